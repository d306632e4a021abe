"""
Topic payload decoding.

Turns raw message text into typed updates:
- logs: LogUpdate (one pushed line, or a polled JSON list snapshot)
- progress: int percent
- state: bool running flag

Anything that doesn't decode raises PayloadError; channels drop that one
message and keep going.
"""

from __future__ import annotations

import json

from ..errors import PayloadError
from ..models import LogUpdate, Topic


def decode(topic: Topic, raw: str, snapshot: bool = False):
    """
    Decode one topic message.

    Args:
        topic: Topic the message arrived on.
        raw: Message text (WebSocket frame or HTTP body).
        snapshot: True for polled bodies, False for pushed frames.

    Returns:
        LogUpdate, int or bool depending on topic.
    """
    if topic is Topic.LOGS:
        return _decode_logs(raw, snapshot)
    if topic is Topic.PROGRESS:
        return _decode_progress(raw)
    if topic is Topic.STATE:
        return _decode_state(raw)
    raise PayloadError(f"Unknown topic: {topic}")


def _decode_logs(raw: str, snapshot: bool) -> LogUpdate:
    if not snapshot:
        if not isinstance(raw, str):
            raise PayloadError(f"Log line is not text: {raw!r}")
        return LogUpdate([raw])

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise PayloadError(f"Log snapshot is not JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(line, str) for line in data):
        raise PayloadError("Log snapshot is not a list of strings")
    return LogUpdate(data, snapshot=True)


def _decode_progress(raw: str) -> int:
    try:
        return int(str(raw).strip())
    except ValueError:
        raise PayloadError(f"Progress is not an integer: {raw!r}") from None


def _decode_state(raw: str) -> bool:
    text = str(raw).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise PayloadError(f"State is not a boolean: {raw!r}")
