"""
Run configuration builder.

Turns what the operator picked (script, duration text, window mode label)
into a RunConfig, or raises ValidationError with the one message to show.
Runs before any request is made.
"""

from __future__ import annotations

from ..errors import ValidationError
from ..models import RunConfig, WindowMode
from ..session import SessionState


def build_run_config(session: SessionState, catalog=None) -> RunConfig:
    """
    Validate the session's run inputs.

    Args:
        session: Current operator choices.
        catalog: Optional ScriptCatalog; when given, the selected script
            must be one of its entries.

    Returns:
        Frozen RunConfig ready for the start request.

    Raises:
        ValidationError: Missing script, bad duration or no window mode.
    """
    duration = _parse_duration(session.duration_text)
    if not session.selected_script or duration is None:
        raise ValidationError("Please select a script and a valid duration.")

    if duration <= 0:
        raise ValidationError("Duration must be greater than 0.")

    if catalog is not None and session.selected_script not in catalog:
        raise ValidationError(f"Unknown script: {session.selected_script}")

    mode = WindowMode.parse(session.window_mode)
    if mode is None:
        raise ValidationError("Please choose a window mode.")

    return RunConfig(
        script_id=session.selected_script,
        duration_minutes=duration,
        window_mode=mode,
    )


def _parse_duration(text) -> int | None:
    try:
        return int(str(text).strip())
    except ValueError:
        return None
