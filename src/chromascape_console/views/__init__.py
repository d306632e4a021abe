"""
View Layer - Presentation state.

Plain models a front-end draws from:
- LogView: ordered log buffer with scroll preservation
- ProgressView: last-write-wins percentage
- ToggleView: Start/Stop button
- PreviewView: decoded colour filter previews
- Notices: blocking and non-blocking operator messages
"""

from .log_view import LogView
from .notices import Notice, Notices
from .preview_view import PreviewPair, PreviewView, decode_image
from .progress_view import ProgressView
from .toggle_view import ToggleView

__all__ = [
    "LogView",
    "Notice",
    "Notices",
    "PreviewPair",
    "PreviewView",
    "decode_image",
    "ProgressView",
    "ToggleView",
]
