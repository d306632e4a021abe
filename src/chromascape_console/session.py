"""
Session state - everything the operator has chosen so far.

Owned by the Console and passed by reference to each component, so no
component keeps its own copy of the selection or the run flag.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import RunState, SliderState


@dataclass
class SessionState:
    """Mutable per-session operator state."""

    selected_script: str | None = None
    window_mode: str | None = None  # dropdown label, validated at Start
    duration_text: str = ""  # raw duration input, validated at Start
    run_state: RunState = field(default_factory=RunState)
    sliders: SliderState = field(default_factory=SliderState)
