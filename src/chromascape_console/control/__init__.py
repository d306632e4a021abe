"""
Control Layer - Operator actions.

Provides:
- ScriptCatalog: script list and single selection
- build_run_config: Start validation
- RunStateReconciler: Start/Stop and backend state reconciliation
- ParameterTuner: debounced HSV sliders and preview refresh
- ColourSubmitter: save the current HSV range under a name
"""

from .catalog import ScriptCatalog
from .colour import ColourSubmitter, validate_colour_name
from .debounce import Debouncer
from .reconciler import RunPhase, RunStateReconciler
from .run_config import build_run_config
from .tuner import ParameterTuner

__all__ = [
    "ScriptCatalog",
    "ColourSubmitter",
    "validate_colour_name",
    "Debouncer",
    "RunPhase",
    "RunStateReconciler",
    "build_run_config",
    "ParameterTuner",
]
