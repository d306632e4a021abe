"""
ChromaScape Console - Operator control surface for automation scripts.

Keeps a local view of a remote automation run in sync with the backend:
- Script catalog and run configuration
- Start/Stop with state reconciliation
- Live logs and progress over WebSockets or polling
- HSV colour filter tuning with preview images
"""

from .console import Console
from .settings import Settings

__all__ = ["Console", "Settings"]
