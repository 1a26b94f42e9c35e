"""Temp-file lifecycle: immediate cleanup, retention timers, download claims."""
from .manager import TempFileLifecycleManager, get_lifecycle_manager, set_lifecycle_manager
from .schemas import ArtifactState, CleanupOutcome

__all__ = [
    "ArtifactState",
    "CleanupOutcome",
    "TempFileLifecycleManager",
    "get_lifecycle_manager",
    "set_lifecycle_manager",
]
