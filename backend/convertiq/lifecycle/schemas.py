"""Types describing temp-file lifecycle state and cleanup results."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class ArtifactState(str, Enum):
    """Lifecycle of a converted artifact.

    PENDING    registered, retention not yet started
    READY      converted, awaiting download, retention timer armed
    DOWNLOADED served at least once, deletion owned by the download timer
    DELETED    removed from disk; terminal
    """
    PENDING = "pending"
    READY = "ready"
    DOWNLOADED = "downloaded"
    DELETED = "deleted"


@dataclass
class CleanupOutcome:
    """What a best-effort cleanup actually did. Logged, never raised."""
    deleted: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def merge(self, other: "CleanupOutcome") -> "CleanupOutcome":
        self.deleted.extend(other.deleted)
        self.missing.extend(other.missing)
        self.failed.update(other.failed)
        return self
