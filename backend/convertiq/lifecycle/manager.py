"""Temp-file lifecycle manager.

Owns every deletion in the staging directory:

* inputs are discarded as soon as a conversion is over (or rejected);
* converted outputs are retained for ``retention_seconds`` and then removed;
* the first download of an output claims it, cancels the conversion-time
  timer and arms a single new one counted from the moment of serving.

Each artifact is deleted exactly once: every timer goes through ``_expire``,
which unregisters the artifact and marks it ``DELETED`` under the manager's
lock; whoever loses that race finds nothing to do. Cleanup is
best-effort; failures end up in a ``CleanupOutcome`` and the log, never in
the caller's response.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..config import StagingConfig
from .schemas import ArtifactState, CleanupOutcome

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Deleted artifacts remembered for state_of; oldest are forgotten first.
DELETED_HISTORY_SIZE = 1024

_manager: Optional["TempFileLifecycleManager"] = None


def get_lifecycle_manager() -> Optional["TempFileLifecycleManager"]:
    return _manager


def set_lifecycle_manager(manager: Optional["TempFileLifecycleManager"]) -> None:
    global _manager
    _manager = manager


def remove_path(path: PathLike) -> CleanupOutcome:
    """Delete one file. Missing files count as cleaned up, not as errors."""
    outcome = CleanupOutcome()
    target = str(path)
    try:
        Path(target).unlink()
        outcome.deleted.append(target)
    except FileNotFoundError:
        outcome.missing.append(target)
    except OSError as exc:
        outcome.failed[target] = str(exc)
        logger.warning("Failed to delete temp file %s: %s", target, exc)
    return outcome


@dataclass
class _Artifact:
    state: ArtifactState
    expires_at: float = 0.0  # absolute monotonic deadline
    timer: Optional[asyncio.Task] = None  # type: ignore[type-arg]


class TempFileLifecycleManager:
    """Tracks converted artifacts and deletes temp files at the right time."""

    def __init__(
        self,
        staging: StagingConfig,
        sweep_interval_seconds: float = 600.0,
        orphan_max_age_seconds: Optional[float] = None,
        orphan_sweep_enabled: bool = False,
    ) -> None:
        self._staging = staging
        self._retention = staging.retention_seconds
        self._sweep_interval = sweep_interval_seconds
        self._orphan_max_age = (
            orphan_max_age_seconds if orphan_max_age_seconds is not None else staging.retention_seconds
        )
        self._orphan_sweep_enabled = orphan_sweep_enabled
        self._artifacts: Dict[str, _Artifact] = {}
        self._deleted: "OrderedDict[str, None]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._sweep_task: Optional[asyncio.Task] = None  # type: ignore[type-arg]

    @property
    def retention_seconds(self) -> float:
        return self._retention

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start the orphan sweep, if enabled."""
        if self._orphan_sweep_enabled and self._sweep_task is None:
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info(
                "Orphan sweep started (interval=%ss, max_age=%ss)",
                self._sweep_interval,
                self._orphan_max_age,
            )

    async def stop(self) -> None:
        """Cancel the sweep and every pending retention timer.

        Files whose timers are cancelled stay on disk until the orphan
        sweep (when enabled) reaps them after a restart.
        """
        tasks = []
        if self._sweep_task:
            self._sweep_task.cancel()
            tasks.append(self._sweep_task)
            self._sweep_task = None
        async with self._lock:
            for artifact in self._artifacts.values():
                if artifact.timer and not artifact.timer.done():
                    artifact.timer.cancel()
                    tasks.append(artifact.timer)
                artifact.timer = None
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("Lifecycle manager stopped; %d timers cancelled", len(tasks))

    # ------------------------------------------------------------------
    # Immediate cleanup
    # ------------------------------------------------------------------

    async def discard(self, paths: Iterable[Optional[PathLike]]) -> CleanupOutcome:
        """Delete *paths* now. Safe to call repeatedly on the same paths."""
        outcome = CleanupOutcome()
        for path in paths:
            if not path:
                continue
            key = self._key(path)
            async with self._lock:
                artifact = self._artifacts.pop(key, None)
                if artifact is not None:
                    self._retire(key, artifact)
            outcome.merge(remove_path(key))
        if outcome.deleted or outcome.failed:
            logger.info(
                "Cleanup: %d deleted, %d already gone, %d failed",
                len(outcome.deleted),
                len(outcome.missing),
                len(outcome.failed),
            )
        return outcome

    # ------------------------------------------------------------------
    # Retention
    # ------------------------------------------------------------------

    async def retain(self, path: PathLike) -> None:
        """Keep a freshly converted output for one retention window."""
        key = self._key(path)
        async with self._lock:
            artifact = self._artifacts.get(key)
            if artifact is None:
                artifact = _Artifact(state=ArtifactState.PENDING)
                self._artifacts[key] = artifact
                self._deleted.pop(key, None)
            elif artifact.state is not ArtifactState.PENDING:
                return
            self._arm(key, artifact)
            artifact.state = ArtifactState.READY
        logger.info("Retaining %s for %ss", key, self._retention)

    async def claim_download(self, path: PathLike) -> bool:
        """Take ownership of an artifact's deletion on its first download.

        Returns True when this call armed the post-download timer, False when
        the artifact was already claimed or already deleted.
        """
        key = self._key(path)
        async with self._lock:
            artifact = self._artifacts.get(key)
            if artifact is None:
                artifact = _Artifact(state=ArtifactState.PENDING)
                self._artifacts[key] = artifact
                self._deleted.pop(key, None)
            if artifact.state is ArtifactState.DOWNLOADED:
                return False
            if artifact.timer and not artifact.timer.done():
                artifact.timer.cancel()
            self._arm(key, artifact)
            artifact.state = ArtifactState.DOWNLOADED
        logger.info("Download claimed %s; deleting in %ss", key, self._retention)
        return True

    def state_of(self, path: PathLike) -> Optional[ArtifactState]:
        """Current state, or None for paths that were never tracked.

        Only the most recent ``DELETED_HISTORY_SIZE`` deletions are remembered;
        older ones report None again.
        """
        key = self._key(path)
        artifact = self._artifacts.get(key)
        if artifact is not None:
            return artifact.state
        return ArtifactState.DELETED if key in self._deleted else None

    def seconds_until_expiry(self, path: PathLike) -> Optional[float]:
        artifact = self._artifacts.get(self._key(path))
        if artifact is None or artifact.timer is None:
            return None
        return max(0.0, artifact.expires_at - time.monotonic())

    def _arm(self, key: str, artifact: _Artifact) -> None:
        # Caller holds the lock.
        artifact.expires_at = time.monotonic() + self._retention
        artifact.timer = asyncio.create_task(self._expire_after(key, self._retention))

    def _retire(self, key: str, artifact: _Artifact) -> None:
        # Caller holds the lock and has already unregistered the artifact.
        if artifact.timer and artifact.timer is not asyncio.current_task() and not artifact.timer.done():
            artifact.timer.cancel()
        artifact.timer = None
        artifact.state = ArtifactState.DELETED
        self._deleted[key] = None
        while len(self._deleted) > DELETED_HISTORY_SIZE:
            self._deleted.popitem(last=False)

    async def _expire_after(self, key: str, delay: float) -> None:
        await asyncio.sleep(delay)
        await self._expire(key)

    async def _expire(self, key: str) -> CleanupOutcome:
        async with self._lock:
            artifact = self._artifacts.pop(key, None)
            if artifact is None:
                return CleanupOutcome()
            self._retire(key, artifact)
        outcome = remove_path(key)
        logger.info("Retention expired for %s", key)
        return outcome

    # ------------------------------------------------------------------
    # Orphan sweep
    # ------------------------------------------------------------------

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self._sweep_interval)
            await self.sweep_once()

    async def sweep_once(self) -> CleanupOutcome:
        """Delete untracked staging files older than the orphan age limit."""
        outcome = CleanupOutcome()
        directory = self._staging.directory
        if not directory.is_dir():
            return outcome
        cutoff = time.time() - self._orphan_max_age
        async with self._lock:
            tracked = set(self._artifacts)
        for entry in directory.iterdir():
            key = self._key(entry)
            if key in tracked or not entry.is_file():
                continue
            try:
                if entry.stat().st_mtime > cutoff:
                    continue
            except FileNotFoundError:
                continue
            outcome.merge(remove_path(key))
        if outcome.deleted:
            logger.info("Orphan sweep: removed %d stale files", len(outcome.deleted))
        return outcome

    @staticmethod
    def _key(path: PathLike) -> str:
        return str(Path(path).resolve())
