"""
File lifecycle routing.

Every incoming document ends up in exactly one of the processed or failed
directories. A failed move is logged and leaves the file where it was, so the
next run picks it up again.
"""

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from faxbridge.config import PipelineConfig
from faxbridge.exceptions import RelocationError
from faxbridge.models.outcome import FailureReason, FileOutcome, FileStatus

logger = logging.getLogger(__name__)


class LifecycleRouter:
    """Moves documents out of the incoming directory once their fate is known."""

    def __init__(self, config: PipelineConfig):
        self.processed_dir = Path(config.processed_dir)
        self.failed_dir = Path(config.failed_dir)

    def _move(self, source: Path, target_dir: Path) -> Path:
        target = target_dir / source.name
        if target.exists():
            raise RelocationError(f"{target} already exists")
        try:
            shutil.move(str(source), str(target))
        except OSError as e:
            raise RelocationError(f"Could not move {source} to {target_dir}: {e}") from e
        return target

    def route(
        self,
        path: Path,
        valid: bool,
        reason: Optional[FailureReason] = None,
        missing_fields: Optional[List[str]] = None,
        error: Optional[str] = None,
    ) -> FileOutcome:
        """
        Relocate one file: valid -> processed, invalid -> failed.

        Never raises for relocation problems; they yield a PENDING outcome.
        """
        path = Path(path)
        if valid:
            target_dir, status, label = self.processed_dir, FileStatus.PROCESSED, "processed"
            reason = None
        else:
            target_dir, status, label = self.failed_dir, FileStatus.FAILED, "failed uploads"

        outcome = FileOutcome(
            filename=path.name,
            status=status,
            reason=reason,
            missing_fields=missing_fields or [],
            error=error,
        )

        try:
            self._move(path, target_dir)
        except RelocationError as e:
            logger.error("Error moving file %s: %s", path.name, e)
            outcome.status = FileStatus.PENDING
            outcome.error = str(e) if error is None else f"{error}; {e}"
            return outcome

        logger.info("Moved file to %s folder: %s", label, path.name)
        return outcome

    def route_all(self, pairs: Iterable[Tuple[Path, bool]]) -> List[FileOutcome]:
        """Route each (path, valid) pair exactly once, in order."""
        return [
            self.route(path, valid, reason=None if valid else FailureReason.MISSING_FIELDS)
            for path, valid in pairs
        ]

    def sweep_leftovers(self, paths: Iterable[Path]) -> List[FileOutcome]:
        """Move every document still sitting in incoming to the failed directory."""
        return [
            self.route(path, valid=False, reason=FailureReason.LEFTOVER)
            for path in paths
        ]
