"""Persist validated candidates with an optional timestamped backup."""

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

from testsmith.files.exceptions import BackupFailed, WriteFailed
from testsmith.models import BackupDescriptor, CodeCandidate, SinkResult

logger = logging.getLogger(__name__)

BACKUP_MARKER = "bak"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def backup_path_for(path: Path, when: datetime) -> Path:
    """Return the sibling backup path for ``path`` at time ``when``.

    ``tests/login.spec.js`` -> ``tests/login.spec.bak.20260101120000.js``.
    Second resolution; two backups in the same second share a name.
    """
    stamp = when.strftime(TIMESTAMP_FORMAT)
    return path.with_name(f"{path.stem}.{BACKUP_MARKER}.{stamp}{path.suffix}")


class OutputSink:
    """Writes candidates to their target path, backup first."""

    def __init__(self, now=datetime.now) -> None:
        self._now = now

    def write(
        self,
        path: str | Path,
        candidate: CodeCandidate | str,
        backup: bool = True,
        dry_run: bool = False,
    ) -> SinkResult:
        """Write the candidate to ``path``, replacing prior content entirely.

        Args:
            path: Target file.
            candidate: Validated candidate (or its source string).
            backup: Copy an existing target to a timestamped sibling first.
            dry_run: Touch nothing on disk; the caller renders the candidate.

        Returns:
            SinkResult describing what was written.

        Raises:
            BackupFailed: If the backup copy fails. The target is untouched.
            WriteFailed: If the target cannot be written.
        """
        target = Path(path)
        source = candidate.source if isinstance(candidate, CodeCandidate) else candidate

        if dry_run:
            logger.info("Dry run: not writing %s", target)
            return SinkResult(target_path=str(target), wrote=False, dry_run=True)

        descriptor = None
        if backup and target.exists():
            descriptor = self._backup(target)

        self._atomic_write(target, source)
        logger.info("Wrote %s (%d chars)", target, len(source))
        return SinkResult(target_path=str(target), wrote=True, backup=descriptor)

    def _backup(self, target: Path) -> BackupDescriptor:
        created_at = self._now()
        dest = backup_path_for(target, created_at)
        try:
            shutil.copyfile(target, dest)
        except OSError as e:
            raise BackupFailed(f"Failed to back up '{target}' to '{dest}': {e}") from e
        logger.info("Backup created at %s", dest)
        return BackupDescriptor(
            original_path=str(target),
            backup_path=str(dest),
            created_at=created_at,
        )

    def _atomic_write(self, target: Path, source: str) -> None:
        tmp_name = None
        replaced = False
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=target.parent,
                prefix=f".{target.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(source)
            if target.exists():
                shutil.copymode(target, tmp_name)
            os.replace(tmp_name, target)
            replaced = True
        except (OSError, UnicodeError) as e:
            raise WriteFailed(f"Failed to write '{target}': {e}") from e
        finally:
            if not replaced and tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
