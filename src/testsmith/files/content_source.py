"""Read task inputs (descriptions, failing tests, error logs) from disk."""

import logging
from pathlib import Path

from testsmith.files.exceptions import InputEmpty, InputNotFound, InputUnreadable
from testsmith.models import GenerationTask, RepairTask, language_for

logger = logging.getLogger(__name__)


class ContentSource:
    """Loads UTF-8 text inputs and assembles TaskInput models."""

    def read_text(self, path: str | Path, label: str = "input") -> str:
        """Read a UTF-8 text file.

        Args:
            path: File to read.
            label: Human-readable role of the file, used in error messages.

        Returns:
            The file content, unmodified.

        Raises:
            InputNotFound: If the path is missing or not a regular file.
            InputUnreadable: If the file cannot be read or decoded as UTF-8.
            InputEmpty: If the file contains only whitespace.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise InputNotFound(f"{label} file not found: {file_path}")

        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InputUnreadable(f"{label} file is not valid UTF-8: {file_path}") from e
        except OSError as e:
            raise InputUnreadable(f"Failed to read {label} file '{file_path}': {e}") from e

        if not content.strip():
            raise InputEmpty(f"{label} file is empty: {file_path}")

        logger.debug("Read %s file %s (%d chars)", label, file_path, len(content))
        return content

    def load_generation_task(
        self,
        description_path: str | Path,
        target_path: str | Path,
    ) -> GenerationTask:
        """Build a generation-mode task from a plain-text description file."""
        description = self.read_text(description_path, label="Test description")
        target_name = Path(target_path).name
        return GenerationTask(
            description=description,
            target_name=target_name,
            language=language_for(target_name),
        )

    def load_repair_task(self, test_path: str | Path, log_path: str | Path) -> RepairTask:
        """Build a repair-mode task from a failing test and its error log."""
        original_source = self.read_text(test_path, label="Test")
        failure_log = self.read_text(log_path, label="Error log")
        return RepairTask(
            original_source=original_source,
            failure_log=failure_log,
            file_name=Path(test_path).name,
        )
