"""
Import service - bulk creation of tasks from a CSV file.

The source file is configured at startup and reopened on every import. Rows
are read one at a time and each valid row is created (and persisted) before
the next is read. The first invalid row aborts the import; rows created before
it stay committed.
"""
import csv
import logging
from pathlib import Path
from typing import Iterator, List, Tuple

from tasklite.exceptions.errors import ImportSourceError, TaskValidationError
from tasklite.services.task_service import TaskService, REQUIRED_FIELDS_MESSAGE

logger = logging.getLogger(__name__)


class ImportService:
    """Service for bulk task import."""

    def __init__(
        self,
        task_service: TaskService,
        source_path: str,
        delimiter: str = ",",
        encoding: str = "utf-8",
    ):
        """
        Initialize the import service.

        Args:
            task_service: Service used to create each imported task
            source_path: CSV file to import from; first line is a header
            delimiter: Field delimiter
            encoding: Text encoding of the source file
        """
        self.task_service = task_service
        self.source_path = Path(source_path)
        self.delimiter = delimiter
        self.encoding = encoding

    def _rows(self, f) -> Iterator[Tuple[int, List[str]]]:
        """Yield (line number, row) pairs after the header, skipping blank lines."""
        reader = csv.reader(f, delimiter=self.delimiter)
        try:
            for row in reader:
                if reader.line_num == 1:
                    continue
                if not row:
                    continue
                yield reader.line_num, row
        except csv.Error as e:
            raise TaskValidationError(f"Malformed CSV at line {reader.line_num}: {e}", line=reader.line_num) from e
        except UnicodeDecodeError as e:
            # The file is decoded in chunks, so this is the first line not yet read
            line = reader.line_num + 1
            raise TaskValidationError(
                f"Import file is not valid {self.encoding} text near line {line}", line=line
            ) from e

    def import_tasks(self) -> int:
        """
        Create one task per data row of the source file.

        Returns:
            Number of tasks created

        Raises:
            ImportSourceError: If the source file cannot be opened
            TaskValidationError: On the first row missing a title or description
            PersistenceError: If a created task could not be persisted
        """
        try:
            f = open(self.source_path, "r", encoding=self.encoding, newline="")
        except OSError as e:
            logger.error(f"Cannot open import source {self.source_path}: {e}")
            raise ImportSourceError(f"Import source {self.source_path} is unavailable") from e

        created = 0
        logger.info(f"Importing tasks from {self.source_path}")
        with f:
            for line, row in self._rows(f):
                title = row[0] if len(row) > 0 else ""
                description = row[1] if len(row) > 1 else ""

                if not title or not description:
                    logger.warning(
                        f"Import aborted at line {line} after {created} task(s): missing title or description"
                    )
                    raise TaskValidationError(REQUIRED_FIELDS_MESSAGE, line=line)

                self.task_service.create_task(title, description)
                created += 1

        logger.info(f"Imported {created} task(s) from {self.source_path}")
        return created
