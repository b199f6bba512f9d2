"""
JSON snapshot storage.

All tables live in memory as {kind: [record, ...]} and the whole structure is
rewritten to a single JSON file after every mutation. Mutations are applied to
a copy first; the copy only becomes the live state once the snapshot write has
succeeded, so memory never runs ahead of disk.
"""
import os
import copy
import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple

from tasklite.exceptions.errors import PersistenceError
from tasklite.storage.filtering import filter_records
from tasklite.storage.interface import StorageInterface

logger = logging.getLogger(__name__)

Tables = Dict[str, List[Dict[str, Any]]]
Schema = Dict[str, Tuple[type, ...]]

# Field types a loaded snapshot row must have, per kind
TASK_SCHEMA: Schema = {
    "id": (str,),
    "title": (str,),
    "description": (str,),
    "completed_at": (str, type(None)),
    "created_at": (str,),
    "updated_at": (str,),
}
DEFAULT_SCHEMAS: Dict[str, Schema] = {"tasks": TASK_SCHEMA}


def _row_fits(row: Dict[str, Any], schema: Schema) -> bool:
    return all(field in row and isinstance(row[field], types) for field, types in schema.items())


class JsonFileStorage(StorageInterface):
    """Kind-keyed record store mirrored to a JSON file."""

    def __init__(self, db_path: str, case_sensitive: bool = True, schemas: Optional[Dict[str, Schema]] = None):
        """Initialize storage and load any existing snapshot.

        Args:
            db_path: Path to the JSON snapshot file
            case_sensitive: Whether select() substring matching is case-sensitive
            schemas: Required field types per kind, checked when loading the snapshot
        """
        self.db_path = Path(db_path)
        self.case_sensitive = case_sensitive
        self.schemas = DEFAULT_SCHEMAS if schemas is None else schemas
        self._lock = threading.RLock()
        self._tables: Tables = self._load()

    def _load(self) -> Tables:
        """Read the snapshot; anything missing or malformed starts empty."""
        if not self.db_path.exists():
            logger.info(f"No snapshot at {self.db_path}, starting with empty tables")
            return {}

        try:
            with open(self.db_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read snapshot {self.db_path}, starting fresh: {e}")
            return {}

        if not isinstance(data, dict) or not all(
            isinstance(rows, list) and all(isinstance(row, dict) for row in rows)
            for rows in data.values()
        ):
            logger.warning(f"Snapshot {self.db_path} has an unexpected layout, starting fresh")
            return {}

        for kind, rows in data.items():
            schema = self.schemas.get(kind)
            if schema and not all(_row_fits(row, schema) for row in rows):
                logger.warning(f"Snapshot {self.db_path} has malformed {kind} records, starting fresh")
                return {}

        logger.info(
            f"Loaded snapshot {self.db_path}",
            extra={"tables": {kind: len(rows) for kind, rows in data.items()}}
        )
        return data

    def _persist(self, tables: Tables) -> None:
        """Atomically replace the snapshot file with `tables`."""
        directory = self.db_path.parent
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.db_path.name}.", suffix=".tmp", dir=str(directory))
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(tables, f, indent=2)
            os.replace(tmp_path, self.db_path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write snapshot {self.db_path}: {e}", exc_info=True)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(f"Failed to write snapshot {self.db_path}: {e}") from e

    def _commit(self, tables: Tables) -> None:
        self._persist(tables)
        self._tables = tables

    def insert(self, kind: str, record: Dict[str, Any]) -> None:
        with self._lock:
            tables = copy.deepcopy(self._tables)
            tables.setdefault(kind, []).append(copy.deepcopy(record))
            self._commit(tables)

    def select(self, kind: str, filters: Optional[Dict[str, Optional[str]]] = None) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._tables.get(kind, [])
            return [copy.deepcopy(row) for row in filter_records(rows, filters, self.case_sensitive)]

    def get(self, kind: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for row in self._tables.get(kind, []):
                if row.get("id") == record_id:
                    return copy.deepcopy(row)
            return None

    def update(self, kind: str, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            tables = copy.deepcopy(self._tables)
            for row in tables.get(kind, []):
                if row.get("id") == record_id:
                    row.update(copy.deepcopy(fields))
                    self._commit(tables)
                    return copy.deepcopy(row)
            return None

    def delete(self, kind: str, record_id: str) -> None:
        with self._lock:
            if self.get(kind, record_id) is None:
                return
            tables = copy.deepcopy(self._tables)
            tables[kind] = [row for row in tables[kind] if row.get("id") != record_id]
            self._commit(tables)

    def count(self, kind: str) -> int:
        """Number of records in a table."""
        with self._lock:
            return len(self._tables.get(kind, []))

    def kinds(self) -> List[str]:
        """Names of the tables currently held."""
        with self._lock:
            return list(self._tables.keys())
