"""
Storage interface - defines the contract for all storage backends.
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any


class StorageInterface(ABC):
    """Abstract interface for kind-keyed record storage."""

    @abstractmethod
    def insert(self, kind: str, record: Dict[str, Any]) -> None:
        """Append a record to the table for `kind` and persist."""
        pass

    @abstractmethod
    def select(self, kind: str, filters: Optional[Dict[str, Optional[str]]] = None) -> List[Dict[str, Any]]:
        """Return copies of the records in `kind` matching `filters`."""
        pass

    @abstractmethod
    def get(self, kind: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Get a record by exact id."""
        pass

    @abstractmethod
    def update(self, kind: str, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge `fields` into a record and persist."""
        pass

    @abstractmethod
    def delete(self, kind: str, record_id: str) -> None:
        """Remove a record and persist."""
        pass
