# fansub_rbac/application/ports/outbound.py

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class IUserDataStore(ABC):
    """Storage interface for the user, owner-id and audit-log data files."""

    @abstractmethod
    def read_users(self) -> List[Dict[str, Any]]:
        """Read raw user records; missing or unreadable data reads as []."""
        pass

    @abstractmethod
    def read_owner_ids(self) -> List[Any]:
        """Read the raw owner-id list; missing or unreadable data reads as []."""
        pass

    @abstractmethod
    def write_users(self, users: List[Dict[str, Any]]) -> None:
        """Replace the user records."""
        pass

    @abstractmethod
    def write_owner_ids(self, owner_ids: List[str]) -> None:
        """Replace the owner-id list."""
        pass

    @abstractmethod
    def append_audit_entry(self, entry: Dict[str, Any]) -> None:
        """Append one entry to the audit log."""
        pass

    @abstractmethod
    def write_users_backup(self, users: List[Dict[str, Any]], stamp: str) -> str:
        """Snapshot user records before a migration; returns the backup path."""
        pass
