# fansub_rbac/adapters/outbound/persistence/json_data_store.py

"""
JSON file storage for users, owner ids and the audit log.

Reads are forgiving: a missing or corrupt file reads as its fallback.
Writes are not: any OSError surfaces as a DataFileException.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fansub_rbac.adapters.configuration.config import Settings, settings as default_settings
from fansub_rbac.application.ports.outbound import IUserDataStore
from fansub_rbac.domain.exceptions import DataFileException
from fansub_rbac.shared.utils.input_normalization import InputNormalizer

logger = logging.getLogger(__name__)


def read_json(path: Path, fallback: Any) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError:
        logger.debug(f"Data file not found, using fallback: {path}")
        return fallback
    except (OSError, ValueError) as e:
        logger.warning(f"Unreadable data file {path}, using fallback: {e}")
        return fallback


def load_json(path: Path) -> Any:
    """Strict counterpart of read_json: a missing or corrupt file raises."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading data file {path}: {e}")
        raise DataFileException(detail="Erro ao ler arquivo de dados", path=str(path), original_error=e)


def write_json(path: Path, value: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(json.dumps(value, indent=2, ensure_ascii=False))
            fh.write("\n")
    except OSError as e:
        logger.error(f"Error writing data file {path}: {e}")
        raise DataFileException(path=str(path), original_error=e)


class JsonUserDataStore(IUserDataStore):
    """
    File-backed data store rooted at the configured data directory.
    """

    def __init__(self, data_dir: Path, backups_dir: Path,
                 users_file_name: str = "users.json",
                 owner_ids_file_name: str = "owner-ids.json",
                 audit_log_file_name: str = "audit-log.json"):
        self.data_dir = Path(data_dir)
        self.backups_dir = Path(backups_dir)
        self.users_file = self.data_dir / users_file_name
        self.owner_ids_file = self.data_dir / owner_ids_file_name
        self.audit_log_file = self.data_dir / audit_log_file_name

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "JsonUserDataStore":
        config = config or default_settings
        return cls(
            data_dir=config.DATA_DIR,
            backups_dir=config.BACKUPS_DIR,
            users_file_name=config.USERS_FILE_NAME,
            owner_ids_file_name=config.OWNER_IDS_FILE_NAME,
            audit_log_file_name=config.AUDIT_LOG_FILE_NAME,
        )

    def read_users(self) -> List[Dict[str, Any]]:
        return InputNormalizer.ensure_list(read_json(self.users_file, []))

    def read_owner_ids(self) -> List[Any]:
        return InputNormalizer.ensure_list(read_json(self.owner_ids_file, []))

    def write_users(self, users: List[Dict[str, Any]]) -> None:
        write_json(self.users_file, users)

    def write_owner_ids(self, owner_ids: List[str]) -> None:
        write_json(self.owner_ids_file, owner_ids)

    def append_audit_entry(self, entry: Dict[str, Any]) -> None:
        entries = InputNormalizer.ensure_list(read_json(self.audit_log_file, []))
        entries.append(entry)
        write_json(self.audit_log_file, entries)

    def write_users_backup(self, users: List[Dict[str, Any]], stamp: str) -> str:
        backup_path = self.backups_dir / f"users-rbac-v2-backup-{stamp}.json"
        write_json(backup_path, users)
        logger.info(f"Users backup written: {backup_path}")
        return str(backup_path)
