from __future__ import annotations

from pathlib import Path

import pytest

from fansub_rbac.adapters.configuration.config import Settings
from fansub_rbac.adapters.outbound.persistence.json_data_store import JsonUserDataStore, load_json
from fansub_rbac.domain.exceptions import DataFileException

from .conftest import read_json, write_json


def test_missing_and_corrupt_files_read_as_empty(data_dirs) -> None:
    data_dir, backups_dir = data_dirs
    (data_dir / "users.json").write_text("{not json", encoding="utf-8")
    write_json(data_dir / "owner-ids.json", {"not": "a list"})

    store = JsonUserDataStore(data_dir, backups_dir)

    assert store.read_users() == []
    assert store.read_owner_ids() == []


def test_writes_pretty_json_with_trailing_newline(data_dirs) -> None:
    data_dir, backups_dir = data_dirs
    store = JsonUserDataStore(data_dir, backups_dir)

    store.write_owner_ids(["ação"])

    text = (data_dir / "owner-ids.json").read_text(encoding="utf-8")
    assert text == '[\n  "ação"\n]\n'


def test_append_audit_entry_creates_file(tmp_path: Path) -> None:
    store = JsonUserDataStore(tmp_path / "nested" / "data", tmp_path / "backups")

    store.append_audit_entry({"id": "a"})
    store.append_audit_entry({"id": "b"})

    assert read_json(tmp_path / "nested" / "data" / "audit-log.json") == [{"id": "a"}, {"id": "b"}]


def test_write_failure_raises_data_file_exception(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    store = JsonUserDataStore(blocker / "data", tmp_path / "backups")

    with pytest.raises(DataFileException) as excinfo:
        store.write_users([])
    assert excinfo.value.internal_code == "DATA_FILE_ERROR"
    assert "users.json" in str(excinfo.value)


def test_from_settings(tmp_path: Path) -> None:
    config = Settings(_env_file=None, DATA_DIR=tmp_path / "d", BACKUPS_DIR=tmp_path / "b")
    store = JsonUserDataStore.from_settings(config)

    assert store.users_file == tmp_path / "d" / "users.json"
    assert store.write_users_backup([], "stamp") == str(tmp_path / "b" / "users-rbac-v2-backup-stamp.json")


def test_load_json_is_strict(tmp_path: Path) -> None:
    good = tmp_path / "user.json"
    write_json(good, {"id": "u1"})
    assert load_json(good) == {"id": "u1"}

    with pytest.raises(DataFileException) as exc_info:
        load_json(tmp_path / "missing.json")
    assert exc_info.value.internal_code == "DATA_FILE_ERROR"

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("[1,", encoding="utf-8")
    with pytest.raises(DataFileException):
        load_json(corrupt)
