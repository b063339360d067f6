from __future__ import annotations

from datetime import datetime, timezone
from itertools import count
from pathlib import Path

import pytest

from fansub_rbac.adapters.outbound.persistence.json_data_store import JsonUserDataStore
from fansub_rbac.application.use_cases.migration_use_cases import (
    PermissionsMigrationService,
    build_migration,
    infer_access_role,
    normalize_roles,
)
from fansub_rbac.domain.models.access_domain_model import DEFAULT_ADMIN_PERMISSIONS, PERMISSION_IDS

from .conftest import read_json, write_json

USERS = [
    {"id": "owner-1", "name": "Primeiro", "roles": ["Dono", "Tradutor"], "permissions": ["*"]},
    {"id": " owner-2 ", "roles": ["dono"], "permissions": ["posts"], "accessRole": "normal"},
    {"id": "editor", "roles": ["Editor", "Editor"], "permissions": ["posts", "Legacy-Thing"]},
    {"id": "staff", "permissions": ["usuarios"]},
    {"id": "badge", "permissions": ["posts", "projetos", "comentarios", "usuarios", "paginas", "configuracoes"]},
    {"id": "empty-admin", "accessRole": "admin", "permissions": ["unknown"]},
    {"id": "demoted", "accessRole": "owner_secondary", "permissions": ["paginas"]},
]


def _by_id(users):
    return {user["id"]: user for user in users}


def test_normalize_roles() -> None:
    assert normalize_roles([" Editor ", "dono", "", None, "Editor", "DONO"]) == ["Editor"]
    assert normalize_roles("Editor") == []


@pytest.mark.parametrize(
    ("user", "expected"),
    [
        ({"accessRole": "admin"}, "admin"),
        ({"accessRole": "owner_primary", "permissions": ["*"]}, "normal"),
        ({"permissions": ["*"]}, "admin"),
        ({"permissions": [" Usuarios "]}, "admin"),
        ({"permissions": ["posts", "projetos", "comentarios", "usuarios", "paginas", "configuracoes"]}, "admin"),
        ({"permissions": ["posts", "projetos"]}, "normal"),
        ({"accessRole": "bogus"}, "normal"),
    ],
)
def test_infer_access_role(user, expected) -> None:
    assert infer_access_role(user) == expected


def test_build_migration_owners() -> None:
    result = build_migration(USERS, ["owner-1", "ghost"])
    users = _by_id(result.next_users)

    assert result.previous_owner_ids == ["owner-1", "ghost"]
    assert result.next_owner_ids == ["owner-1", "owner-2"]
    assert users["owner-1"]["accessRole"] == "owner_primary"
    assert users["owner-2"]["accessRole"] == "owner_secondary"
    assert users["owner-1"]["permissions"] == list(PERMISSION_IDS)
    assert users["owner-2"]["permissions"] == list(PERMISSION_IDS)
    assert users["owner-1"]["roles"] == ["Tradutor"]
    assert users["owner-1"]["name"] == "Primeiro"


def test_build_migration_non_owners() -> None:
    users = _by_id(build_migration(USERS, ["owner-1"]).next_users)

    assert users["editor"] == {
        "id": "editor",
        "roles": ["Editor"],
        "permissions": ["posts", "Legacy-Thing"],
        "accessRole": "normal",
    }
    assert users["staff"]["accessRole"] == "admin"
    assert users["staff"]["permissions"] == ["usuarios_basico", "usuarios_acesso"]
    assert users["badge"]["accessRole"] == "admin"
    assert users["empty-admin"]["permissions"] == list(DEFAULT_ADMIN_PERMISSIONS) + ["unknown"]
    assert users["demoted"]["accessRole"] == "normal"


def test_build_migration_summary() -> None:
    summary = build_migration(USERS, ["owner-1"]).summary

    assert summary.total_users == 7
    assert summary.changed_users == 7
    assert summary.expanded_stars == 1
    assert summary.owner_role_removed == 3
    assert summary.unknown_permissions_preserved == 2
    assert summary.access_role_assigned == {
        "normal": 2,
        "admin": 3,
        "owner_secondary": 1,
        "owner_primary": 1,
    }
    assert summary.to_payload()["accessRoleAssigned"]["admin"] == 3


def test_build_migration_is_idempotent() -> None:
    first = build_migration(USERS, ["owner-1"])
    second = build_migration(first.next_users, first.next_owner_ids)

    assert second.next_users == first.next_users
    assert second.next_owner_ids == first.next_owner_ids
    assert second.summary.changed_users == 0
    assert second.summary.owner_role_removed == 0


def test_build_migration_tolerates_garbage() -> None:
    result = build_migration("not-a-list", None)
    assert result.next_users == []
    assert result.next_owner_ids == []
    assert result.summary.total_users == 0


def _service(data_dir: Path, backups_dir: Path) -> PermissionsMigrationService:
    ids = count(1)
    return PermissionsMigrationService(
        JsonUserDataStore(data_dir, backups_dir),
        clock=lambda: datetime(2026, 3, 1, 12, 30, 15, 123000, tzinfo=timezone.utc),
        id_factory=lambda: f"id-{next(ids)}",
    )


def test_dry_run_writes_nothing(data_dirs) -> None:
    data_dir, backups_dir = data_dirs
    write_json(data_dir / "users.json", USERS)
    write_json(data_dir / "owner-ids.json", ["owner-1"])

    report = _service(data_dir, backups_dir).run(apply=False)

    assert report.dry_run is True and report.apply is False
    assert report.backup_path is None
    assert read_json(data_dir / "users.json") == USERS
    assert not (data_dir / "audit-log.json").exists()
    assert not backups_dir.exists()


def test_apply_writes_backup_data_and_audit_entry(data_dirs) -> None:
    data_dir, backups_dir = data_dirs
    write_json(data_dir / "users.json", USERS)
    write_json(data_dir / "owner-ids.json", ["owner-1"])
    write_json(data_dir / "audit-log.json", [{"id": "older"}])

    report = _service(data_dir, backups_dir).run(apply=True)

    backup = backups_dir / "users-rbac-v2-backup-2026-03-01T12-30-15-123Z.json"
    assert report.backup_path == str(backup)
    assert read_json(backup) == USERS
    assert read_json(data_dir / "owner-ids.json") == ["owner-1", "owner-2"]
    assert _by_id(read_json(data_dir / "users.json"))["staff"]["accessRole"] == "admin"

    audit = read_json(data_dir / "audit-log.json")
    assert audit[0] == {"id": "older"}
    entry = audit[1]
    assert entry["id"] == "id-1"
    assert entry["requestId"] == "migration-id-2"
    assert entry["ts"] == "2026-03-01T12:30:15.123Z"
    assert entry["actorId"] == "system"
    assert entry["actorName"] == "RBAC V2 Migration"
    assert entry["action"] == "users.permissions_v2_migrate"
    assert entry["resource"] == "users" and entry["resourceId"] == "all"
    assert entry["status"] == "success" and entry["ip"] == "127.0.0.1"
    assert entry["meta"]["dryRun"] is False
    assert entry["meta"]["beforeOwnerIds"] == ["owner-1"]
    assert entry["meta"]["afterOwnerIds"] == ["owner-1", "owner-2"]
    assert entry["meta"]["summary"]["changedUsers"] == 7


def test_apply_with_missing_files(data_dirs) -> None:
    data_dir, backups_dir = data_dirs

    report = _service(data_dir, backups_dir).run(apply=True)

    assert report.summary.total_users == 0
    assert read_json(data_dir / "users.json") == []
    assert read_json(data_dir / "owner-ids.json") == []
    assert len(read_json(data_dir / "audit-log.json")) == 1
