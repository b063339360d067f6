from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fansub_rbac.adapters.inbound.cli.main import app

from .conftest import read_json, write_json

runner = CliRunner()

USERS = [
    {"id": "u1", "roles": ["Dono"], "permissions": ["*"]},
    {"id": "u2", "permissions": ["posts"]},
]


def _first_json(text: str):
    return json.JSONDecoder().raw_decode(text[text.index("{"):])[0]


@pytest.fixture
def seeded(data_dirs):
    data_dir, backups_dir = data_dirs
    write_json(data_dir / "users.json", USERS)
    write_json(data_dir / "owner-ids.json", [])
    return data_dir, backups_dir


def _migrate(data_dir: Path, backups_dir: Path, *flags: str):
    return runner.invoke(
        app,
        ["migrate-permissions", "--data-dir", str(data_dir), "--backups-dir", str(backups_dir), *flags],
    )


def test_migrate_defaults_to_dry_run(seeded) -> None:
    data_dir, backups_dir = seeded

    result = _migrate(data_dir, backups_dir)

    assert result.exit_code == 0
    report = _first_json(result.stdout)
    assert report["dryRun"] is True and report["apply"] is False
    assert report["afterOwnerIds"] == ["u1"]
    assert report["summary"]["accessRoleAssigned"]["owner_primary"] == 1
    assert read_json(data_dir / "users.json") == USERS


def test_migrate_apply(seeded) -> None:
    data_dir, backups_dir = seeded

    result = _migrate(data_dir, backups_dir, "--apply")

    assert result.exit_code == 0
    assert "Applied RBAC V2 migration. Backup:" in result.stdout
    assert read_json(data_dir / "owner-ids.json") == ["u1"]
    assert len(list(backups_dir.glob("users-rbac-v2-backup-*.json"))) == 1
    assert read_json(data_dir / "audit-log.json")[0]["action"] == "users.permissions_v2_migrate"


def test_dry_run_flag_wins_over_apply(seeded) -> None:
    data_dir, backups_dir = seeded

    result = _migrate(data_dir, backups_dir, "--apply", "--dry-run")

    assert result.exit_code == 0
    assert _first_json(result.stdout)["dryRun"] is True
    assert not backups_dir.exists()


def test_migrate_reports_write_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    result = _migrate(blocker / "data", tmp_path / "backups", "--apply")

    assert result.exit_code == 1
    assert "DATA_FILE_ERROR" in result.output


def test_resolve_legacy(tmp_path: Path) -> None:
    user_file = tmp_path / "user.json"
    write_json(user_file, {"id": "u2", "permissions": ["posts"]})

    result = runner.invoke(app, ["resolve", str(user_file), "--path", "/dashboard/audit-log"])

    assert result.exit_code == 0
    payload = _first_json(result.stdout)
    assert payload["accessRole"] == "normal"
    assert payload["grants"]["comentarios"] is True
    assert payload["landingRoute"] == "/dashboard"
    assert payload["pathAllowed"] is True


def test_resolve_v2_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RBAC_V2_ENABLED", "on")
    user_file = tmp_path / "user.json"
    write_json(user_file, {"id": "u2", "accessRole": "admin", "grants": {"posts": True}})

    result = runner.invoke(app, ["resolve", str(user_file), "--path", "/dashboard/audit-log"])

    assert result.exit_code == 0
    payload = _first_json(result.stdout)
    assert payload["accessRole"] == "admin"
    assert payload["rbacV2Enabled"] is True
    assert payload["pathAllowed"] is False


def test_resolve_unknown_strategy(tmp_path: Path) -> None:
    user_file = tmp_path / "user.json"
    write_json(user_file, {"id": "u2"})

    result = runner.invoke(app, ["resolve", str(user_file), "--strategy", "v3"])

    assert result.exit_code == 1
    assert "INVALID_INPUT" in result.output


def test_resolve_missing_user_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["resolve", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "DATA_FILE_ERROR" in result.output
    assert "accessRole" not in result.output


def test_resolve_corrupt_user_file(tmp_path: Path) -> None:
    user_file = tmp_path / "user.json"
    user_file.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["resolve", str(user_file)])

    assert result.exit_code == 1
    assert "DATA_FILE_ERROR" in result.output
