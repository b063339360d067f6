from __future__ import annotations

import json
from pathlib import Path

import pytest

from fansub_rbac.adapters.configuration.config import Settings
from fansub_rbac.application.use_cases.access_use_cases import AccessResolver, build_access_resolver
from fansub_rbac.domain.models.access_domain_model import PERMISSION_IDS


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RBAC_V2_ENABLED", "LOG_LEVEL", "DEBUG", "DATA_DIR", "BACKUPS_DIR", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def legacy_resolver() -> AccessResolver:
    return build_access_resolver(Settings(_env_file=None, RBAC_V2_ENABLED=False))


@pytest.fixture
def v2_resolver() -> AccessResolver:
    return build_access_resolver(Settings(_env_file=None, RBAC_V2_ENABLED=True))


@pytest.fixture
def no_grants() -> dict[str, bool]:
    return {permission: False for permission in PERMISSION_IDS}


@pytest.fixture
def data_dirs(tmp_path: Path) -> tuple[Path, Path]:
    data_dir = tmp_path / "server" / "data"
    backups_dir = tmp_path / "backups"
    data_dir.mkdir(parents=True)
    return data_dir, backups_dir


def write_json(path: Path, value) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(value), encoding="utf-8")


def read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))
