# fansub_rbac/adapters/configuration/config.py

from pathlib import Path
from logging import getLevelName
from pydantic import field_validator, ConfigDict
from pydantic_settings import BaseSettings

from fansub_rbac.shared.utils.input_normalization import InputNormalizer


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"

    DEBUG: bool = False

    # RBAC V2: explicit grant maps + dashboard route gating. Read once at startup.
    RBAC_V2_ENABLED: bool = False

    # Data files
    DATA_DIR: Path = Path("server/data")
    BACKUPS_DIR: Path = Path("backups")
    USERS_FILE_NAME: str = "users.json"
    OWNER_IDS_FILE_NAME: str = "owner-ids.json"
    AUDIT_LOG_FILE_NAME: str = "audit-log.json"

    @field_validator("RBAC_V2_ENABLED", mode="before")
    def parse_rbac_v2_flag(cls, v) -> bool:
        """Só 1/true/yes/on (sem diferenciar maiúsculas) ativam a flag; o resto é falso."""
        return InputNormalizer.parse_truthy(v, default=False) if not isinstance(v, bool) else v

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Garante que o valor é um nível válido do logging"""
        lvl = str(v).strip().upper()
        if not isinstance(getLevelName(lvl), int):
            raise ValueError(f"LOG_LEVEL inválido: {v!r}")
        return lvl

    @property
    def users_file(self) -> Path:
        return self.DATA_DIR / self.USERS_FILE_NAME

    @property
    def owner_ids_file(self) -> Path:
        return self.DATA_DIR / self.OWNER_IDS_FILE_NAME

    @property
    def audit_log_file(self) -> Path:
        return self.DATA_DIR / self.AUDIT_LOG_FILE_NAME

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
