# fansub_rbac/application/dtos/migration_dto.py

"""
Schemas para a migração de permissões (formato legado -> RBAC V2).

Este módulo define o resumo numérico da migração, o resultado calculado,
o relatório impresso pela CLI e a entrada gravada no audit log.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field

from fansub_rbac.application.dtos.base_dto import CustomBaseModel
from fansub_rbac.domain.models.access_domain_model import ACCESS_ROLE_IDS


def _empty_role_tally() -> Dict[str, int]:
    return {role: 0 for role in ACCESS_ROLE_IDS}


class MigrationSummary(CustomBaseModel):
    """
    Contadores da migração.
    """
    total_users: int = Field(0, alias="totalUsers", description="Total de usuários lidos.")
    changed_users: int = Field(0, alias="changedUsers", description="Usuários cujo registro mudou.")
    expanded_stars: int = Field(0, alias="expandedStars", description="Usuários com '*' expandido.")
    owner_role_removed: int = Field(
        0, alias="ownerRoleRemoved", description="Usuários que perderam o marcador legado 'dono'."
    )
    unknown_permissions_preserved: int = Field(
        0, alias="unknownPermissionsPreserved", description="Permissões desconhecidas mantidas."
    )
    access_role_assigned: Dict[str, int] = Field(
        default_factory=_empty_role_tally, alias="accessRoleAssigned", description="Contagem por accessRole."
    )


class MigrationResult(CustomBaseModel):
    """
    Resultado puro da migração, antes de qualquer gravação.
    """
    next_users: List[Dict[str, Any]] = Field(default_factory=list, alias="nextUsers")
    next_owner_ids: List[str] = Field(default_factory=list, alias="nextOwnerIds")
    previous_owner_ids: List[str] = Field(default_factory=list, alias="previousOwnerIds")
    summary: MigrationSummary = Field(default_factory=MigrationSummary)


class MigrationReport(CustomBaseModel):
    """
    Relatório impresso pela CLI em dry-run e em apply.
    """
    dry_run: bool = Field(..., alias="dryRun")
    apply: bool = Field(...)
    summary: MigrationSummary = Field(...)
    before_owner_ids: List[str] = Field(default_factory=list, alias="beforeOwnerIds")
    after_owner_ids: List[str] = Field(default_factory=list, alias="afterOwnerIds")
    backup_path: Optional[str] = Field(None, alias="backupPath")


class AuditLogMeta(CustomBaseModel):
    dry_run: bool = Field(False, alias="dryRun")
    before_owner_ids: List[str] = Field(default_factory=list, alias="beforeOwnerIds")
    after_owner_ids: List[str] = Field(default_factory=list, alias="afterOwnerIds")
    summary: MigrationSummary = Field(default_factory=MigrationSummary)


class AuditLogEntry(CustomBaseModel):
    """
    Entrada do audit log registrada quando a migração é aplicada.
    """
    id: str
    ts: str
    actor_id: str = Field("system", alias="actorId")
    actor_name: str = Field("RBAC V2 Migration", alias="actorName")
    action: str = "users.permissions_v2_migrate"
    resource: str = "users"
    resource_id: str = Field("all", alias="resourceId")
    status: str = "success"
    ip: str = "127.0.0.1"
    request_id: str = Field(..., alias="requestId")
    meta: AuditLogMeta = Field(default_factory=AuditLogMeta)
