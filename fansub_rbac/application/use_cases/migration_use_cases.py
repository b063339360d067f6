# fansub_rbac/application/use_cases/migration_use_cases.py

"""
Migração offline de permissões legadas para o vocabulário RBAC V2.

O cálculo (build_migration) é puro; a gravação fica a cargo do
PermissionsMigrationService, que só toca os arquivos quando aplicado.
"""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from fansub_rbac.application.dtos.migration_dto import (
    AuditLogEntry,
    AuditLogMeta,
    MigrationReport,
    MigrationResult,
    MigrationSummary,
)
from fansub_rbac.application.ports.inbound import IPermissionsMigration
from fansub_rbac.application.ports.outbound import IUserDataStore
from fansub_rbac.domain.models.access_domain_model import (
    ACCESS_ROLE_IDS,
    ADMIN_BADGE_LEGACY_PERMISSIONS,
    LEGACY_OWNER_ROLE_LABEL,
    LEGACY_USERS_TOKEN,
    LEGACY_WILDCARD,
    PERMISSION_IDS,
    AccessRole,
)
from fansub_rbac.domain.services.authz_service import (
    default_permissions_for_role,
    expand_legacy_permissions,
    is_owner_access_role,
)
from fansub_rbac.shared.utils.input_normalization import InputNormalizer, utc_timestamp

# Configurar logger
logger = logging.getLogger(__name__)


def normalize_roles(roles: Any) -> List[str]:
    """
    Normaliza a lista de papéis descritivos, removendo o marcador legado "dono".

    Args:
        roles: Lista bruta de papéis

    Returns:
        Papéis sem espaços nas pontas, sem vazios, sem "dono" e sem duplicados
    """
    result: List[str] = []
    for role in InputNormalizer.ensure_list(roles):
        text = InputNormalizer.to_text(role)
        if not text or text.lower() == LEGACY_OWNER_ROLE_LABEL:
            continue
        if text not in result:
            result.append(text)
    return result


def infer_access_role(user: Dict[str, Any]) -> str:
    """
    Deduz o accessRole de um usuário que não é dono.

    Um accessRole armazenado de dono é rebaixado para "normal": ser dono
    depende só da lista de donos.
    """
    stored = InputNormalizer.to_token(user.get("accessRole"))
    if stored in ACCESS_ROLE_IDS:
        if is_owner_access_role(stored):
            return AccessRole.NORMAL
        return stored

    permissions = [InputNormalizer.to_token(item) for item in InputNormalizer.ensure_list(user.get("permissions"))]
    if LEGACY_WILDCARD in permissions or LEGACY_USERS_TOKEN in permissions:
        return AccessRole.ADMIN
    if all(permission in permissions for permission in ADMIN_BADGE_LEGACY_PERMISSIONS):
        return AccessRole.ADMIN
    return AccessRole.NORMAL


def owner_ids_from_roles(users: List[Dict[str, Any]]) -> List[str]:
    return InputNormalizer.unique_ids([
        user.get("id")
        for user in users
        if any(
            InputNormalizer.to_token(role) == LEGACY_OWNER_ROLE_LABEL
            for role in InputNormalizer.ensure_list(user.get("roles"))
        )
    ])


def _serialize(record: Dict[str, Any]) -> str:
    return json.dumps(record, ensure_ascii=False, default=str)


def build_migration(users_input: Any, owner_ids_input: Any) -> MigrationResult:
    """
    Calcula a migração de todos os usuários, sem efeitos colaterais.

    Args:
        users_input: Registros de usuário como lidos do users.json
        owner_ids_input: Lista de donos como lida do owner-ids.json

    Returns:
        MigrationResult com os novos registros, a nova lista de donos e o resumo
    """
    users = [
        {**user, "id": InputNormalizer.to_text(user.get("id"))}
        for user in InputNormalizer.ensure_list(users_input)
        if isinstance(user, dict)
    ]
    previous_owner_ids = InputNormalizer.unique_ids(owner_ids_input)
    merged_owner_ids = InputNormalizer.unique(previous_owner_ids + owner_ids_from_roles(users))
    primary_owner_id = merged_owner_ids[0] if merged_owner_ids else None

    summary = MigrationSummary(total_users=len(users))
    next_users: List[Dict[str, Any]] = []

    for user in users:
        is_primary_owner = bool(primary_owner_id and user["id"] == primary_owner_id)
        is_secondary_owner = not is_primary_owner and user["id"] in merged_owner_ids

        previous_roles = InputNormalizer.ensure_list(user.get("roles"))
        roles = normalize_roles(previous_roles)
        if len(roles) != len(previous_roles):
            summary.owner_role_removed += 1

        expanded = expand_legacy_permissions(user.get("permissions"))
        if expanded.had_legacy_star:
            summary.expanded_stars += 1
        summary.unknown_permissions_preserved += len(expanded.unknown)

        if is_primary_owner:
            access_role = AccessRole.OWNER_PRIMARY
        elif is_secondary_owner:
            access_role = AccessRole.OWNER_SECONDARY
        else:
            access_role = infer_access_role(user)

        known_permissions = expanded.known
        if access_role in (AccessRole.OWNER_PRIMARY, AccessRole.OWNER_SECONDARY):
            known_permissions = list(PERMISSION_IDS)
        elif access_role == AccessRole.ADMIN and not known_permissions:
            known_permissions = default_permissions_for_role(AccessRole.ADMIN)

        next_user = {
            **user,
            "roles": roles,
            "permissions": known_permissions + expanded.unknown,
            "accessRole": access_role,
        }
        summary.access_role_assigned[access_role] += 1
        if _serialize(next_user) != _serialize(user):
            summary.changed_users += 1
        next_users.append(next_user)

    active_user_ids = {user["id"] for user in next_users if user["id"]}
    next_owner_ids = [owner_id for owner_id in merged_owner_ids if owner_id in active_user_ids]

    return MigrationResult(
        next_users=next_users,
        next_owner_ids=next_owner_ids,
        previous_owner_ids=previous_owner_ids,
        summary=summary,
    )


class PermissionsMigrationService(IPermissionsMigration):
    """
    Executa a migração sobre um repositório de dados (dry-run por padrão).
    """

    def __init__(
            self,
            store: IUserDataStore,
            clock: Optional[Callable[[], datetime]] = None,
            id_factory: Callable[[], Any] = uuid4,
    ):
        """
        Args:
            store: Repositório dos arquivos de usuários, donos e audit log
            clock: Fonte de data/hora (para testes)
            id_factory: Gerador de ids do audit log
        """
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    def run(self, apply: bool = False) -> MigrationReport:
        users = self.store.read_users()
        owner_ids = self.store.read_owner_ids()
        migration = build_migration(users, owner_ids)
        summary = migration.summary

        logger.info(
            f"Migração de permissões calculada: {summary.total_users} usuários, "
            f"{summary.changed_users} alterados (apply={apply})"
        )

        report = MigrationReport(
            dry_run=not apply,
            apply=apply,
            summary=summary,
            before_owner_ids=migration.previous_owner_ids,
            after_owner_ids=migration.next_owner_ids,
        )
        if not apply:
            return report

        ts = utc_timestamp(self.clock() if self.clock else None)
        backup_stamp = ts.replace(":", "-").replace(".", "-")
        report.backup_path = self.store.write_users_backup(users, backup_stamp)

        self.store.write_users(migration.next_users)
        self.store.write_owner_ids(migration.next_owner_ids)
        self.store.append_audit_entry(
            self._build_audit_entry(ts, migration).to_payload(exclude_none=False)
        )

        logger.info(f"Migração RBAC V2 aplicada. Backup: {report.backup_path}")
        return report

    def _build_audit_entry(self, ts: str, migration: MigrationResult) -> AuditLogEntry:
        return AuditLogEntry(
            id=str(self.id_factory()),
            ts=ts,
            request_id=f"migration-{self.id_factory()}",
            meta=AuditLogMeta(
                dry_run=False,
                before_owner_ids=migration.previous_owner_ids,
                after_owner_ids=migration.next_owner_ids,
                summary=migration.summary,
            ),
        )
