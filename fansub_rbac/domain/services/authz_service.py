# fansub_rbac/domain/services/authz_service.py

"""
Domain helpers for access roles, grants and legacy permission tokens.

Every function here is pure and total: malformed input degrades to the
least-privileged value instead of raising.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from fansub_rbac.domain.models.access_domain_model import (
    ACCESS_ROLE_IDS,
    BASIC_PROFILE_FIELDS,
    DEFAULT_PERMISSIONS_BY_ROLE,
    LEGACY_OWNER_ROLE_LABEL,
    LEGACY_PERMISSION_ALIASES,
    LEGACY_WILDCARD,
    OWNER_ROLE_LABEL,
    PERMISSION_IDS,
    AccessRole,
    AccessSubject,
    GrantMap,
    PermissionId,
)
from fansub_rbac.shared.utils.input_normalization import InputNormalizer


@dataclass
class ExpandedPermissions:
    """Result of expanding a legacy permission list."""
    known: List[str] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)
    had_legacy_star: bool = False


def empty_grant_map() -> GrantMap:
    return {permission: False for permission in PERMISSION_IDS}


def full_grant_map() -> GrantMap:
    return {permission: True for permission in PERMISSION_IDS}


def normalize_access_role(value: Any, fallback: str = AccessRole.NORMAL) -> str:
    normalized = InputNormalizer.to_token(value)
    if normalized in ACCESS_ROLE_IDS:
        return normalized
    return fallback


def is_owner_access_role(value: Any) -> bool:
    role = normalize_access_role(value)
    return role in (AccessRole.OWNER_PRIMARY, AccessRole.OWNER_SECONDARY)


def default_permissions_for_role(access_role: Any) -> List[str]:
    role = normalize_access_role(access_role)
    return list(DEFAULT_PERMISSIONS_BY_ROLE.get(role, ()))


def compute_effective_access_role(
        user_id: Any = None,
        access_role: Any = None,
        owner_ids: Any = None,
        primary_owner_id: Any = None,
) -> str:
    """
    Effective role from raw record fields, as the server computes it.

    The primary owner is the explicit primary_owner_id, or else the first
    entry of owner_ids.
    """
    normalized_user_id = InputNormalizer.to_text(user_id)
    owners = [str(owner_id) for owner_id in owner_ids] if isinstance(owner_ids, (list, tuple)) else []
    if primary_owner_id:
        primary = str(primary_owner_id)
    else:
        primary = owners[0] if owners else ""
    if primary and normalized_user_id and normalized_user_id == primary:
        return AccessRole.OWNER_PRIMARY
    if normalized_user_id and normalized_user_id in owners:
        return AccessRole.OWNER_SECONDARY
    return normalize_access_role(access_role)


def compute_grants(
        user_id: Any = None,
        access_role: Any = None,
        permissions: Any = None,
        owner_ids: Any = None,
        primary_owner_id: Any = None,
        accept_legacy_star: bool = True,
) -> GrantMap:
    """
    Server-side grant computation for a stored user record.

    Args:
        user_id: Id of the user
        access_role: Stored accessRole
        permissions: Stored permission list; when it is not a list, the
            defaults of the effective role apply
        owner_ids: Owner id list
        primary_owner_id: Explicit primary owner id
        accept_legacy_star: Expand "*" in the stored list

    Returns:
        Complete grant map; the primary owner gets every permission
    """
    effective_role = compute_effective_access_role(
        user_id=user_id,
        access_role=access_role,
        owner_ids=owner_ids,
        primary_owner_id=primary_owner_id,
    )
    if effective_role == AccessRole.OWNER_PRIMARY:
        return full_grant_map()

    if isinstance(permissions, (list, tuple)):
        base_permissions = expand_legacy_permissions(
            permissions, accept_legacy_star=accept_legacy_star, keep_unknown=False
        ).known
    else:
        base_permissions = default_permissions_for_role(effective_role)

    grants = empty_grant_map()
    for permission in base_permissions:
        if permission in grants:
            grants[permission] = True
    return grants


def can(grants: Optional[Mapping[str, Any]], permission: Any) -> bool:
    return can_grant(grants, permission)


def resolve_access_role(subject: Optional[AccessSubject]) -> str:
    """
    Resolve the effective access role of a user.

    Owner membership always wins over the stored role, so a user whose
    record still says "normal" is recognised as an owner as soon as their
    id is in the owner list.

    Args:
        subject: Normalized user record, or None

    Returns:
        One of the four access roles
    """
    if subject is None:
        return AccessRole.NORMAL
    primary_owner_id = subject.effective_primary_owner_id
    if primary_owner_id and subject.id == primary_owner_id:
        return AccessRole.OWNER_PRIMARY
    if subject.is_owner:
        return AccessRole.OWNER_SECONDARY
    return normalize_access_role(subject.access_role)


def to_permission_set(permissions: Any) -> set:
    """Lower-cased permission set with "*" and "usuarios" expanded."""
    result = set()
    for permission in InputNormalizer.ensure_list(permissions):
        normalized = InputNormalizer.to_token(permission)
        if not normalized:
            continue
        if normalized == LEGACY_WILDCARD:
            result.update(PERMISSION_IDS)
            continue
        aliases = LEGACY_PERMISSION_ALIASES.get(normalized)
        if aliases:
            result.update(aliases)
            continue
        result.add(normalized)
    return result


def coerce_grants(grants: Optional[Mapping[str, Any]]) -> GrantMap:
    """Pad a partial grant map to all permissions; only a literal True grants."""
    result = empty_grant_map()
    if not isinstance(grants, Mapping):
        return result
    for permission in PERMISSION_IDS:
        result[permission] = grants.get(permission) is True
    return result


def compute_legacy_grants(subject: Optional[AccessSubject]) -> GrantMap:
    """
    Infer a grant map from a legacy flat permission list.

    The implied-permission rules below are part of the contract shared
    with the permissions migration and must stay stable.
    """
    if subject is None:
        return empty_grant_map()
    if subject.is_owner:
        return full_grant_map()

    permissions = to_permission_set(subject.permissions)

    def has(*candidates: str) -> bool:
        return any(candidate in permissions for candidate in candidates)

    return {
        PermissionId.POSTS: has(PermissionId.POSTS),
        PermissionId.PROJETOS: has(PermissionId.PROJETOS),
        PermissionId.COMENTARIOS: has(PermissionId.COMENTARIOS, PermissionId.POSTS, PermissionId.PROJETOS),
        PermissionId.PAGINAS: has(PermissionId.PAGINAS),
        PermissionId.UPLOADS: has(
            PermissionId.UPLOADS, PermissionId.POSTS, PermissionId.PROJETOS, PermissionId.CONFIGURACOES
        ),
        PermissionId.ANALYTICS: has(
            PermissionId.ANALYTICS, PermissionId.POSTS, PermissionId.PROJETOS, PermissionId.COMENTARIOS
        ),
        PermissionId.USUARIOS_BASICO: has(PermissionId.USUARIOS_BASICO),
        PermissionId.USUARIOS_ACESSO: has(PermissionId.USUARIOS_ACESSO),
        PermissionId.CONFIGURACOES: has(PermissionId.CONFIGURACOES),
        # Owners returned above; no legacy token ever grants the audit log.
        PermissionId.AUDIT_LOG: subject.is_owner,
        PermissionId.INTEGRACOES: has(
            PermissionId.INTEGRACOES, PermissionId.CONFIGURACOES, PermissionId.PROJETOS
        ),
    }


def can_grant(grants: Optional[Mapping[str, Any]], permission: Any) -> bool:
    if not isinstance(grants, Mapping) or not isinstance(permission, str) or not permission:
        return False
    return grants.get(permission) is True


def can_access_users_page(grants: Optional[Mapping[str, Any]]) -> bool:
    if not isinstance(grants, Mapping):
        return False
    return can_grant(grants, PermissionId.USUARIOS_BASICO) or can_grant(grants, PermissionId.USUARIOS_ACESSO)


def expand_legacy_permissions(
        permissions: Any,
        accept_legacy_star: bool = True,
        keep_unknown: bool = True,
) -> ExpandedPermissions:
    """
    Map a legacy permission list onto the permission vocabulary.

    Args:
        permissions: Raw permission tokens
        accept_legacy_star: Expand "*" to every permission
        keep_unknown: Keep unrecognized tokens verbatim

    Returns:
        Known ids in first-seen order, unknown tokens, and whether "*" was present
    """
    expanded = ExpandedPermissions()
    for raw in InputNormalizer.ensure_list(permissions):
        permission = InputNormalizer.to_token(raw)
        if not permission:
            continue
        if permission == LEGACY_WILDCARD:
            expanded.had_legacy_star = True
            if accept_legacy_star:
                _add_unique(expanded.known, *PERMISSION_IDS)
            elif keep_unknown:
                _add_unique(expanded.unknown, str(raw))
            continue
        if permission in PERMISSION_IDS:
            _add_unique(expanded.known, permission)
            continue
        aliases = LEGACY_PERMISSION_ALIASES.get(permission)
        if aliases:
            _add_unique(expanded.known, *aliases)
            continue
        if keep_unknown:
            _add_unique(expanded.unknown, str(raw))
    return expanded


def sanitize_permissions_for_storage(
        permissions: Any,
        accept_legacy_star: bool = True,
        keep_unknown: bool = True,
) -> List[str]:
    expanded = expand_legacy_permissions(
        permissions, accept_legacy_star=accept_legacy_star, keep_unknown=keep_unknown
    )
    if not keep_unknown:
        return list(expanded.known)
    return expanded.known + expanded.unknown


def remove_owner_role_label(roles: Any) -> List[Any]:
    if not isinstance(roles, (list, tuple)):
        return []
    return [role for role in roles if InputNormalizer.to_token(role) != LEGACY_OWNER_ROLE_LABEL]


def add_owner_role_label(roles: Any, is_owner: bool) -> List[Any]:
    normalized = remove_owner_role_label(roles)
    if not is_owner:
        return normalized
    return [OWNER_ROLE_LABEL] + normalized


def is_basic_profile_field(name: Any) -> bool:
    return InputNormalizer.to_text(name) in BASIC_PROFILE_FIELDS


def pick_basic_profile_patch(payload: Any) -> Dict[str, Any]:
    """Keep only the profile fields a user may always edit on their own record."""
    if not isinstance(payload, Mapping):
        return {}
    return {name: payload[name] for name in BASIC_PROFILE_FIELDS if name in payload}


def is_truthy_env(value: Any, default: bool = False) -> bool:
    return InputNormalizer.parse_truthy(value, default)


def _add_unique(target: List[str], *values: str) -> None:
    for value in values:
        if value and value not in target:
            target.append(value)
