# fansub_rbac/domain/models/access_domain_model.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


class AccessRole:
    """Access roles, ordered by privilege."""
    NORMAL = "normal"
    ADMIN = "admin"
    OWNER_SECONDARY = "owner_secondary"
    OWNER_PRIMARY = "owner_primary"


ACCESS_ROLE_IDS: Tuple[str, ...] = (
    AccessRole.NORMAL,
    AccessRole.ADMIN,
    AccessRole.OWNER_SECONDARY,
    AccessRole.OWNER_PRIMARY,
)


class PermissionId:
    """Grantable dashboard capabilities."""
    POSTS = "posts"
    PROJETOS = "projetos"
    COMENTARIOS = "comentarios"
    PAGINAS = "paginas"
    UPLOADS = "uploads"
    ANALYTICS = "analytics"
    USUARIOS_BASICO = "usuarios_basico"
    USUARIOS_ACESSO = "usuarios_acesso"
    CONFIGURACOES = "configuracoes"
    AUDIT_LOG = "audit_log"
    INTEGRACOES = "integracoes"


PERMISSION_IDS: Tuple[str, ...] = (
    PermissionId.POSTS,
    PermissionId.PROJETOS,
    PermissionId.COMENTARIOS,
    PermissionId.PAGINAS,
    PermissionId.UPLOADS,
    PermissionId.ANALYTICS,
    PermissionId.USUARIOS_BASICO,
    PermissionId.USUARIOS_ACESSO,
    PermissionId.CONFIGURACOES,
    PermissionId.AUDIT_LOG,
    PermissionId.INTEGRACOES,
)

# Legacy tokens
LEGACY_WILDCARD = "*"
LEGACY_USERS_TOKEN = "usuarios"
LEGACY_OWNER_ROLE_LABEL = "dono"
OWNER_ROLE_LABEL = "Dono"

LEGACY_PERMISSION_ALIASES: Dict[str, Tuple[str, ...]] = {
    LEGACY_USERS_TOKEN: (PermissionId.USUARIOS_BASICO, PermissionId.USUARIOS_ACESSO),
}

DEFAULT_ADMIN_PERMISSIONS: Tuple[str, ...] = (
    PermissionId.POSTS,
    PermissionId.PROJETOS,
    PermissionId.COMENTARIOS,
    PermissionId.PAGINAS,
    PermissionId.UPLOADS,
    PermissionId.ANALYTICS,
    PermissionId.USUARIOS_BASICO,
)

DEFAULT_PERMISSIONS_BY_ROLE: Dict[str, Tuple[str, ...]] = {
    AccessRole.NORMAL: (),
    AccessRole.ADMIN: DEFAULT_ADMIN_PERMISSIONS,
    AccessRole.OWNER_SECONDARY: PERMISSION_IDS,
    AccessRole.OWNER_PRIMARY: PERMISSION_IDS,
}

# Holding every one of these legacy tokens marked a user as admin
ADMIN_BADGE_LEGACY_PERMISSIONS: Tuple[str, ...] = (
    PermissionId.POSTS,
    PermissionId.PROJETOS,
    PermissionId.COMENTARIOS,
    LEGACY_USERS_TOKEN,
    PermissionId.PAGINAS,
    PermissionId.CONFIGURACOES,
)

BASIC_PROFILE_FIELDS: Tuple[str, ...] = (
    "name",
    "phrase",
    "bio",
    "avatarUrl",
    "avatarDisplay",
    "socials",
)

# Route requirement meaning "usuarios_basico or usuarios_acesso"
USERS_REQUIREMENT = "users"

GrantMap = Dict[str, bool]


@dataclass
class AccessSubject:
    """Normalized view of a user record, as seen by the access resolver."""
    id: str = ""
    access_role: Optional[str] = None
    permissions: List[str] = field(default_factory=list)
    grants: Optional[Dict[str, Any]] = None
    owner_ids: List[str] = field(default_factory=list)
    primary_owner_id: Optional[str] = None

    @property
    def is_owner(self) -> bool:
        return self.id in self.owner_ids

    @property
    def effective_primary_owner_id(self) -> str:
        if self.primary_owner_id:
            return self.primary_owner_id
        return self.owner_ids[0] if self.owner_ids else ""


@dataclass(frozen=True)
class DashboardRoute:
    """A dashboard href and the permission it requires (None: open)."""
    href: str
    requirement: Optional[str] = None


DASHBOARD_ROUTES: Tuple[DashboardRoute, ...] = (
    DashboardRoute("/dashboard", None),
    DashboardRoute("/dashboard/seguranca", None),
    DashboardRoute("/dashboard/analytics", PermissionId.ANALYTICS),
    DashboardRoute("/dashboard/posts", PermissionId.POSTS),
    DashboardRoute("/dashboard/projetos", PermissionId.PROJETOS),
    DashboardRoute("/dashboard/comentarios", PermissionId.COMENTARIOS),
    DashboardRoute("/dashboard/audit-log", PermissionId.AUDIT_LOG),
    DashboardRoute("/dashboard/usuarios", USERS_REQUIREMENT),
    DashboardRoute("/dashboard/paginas", PermissionId.PAGINAS),
    DashboardRoute("/dashboard/webhooks", PermissionId.INTEGRACOES),
    DashboardRoute("/dashboard/configuracoes", PermissionId.CONFIGURACOES),
)

DASHBOARD_HOME = "/dashboard"
