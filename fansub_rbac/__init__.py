# fansub_rbac/__init__.py

"""
Controle de acesso (RBAC) do dashboard do site de fansub.

Resolve o papel efetivo, o mapa de grants e as rotas permitidas de um
usuário, nos formatos legado e RBAC V2.
"""

from fansub_rbac.application.dtos.access_dto import AccessSnapshot, AccessUserLike, DashboardMenuItem
from fansub_rbac.application.use_cases.access_use_cases import AccessResolver, build_access_resolver
from fansub_rbac.domain.models.access_domain_model import (
    ACCESS_ROLE_IDS,
    PERMISSION_IDS,
    AccessRole,
    PermissionId,
)
from fansub_rbac.domain.services.authz_service import can_access_users_page, can_grant

__all__ = [
    "ACCESS_ROLE_IDS",
    "PERMISSION_IDS",
    "AccessRole",
    "PermissionId",
    "AccessResolver",
    "AccessSnapshot",
    "AccessUserLike",
    "DashboardMenuItem",
    "build_access_resolver",
    "can_access_users_page",
    "can_grant",
]
