# fansub_rbac/application/use_cases/access_use_cases.py

"""
Access resolution use cases.

The resolver receives its grant strategy once, at construction time, so a
single process can hold a legacy resolver and an RBAC V2 resolver side by
side (tests do exactly that). Callers never branch on the V2 flag.
"""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel

from fansub_rbac.adapters.configuration.config import Settings, settings as default_settings
from fansub_rbac.application.dtos.access_dto import AccessSnapshot, AccessUserLike
from fansub_rbac.application.ports.inbound import IAccessResolver
from fansub_rbac.domain.models.access_domain_model import DASHBOARD_HOME, USERS_REQUIREMENT, GrantMap
from fansub_rbac.domain.services import authz_service
from fansub_rbac.domain.services.grant_strategies import GrantStrategy, select_grant_strategy
from fansub_rbac.domain.services.route_service import DashboardRouteTable, default_route_table

logger = logging.getLogger(__name__)


class AccessResolver(IAccessResolver):
    """
    Resolves roles, grants and dashboard reachability for user records.
    """

    def __init__(self, strategy: GrantStrategy, route_table: Optional[DashboardRouteTable] = None):
        """
        Args:
            strategy: Grant strategy that is authoritative for this resolver
            route_table: Dashboard route table (defaults to the built-in one)
        """
        self.strategy = strategy
        self.route_table = route_table or default_route_table

    @property
    def gates_routes(self) -> bool:
        return self.strategy.gates_routes

    def resolve_access_role(self, user: Any) -> str:
        record = AccessUserLike.coerce(user)
        return authz_service.resolve_access_role(record.to_domain() if record else None)

    def resolve_grants(self, user: Any) -> GrantMap:
        record = AccessUserLike.coerce(user)
        grants = self.strategy.resolve_grants(record.to_domain() if record else None)
        logger.debug(
            f"Grants resolved via {self.strategy.name} for user "
            f"{record.id if record else 'N/A'}: {sorted(p for p, v in grants.items() if v)}"
        )
        return grants

    # Mode-independent checks, exposed here so callers need only the resolver
    can_grant = staticmethod(authz_service.can_grant)
    can_access_users_page = staticmethod(authz_service.can_access_users_page)

    def get_dashboard_route_requirement(self, pathname: str) -> Optional[str]:
        return self.route_table.requirement_for(pathname)

    def is_dashboard_path_allowed(self, pathname: str, grants: Optional[GrantMap],
                                  allow_users_for_self: bool = False) -> bool:
        if not self.gates_routes:
            return True
        required = self.get_dashboard_route_requirement(pathname)
        if required is None:
            return True
        if required == USERS_REQUIREMENT:
            return bool(allow_users_for_self or authz_service.can_access_users_page(grants))
        return authz_service.can_grant(grants, required)

    def is_dashboard_href_allowed(self, href: str, grants: Optional[GrantMap],
                                  allow_users_for_self: bool = False) -> bool:
        if not self.gates_routes:
            return True
        route = self.route_table.get(href)
        if route is None or route.requirement is None:
            return True
        if route.requirement == USERS_REQUIREMENT:
            if grants is None:
                return False
            return authz_service.can_access_users_page(grants) or bool(allow_users_for_self)
        return authz_service.can_grant(grants, route.requirement)

    def get_first_allowed_dashboard_route(self, grants: Optional[GrantMap],
                                          allow_users_for_self: bool = False) -> str:
        if not self.gates_routes:
            return DASHBOARD_HOME
        for href in self.route_table.hrefs:
            if self.is_dashboard_href_allowed(href, grants, allow_users_for_self=allow_users_for_self):
                return href
        return DASHBOARD_HOME

    def build_dashboard_menu_from_grants(self, items: Sequence[Any], grants: Optional[GrantMap],
                                         allow_users_for_self: bool = False) -> List[Any]:
        """
        Recompute each item's "enabled" flag and keep only the enabled ones.

        Items may be DashboardMenuItem instances or mappings with an "href"
        key; the returned items are copies of the same type, in input order.
        Anything else is dropped.
        """
        menu = []
        for item in items or []:
            if isinstance(item, Mapping):
                href = item.get("href")
            elif isinstance(item, BaseModel):
                href = getattr(item, "href", None)
            else:
                logger.debug(f"Skipping unsupported menu item: {type(item).__name__}")
                continue
            enabled = self.is_dashboard_href_allowed(
                href, grants, allow_users_for_self=allow_users_for_self
            )
            if not enabled:
                continue
            if isinstance(item, Mapping):
                menu.append({**item, "enabled": True})
            else:
                menu.append(item.model_copy(update={"enabled": True}))
        return menu

    def resolve_access(self, user: Any, allow_users_for_self: bool = False) -> AccessSnapshot:
        grants = self.resolve_grants(user)
        return AccessSnapshot(
            access_role=self.resolve_access_role(user),
            grants=grants,
            landing_route=self.get_first_allowed_dashboard_route(
                grants, allow_users_for_self=allow_users_for_self
            ),
            rbac_v2_enabled=self.gates_routes,
        )


def build_access_resolver(config: Optional[Settings] = None,
                          route_table: Optional[DashboardRouteTable] = None) -> AccessResolver:
    """
    Build a resolver whose strategy follows the RBAC V2 flag of the given settings.

    Args:
        config: Settings to read the flag from (defaults to the process settings)
        route_table: Optional custom route table

    Returns:
        A configured AccessResolver
    """
    config = config or default_settings
    strategy = select_grant_strategy(config.RBAC_V2_ENABLED)
    logger.info(f"Access resolver ready (strategy={strategy.name})")
    return AccessResolver(strategy, route_table=route_table)
