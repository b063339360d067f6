# fansub_rbac/application/ports/inbound.py

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from fansub_rbac.application.dtos.access_dto import AccessSnapshot
from fansub_rbac.application.dtos.migration_dto import MigrationReport
from fansub_rbac.domain.models.access_domain_model import GrantMap


class IAccessResolver(ABC):
    """Interface for access resolution use cases."""

    @abstractmethod
    def resolve_access_role(self, user: Any) -> str:
        """Resolve the effective access role of a user."""
        pass

    @abstractmethod
    def resolve_grants(self, user: Any) -> GrantMap:
        """Resolve the total grant map of a user."""
        pass

    @abstractmethod
    def is_dashboard_path_allowed(self, pathname: str, grants: Optional[GrantMap],
                                  allow_users_for_self: bool = False) -> bool:
        """Check whether a dashboard pathname is reachable."""
        pass

    @abstractmethod
    def is_dashboard_href_allowed(self, href: str, grants: Optional[GrantMap],
                                  allow_users_for_self: bool = False) -> bool:
        """Check whether a dashboard menu href is reachable."""
        pass

    @abstractmethod
    def get_first_allowed_dashboard_route(self, grants: Optional[GrantMap],
                                          allow_users_for_self: bool = False) -> str:
        """Get the landing route for a grant map."""
        pass

    @abstractmethod
    def build_dashboard_menu_from_grants(self, items: Sequence[Any], grants: Optional[GrantMap],
                                         allow_users_for_self: bool = False) -> List[Any]:
        """Keep only the menu items the grant map allows."""
        pass

    @abstractmethod
    def resolve_access(self, user: Any, allow_users_for_self: bool = False) -> AccessSnapshot:
        """Resolve role, grants and landing route in one call."""
        pass


class IPermissionsMigration(ABC):
    """Interface for the offline permissions migration."""

    @abstractmethod
    def run(self, apply: bool = False) -> MigrationReport:
        """Compute the migration and, when applying, persist it."""
        pass
