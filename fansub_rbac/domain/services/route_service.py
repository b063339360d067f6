# fansub_rbac/domain/services/route_service.py

import re
from typing import Dict, Iterable, List, Optional, Tuple

from fansub_rbac.domain.exceptions import InvalidInputException
from fansub_rbac.domain.models.access_domain_model import DASHBOARD_ROUTES, DashboardRoute

TRAILING_SLASHES = re.compile(r"/+$")


class DashboardRouteTable:
    """
    Ordered, immutable table of dashboard hrefs and their requirements.

    Lookups by href are exact; lookups by pathname use longest-prefix
    matching, where a path matches an entry when it equals the entry or
    starts with the entry followed by "/".
    """

    def __init__(self, routes: Iterable[DashboardRoute] = DASHBOARD_ROUTES):
        self._routes: Tuple[DashboardRoute, ...] = tuple(routes)
        self._by_href: Dict[str, DashboardRoute] = {}
        for route in self._routes:
            if route.href in self._by_href:
                raise InvalidInputException(
                    detail="Rota duplicada na tabela do dashboard",
                    fields={"href": route.href},
                )
            self._by_href[route.href] = route
        # Longest prefix first, so the first match is the most specific one
        self._by_specificity: List[DashboardRoute] = sorted(
            self._routes, key=lambda route: len(route.href), reverse=True
        )

    @property
    def routes(self) -> Tuple[DashboardRoute, ...]:
        return self._routes

    @property
    def hrefs(self) -> List[str]:
        return [route.href for route in self._routes]

    def get(self, href: str) -> Optional[DashboardRoute]:
        if not isinstance(href, str):
            return None
        return self._by_href.get(href)

    @staticmethod
    def normalize_path(pathname: str) -> str:
        return TRAILING_SLASHES.sub("", str(pathname) if pathname else "") or "/"

    def match(self, pathname: str) -> Optional[DashboardRoute]:
        normalized = self.normalize_path(pathname)
        for route in self._by_specificity:
            if normalized == route.href or normalized.startswith(f"{route.href}/"):
                return route
        return None

    def requirement_for(self, pathname: str) -> Optional[str]:
        route = self.match(pathname)
        return route.requirement if route else None


default_route_table = DashboardRouteTable()
