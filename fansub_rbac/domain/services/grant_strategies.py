# fansub_rbac/domain/services/grant_strategies.py

"""
Grant resolution strategies.

Exactly one strategy is authoritative for the lifetime of a process: the
legacy strategy infers grants from flat permission lists and does no route
gating; the explicit strategy (RBAC V2) trusts the stored grant map and
gates dashboard routes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from fansub_rbac.domain.exceptions import InvalidInputException
from fansub_rbac.domain.models.access_domain_model import AccessSubject, GrantMap
from fansub_rbac.domain.services.authz_service import (
    coerce_grants,
    compute_legacy_grants,
    empty_grant_map,
)

logger = logging.getLogger(__name__)


class GrantStrategy(ABC):
    """Interface for grant resolution strategies."""

    name: str = ""
    gates_routes: bool = False

    def resolve_grants(self, subject: Optional[AccessSubject]) -> GrantMap:
        if subject is None:
            return empty_grant_map()
        return self._resolve(subject)

    @abstractmethod
    def _resolve(self, subject: AccessSubject) -> GrantMap:
        """Resolve grants for a present user."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class LegacyGrantStrategy(GrantStrategy):
    """Infers grants from the legacy permission list; owners get everything."""

    name = "legacy"
    gates_routes = False

    def _resolve(self, subject: AccessSubject) -> GrantMap:
        return compute_legacy_grants(subject)


class ExplicitGrantStrategy(GrantStrategy):
    """Trusts the stored grant map verbatim, padding missing permissions with False."""

    name = "v2"
    gates_routes = True

    def _resolve(self, subject: AccessSubject) -> GrantMap:
        return coerce_grants(subject.grants)


GRANT_STRATEGIES = {
    LegacyGrantStrategy.name: LegacyGrantStrategy,
    ExplicitGrantStrategy.name: ExplicitGrantStrategy,
}


def select_grant_strategy(rbac_v2_enabled: bool) -> GrantStrategy:
    strategy = ExplicitGrantStrategy() if rbac_v2_enabled else LegacyGrantStrategy()
    logger.debug(f"Grant strategy selected: {strategy.name}")
    return strategy


def get_grant_strategy(name: str) -> GrantStrategy:
    """
    Build a strategy by name ("legacy" or "v2").

    Raises:
        InvalidInputException: If the name is unknown
    """
    strategy_class = GRANT_STRATEGIES.get(str(name or "").strip().lower())
    if strategy_class is None:
        raise InvalidInputException(
            detail="Estratégia de permissões desconhecida",
            fields={"strategy": str(name)},
        )
    return strategy_class()
