# fansub_rbac/application/dtos/access_dto.py

"""
Schemas para os dados de entrada e saída do resolvedor de acesso.

O registro de usuário pode vir no formato legado (lista plana de
permissões) ou no formato V2 (mapa explícito de grants + accessRole).
Os validadores são tolerantes: valores malformados viram o padrão de
menor privilégio em vez de gerar erro.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, ValidationError, field_validator

from fansub_rbac.application.dtos.base_dto import CustomBaseModel
from fansub_rbac.domain.models.access_domain_model import AccessSubject, GrantMap
from fansub_rbac.shared.utils.input_normalization import InputNormalizer

logger = logging.getLogger(__name__)


class AccessUserLike(CustomBaseModel):
    """
    Schema do registro de usuário consumido pelo resolvedor.
    """
    id: str = Field("", description="Identificador do usuário.")
    access_role: Optional[str] = Field(None, alias="accessRole", description="Papel de acesso armazenado.")
    permissions: List[str] = Field(default_factory=list, description="Permissões legadas (lista plana).")
    grants: Optional[Dict[str, Any]] = Field(None, description="Mapa parcial de grants (RBAC V2).")
    owner_ids: List[str] = Field(default_factory=list, alias="ownerIds", description="Ids dos donos.")
    primary_owner_id: Optional[str] = Field(None, alias="primaryOwnerId", description="Id do dono principal.")

    @field_validator("id", mode="before")
    def coerce_id(cls, v):
        return InputNormalizer.to_text(v)

    @field_validator("access_role", "primary_owner_id", mode="before")
    def coerce_optional_text(cls, v):
        text = InputNormalizer.to_text(v)
        return text or None

    @field_validator("permissions", mode="before")
    def coerce_permissions(cls, v):
        return [InputNormalizer.to_text(item) for item in InputNormalizer.ensure_list(v)]

    @field_validator("owner_ids", mode="before")
    def coerce_owner_ids(cls, v):
        return InputNormalizer.unique_ids(v)

    @field_validator("grants", mode="before")
    def coerce_grant_mapping(cls, v):
        if not isinstance(v, Mapping):
            return None
        return {str(key): value for key, value in v.items()}

    @classmethod
    def coerce(cls, raw: Any) -> Optional["AccessUserLike"]:
        """
        Converte um registro bruto (dto, dict ou objeto) em AccessUserLike.

        Args:
            raw: Registro de usuário em qualquer formato aceito

        Returns:
            O dto, ou None quando não há usuário utilizável
        """
        if raw is None:
            return None
        if isinstance(raw, cls):
            return raw
        try:
            if isinstance(raw, Mapping):
                return cls.model_validate(dict(raw))
            return cls.model_validate(raw, from_attributes=True)
        except ValidationError as e:
            logger.warning(f"Registro de usuário ignorado pelo resolvedor: {e.error_count()} erro(s)")
            return None

    def to_domain(self) -> AccessSubject:
        return AccessSubject(
            id=self.id,
            access_role=self.access_role,
            permissions=list(self.permissions),
            grants=dict(self.grants) if self.grants is not None else None,
            owner_ids=list(self.owner_ids),
            primary_owner_id=self.primary_owner_id,
        )


class DashboardMenuItem(CustomBaseModel):
    """
    Item do menu do dashboard. Campos extras (ícone, badge...) são preservados.
    """
    href: str = Field(..., description="Rota do dashboard.")
    label: Optional[str] = Field(None, description="Texto exibido no menu.")
    enabled: bool = Field(True, description="Indica se o item está habilitado.")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class AccessSnapshot(CustomBaseModel):
    """
    Resumo do acesso efetivo de um usuário.
    """
    access_role: str = Field(..., alias="accessRole")
    grants: GrantMap = Field(...)
    landing_route: str = Field(..., alias="landingRoute")
    rbac_v2_enabled: bool = Field(..., alias="rbacV2Enabled")
