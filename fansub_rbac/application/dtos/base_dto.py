# fansub_rbac/application/dtos/base_dto.py

"""
Classe base para dtos personalizados.

Os registros de usuário e do audit log são gravados em JSON com chaves
camelCase; os dtos expõem nomes snake_case em Python e aliases camelCase
na serialização.
"""

from pydantic import BaseModel, ConfigDict
from typing import Any, Dict


class CustomBaseModel(BaseModel):
    """
    Modelo base personalizado para todos os dtos da aplicação.

    Aceita tanto o nome do campo quanto o alias na entrada e ignora
    chaves desconhecidas.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self, exclude_none: bool = True) -> Dict[str, Any]:
        """
        Serializa o modelo com as chaves camelCase usadas nos arquivos JSON.

        Args:
            exclude_none: Omite campos sem valor definido

        Returns:
            Dict[str, Any]: Dicionário pronto para json.dumps
        """
        return self.model_dump(by_alias=True, exclude_none=exclude_none, mode="json")
