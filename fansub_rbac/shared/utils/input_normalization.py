# fansub_rbac/shared/utils/input_normalization.py

from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional


class InputNormalizer:
    """
    Normalização tolerante de entradas vindas de registros JSON legados,
    complementando as validações do Pydantic.
    """

    TRUTHY_TOKENS = ("1", "true", "yes", "on")
    FALSY_TOKENS = ("0", "false", "no", "off")

    @staticmethod
    def ensure_list(value: Any) -> List[Any]:
        """Retorna o valor se for lista/tupla, senão uma lista vazia."""
        if isinstance(value, (list, tuple)):
            return list(value)
        return []

    @staticmethod
    def to_text(value: Any) -> str:
        """
        Converte para string, tratando None e valores vazios como "".

        Args:
            value: Valor a ser convertido

        Returns:
            String sem espaços nas pontas
        """
        if value is None or value is False:
            return ""
        return str(value).strip()

    @classmethod
    def to_token(cls, value: Any) -> str:
        """Texto normalizado em minúsculas, usado para permissões e papéis."""
        return cls.to_text(value).lower()

    @staticmethod
    def unique(values: Iterable[Any]) -> List[Any]:
        """Remove duplicados e vazios preservando a ordem de primeira ocorrência."""
        seen: List[Any] = []
        for value in values:
            if not value:
                continue
            if value not in seen:
                seen.append(value)
        return seen

    @classmethod
    def unique_ids(cls, values: Any) -> List[str]:
        """Lista de ids sem espaços, sem vazios e sem duplicados."""
        return cls.unique(cls.to_text(value) for value in cls.ensure_list(values))

    @classmethod
    def parse_truthy(cls, value: Any, default: bool = False) -> bool:
        """
        Interpreta um valor de ambiente como booleano.

        Args:
            value: Valor bruto (string, bool ou None)
            default: Valor usado quando o texto não é reconhecido

        Returns:
            True para 1/true/yes/on, False para 0/false/no/off, senão o padrão
        """
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        normalized = str(value).strip().lower()
        if normalized in cls.TRUTHY_TOKENS:
            return True
        if normalized in cls.FALSY_TOKENS:
            return False
        return default


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a trailing Z."""
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
