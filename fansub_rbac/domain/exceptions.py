# fansub_rbac/domain/exceptions.py

"""
Exceções personalizadas do domínio de controle de acesso.

O resolvedor de permissões nunca lança exceções: entradas inválidas
degradam para o padrão de menor privilégio. As exceções abaixo cobrem
apenas a montagem do resolvedor e a migração offline de permissões.
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """
    Exceção base para todas as exceções do domínio.
    Carrega um código interno estável para quem precisar mapear o erro.
    """

    def __init__(
            self,
            detail: Any = None,
            internal_code: Optional[str] = None,
            details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        self.internal_code = internal_code
        self.details = details or {}

    def __str__(self) -> str:
        return str(self.detail)


class InvalidInputException(DomainException):
    """Dados de entrada inválidos."""

    def __init__(self, detail: str = "Dados de entrada inválidos", fields: Optional[Dict[str, str]] = None):
        field_errors = ""
        if fields:
            field_errors = ": " + ", ".join([f"{field}: {error}" for field, error in fields.items()])

        super().__init__(
            detail=f"{detail}{field_errors}",
            internal_code="INVALID_INPUT",
            details=fields,
        )


class DataFileException(DomainException):
    """Erro ao ler ou gravar um arquivo de dados (usuários, donos, audit log ou backup)."""

    def __init__(self, detail: str = "Erro ao gravar arquivo de dados",
                 path: Optional[str] = None,
                 original_error: Optional[Exception] = None):
        path_info = f" ({path})" if path else ""
        error_info = f": {str(original_error)}" if original_error else ""
        super().__init__(
            detail=f"{detail}{path_info}{error_info}",
            internal_code="DATA_FILE_ERROR",
            details={"path": path} if path else None,
        )
