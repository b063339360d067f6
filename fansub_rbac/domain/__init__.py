# fansub_rbac/domain/__init__.py

"""
Componentes do domínio: modelos de acesso, serviços puros e exceções.
"""

# Exportar todas as exceções para facilitar a importação
from fansub_rbac.domain.exceptions import (
    DomainException,               # Exceção base pura do domínio
    InvalidInputException,
    DataFileException,
)
