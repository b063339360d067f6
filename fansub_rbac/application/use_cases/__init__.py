# fansub_rbac/application/use_cases/__init__.py

"""
Application use cases: access resolution and the permissions migration.
"""

from fansub_rbac.application.use_cases.access_use_cases import AccessResolver, build_access_resolver
from fansub_rbac.application.use_cases.migration_use_cases import PermissionsMigrationService, build_migration

__all__ = [
    "AccessResolver",
    "build_access_resolver",
    "PermissionsMigrationService",
    "build_migration",
]
