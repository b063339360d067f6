# fansub_rbac/adapters/inbound/cli/__init__.py

from fansub_rbac.adapters.inbound.cli.main import app

__all__ = ["app"]
