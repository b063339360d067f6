# fansub_rbac/adapters/outbound/persistence/__init__.py
