# fansub_rbac/adapters/outbound/__init__.py
