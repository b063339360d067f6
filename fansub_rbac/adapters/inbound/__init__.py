# fansub_rbac/adapters/inbound/__init__.py
