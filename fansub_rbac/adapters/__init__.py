# fansub_rbac/adapters/__init__.py
