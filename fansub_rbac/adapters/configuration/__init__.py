# fansub_rbac/adapters/configuration/__init__.py
