# fansub_rbac/shared/__init__.py
