# fansub_rbac/shared/utils/__init__.py
