# fansub_rbac/domain/models/__init__.py
