# fansub_rbac/domain/services/__init__.py
