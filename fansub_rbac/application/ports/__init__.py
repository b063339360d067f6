# fansub_rbac/application/ports/__init__.py
