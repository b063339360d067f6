# fansub_rbac/application/__init__.py
