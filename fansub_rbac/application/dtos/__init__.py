# fansub_rbac/application/dtos/__init__.py
