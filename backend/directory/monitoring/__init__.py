# backend/directory/monitoring/__init__.py
