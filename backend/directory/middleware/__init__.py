# backend/directory/middleware/__init__.py
