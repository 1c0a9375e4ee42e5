"""
asgi.py -- ASGI entry point for bizdir.

Kept separate from api/main.py so process managers have one stable import
path regardless of how the api package is laid out.

Run with:  uvicorn asgi:app --reload
           uvicorn asgi:app --host 0.0.0.0 --port 8080 --workers 2
"""

from api.main import app

__all__ = ["app"]
