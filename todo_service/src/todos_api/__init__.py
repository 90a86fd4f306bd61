"""
TODO service package.

Exposes the FastAPI app at package level (import path: src.todos_api.app).
"""

from .main import app  # noqa: F401
