"""Mindlog Server - JSON API for logs, comments, likes and search.

This module provides the FastAPI application for the Mindlog service.
"""

from .config import ServerConfig
from .main import create_app

__all__ = [
    "ServerConfig",
    "create_app",
]
