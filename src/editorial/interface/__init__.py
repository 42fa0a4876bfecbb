"""
Interface module - External bindings for the editorial services.

This module contains:
- api.py: FastAPI REST API
- cli.py: Command-line interface
"""

from editorial.interface.api import app as api_app

__all__ = [
    "api_app",
]
