"""
API module initialization.

Exports the application factory.
"""

from .main import create_app

__all__ = [
    "create_app"
]
