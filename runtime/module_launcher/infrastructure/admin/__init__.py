"""
Admin Infrastructure

Administrative request endpoint of the launcher process.
"""

from .app import create_admin_app
from .dispatcher import AdminRequestDispatcher
from .server import AdminServer

__all__ = ["AdminRequestDispatcher", "AdminServer", "create_admin_app"]
