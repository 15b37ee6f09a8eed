"""
Infrastructure Layer

Provides technical implementations for external concerns.
"""

from .admin import AdminRequestDispatcher, AdminServer
from .http import MasterClient
from .module_host import EntryPointModuleHost

__all__ = ["AdminRequestDispatcher", "AdminServer", "EntryPointModuleHost", "MasterClient"]
