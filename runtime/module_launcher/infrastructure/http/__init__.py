"""
HTTP Infrastructure

Clients of the master and of manager services.
"""

from .master_client import MasterClient

__all__ = ["MasterClient"]
