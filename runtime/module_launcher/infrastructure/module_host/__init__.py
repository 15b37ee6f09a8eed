"""
Module Host Infrastructure

Runs modules inside the launcher process.
"""

from .entry_point_host import EntryPointModuleHost, resolve_module_class

__all__ = ["EntryPointModuleHost", "resolve_module_class"]
