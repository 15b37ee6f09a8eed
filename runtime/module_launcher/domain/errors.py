"""
Launcher Errors

Domain errors raised by the launcher and infrastructure errors raised by adapters.
"""

from typing import Any, Optional


class LauncherError(Exception):
    """Base class of domain errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class MissingModuleTypeError(LauncherError):
    """No module type was given on the command line."""
    pass


class InvalidModuleTypeError(LauncherError):
    """Module type is not a ``pkg/Type`` pair."""
    pass


class LoadError(LauncherError):
    """The manager refused or failed the load request."""
    pass


class InfrastructureError(Exception):
    """Base class of adapter errors."""

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class RpcError(InfrastructureError):
    """A service call failed at the transport level or the service is not advertised."""
    pass
