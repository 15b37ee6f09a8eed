"""
Launcher Domain Layer

Value objects, entities and errors of the module launcher,
plus the ports through which it reaches external collaborators.
"""

from .entities import LeaseHandle, ShutdownLatch
from .errors import LauncherError, LoadError, RpcError
from .value_objects import (
    ExitCode,
    LeaseToken,
    ModuleIdentity,
    RemappingSet,
    ShutdownReason,
    ShutdownReasonKind,
    SupervisorState,
    UnloadOutcome,
)

__all__ = [
    "LeaseHandle",
    "ShutdownLatch",
    "LauncherError",
    "LoadError",
    "RpcError",
    "ExitCode",
    "LeaseToken",
    "ModuleIdentity",
    "RemappingSet",
    "ShutdownReason",
    "ShutdownReasonKind",
    "SupervisorState",
    "UnloadOutcome",
]
