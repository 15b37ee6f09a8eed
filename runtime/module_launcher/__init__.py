"""
Module Launcher

Runs a module embedded in this process or loads it into a long-lived manager
and supervises it until shutdown.
"""

__version__ = "1.0.0"

from .domain.entities import LeaseHandle, ShutdownLatch
from .domain.value_objects import (
    ExitCode,
    LaunchArguments,
    LeaseToken,
    ModuleContext,
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
    "ExitCode",
    "LaunchArguments",
    "LeaseToken",
    "ModuleContext",
    "ModuleIdentity",
    "RemappingSet",
    "ShutdownReason",
    "ShutdownReasonKind",
    "SupervisorState",
    "UnloadOutcome",
]
