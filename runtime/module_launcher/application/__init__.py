"""
Application Layer

Orchestrates domain objects to launch and supervise a module.
"""

from .services import (
    EmbeddedRunner,
    HeartbeatMonitor,
    LifecycleSupervisor,
    RemoteLoaderClient,
    ShutdownSignalBridge,
)

__all__ = [
    "EmbeddedRunner",
    "HeartbeatMonitor",
    "LifecycleSupervisor",
    "RemoteLoaderClient",
    "ShutdownSignalBridge",
]
