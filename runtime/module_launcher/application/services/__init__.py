"""
Application Services

Supervisor components built on the domain ports.
"""

from .embedded_runner import EmbeddedRunner
from .heartbeat_monitor import HeartbeatMonitor
from .lifecycle_supervisor import LifecycleSupervisor
from .remote_loader import RemoteLoaderClient
from .shutdown_bridge import ShutdownSignalBridge

__all__ = [
    "EmbeddedRunner",
    "HeartbeatMonitor",
    "LifecycleSupervisor",
    "RemoteLoaderClient",
    "ShutdownSignalBridge",
]
