"""
Domain Ports

Port interfaces defining contracts between layers.
All dependencies on external systems are abstracted through ports.
"""

from .admin_port import AdminHandler, IAdminRequestPort
from .heartbeat_port import IHeartbeatPort
from .module_host_port import IModuleHostPort
from .parameter_port import IParameterPort
from .rpc_port import IRpcPort

__all__ = [
    # Admin requests
    "AdminHandler",
    "IAdminRequestPort",
    # Heartbeat
    "IHeartbeatPort",
    # Module host
    "IModuleHostPort",
    # Parameters
    "IParameterPort",
    # RPC
    "IRpcPort",
]
