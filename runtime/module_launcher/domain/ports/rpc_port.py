"""
RPC Port Interface

Defines the contract for calling services advertised by the manager.
This is an output port - implemented by infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict


class IRpcPort(ABC):
    """
    Port interface for service discovery and service calls.
    """

    @abstractmethod
    async def service_exists(self, name: str) -> bool:
        """
        Non-blocking probe for an advertised service.

        A failed lookup counts as "not advertised".

        Args:
            name: Absolute service name

        Returns:
            True if the service is currently advertised
        """
        pass

    @abstractmethod
    async def wait_for_service(self, name: str) -> None:
        """
        Wait until a service is advertised. There is no timeout.

        Args:
            name: Absolute service name
        """
        pass

    @abstractmethod
    async def call(self, name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a service once.

        Args:
            name: Absolute service name
            payload: Request body

        Returns:
            Response body

        Raises:
            RpcError: Transport failure or service not advertised
        """
        pass
