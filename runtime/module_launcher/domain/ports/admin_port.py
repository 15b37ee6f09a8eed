"""
Admin Request Port Interface

Defines the contract for intercepting administrative control requests
such as "shutdown". This is an input port - served by infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List

# A handler receives the raw params list and returns [code, status_message, value].
AdminHandler = Callable[[List[Any]], List[Any]]


class IAdminRequestPort(ABC):
    """
    Port interface for administrative request dispatch.

    Binding a handler replaces whatever default handling the method had,
    so the handler fully owns the response.
    """

    @abstractmethod
    def bind(self, method: str, handler: AdminHandler) -> None:
        """
        Install a handler for a method.

        Args:
            method: Method name, e.g. "shutdown"
            handler: Callable producing the full response
        """
        pass

    @abstractmethod
    def unbind(self, method: str) -> None:
        """
        Remove the handler of a method, if any.

        Args:
            method: Method name
        """
        pass

    @abstractmethod
    def dispatch(self, method: str, params: List[Any]) -> List[Any]:
        """
        Route a request to its handler.

        Args:
            method: Method name
            params: Request parameters

        Returns:
            Response triple [code, status_message, value]
        """
        pass
