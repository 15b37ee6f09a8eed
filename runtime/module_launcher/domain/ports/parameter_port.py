"""
Parameter Port Interface

Defines the contract for the shared parameter tree.
This is an output port - implemented by infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IParameterPort(ABC):
    """
    Port interface for reading and writing parameter subtrees.
    """

    @abstractmethod
    async def get_param(self, key: str) -> Optional[Any]:
        """
        Read a parameter or a whole subtree.

        Args:
            key: Absolute parameter name

        Returns:
            The stored value, or None if nothing is stored under ``key``
        """
        pass

    @abstractmethod
    async def set_param(self, key: str, value: Any) -> None:
        """
        Write a parameter or a whole subtree.

        Args:
            key: Absolute parameter name
            value: Scalar or nested dict
        """
        pass
