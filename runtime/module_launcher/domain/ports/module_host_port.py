"""
Module Host Port Interface

Defines the contract for running a module inside this process.
This is an output port - implemented by infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Dict, List


class IModuleHostPort(ABC):
    """
    Port interface for the in-process module host.
    """

    @abstractmethod
    async def load(
        self,
        name: str,
        module_type: str,
        remappings: Dict[str, str],
        argv: List[str],
    ) -> bool:
        """
        Load and initialize a module.

        Args:
            name: Instance name
            module_type: ``pkg/Type`` of the module
            remappings: Extra name remappings for the module
            argv: Extra arguments for the module

        Returns:
            True if the module was loaded
        """
        pass

    @abstractmethod
    def unload(self, name: str) -> bool:
        """
        Shut a loaded module down.

        Args:
            name: Instance name

        Returns:
            True if a module was unloaded
        """
        pass
