"""
In-process module host.

Resolves ``pkg/Type`` through the ``module_launcher.modules`` entry point
group, falling back to attribute ``Type`` of Python module ``pkg``.
A module class is instantiated without arguments, then ``on_init(context)``
is called (plain or coroutine); ``on_shutdown()`` is called on unload.
"""

import importlib
import inspect
from importlib.metadata import entry_points
from typing import Any, Dict, List

from module_launcher.domain.ports import IModuleHostPort
from module_launcher.domain.value_objects import ModuleContext
from module_launcher.infrastructure.logging import get_logger


logger = get_logger()

ENTRY_POINT_GROUP = "module_launcher.modules"


def resolve_module_class(module_type: str) -> type:
    """
    Find the class implementing a module type.

    Raises:
        ImportError: Neither an entry point nor an importable attribute exists
    """
    for entry_point in entry_points(group=ENTRY_POINT_GROUP, name=module_type):
        return entry_point.load()

    package, _, type_name = module_type.partition("/")
    try:
        return getattr(importlib.import_module(package), type_name)
    except AttributeError as e:
        raise ImportError(f"Module {package!r} has no attribute {type_name!r}") from e


class EntryPointModuleHost(IModuleHostPort):
    """Keeps the modules loaded into this process, by instance name."""

    def __init__(self):
        self._modules: Dict[str, Any] = {}

    async def load(
        self,
        name: str,
        module_type: str,
        remappings: Dict[str, str],
        argv: List[str],
    ) -> bool:
        if name in self._modules:
            logger.error("A module with this name is already loaded", instance=name)
            return False

        try:
            module_class = resolve_module_class(module_type)
        except ImportError as e:
            logger.error("Failed to resolve module type", module_type=module_type, error=str(e))
            return False

        context = ModuleContext(name=name, remappings=dict(remappings), argv=list(argv))
        try:
            module = module_class()
            result = module.on_init(context)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(
                "Module failed to initialize",
                module_type=module_type,
                instance=name,
                error=str(e),
                exc_info=True,
            )
            return False

        self._modules[name] = module
        logger.debug("Module initialized", module_type=module_type, instance=name)
        return True

    def unload(self, name: str) -> bool:
        module = self._modules.pop(name, None)
        if module is None:
            return False

        on_shutdown = getattr(module, "on_shutdown", None)
        if on_shutdown is not None:
            try:
                on_shutdown()
            except Exception as e:
                logger.error("Module failed to shut down", instance=name, error=str(e))
        return True
