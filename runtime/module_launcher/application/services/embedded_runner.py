"""
Embedded Runner

Runs the module inside this process when no manager is given.
"""

import asyncio
import signal
from typing import Optional, Sequence

import structlog

from module_launcher.domain.ports import IModuleHostPort
from module_launcher.domain.value_objects import ExitCode, ModuleIdentity


logger = structlog.get_logger(__name__)


class EmbeddedRunner:
    """
    Loads the module in-process and blocks until the process is stopped.

    Remappings are already applied process-wide, so the module gets none
    of its own and no extra arguments.
    """

    def __init__(
        self,
        module_host: IModuleHostPort,
        signals: Sequence[int] = (signal.SIGINT, signal.SIGTERM),
    ):
        """
        Initialize embedded runner.

        Args:
            module_host: Host that runs the module in this process
            signals: Signals that stop the run
        """
        self._module_host = module_host
        self._signals = tuple(signals)
        self._stopped = asyncio.Event()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def run(self, identity: ModuleIdentity) -> ExitCode:
        logger.info(
            "Loading embedded module",
            module_type=identity.qualified_type,
            instance=identity.instance_name,
        )

        loaded = await self._module_host.load(
            identity.instance_name, identity.qualified_type, {}, []
        )
        if not loaded:
            logger.error("Failed to launch embedded module", module_type=identity.qualified_type)
            return ExitCode.EMBEDDED_LOAD_FAILED

        logger.debug("Embedded module loaded", instance=identity.instance_name)

        self._loop = asyncio.get_running_loop()
        for signum in self._signals:
            self._loop.add_signal_handler(signum, self.stop)

        try:
            await self._stopped.wait()
        finally:
            for signum in self._signals:
                self._loop.remove_signal_handler(signum)
            self._module_host.unload(identity.instance_name)

        logger.info("Embedded module stopped", instance=identity.instance_name)
        return ExitCode.OK

    def stop(self) -> None:
        """Let run() unload the module and return."""
        self._stopped.set()
