"""
Shutdown Signal Bridge

Turns OS interrupt signals and remote "shutdown" requests into one latch.
"""

import asyncio
import signal
from typing import Any, List, Optional, Sequence

import structlog

from module_launcher.domain.entities import ShutdownLatch
from module_launcher.domain.ports import IAdminRequestPort
from module_launcher.domain.value_objects import ShutdownReason


logger = structlog.get_logger(__name__)

SHUTDOWN_METHOD = "shutdown"
SHUTDOWN_ACK = [1, "", 0]


class ShutdownSignalBridge:
    """
    Intercepts shutdown triggers so the module can be unloaded first.

    Handles:
    - SIGINT/SIGTERM via loop signal handlers that only set the latch
    - The administrative "shutdown" request, bound ahead of the default
      handler that would terminate the process right away
    """

    def __init__(
        self,
        admin_port: Optional[IAdminRequestPort] = None,
        signals: Sequence[int] = (signal.SIGINT, signal.SIGTERM),
        latch: Optional[ShutdownLatch] = None,
    ):
        """
        Initialize shutdown bridge.

        Args:
            admin_port: Dispatcher of administrative requests
            signals: Signals to intercept
            latch: Latch to feed, a new one by default
        """
        self._admin_port = admin_port
        self._signals = tuple(signals)
        self._latch = latch or ShutdownLatch()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._installed = False

    @property
    def latch(self) -> ShutdownLatch:
        return self._latch

    def install(self) -> ShutdownLatch:
        """
        Install both triggers.

        Must be called from the running event loop.

        Returns:
            The latch fed by the triggers
        """
        if self._installed:
            return self._latch

        self._loop = asyncio.get_running_loop()
        for signum in self._signals:
            self._loop.add_signal_handler(signum, self.handle_signal)
            logger.debug("Signal handler registered", signal=signal.Signals(signum).name)

        if self._admin_port is not None:
            self._admin_port.unbind(SHUTDOWN_METHOD)
            self._admin_port.bind(SHUTDOWN_METHOD, self.handle_shutdown_request)
            logger.debug("Shutdown request handler bound")

        self._installed = True
        return self._latch

    def uninstall(self) -> None:
        """Restore default signal handling."""
        if not self._installed:
            return
        for signum in self._signals:
            self._loop.remove_signal_handler(signum)
        self._installed = False

    def handle_signal(self) -> None:
        self._latch.trigger(ShutdownReason.signal())

    def handle_shutdown_request(self, params: List[Any]) -> List[Any]:
        """
        Handle a remote "shutdown" request.

        params[1], when present, is the reason. Requests without a reason are
        acknowledged but do not trigger shutdown.

        Args:
            params: Request parameters

        Returns:
            Acknowledgement triple
        """
        if isinstance(params, list) and len(params) > 1:
            reason = str(params[1])
            logger.warning("Shutdown request received", reason=reason)
            self._latch.trigger(ShutdownReason.remote_request(reason))

        return list(SHUTDOWN_ACK)
