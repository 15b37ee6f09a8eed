"""
Admin request dispatcher.

Routes administrative requests to bound handlers. Until something else is
bound, "shutdown" terminates the process the way an interrupt would.
"""

import os
import signal
import threading
from typing import Any, Dict, List

from module_launcher.domain.ports import AdminHandler, IAdminRequestPort
from module_launcher.infrastructure.logging import get_logger


logger = get_logger()


def default_shutdown_handler(params: List[Any]) -> List[Any]:
    """Interrupt this process right away."""
    reason = str(params[1]) if isinstance(params, list) and len(params) > 1 else ""
    logger.warning("Shutdown request received, terminating", reason=reason)
    os.kill(os.getpid(), signal.SIGINT)
    return [1, "", 0]


def get_pid_handler(params: List[Any]) -> List[Any]:
    return [1, "", os.getpid()]


class AdminRequestDispatcher(IAdminRequestPort):
    """Thread-safe method table for the admin endpoint."""

    def __init__(self, install_defaults: bool = True):
        self._lock = threading.Lock()
        self._handlers: Dict[str, AdminHandler] = {}
        if install_defaults:
            self._handlers["shutdown"] = default_shutdown_handler
            self._handlers["getPid"] = get_pid_handler

    def bind(self, method: str, handler: AdminHandler) -> None:
        with self._lock:
            self._handlers[method] = handler

    def unbind(self, method: str) -> None:
        with self._lock:
            self._handlers.pop(method, None)

    def dispatch(self, method: str, params: List[Any]) -> List[Any]:
        with self._lock:
            handler = self._handlers.get(method)

        if handler is None:
            logger.debug("Unknown admin method", method=method)
            return [-1, f"unknown method {method}", 0]

        return handler(params)
