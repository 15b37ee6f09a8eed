"""
Admin endpoint server.

Serves the admin application with uvicorn on a background thread so that
requests are answered while the supervisor loop runs.
"""

import socket
import threading
from typing import Optional

import uvicorn

from module_launcher.domain.ports import IAdminRequestPort
from module_launcher.infrastructure.admin.app import create_admin_app
from module_launcher.infrastructure.logging import get_logger


logger = get_logger()


class AdminServer:
    """
    uvicorn server on a daemon thread.

    The listening socket is bound in start() so the URI is known at once,
    also for port 0. uvicorn only installs signal handlers on the main
    thread, so this server leaves signal handling to the supervisor.
    """

    def __init__(
        self,
        dispatcher: IAdminRequestPort,
        host: str = "127.0.0.1",
        port: int = 0,
        log_level: str = "warning",
    ):
        self._dispatcher = dispatcher
        self._host = host
        self._port = port
        self._log_level = log_level
        self._socket: Optional[socket.socket] = None
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def port(self) -> int:
        if self._socket is None:
            return self._port
        return self._socket.getsockname()[1]

    @property
    def uri(self) -> str:
        return f"http://{self._host}:{self.port}"

    def start(self) -> None:
        if self._thread is not None:
            return

        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._socket.bind((self._host, self._port))
        self._socket.listen()

        config = uvicorn.Config(
            create_admin_app(self._dispatcher),
            log_level=self._log_level,
            lifespan="off",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [self._socket]},
            daemon=True,
            name="AdminServerThread",
        )
        self._thread.start()
        logger.info("Admin endpoint listening", admin_uri=self.uri)

    def stop(self, timeout: float = 2.0) -> None:
        if self._thread is None:
            return

        self._server.should_exit = True
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Admin endpoint did not stop in time")

        self._socket.close()
        self._thread = None
        self._server = None
        self._socket = None
