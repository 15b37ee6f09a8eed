"""
Heartbeat Monitor

Keeps a liveness lease with the manager and reports when it breaks.
"""

import asyncio
import time
from typing import Callable, Dict, Optional

import structlog

from module_launcher.domain.entities import LeaseHandle
from module_launcher.domain.errors import RpcError
from module_launcher.domain.ports import IHeartbeatPort, IRpcPort
from module_launcher.domain.value_objects import LeaseToken


logger = structlog.get_logger(__name__)


class HeartbeatMonitor(IHeartbeatPort):
    """
    Lease supervision over the RPC port.

    Sends a heartbeat every ``period`` seconds. The lease breaks when no
    acknowledgement arrives within ``timeout`` of the last one (or within
    ``connect_timeout`` of establishing it), or when the peer answers that the
    lease is over. The monitor only reports; it never unloads or exits.
    """

    def __init__(
        self,
        rpc_port: IRpcPort,
        period: float = 1.0,
        timeout: float = 4.0,
        connect_timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize heartbeat monitor.

        Args:
            rpc_port: Port used for the liveness exchange
            period: Heartbeat period in seconds
            timeout: Seconds without acknowledgement that break the lease
            connect_timeout: Seconds allowed before the first acknowledgement
            clock: Monotonic clock
        """
        self._rpc_port = rpc_port
        self._period = period
        self._timeout = timeout
        self._connect_timeout = connect_timeout
        self._clock = clock
        self._tasks: Dict[str, asyncio.Task] = {}

    async def establish(self, peer_address: str, lease_token: LeaseToken) -> LeaseHandle:
        handle = LeaseHandle(
            peer_address=peer_address,
            token=lease_token,
            established_at=self._clock(),
        )

        if handle.lease_id in self._tasks:
            logger.warning("Lease already established", lease_id=handle.lease_id)
            return handle

        self._tasks[handle.lease_id] = asyncio.create_task(
            self._heartbeat_loop(handle),
            name=f"heartbeat-{handle.lease_id}",
        )
        logger.debug("Lease established", peer=peer_address, lease_id=handle.lease_id)
        return handle

    def is_broken(self, handle: LeaseHandle) -> bool:
        return handle.broken

    async def release(self, handle: LeaseHandle) -> None:
        task = self._tasks.pop(handle.lease_id, None)
        if task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if handle.released:
            return
        handle.released = True

        # Tell the peer so it does not wait out its own timeout
        if handle.acknowledged and not handle.broken:
            await self._exchange(handle, "break")
            handle.mark_broken("released")
            logger.debug("Lease broken explicitly", lease_id=handle.lease_id)

    async def _exchange(self, handle: LeaseHandle, action: str) -> Optional[bool]:
        """
        Send one lease message.

        Returns:
            The peer's "alive" answer, or None when no answer arrived
        """
        payload = {
            "id": handle.lease_id,
            "action": action,
        }
        try:
            response = await asyncio.wait_for(
                self._rpc_port.call(handle.peer_address, payload),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.debug("Lease message timed out", lease_id=handle.lease_id, action=action)
            return None
        except RpcError as e:
            logger.debug(
                "Lease message failed",
                lease_id=handle.lease_id,
                action=action,
                error=str(e),
            )
            return None

        if not isinstance(response, dict):
            logger.debug(
                "Malformed lease reply",
                lease_id=handle.lease_id,
                action=action,
                reply_type=type(response).__name__,
            )
            return None

        return bool(response.get("alive", False))

    async def _heartbeat_loop(self, handle: LeaseHandle) -> None:
        """
        Main heartbeat loop.

        Runs until the lease breaks or the task is cancelled by release().
        """
        try:
            while not handle.broken:
                alive = await self._exchange(handle, "heartbeat")
                now = self._clock()

                if alive:
                    handle.acknowledge(now)
                elif alive is False:
                    if handle.mark_broken("peer ended the lease"):
                        logger.info("Lease ended by peer", lease_id=handle.lease_id)
                    break

                if now > handle.deadline(self._timeout, self._connect_timeout):
                    if handle.mark_broken("heartbeat timeout"):
                        logger.info(
                            "Lease timed out",
                            lease_id=handle.lease_id,
                            acknowledged=handle.acknowledged,
                        )
                    break

                await asyncio.sleep(self._period)

        except asyncio.CancelledError:
            logger.debug("Heartbeat loop cancelled", lease_id=handle.lease_id)
            raise
        except Exception as e:
            if handle.mark_broken("heartbeat error"):
                logger.error(
                    "Heartbeat loop failed",
                    lease_id=handle.lease_id,
                    error=str(e),
                    exc_info=True,
                )
