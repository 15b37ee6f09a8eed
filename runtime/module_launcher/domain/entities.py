"""
Launcher Entities

Mutable state shared between the supervisor and its background activities.
"""

import threading
from dataclasses import dataclass
from typing import Optional

from module_launcher.domain.value_objects import LeaseToken, ShutdownReason


class ShutdownLatch:
    """
    Single-shot shutdown latch.

    Written from the signal path and from the admin request thread, read by
    the supervisor poll loop. The first trigger wins; later triggers are ignored.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._reason: Optional[ShutdownReason] = None

    def trigger(self, reason: ShutdownReason) -> bool:
        """
        Set the latch.

        Args:
            reason: Why shutdown was requested

        Returns:
            True if this call set the latch, False if it was already set
        """
        with self._lock:
            if self._reason is not None:
                return False
            self._reason = reason
            return True

    def is_set(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> Optional[ShutdownReason]:
        return self._reason


@dataclass
class LeaseHandle:
    """
    A liveness lease with a peer.

    ``broken`` only ever goes from False to True.
    """

    peer_address: str
    token: LeaseToken
    established_at: float = 0.0
    last_ack_at: Optional[float] = None
    broken: bool = False
    broken_reason: Optional[str] = None
    released: bool = False

    @property
    def lease_id(self) -> str:
        return self.token.id

    @property
    def acknowledged(self) -> bool:
        return self.last_ack_at is not None

    def acknowledge(self, now: float) -> None:
        if not self.broken:
            self.last_ack_at = now

    def mark_broken(self, reason: str) -> bool:
        """Break the lease. Returns False if it was already broken."""
        if self.broken:
            return False
        self.broken = True
        self.broken_reason = reason
        return True

    def deadline(self, heartbeat_timeout: float, connect_timeout: float) -> float:
        """Time after which a missing acknowledgement breaks the lease."""
        if self.last_ack_at is None:
            return self.established_at + connect_timeout
        return self.last_ack_at + heartbeat_timeout
