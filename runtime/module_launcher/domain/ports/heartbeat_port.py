"""
Heartbeat Port Interface

Defines the contract for a liveness lease with a remote peer.
This is an output port - implemented by application layer.
"""

from abc import ABC, abstractmethod

from module_launcher.domain.entities import LeaseHandle
from module_launcher.domain.value_objects import LeaseToken


class IHeartbeatPort(ABC):
    """
    Port interface for lease supervision.

    A broken lease stays broken; it is never re-established.
    """

    @abstractmethod
    async def establish(self, peer_address: str, lease_token: LeaseToken) -> LeaseHandle:
        """
        Start exchanging liveness signals with a peer.

        Args:
            peer_address: Lease endpoint of the peer
            lease_token: Identifier of the lease

        Returns:
            Handle used to query and release the lease
        """
        pass

    @abstractmethod
    def is_broken(self, handle: LeaseHandle) -> bool:
        """
        Check whether the peer stopped answering.

        Args:
            handle: Lease handle

        Returns:
            True once the lease is broken
        """
        pass

    @abstractmethod
    async def release(self, handle: LeaseHandle) -> None:
        """
        Stop the liveness exchange.

        Safe to call on a broken, released or never started lease.

        Args:
            handle: Lease handle
        """
        pass
