"""
Lifecycle Supervisor

Chooses embedded or remote mode and drives the remote-mode state machine:

    STARTING -> LOADED -> MONITORING -> SHUTTING_DOWN -> TERMINATED

A failed load ends the run from STARTING with a load-failure exit code.
"""

import asyncio
from typing import Optional

import structlog

from module_launcher.application.services.embedded_runner import EmbeddedRunner
from module_launcher.application.services.remote_loader import RemoteLoaderClient
from module_launcher.application.services.shutdown_bridge import ShutdownSignalBridge
from module_launcher.domain.entities import LeaseHandle, ShutdownLatch
from module_launcher.domain.errors import LoadError
from module_launcher.domain.ports import IHeartbeatPort
from module_launcher.domain.value_objects import (
    ExitCode,
    LaunchArguments,
    LeaseToken,
    ModuleIdentity,
    RemappingSet,
    ShutdownReason,
    SupervisorState,
    UnloadOutcome,
)


logger = structlog.get_logger(__name__)

LEASE_SERVICE = "lease"


class LifecycleSupervisor:
    """
    Owner of the launch lifecycle.

    Only this class mutates the supervisor state, and the state only moves
    forward.
    """

    def __init__(
        self,
        launch: LaunchArguments,
        identity: ModuleIdentity,
        remappings: RemappingSet,
        embedded_runner: Optional[EmbeddedRunner] = None,
        loader: Optional[RemoteLoaderClient] = None,
        heartbeat_port: Optional[IHeartbeatPort] = None,
        shutdown_bridge: Optional[ShutdownSignalBridge] = None,
        poll_interval: float = 0.1,
    ):
        """
        Initialize lifecycle supervisor.

        Args:
            launch: Parsed launch arguments
            identity: Module type and instance name
            remappings: Name remappings of this process
            embedded_runner: Runner used without a manager
            loader: Client of the manager's load/unload services
            heartbeat_port: Lease supervision
            shutdown_bridge: Source of shutdown requests
            poll_interval: Seconds between checks while monitoring
        """
        self._launch = launch
        self._identity = identity
        self._remappings = remappings
        self._embedded_runner = embedded_runner
        self._loader = loader
        self._heartbeat_port = heartbeat_port
        self._shutdown_bridge = shutdown_bridge
        self._poll_interval = poll_interval

        self._state = SupervisorState.STARTING
        self._lease_token: Optional[LeaseToken] = None
        self._lease: Optional[LeaseHandle] = None
        self._shutdown_reason: Optional[ShutdownReason] = None
        self._unload_outcome: Optional[UnloadOutcome] = None

    @property
    def state(self) -> SupervisorState:
        return self._state

    @property
    def lease_token(self) -> Optional[LeaseToken]:
        return self._lease_token

    @property
    def shutdown_reason(self) -> Optional[ShutdownReason]:
        return self._shutdown_reason

    @property
    def unload_outcome(self) -> Optional[UnloadOutcome]:
        return self._unload_outcome

    async def run(self) -> ExitCode:
        """
        Run the module until a terminal condition.

        Returns:
            Process exit code
        """
        if not self._launch.is_remote:
            if self._embedded_runner is None:
                raise RuntimeError("Embedded mode requires an embedded runner")
            return await self._embedded_runner.run(self._identity)

        if self._loader is None or self._shutdown_bridge is None:
            raise RuntimeError("Remote mode requires a loader and a shutdown bridge")
        if self._launch.use_lease and self._heartbeat_port is None:
            raise RuntimeError("Lease supervision requires a heartbeat port")

        return await self._run_remote()

    async def _run_remote(self) -> ExitCode:
        manager = self._launch.manager
        log = logger.bind(instance=self._identity.instance_name, manager=manager)

        if self._launch.use_lease:
            self._lease_token = LeaseToken.generate(self._identity.instance_name)

        try:
            await self._loader.load(
                self._identity,
                manager,
                list(self._launch.argv),
                self._remappings,
                self._lease_token,
            )
        except LoadError:
            return ExitCode.REMOTE_LOAD_FAILED

        self._transition(SupervisorState.LOADED)

        latch = self._shutdown_bridge.install()
        if self._lease_token is not None:
            self._lease = await self._heartbeat_port.establish(
                f"{manager.rstrip('/')}/{LEASE_SERVICE}", self._lease_token
            )

        self._transition(SupervisorState.MONITORING)
        self._shutdown_reason = await self._monitor(latch)
        log.info("Shutting down", reason=str(self._shutdown_reason))

        self._transition(SupervisorState.SHUTTING_DOWN)
        try:
            self._unload_outcome = await self._loader.unload(self._identity, manager)
        finally:
            try:
                if self._lease is not None:
                    await self._heartbeat_port.release(self._lease)
            finally:
                self._shutdown_bridge.uninstall()
                self._transition(SupervisorState.TERMINATED)

        return ExitCode.OK

    async def _monitor(self, latch: ShutdownLatch) -> ShutdownReason:
        """Poll the latch and the lease until one of them fires."""
        while True:
            if latch.is_set():
                return latch.reason

            if self._lease is not None and self._heartbeat_port.is_broken(self._lease):
                logger.info("Lease broken, exiting", lease_id=self._lease.lease_id)
                return ShutdownReason.lease_broken()

            await asyncio.sleep(self._poll_interval)

    def _transition(self, new_state: SupervisorState) -> None:
        if new_state.order <= self._state.order:
            raise RuntimeError(
                f"Invalid supervisor transition {self._state.value} -> {new_state.value}"
            )
        logger.debug("Supervisor state", previous=self._state.value, state=new_state.value)
        self._state = new_state
