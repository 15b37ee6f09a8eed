"""
Remote Loader Client

Asks the manager to load and unload the module.
"""

from typing import List, Optional

import structlog

from module_launcher.domain.errors import LoadError, RpcError
from module_launcher.domain.ports import IParameterPort, IRpcPort
from module_launcher.domain.value_objects import (
    LeaseToken,
    LoadRequest,
    ModuleIdentity,
    RemappingSet,
    UnloadOutcome,
)


logger = structlog.get_logger(__name__)

LOAD_SERVICE = "load_module"
UNLOAD_SERVICE = "unload_module"


def service_name(manager: str, service: str) -> str:
    """Join a manager namespace and a service name."""
    return f"{manager.rstrip('/')}/{service}"


class RemoteLoaderClient:
    """
    Client of the manager's load/unload services.

    Each call is attempted once; there is no retry.
    """

    def __init__(
        self,
        rpc_port: IRpcPort,
        parameter_port: IParameterPort,
        parameter_namespace: Optional[str] = None,
    ):
        """
        Initialize remote loader client.

        Args:
            rpc_port: Port for service discovery and calls
            parameter_port: Port for the shared parameter tree
            parameter_namespace: Namespace whose parameters the module inherits,
                defaults to the module's own instance name
        """
        self._rpc_port = rpc_port
        self._parameter_port = parameter_port
        self._parameter_namespace = parameter_namespace

    async def load(
        self,
        identity: ModuleIdentity,
        manager: str,
        argv: List[str],
        remappings: RemappingSet,
        lease_token: Optional[LeaseToken] = None,
    ) -> None:
        """
        Load the module into the manager.

        Blocks until the load service is advertised, without a timeout.

        Args:
            identity: Module type and instance name
            manager: Manager namespace
            argv: Extra arguments for the module
            remappings: Name remappings of this process
            lease_token: Lease the manager should bind the module to

        Raises:
            LoadError: The call failed or the manager refused the load
        """
        logger.info(
            "Loading module with the following remappings",
            instance=identity.instance_name,
            module_type=identity.qualified_type,
            manager=manager,
        )
        for source, target in remappings:
            logger.info("Remapping", source=source, target=target)

        await self._propagate_parameters(identity)

        service = service_name(manager, LOAD_SERVICE)
        logger.debug("Waiting for service to be available", service=service)
        await self._rpc_port.wait_for_service(service)

        request = LoadRequest.build(identity, argv, remappings, lease_token)
        details = {
            "instance": identity.instance_name,
            "module_type": identity.qualified_type,
            "manager": manager,
        }

        try:
            response = await self._rpc_port.call(service, request.to_dict())
        except RpcError as e:
            logger.critical("Failed to load module", error=str(e), **details)
            raise LoadError("Load request failed", details=details) from e

        if not isinstance(response, dict) or not response.get("success", False):
            logger.critical("Manager refused to load module", **details)
            raise LoadError("Manager refused the load request", details=details)

        logger.debug("Module loaded", **details)

    async def unload(self, identity: ModuleIdentity, manager: str) -> UnloadOutcome:
        """
        Unload the module from the manager.

        Never raises; every outcome lets the shutdown continue.

        Args:
            identity: Module type and instance name
            manager: Manager namespace

        Returns:
            What happened to the unload request
        """
        logger.info("Unloading module", instance=identity.instance_name, manager=manager)

        service = service_name(manager, UNLOAD_SERVICE)
        if not await self._rpc_port.service_exists(service):
            logger.warning(
                "Couldn't find unload service, perhaps the manager is already shut down",
                service=service,
            )
            return UnloadOutcome.SERVICE_ABSENT

        try:
            response = await self._rpc_port.call(service, {"name": identity.instance_name})
            if isinstance(response, dict) and response.get("success", False):
                return UnloadOutcome.UNLOADED
            error = "manager refused the unload request"
        except RpcError as e:
            error = str(e)

        # The manager may have shut down while we were calling it
        if await self._rpc_port.service_exists(service):
            logger.critical(
                "Failed to unload module",
                instance=identity.instance_name,
                manager=manager,
                error=error,
            )
            return UnloadOutcome.FAILED

        logger.warning(
            "Unload service disappeared during the call",
            service=service,
            error=error,
        )
        return UnloadOutcome.SERVICE_VANISHED

    async def _propagate_parameters(self, identity: ModuleIdentity) -> None:
        """Copy this process's parameter subtree onto the module's namespace."""
        source = self._parameter_namespace or identity.instance_name
        target = identity.instance_name

        try:
            tree = await self._parameter_port.get_param(source)
            if tree is None:
                logger.debug("No parameters to propagate", namespace=source)
                return
            await self._parameter_port.set_param(target, tree)
        except RpcError as e:
            logger.warning(
                "Failed to propagate parameters",
                source=source,
                target=target,
                error=str(e),
            )
