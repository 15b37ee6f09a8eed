#!/usr/bin/env python3
"""
module-launch - run a module embedded or load it into a manager

    module-launch <pkg/ModuleType> [<manager> [--no-bond]] [extra args...] [from:=to ...]
"""

import asyncio
import sys
from typing import List, Optional

from module_launcher.application.services import (
    EmbeddedRunner,
    HeartbeatMonitor,
    LifecycleSupervisor,
    RemoteLoaderClient,
    ShutdownSignalBridge,
)
from module_launcher.domain.errors import InvalidModuleTypeError, MissingModuleTypeError
from module_launcher.domain.value_objects import (
    ExitCode,
    LaunchArguments,
    ModuleIdentity,
    RemappingSet,
)
from module_launcher.infrastructure.admin import AdminRequestDispatcher, AdminServer
from module_launcher.infrastructure.config import Settings, get_settings
from module_launcher.infrastructure.http import MasterClient
from module_launcher.infrastructure.logging import configure_logging, get_logger
from module_launcher.infrastructure.module_host import EntryPointModuleHost
from module_launcher.interfaces.cli.arguments import (
    parse_launch_arguments,
    resolve_instance_name,
    resolve_name,
    resolve_namespace,
    resolve_remappings,
    split_command_line,
)


def build_supervisor(
    launch: LaunchArguments,
    identity: ModuleIdentity,
    remappings: RemappingSet,
    settings: Settings,
    dispatcher: AdminRequestDispatcher,
    master: Optional[MasterClient] = None,
) -> LifecycleSupervisor:
    """Wire the supervisor for the requested mode."""
    if not launch.is_remote:
        return LifecycleSupervisor(
            launch,
            identity,
            remappings,
            embedded_runner=EmbeddedRunner(EntryPointModuleHost()),
            poll_interval=settings.poll_interval,
        )

    heartbeat = None
    if launch.use_lease:
        heartbeat = HeartbeatMonitor(
            master,
            period=settings.heartbeat_period,
            timeout=settings.heartbeat_timeout,
            connect_timeout=settings.heartbeat_connect_timeout,
        )

    return LifecycleSupervisor(
        launch,
        identity,
        remappings,
        loader=RemoteLoaderClient(master, master),
        heartbeat_port=heartbeat,
        shutdown_bridge=ShutdownSignalBridge(admin_port=dispatcher),
        poll_interval=settings.poll_interval,
    )


async def run_launcher(
    launch: LaunchArguments,
    identity: ModuleIdentity,
    remappings: RemappingSet,
    settings: Settings,
) -> ExitCode:
    """Serve the admin endpoint and run the supervisor until it finishes."""
    dispatcher = AdminRequestDispatcher()
    admin = AdminServer(dispatcher, settings.admin_host, settings.admin_port)
    master = None
    if launch.is_remote:
        master = MasterClient(
            settings.master_uri,
            rpc_timeout=settings.rpc_timeout,
            service_wait_interval=settings.service_wait_interval,
        )

    admin.start()
    try:
        if master is not None:
            await master.register_node(identity.instance_name, admin.uri)
        supervisor = build_supervisor(launch, identity, remappings, settings, dispatcher, master)
        return await supervisor.run()
    finally:
        admin.stop()
        if master is not None:
            await master.close()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Launcher entry.

    Args:
        argv: Arguments without the program name, sys.argv[1:] by default

    Returns:
        Process exit code
    """
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    command_line = split_command_line(argv)
    instance_name = resolve_instance_name(command_line, settings.node_name)
    logger = get_logger(instance=instance_name)

    try:
        launch = parse_launch_arguments(command_line.positional)
    except MissingModuleTypeError as e:
        logger.error(e.message)
        return int(ExitCode.MISSING_MODULE_TYPE)
    except InvalidModuleTypeError as e:
        logger.error(e.message)
        return int(ExitCode.MALFORMED_MODULE_TYPE)

    if launch.is_remote:
        launch = LaunchArguments(
            module_type=launch.module_type,
            manager=resolve_name(launch.manager, resolve_namespace(command_line)),
            use_lease=launch.use_lease,
            argv=launch.argv,
        )

    identity = ModuleIdentity(qualified_type=launch.module_type, instance_name=instance_name)
    remappings = resolve_remappings(command_line, instance_name)

    try:
        return int(asyncio.run(run_launcher(launch, identity, remappings, settings)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return int(ExitCode.OK)


def entry_point():
    """Console script entry."""
    sys.exit(main())


if __name__ == "__main__":
    entry_point()
