"""
Command line handling.

Splits launcher remappings (``from:=to``, ``__name:=x``, ``__ns:=/ns``) from
positional arguments and turns the positional part into LaunchArguments:

    <pkg/ModuleType> [<manager> [--no-bond]] [extra args...]
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from module_launcher.domain.errors import MissingModuleTypeError
from module_launcher.domain.value_objects import (
    LaunchArguments,
    RemappingSet,
    validate_module_type,
)

REMAP_SEPARATOR = ":="
NO_LEASE_FLAG = "--no-bond"


@dataclass(frozen=True)
class CommandLine:
    """Command line after launcher arguments were taken out."""

    positional: List[str]
    remappings: List[tuple] = field(default_factory=list)
    special: Dict[str, str] = field(default_factory=dict)


def split_command_line(argv: Sequence[str]) -> CommandLine:
    """
    Separate remappings from positional arguments, keeping their order.

    Args:
        argv: Arguments without the program name

    Returns:
        Positional arguments, plain remappings and ``__``-prefixed settings
    """
    positional: List[str] = []
    remappings: List[tuple] = []
    special: Dict[str, str] = {}

    for token in argv:
        if REMAP_SEPARATOR not in token:
            positional.append(token)
            continue

        source, _, target = token.partition(REMAP_SEPARATOR)
        if not source or not target:
            continue
        if source.startswith("__"):
            special[source] = target
        else:
            remappings.append((source, target))

    return CommandLine(positional=positional, remappings=remappings, special=special)


def resolve_name(name: str, namespace: str = "/", node_name: Optional[str] = None) -> str:
    """
    Make a name absolute.

    ``/x`` stays as is, ``~x`` lives under the node name, anything else under
    the namespace.
    """
    if name.startswith("/"):
        resolved = name
    elif name.startswith("~"):
        base = node_name or namespace
        resolved = f"{base.rstrip('/')}/{name[1:].lstrip('/')}"
    else:
        resolved = f"{namespace.rstrip('/')}/{name}"

    return "/" + "/".join(part for part in resolved.split("/") if part)


def resolve_namespace(command_line: CommandLine) -> str:
    return resolve_name(command_line.special.get("__ns", "/"))


def resolve_instance_name(command_line: CommandLine, default_name: str) -> str:
    """Absolute instance name from ``__name``/``__ns`` or the default."""
    name = command_line.special.get("__name", default_name)
    return resolve_name(name, resolve_namespace(command_line))


def resolve_remappings(command_line: CommandLine, node_name: str) -> RemappingSet:
    namespace = resolve_namespace(command_line)
    return RemappingSet.from_pairs(
        (resolve_name(source, namespace, node_name), resolve_name(target, namespace, node_name))
        for source, target in command_line.remappings
    )


def parse_launch_arguments(positional: Sequence[str]) -> LaunchArguments:
    """
    Interpret the positional arguments.

    Raises:
        MissingModuleTypeError: No arguments at all
        InvalidModuleTypeError: First argument is not ``pkg/Type``
    """
    if not positional:
        raise MissingModuleTypeError("No module type given")

    module_type = positional[0]
    validate_module_type(module_type)

    rest = list(positional[1:])
    if not rest:
        return LaunchArguments(module_type=module_type)

    manager = rest.pop(0)
    use_lease = True
    if rest and rest[0] == NO_LEASE_FLAG:
        rest.pop(0)
        use_lease = False

    return LaunchArguments(
        module_type=module_type,
        manager=manager,
        use_lease=use_lease,
        argv=tuple(rest),
    )
