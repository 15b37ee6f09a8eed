"""
Launcher Value Objects

Immutable value objects describing what is launched and why it stops.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, List, Optional, Tuple

from module_launcher.domain.errors import InvalidModuleTypeError


class SupervisorState(str, Enum):
    """State of the remote-mode lifecycle supervisor."""

    STARTING = "starting"
    LOADED = "loaded"
    MONITORING = "monitoring"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"

    @property
    def order(self) -> int:
        return list(SupervisorState).index(self)


class ShutdownReasonKind(str, Enum):
    """What triggered the shutdown sequence."""

    SIGNAL = "signal"
    REMOTE_REQUEST = "remote_request"
    LEASE_BROKEN = "lease_broken"


class UnloadOutcome(str, Enum):
    """Result of an unload attempt. None of these stop the shutdown sequence."""

    UNLOADED = "unloaded"
    SERVICE_ABSENT = "service_absent"
    SERVICE_VANISHED = "service_vanished"
    FAILED = "failed"

    @property
    def is_benign(self) -> bool:
        return self is not UnloadOutcome.FAILED


class ExitCode(IntEnum):
    """Process exit codes of the launcher."""

    OK = 0
    MISSING_MODULE_TYPE = 1
    MALFORMED_MODULE_TYPE = 2
    EMBEDDED_LOAD_FAILED = 3
    REMOTE_LOAD_FAILED = 4


@dataclass(frozen=True)
class ShutdownReason:
    """
    Tagged shutdown reason.

    Attributes:
        kind: Trigger that fired
        detail: Human-readable reason carried by a remote request
    """

    kind: ShutdownReasonKind
    detail: Optional[str] = None

    @classmethod
    def signal(cls) -> "ShutdownReason":
        return cls(ShutdownReasonKind.SIGNAL)

    @classmethod
    def remote_request(cls, reason: str) -> "ShutdownReason":
        return cls(ShutdownReasonKind.REMOTE_REQUEST, reason)

    @classmethod
    def lease_broken(cls) -> "ShutdownReason":
        return cls(ShutdownReasonKind.LEASE_BROKEN)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.kind.value}: {self.detail}"
        return self.kind.value


@dataclass(frozen=True)
class ModuleIdentity:
    """
    Identity of the launched module.

    Attributes:
        qualified_type: Namespace-qualified module type, e.g. ``pkg/Type``
        instance_name: Absolute name the instance runs under
    """

    qualified_type: str
    instance_name: str

    def __post_init__(self):
        validate_module_type(self.qualified_type)


def validate_module_type(qualified_type: str) -> None:
    """
    Check that a module type is a ``ns/Type`` pair.

    Raises:
        InvalidModuleTypeError: If there is no '/' or either side is empty
    """
    package, sep, type_name = qualified_type.partition("/")
    if not sep or not package or not type_name:
        raise InvalidModuleTypeError(
            f"Module type has to be pkg/ModuleName, but {qualified_type!r} was given",
            details={"module_type": qualified_type},
        )


@dataclass(frozen=True)
class LeaseToken:
    """Identifier of one liveness lease with the manager."""

    id: str

    @classmethod
    def generate(cls, instance_name: str) -> "LeaseToken":
        """Create a fresh token ``<instance_name>_<random-hex>``."""
        return cls(f"{instance_name}_{uuid.uuid4().hex}")

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class RemappingSet:
    """
    Ordered (source, target) name remappings of this process.

    Order is kept so the source and target arrays of a load request stay
    positionally paired.
    """

    pairs: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def from_pairs(cls, pairs) -> "RemappingSet":
        return cls(tuple((str(src), str(dst)) for src, dst in pairs))

    @property
    def sources(self) -> List[str]:
        return [src for src, _ in self.pairs]

    @property
    def targets(self) -> List[str]:
        return [dst for _, dst in self.pairs]

    def split(self) -> Tuple[List[str], List[str]]:
        """Return parallel (sources, targets) lists."""
        return self.sources, self.targets

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self):
        return iter(self.pairs)


@dataclass(frozen=True)
class LoadRequest:
    """Payload of the remote load call."""

    name: str
    type: str
    remap_source_args: List[str]
    remap_target_args: List[str]
    my_argv: List[str]
    bond_id: str = ""

    @classmethod
    def build(
        cls,
        identity: ModuleIdentity,
        argv: List[str],
        remappings: RemappingSet,
        lease_token: Optional[LeaseToken],
    ) -> "LoadRequest":
        sources, targets = remappings.split()
        return cls(
            name=identity.instance_name,
            type=identity.qualified_type,
            remap_source_args=sources,
            remap_target_args=targets,
            my_argv=list(argv),
            bond_id=lease_token.id if lease_token else "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "type": self.type,
            "remap_source_args": list(self.remap_source_args),
            "remap_target_args": list(self.remap_target_args),
            "my_argv": list(self.my_argv),
            "bond_id": self.bond_id,
        }


@dataclass(frozen=True)
class LaunchArguments:
    """
    Parsed launch request.

    Attributes:
        module_type: ``pkg/Type`` of the module
        manager: Manager namespace, None for embedded mode
        use_lease: False when ``--no-bond`` was given
        argv: Extra arguments forwarded to the module
    """

    module_type: str
    manager: Optional[str] = None
    use_lease: bool = True
    argv: Tuple[str, ...] = ()

    @property
    def is_remote(self) -> bool:
        return self.manager is not None


@dataclass(frozen=True)
class ModuleContext:
    """What an embedded module receives on initialization."""

    name: str
    remappings: Dict[str, str]
    argv: List[str]
