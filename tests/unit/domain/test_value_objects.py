"""
Unit tests for Domain Value Objects.
"""

import pytest

from module_launcher.domain.errors import InvalidModuleTypeError
from module_launcher.domain.value_objects import (
    LaunchArguments,
    LeaseToken,
    LoadRequest,
    ModuleIdentity,
    RemappingSet,
    ShutdownReason,
    ShutdownReasonKind,
    SupervisorState,
    UnloadOutcome,
    validate_module_type,
)


class TestModuleIdentity:
    """Tests for ModuleIdentity."""

    def test_keeps_qualified_type(self):
        identity = ModuleIdentity(qualified_type="pkg/Foo", instance_name="/foo")

        assert identity.qualified_type == "pkg/Foo"
        assert identity.instance_name == "/foo"

    @pytest.mark.parametrize("module_type", ["Foo", "/Foo", "pkg/", ""])
    def test_rejects_malformed_type(self, module_type):
        with pytest.raises(InvalidModuleTypeError):
            ModuleIdentity(qualified_type=module_type, instance_name="/foo")

    def test_nested_type_name_is_accepted(self):
        validate_module_type("pkg/sub/Foo")

    def test_is_immutable(self, identity):
        with pytest.raises(AttributeError):
            identity.instance_name = "/other"


class TestLeaseToken:
    """Tests for LeaseToken."""

    def test_generated_token_prefixed_with_instance_name(self):
        token = LeaseToken.generate("/camera")

        prefix, _, suffix = token.id.rpartition("_")
        assert prefix == "/camera"
        assert len(suffix) == 32
        int(suffix, 16)

    def test_tokens_for_same_instance_differ(self):
        tokens = {LeaseToken.generate("/camera").id for _ in range(100)}

        assert len(tokens) == 100


class TestRemappingSet:
    """Tests for RemappingSet."""

    def test_split_keeps_order_and_pairing(self):
        remappings = RemappingSet.from_pairs([("a", "b"), ("c", "d")])

        sources, targets = remappings.split()

        assert sources == ["a", "c"]
        assert targets == ["b", "d"]

    def test_empty(self):
        remappings = RemappingSet()

        assert len(remappings) == 0
        assert remappings.split() == ([], [])


class TestLoadRequest:
    """Tests for LoadRequest."""

    def test_build_with_lease(self, identity, remappings):
        token = LeaseToken("/camera_abc")

        request = LoadRequest.build(identity, ["arg1", "arg2"], remappings, token)

        assert request.to_dict() == {
            "name": "/camera",
            "type": "pkg/Foo",
            "remap_source_args": ["/a", "/c"],
            "remap_target_args": ["/b", "/d"],
            "my_argv": ["arg1", "arg2"],
            "bond_id": "/camera_abc",
        }

    def test_build_without_lease_sends_empty_bond_id(self, identity):
        request = LoadRequest.build(identity, [], RemappingSet(), None)

        assert request.bond_id == ""


class TestEnums:
    """Tests for state and outcome enums."""

    def test_states_are_ordered(self):
        orders = [state.order for state in SupervisorState]

        assert orders == sorted(orders)
        assert SupervisorState.STARTING.order < SupervisorState.TERMINATED.order

    def test_only_failed_unload_is_not_benign(self):
        assert not UnloadOutcome.FAILED.is_benign
        assert UnloadOutcome.SERVICE_ABSENT.is_benign
        assert UnloadOutcome.SERVICE_VANISHED.is_benign
        assert UnloadOutcome.UNLOADED.is_benign

    def test_shutdown_reason_constructors(self):
        assert ShutdownReason.signal().kind is ShutdownReasonKind.SIGNAL
        assert ShutdownReason.lease_broken().kind is ShutdownReasonKind.LEASE_BROKEN

        remote = ShutdownReason.remote_request("user request")
        assert remote.kind is ShutdownReasonKind.REMOTE_REQUEST
        assert str(remote) == "remote_request: user request"


def test_launch_arguments_mode():
    assert not LaunchArguments(module_type="pkg/Foo").is_remote
    assert LaunchArguments(module_type="pkg/Foo", manager="/mgr").is_remote
