"""
Unit tests for RemoteLoaderClient.
"""

import pytest

from module_launcher.application.services.remote_loader import RemoteLoaderClient
from module_launcher.domain.errors import LoadError, RpcError
from module_launcher.domain.value_objects import LeaseToken, RemappingSet, UnloadOutcome


class TestLoad:
    """Tests for RemoteLoaderClient.load()."""

    @pytest.fixture
    def loader(self, mock_rpc_port, mock_parameter_port):
        return RemoteLoaderClient(mock_rpc_port, mock_parameter_port)

    @pytest.mark.asyncio
    async def test_load_sends_request(self, loader, mock_rpc_port, identity, remappings):
        token = LeaseToken("/camera_ff")

        await loader.load(identity, "/mgr", ["arg1", "arg2"], remappings, token)

        mock_rpc_port.wait_for_service.assert_awaited_once_with("/mgr/load_module")
        mock_rpc_port.call.assert_awaited_once_with(
            "/mgr/load_module",
            {
                "name": "/camera",
                "type": "pkg/Foo",
                "remap_source_args": ["/a", "/c"],
                "remap_target_args": ["/b", "/d"],
                "my_argv": ["arg1", "arg2"],
                "bond_id": "/camera_ff",
            },
        )

    @pytest.mark.asyncio
    async def test_load_without_lease_sends_empty_bond_id(self, loader, mock_rpc_port, identity):
        await loader.load(identity, "/mgr", [], RemappingSet(), None)

        payload = mock_rpc_port.call.await_args.args[1]
        assert payload["bond_id"] == ""

    @pytest.mark.asyncio
    async def test_load_propagates_parameters_before_call(
        self, loader, mock_rpc_port, mock_parameter_port, identity, remappings
    ):
        order = []
        mock_parameter_port.set_param.side_effect = lambda *a: order.append("set_param")
        mock_rpc_port.call.side_effect = lambda *a: order.append("call") or {"success": True}

        await loader.load(identity, "/mgr", [], remappings, None)

        mock_parameter_port.get_param.assert_awaited_once_with("/camera")
        mock_parameter_port.set_param.assert_awaited_once_with(
            "/camera", {"rate": 10, "frame": "base"}
        )
        assert order == ["set_param", "call"]

    @pytest.mark.asyncio
    async def test_load_copies_from_configured_namespace(
        self, mock_rpc_port, mock_parameter_port, identity
    ):
        loader = RemoteLoaderClient(mock_rpc_port, mock_parameter_port, parameter_namespace="/launcher")

        await loader.load(identity, "/mgr", [], RemappingSet(), None)

        mock_parameter_port.get_param.assert_awaited_once_with("/launcher")
        mock_parameter_port.set_param.assert_awaited_once_with("/camera", {"rate": 10, "frame": "base"})

    @pytest.mark.asyncio
    async def test_empty_parameter_tree_is_not_copied(
        self, loader, mock_rpc_port, mock_parameter_port, identity
    ):
        mock_parameter_port.get_param.return_value = None

        await loader.load(identity, "/mgr", [], RemappingSet(), None)

        mock_parameter_port.set_param.assert_not_awaited()
        mock_rpc_port.call.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_parameter_failure_does_not_stop_load(
        self, loader, mock_rpc_port, mock_parameter_port, identity
    ):
        mock_parameter_port.get_param.side_effect = RpcError("master unreachable")

        await loader.load(identity, "/mgr", [], RemappingSet(), None)

        mock_rpc_port.call.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_transport_failure_raises_load_error(self, loader, mock_rpc_port, identity):
        mock_rpc_port.call.side_effect = RpcError("connection reset")

        with pytest.raises(LoadError) as exc_info:
            await loader.load(identity, "/mgr", [], RemappingSet(), None)

        assert exc_info.value.details["manager"] == "/mgr"

    @pytest.mark.asyncio
    async def test_refused_load_raises_load_error(self, loader, mock_rpc_port, identity):
        mock_rpc_port.call.return_value = {"success": False}

        with pytest.raises(LoadError):
            await loader.load(identity, "/mgr", [], RemappingSet(), None)

    @pytest.mark.asyncio
    async def test_non_object_reply_raises_load_error(self, loader, mock_rpc_port, identity):
        mock_rpc_port.call.return_value = "success"

        with pytest.raises(LoadError):
            await loader.load(identity, "/mgr", [], RemappingSet(), None)


class TestUnload:
    """Tests for RemoteLoaderClient.unload()."""

    @pytest.fixture
    def loader(self, mock_rpc_port, mock_parameter_port):
        return RemoteLoaderClient(mock_rpc_port, mock_parameter_port)

    @pytest.mark.asyncio
    async def test_unload_success(self, loader, mock_rpc_port, identity):
        outcome = await loader.unload(identity, "/mgr/")

        assert outcome is UnloadOutcome.UNLOADED
        mock_rpc_port.service_exists.assert_awaited_once_with("/mgr/unload_module")
        mock_rpc_port.call.assert_awaited_once_with("/mgr/unload_module", {"name": "/camera"})

    @pytest.mark.asyncio
    async def test_absent_service_is_benign(self, loader, mock_rpc_port, identity):
        mock_rpc_port.service_exists.return_value = False

        outcome = await loader.unload(identity, "/mgr")

        assert outcome is UnloadOutcome.SERVICE_ABSENT
        assert outcome.is_benign
        mock_rpc_port.call.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_service_vanishing_during_call_is_benign(self, loader, mock_rpc_port, identity):
        mock_rpc_port.service_exists.side_effect = [True, False]
        mock_rpc_port.call.side_effect = RpcError("connection reset")

        outcome = await loader.unload(identity, "/mgr")

        assert outcome is UnloadOutcome.SERVICE_VANISHED
        assert mock_rpc_port.service_exists.await_count == 2

    @pytest.mark.asyncio
    async def test_failure_with_service_present_is_reported(self, loader, mock_rpc_port, identity):
        mock_rpc_port.call.side_effect = RpcError("internal error")

        outcome = await loader.unload(identity, "/mgr")

        assert outcome is UnloadOutcome.FAILED
        assert not outcome.is_benign

    @pytest.mark.asyncio
    async def test_refused_unload_is_reported(self, loader, mock_rpc_port, identity):
        mock_rpc_port.call.return_value = {"success": False}

        outcome = await loader.unload(identity, "/mgr")

        assert outcome is UnloadOutcome.FAILED

    @pytest.mark.asyncio
    async def test_non_object_reply_is_a_failed_unload(self, loader, mock_rpc_port, identity):
        mock_rpc_port.call.return_value = ["ok"]

        outcome = await loader.unload(identity, "/mgr")

        assert outcome is UnloadOutcome.FAILED
