"""
Integration tests for the module-launch command.

Remote runs talk to an in-memory manager through httpx.MockTransport; the
admin endpoint is a real uvicorn server on an ephemeral port.
"""

import importlib
import json
import os
import signal
import threading
import time

import httpx
import pytest

from module_launcher.infrastructure.http import MasterClient


pytestmark = pytest.mark.integration

cli_main = importlib.import_module("module_launcher.interfaces.cli.main")


class FakeManager:
    """Master plus a manager at /mgr that records load and unload calls."""

    def __init__(self, load_success=True, alive=True, unload_available=True):
        self.load_success = load_success
        self.alive = alive
        self.unload_available = unload_available
        self.loads = []
        self.unloads = []
        self.lease_messages = []
        self.nodes = {}

    def services(self):
        services = {
            "/mgr/load_module": self._load,
            "/mgr/lease": self._lease,
        }
        if self.unload_available:
            services["/mgr/unload_module"] = self._unload
        return services

    def _load(self, body):
        self.loads.append(body)
        return {"success": self.load_success}

    def _unload(self, body):
        self.unloads.append(body)
        return {"success": True}

    def _lease(self, body):
        self.lease_messages.append(body)
        return {"alive": self.alive}

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        services = self.services()

        if request.url.host == "svc" and path in services:
            return httpx.Response(200, json=services[path](json.loads(request.content)))

        if path.startswith("/services/"):
            name = "/" + path[len("/services/"):]
            if name in services:
                return httpx.Response(200, json={"uri": f"http://svc{name}"})
            return httpx.Response(404)

        if path.startswith("/nodes/"):
            self.nodes["/" + path[len("/nodes/"):]] = json.loads(request.content)["admin_uri"]
            return httpx.Response(200, json={})

        return httpx.Response(404)


def when_monitoring(manager: FakeManager, action) -> threading.Thread:
    """Run action once the launcher is heartbeating, i.e. after load and install."""

    def _run():
        deadline = time.monotonic() + 5.0
        while not manager.lease_messages and time.monotonic() < deadline:
            time.sleep(0.01)
        action()

    thread = threading.Thread(target=_run, daemon=True)
    thread.start()
    return thread


@pytest.fixture
def fast_timing(monkeypatch):
    monkeypatch.setenv("MODULE_LAUNCHER_POLL_INTERVAL", "0.01")
    monkeypatch.setenv("MODULE_LAUNCHER_HEARTBEAT_PERIOD", "0.01")
    monkeypatch.setenv("MODULE_LAUNCHER_HEARTBEAT_TIMEOUT", "0.5")
    monkeypatch.setenv("MODULE_LAUNCHER_HEARTBEAT_CONNECT_TIMEOUT", "0.5")
    monkeypatch.setenv("MODULE_LAUNCHER_SERVICE_WAIT_INTERVAL", "0.01")


@pytest.fixture
def use_manager(monkeypatch):
    def _use(manager: FakeManager) -> FakeManager:
        def make_client(*args, **kwargs):
            return MasterClient(*args, transport=httpx.MockTransport(manager.handler), **kwargs)

        monkeypatch.setattr(cli_main, "MasterClient", make_client)
        return manager

    return _use


class TestArgumentErrors:
    """Exit codes of argument errors."""

    def test_no_arguments(self):
        assert cli_main.main([]) == 1

    def test_malformed_type(self):
        assert cli_main.main(["Foo"]) == 2

    def test_only_remappings(self):
        assert cli_main.main(["a:=b"]) == 1


class TestEmbedded:
    """Embedded runs."""

    def test_unknown_module(self):
        assert cli_main.main(["no_such_package_anywhere/Foo"]) == 3


class TestRemote:
    """Runs against a manager."""

    def test_refused_load(self, fast_timing, use_manager):
        manager = use_manager(FakeManager(load_success=False))

        assert cli_main.main(["pkg/Foo", "/mgr", "__name:=camera", "image:=/cam/image"]) == 4

        assert manager.loads[0]["name"] == "/camera"
        assert manager.loads[0]["remap_source_args"] == ["/image"]
        assert manager.loads[0]["remap_target_args"] == ["/cam/image"]
        assert manager.loads[0]["bond_id"].startswith("/camera_")
        assert manager.unloads == []

    def test_lease_ended_by_manager(self, fast_timing, use_manager):
        manager = use_manager(FakeManager(alive=False))

        assert cli_main.main(["pkg/Foo", "mgr", "__name:=camera", "arg"]) == 0

        assert manager.loads[0]["my_argv"] == ["arg"]
        assert manager.unloads == [{"name": "/camera"}]
        assert manager.lease_messages[0]["action"] == "heartbeat"
        assert manager.lease_messages[0]["id"] == manager.loads[0]["bond_id"]
        assert manager.nodes["/camera"].startswith("http://127.0.0.1:")

    def test_interrupt_unloads_then_exits(self, fast_timing, use_manager):
        manager = use_manager(FakeManager())
        when_monitoring(manager, lambda: os.kill(os.getpid(), signal.SIGINT))

        assert cli_main.main(["pkg/Foo", "mgr", "arg1", "arg2", "__name:=camera"]) == 0

        load = manager.loads[0]
        assert load["type"] == "pkg/Foo"
        assert load["my_argv"] == ["arg1", "arg2"]
        assert load["bond_id"].startswith("/camera_")
        assert manager.unloads == [{"name": "/camera"}]
        assert manager.lease_messages[-1] == {"id": load["bond_id"], "action": "break"}

    def test_admin_shutdown_request_unloads_then_exits(self, fast_timing, use_manager):
        manager = use_manager(FakeManager())
        replies = []

        def request_shutdown():
            with httpx.Client(trust_env=False, timeout=5.0) as client:
                response = client.post(
                    f"{manager.nodes['/camera']}/rpc/shutdown",
                    json={"params": ["/master", "manager restarting"]},
                )
            replies.append(response.json())

        thread = when_monitoring(manager, request_shutdown)

        assert cli_main.main(["pkg/Foo", "mgr", "__name:=camera"]) == 0
        thread.join(5.0)

        assert replies == [{"result": [1, "", 0]}]
        assert manager.unloads == [{"name": "/camera"}]

    def test_absent_unload_service_still_exits_cleanly(self, fast_timing, use_manager):
        manager = use_manager(FakeManager(unload_available=False))
        when_monitoring(manager, lambda: os.kill(os.getpid(), signal.SIGINT))

        assert cli_main.main(["pkg/Foo", "mgr", "__name:=camera"]) == 0

        assert len(manager.loads) == 1
        assert manager.unloads == []
