"""Shared fixtures for module-launcher tests."""

from unittest.mock import AsyncMock

import pytest

from module_launcher.domain.ports import IParameterPort, IRpcPort
from module_launcher.domain.value_objects import ModuleIdentity, RemappingSet
from module_launcher.infrastructure.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Keep environment overrides of one test away from the others."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def identity() -> ModuleIdentity:
    return ModuleIdentity(qualified_type="pkg/Foo", instance_name="/camera")


@pytest.fixture
def remappings() -> RemappingSet:
    return RemappingSet.from_pairs([("/a", "/b"), ("/c", "/d")])


@pytest.fixture
def mock_rpc_port() -> AsyncMock:
    """RPC port whose services all exist and succeed."""
    mock = AsyncMock(spec=IRpcPort)
    mock.service_exists.return_value = True
    mock.wait_for_service.return_value = None
    mock.call.return_value = {"success": True}
    return mock


@pytest.fixture
def mock_parameter_port() -> AsyncMock:
    mock = AsyncMock(spec=IParameterPort)
    mock.get_param.return_value = {"rate": 10, "frame": "base"}
    return mock
