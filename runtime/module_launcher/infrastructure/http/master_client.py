"""
Master HTTP client.

Implements IRpcPort and IParameterPort against the master's HTTP API:
- GET  /services/{name}  -> {"uri": ...} or 404
- GET  /params/{key}     -> {"value": ...} or 404
- PUT  /params/{key}     <- {"value": ...}
- PUT  /nodes/{name}     <- {"admin_uri": ...}
Service calls are POSTed as JSON to the advertised service URI.
"""

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from module_launcher.domain.errors import RpcError
from module_launcher.domain.ports import IParameterPort, IRpcPort
from module_launcher.infrastructure.config import get_settings
from module_launcher.infrastructure.logging import get_logger


logger = get_logger()


def _path(name: str) -> str:
    return quote(name.strip("/"), safe="/")


def _json_object(response: httpx.Response, what: str) -> Dict[str, Any]:
    """Decode a JSON object body, raising RpcError for anything else."""
    try:
        body = response.json()
    except ValueError as e:
        raise RpcError(f"{what} returned a malformed response", original_error=e) from e
    if not isinstance(body, dict):
        raise RpcError(f"{what} returned {type(body).__name__} instead of an object")
    return body


class MasterClient(IRpcPort, IParameterPort):
    """
    Async HTTP client for the master and the services it advertises.

    Lookups are not cached: a service may disappear at any time and the
    unload path relies on seeing that.
    """

    def __init__(
        self,
        master_uri: Optional[str] = None,
        rpc_timeout: Optional[float] = None,
        service_wait_interval: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize master client.

        Args:
            master_uri: Master base URL
            rpc_timeout: Timeout of one request in seconds
            service_wait_interval: Polling interval of wait_for_service()
            transport: Custom httpx transport (tests)
        """
        settings = get_settings()
        self.master_uri = (master_uri or settings.master_uri).rstrip("/")
        self.rpc_timeout = rpc_timeout or settings.rpc_timeout
        self.service_wait_interval = service_wait_interval or settings.service_wait_interval

        self.timeout = httpx.Timeout(self.rpc_timeout, connect=5.0)
        self._transport = transport

        # Lazy-initialized async client
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def lookup_service(self, name: str) -> Optional[str]:
        """
        Resolve a service name to its URI.

        Returns:
            Service URI, or None if it is not advertised

        Raises:
            RpcError: The master could not be reached
        """
        url = f"{self.master_uri}/services/{_path(name)}"
        try:
            client = await self._get_client()
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise RpcError(f"Master unreachable while looking up {name}", original_error=e) from e

        if response.status_code == 404:
            return None
        if not 200 <= response.status_code < 300:
            raise RpcError(f"Service lookup for {name} failed with status {response.status_code}")

        return _json_object(response, f"Service lookup for {name}").get("uri")

    async def service_exists(self, name: str) -> bool:
        try:
            return await self.lookup_service(name) is not None
        except RpcError as e:
            logger.debug("Service lookup failed", service=name, error=str(e))
            return False

    async def wait_for_service(self, name: str) -> None:
        while not await self.service_exists(name):
            await asyncio.sleep(self.service_wait_interval)
        logger.debug("Service is available", service=name)

    async def call(self, name: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        uri = await self.lookup_service(name)
        if uri is None:
            raise RpcError(f"Service {name} is not advertised")

        try:
            client = await self._get_client()
            response = await client.post(uri, json=payload)
        except httpx.HTTPError as e:
            raise RpcError(f"Call to {name} failed: {e}", original_error=e) from e

        if not 200 <= response.status_code < 300:
            raise RpcError(f"Call to {name} failed with status {response.status_code}")

        return _json_object(response, f"Call to {name}")

    async def get_param(self, key: str) -> Optional[Any]:
        url = f"{self.master_uri}/params/{_path(key)}"
        try:
            client = await self._get_client()
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise RpcError(f"Failed to read parameter {key}", original_error=e) from e

        if response.status_code == 404:
            return None
        if not 200 <= response.status_code < 300:
            raise RpcError(f"Reading parameter {key} failed with status {response.status_code}")
        return _json_object(response, f"Reading parameter {key}").get("value")

    async def set_param(self, key: str, value: Any) -> None:
        url = f"{self.master_uri}/params/{_path(key)}"
        try:
            client = await self._get_client()
            response = await client.put(url, json={"value": value})
        except httpx.HTTPError as e:
            raise RpcError(f"Failed to write parameter {key}", original_error=e) from e

        if not 200 <= response.status_code < 300:
            raise RpcError(f"Writing parameter {key} failed with status {response.status_code}")

    async def register_node(self, name: str, admin_uri: str) -> bool:
        """
        Advertise this process's admin endpoint.

        Args:
            name: Instance name
            admin_uri: URL of the admin endpoint

        Returns:
            True if the master accepted the registration
        """
        url = f"{self.master_uri}/nodes/{_path(name)}"
        try:
            client = await self._get_client()
            response = await client.put(url, json={"admin_uri": admin_uri})
        except httpx.HTTPError as e:
            logger.warning("Failed to register admin endpoint", instance=name, error=str(e))
            return False

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Master rejected admin endpoint registration",
                instance=name,
                status_code=response.status_code,
            )
            return False

        logger.debug("Admin endpoint registered", instance=name, admin_uri=admin_uri)
        return True
