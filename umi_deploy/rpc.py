"""
Minimal async JSON-RPC 2.0 client over HTTP.

The deployment pipeline talks to the node directly instead of going through a
Web3 provider, since Umi receipts do not follow standard EVM conventions.
"""
import itertools
import logging
from typing import Any, List, Optional

import httpx

from .config import validate_rpc_url
from .exceptions import RPCResponseError, RPCTransportError

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """
    Async JSON-RPC client for a single node endpoint.

    Args:
        rpc_url: Node endpoint URL
        timeout: Per-request HTTP timeout in seconds
        http_client: Optional pre-built ``httpx.AsyncClient``; when given the
            caller keeps ownership and ``aclose`` leaves it open
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = validate_rpc_url(rpc_url)
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._ids = itertools.count(1)

    async def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Invoke a JSON-RPC method.

        Args:
            method: RPC method name (e.g. "eth_getTransactionCount")
            params: Positional parameters

        Returns:
            The ``result`` member of the response (may be None)

        Raises:
            RPCTransportError: If the request fails or the body is not JSON-RPC
            RPCResponseError: If the node returns an error object
        """
        request_id = next(self._ids)
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params or [],
            "id": request_id,
        }
        logger.debug(f"RPC -> {method} (id={request_id})")

        try:
            response = await self._client.post(
                self.rpc_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise RPCTransportError(f"{method} request failed: {str(e)}")

        # Nodes may answer a rejected call with a 4xx/5xx status and a JSON-RPC
        # error body; the error object takes precedence over the status code.
        try:
            body = response.json()
        except ValueError as e:
            body = None
            if not response.is_error:
                raise RPCTransportError(f"Invalid JSON response to {method}: {str(e)}")

        if response.is_error and not (isinstance(body, dict) and body.get("error")):
            raise RPCTransportError(
                f"{method} request failed: HTTP {response.status_code} {response.reason_phrase}"
            )

        if not isinstance(body, dict):
            raise RPCTransportError(f"Unexpected JSON-RPC response to {method}: {body!r}")

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise RPCResponseError(
                    str(error.get("message", error)),
                    code=error.get("code"),
                    data=error.get("data"),
                )
            raise RPCResponseError(str(error))

        if "result" not in body:
            raise RPCTransportError(f"JSON-RPC response to {method} has neither result nor error")

        return body["result"]

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "JsonRpcClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
