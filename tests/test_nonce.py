"""
Tests for the nonce oracle.
"""
import logging

import httpx
import pytest

from umi_deploy.nonce import NonceOracle
from tests.test_helpers import NodeError, TEST_ADDRESS


@pytest.mark.asyncio
async def test_next_nonce_reads_pending_count(fake_node, rpc_client):
    fake_node.tx_count = 12

    nonce = await NonceOracle(rpc_client).next_nonce(TEST_ADDRESS)

    assert nonce == 12
    method, params, _ = fake_node.calls[0]
    assert method == "eth_getTransactionCount"
    assert params == [TEST_ADDRESS, "pending"]


@pytest.mark.asyncio
async def test_transport_failure_falls_back_to_zero(fake_node, rpc_client, caplog):
    def down(params):
        raise httpx.ConnectError("connection refused")
    fake_node.handlers["eth_getTransactionCount"] = down
    oracle = NonceOracle(rpc_client)

    with caplog.at_level(logging.WARNING):
        nonce = await oracle.next_nonce(TEST_ADDRESS)

    assert nonce == 0
    assert oracle.fallback_count == 1
    assert "Failed to get nonce" in caplog.text
    assert TEST_ADDRESS in caplog.text


@pytest.mark.parametrize("outcome", [
    NodeError("internal error"),
    httpx.Response(502, text="Bad Gateway"),
    httpx.Response(200, text="not json"),
    "0xnothex",
    None,
])
@pytest.mark.asyncio
async def test_any_failure_falls_back_to_zero(fake_node, rpc_client, outcome):
    def handler(params):
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
    fake_node.handlers["eth_getTransactionCount"] = handler
    oracle = NonceOracle(rpc_client)

    assert await oracle.next_nonce(TEST_ADDRESS) == 0
    assert oracle.fallback_count == 1
