"""
Tests for the confirmation poller.
"""
import logging

import httpx
import pytest

from umi_deploy.confirmation import ConfirmationPoller, is_success_status
from umi_deploy.exceptions import ConfirmationTimeoutError
from tests.test_helpers import NodeError

TX_HASH = "0x" + "cd" * 32


def receipt(status):
    return {"transactionHash": TX_HASH, "status": status, "logs": [], "contractAddress": None}


def sequence_handler(*responses):
    """Handler returning the given responses in turn, repeating the last one."""
    responses = list(responses)

    def handler(params):
        outcome = responses.pop(0) if len(responses) > 1 else responses[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
    return handler


@pytest.mark.parametrize("status, expected", [
    ("0x0", True),
    ("0x00", True),
    (0, True),
    ("0x1", False),
    (1, False),
    (None, False),
    ("", False),
    ("success", False),
    (False, False),
])
def test_is_success_status(status, expected):
    """Umi reports success as status 0x0"""
    assert is_success_status(status) is expected


class TestConfirmationPoller:
    """Test ConfirmationPoller."""

    @pytest.mark.asyncio
    async def test_returns_successful_receipt(self, fake_node, rpc_client):
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(receipt("0x0"))

        poller = ConfirmationPoller(rpc_client, timeout=2.0, poll_interval=0.01)
        result = await poller.wait(TX_HASH)

        assert result.status == "0x0"
        assert poller.attempts == 1

    @pytest.mark.asyncio
    async def test_waits_while_receipt_missing(self, fake_node, rpc_client):
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(None, None, receipt("0x0"))

        poller = ConfirmationPoller(rpc_client, timeout=2.0, poll_interval=0.01)
        await poller.wait(TX_HASH)

        assert poller.attempts == 3

    @pytest.mark.asyncio
    async def test_status_one_is_not_confirmation(self, fake_node, rpc_client):
        """The conventional EVM success value keeps the poller waiting"""
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(
            receipt("0x1"), receipt("0x1"), receipt("0x0")
        )

        poller = ConfirmationPoller(rpc_client, timeout=2.0, poll_interval=0.01)
        result = await poller.wait(TX_HASH)

        assert result.status == "0x0"
        assert poller.attempts == 3

    @pytest.mark.asyncio
    async def test_status_one_forever_times_out(self, fake_node, rpc_client):
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(receipt("0x1"))

        poller = ConfirmationPoller(rpc_client, timeout=0.2, poll_interval=0.05)
        with pytest.raises(ConfirmationTimeoutError):
            await poller.wait(TX_HASH)

    @pytest.mark.asyncio
    async def test_timeout_arithmetic(self, fake_node, rpc_client):
        """
        A 5 s timeout with a 2 s interval polls at t=0, 2, 4 (3 polls) and fails at
        t=5. Scaled down by 5: timeout=1.0, interval=0.4, polls at 0, 0.4, 0.8.
        """
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(None)

        poller = ConfirmationPoller(rpc_client, timeout=1.0, poll_interval=0.4)
        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            await poller.wait(TX_HASH)

        polls = fake_node.calls_to("eth_getTransactionReceipt")
        assert len(polls) == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.elapsed >= 0.99
        assert exc_info.value.elapsed < 1.4
        assert exc_info.value.tx_hash == TX_HASH
        assert "timeout after" in str(exc_info.value)

        start = polls[0][2]
        offsets = [t - start for _, _, t in polls]
        assert offsets[1] == pytest.approx(0.4, abs=0.15)
        assert offsets[2] == pytest.approx(0.8, abs=0.15)

    @pytest.mark.asyncio
    async def test_transient_errors_consume_cycles(self, fake_node, rpc_client, caplog):
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(
            httpx.ConnectError("connection reset"),
            httpx.Response(200, content=b"<html>bad gateway</html>"),
            receipt("0x0"),
        )

        poller = ConfirmationPoller(rpc_client, timeout=2.0, poll_interval=0.01)
        with caplog.at_level(logging.WARNING):
            result = await poller.wait(TX_HASH)

        assert result.status == "0x0"
        assert poller.attempts == 3
        assert "Error checking transaction status" in caplog.text

    @pytest.mark.asyncio
    async def test_node_errors_do_not_abort(self, fake_node, rpc_client):
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(
            NodeError("header not found"), receipt("0x0")
        )

        poller = ConfirmationPoller(rpc_client, timeout=2.0, poll_interval=0.01)
        await poller.wait(TX_HASH)

        assert poller.attempts == 2

    @pytest.mark.asyncio
    async def test_malformed_receipt_is_skipped(self, fake_node, rpc_client):
        fake_node.handlers["eth_getTransactionReceipt"] = sequence_handler(
            "0xnot-a-receipt", {"status": "0x0", "logs": "not-a-list"}, receipt("0x0")
        )

        poller = ConfirmationPoller(rpc_client, timeout=2.0, poll_interval=0.01)
        await poller.wait(TX_HASH)

        assert poller.attempts == 3

    @pytest.mark.parametrize("kwargs", [{"timeout": 0}, {"poll_interval": -1}])
    def test_rejects_non_positive_settings(self, kwargs):
        with pytest.raises(ValueError):
            ConfirmationPoller(object(), **kwargs)
