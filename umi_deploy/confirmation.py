"""
Confirmation polling for broadcast transactions.

Umi reports receipt status with the opposite polarity of mainstream EVM
chains: ``"0x0"`` means the transaction succeeded. Any other value,
including the conventional ``"0x1"``, is treated as "not confirmed yet" and
polling continues until the deadline.
"""
import asyncio
import logging
from typing import Any, Optional

from pydantic import ValidationError

from ._rate_limited_log import rate_limited_log
from .exceptions import ConfirmationTimeoutError, RPCError
from .models import TransactionReceipt
from .rpc import JsonRpcClient

DEFAULT_TIMEOUT = 60.0
DEFAULT_POLL_INTERVAL = 2.0

# Umi success sentinel: status 0x0 is success
SUCCESS_STATUS = 0


def is_success_status(status: Any) -> bool:
    """
    Check a receipt status against the Umi success sentinel.

    Args:
        status: Raw status value (hex string or int)

    Returns:
        True only for status 0 ("0x0")
    """
    if status is None or isinstance(status, bool):
        return False
    if isinstance(status, int):
        return status == SUCCESS_STATUS
    if isinstance(status, str):
        try:
            return int(status, 16) == SUCCESS_STATUS
        except ValueError:
            return False
    return False


class ConfirmationPoller:
    """
    Polls eth_getTransactionReceipt until a successful receipt or the deadline.

    One deadline covers the whole wait; retries do not extend it. Transient RPC
    errors count as "no receipt yet" and use up a poll cycle.

    Args:
        rpc: JSON-RPC client
        timeout: Total time budget in seconds
        poll_interval: Sleep between polls in seconds
        logger: Optional logger instance
    """

    def __init__(
        self,
        rpc: JsonRpcClient,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self.rpc = rpc
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)
        self.attempts = 0

    async def wait(self, tx_hash: str) -> TransactionReceipt:
        """
        Wait for a transaction to be confirmed.

        Args:
            tx_hash: Hash returned by the broadcaster

        Returns:
            The confirmed receipt

        Raises:
            ConfirmationTimeoutError: If no successful receipt arrives in time
        """
        self.logger.info(f"Waiting for transaction confirmation: {tx_hash}")
        self.attempts = 0
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            receipt = await asyncio.wait_for(self._poll(tx_hash), timeout=self.timeout)
        except asyncio.TimeoutError:
            elapsed = loop.time() - started
            self.logger.error(f"Transaction {tx_hash} not confirmed after {elapsed:.1f}s")
            raise ConfirmationTimeoutError(tx_hash, self.timeout, elapsed, self.attempts)

        self.logger.info(f"Transaction confirmed after {self.attempts} poll(s): {tx_hash}")
        return receipt

    async def _poll(self, tx_hash: str) -> TransactionReceipt:
        while True:
            self.attempts += 1
            receipt = await self._fetch_receipt(tx_hash)
            if receipt is not None:
                if is_success_status(receipt.status):
                    return receipt
                self.logger.debug(f"Receipt for {tx_hash} has status {receipt.status!r}; still waiting")
            await asyncio.sleep(self.poll_interval)

    async def _fetch_receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        try:
            result = await self.rpc.call("eth_getTransactionReceipt", [tx_hash])
        except RPCError as e:
            rate_limited_log(
                f"Error checking transaction status for {tx_hash}: {e}",
                interval=self.poll_interval * 5,
                logger_instance=self.logger,
                key=f"receipt:{tx_hash}:{type(e).__name__}",
            )
            return None

        if result is None:
            return None
        if not isinstance(result, dict):
            self.logger.warning(f"Ignoring malformed receipt for {tx_hash}: {result!r}")
            return None
        try:
            return TransactionReceipt.model_validate(result)
        except ValidationError as e:
            self.logger.warning(f"Ignoring unparseable receipt for {tx_hash}: {e}")
            return None
