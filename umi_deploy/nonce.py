"""
Nonce lookup for deployment transactions.
"""
import logging
from typing import Optional

from .rpc import JsonRpcClient


class NonceOracle:
    """
    Fetches a sender's next usable nonce from the node.

    Lookups never fail: when the node cannot answer, the oracle logs a
    warning, bumps ``fallback_count`` and returns 0 so best-effort
    deployments can still go ahead against a degraded node.
    """

    def __init__(self, rpc: JsonRpcClient, logger: Optional[logging.Logger] = None):
        self.rpc = rpc
        self.logger = logger or logging.getLogger(__name__)
        self.fallback_count = 0

    async def next_nonce(self, address: str) -> int:
        """
        Get the pending transaction count for an address.

        Args:
            address: Sender address

        Returns:
            Next nonce, or 0 if the node could not be queried
        """
        try:
            result = await self.rpc.call("eth_getTransactionCount", [address, "pending"])
            nonce = int(result, 16) if isinstance(result, str) else int(result)
        except Exception as e:
            self.fallback_count += 1
            self.logger.warning(f"Failed to get nonce for {address}, using 0: {e}")
            return 0

        self.logger.debug(f"Next nonce for {address}: {nonce}")
        return nonce
