"""
Submission of signed transactions to the node.
"""
import logging
from typing import Optional

from .exceptions import BroadcastError, RPCResponseError, RPCTransportError
from .models import SignedTransaction
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)


class Broadcaster:
    """Sends raw transactions with eth_sendRawTransaction"""

    def __init__(self, rpc: JsonRpcClient, logger: Optional[logging.Logger] = None):
        self.rpc = rpc
        self.logger = logger or logging.getLogger(__name__)

    async def broadcast(self, signed: SignedTransaction) -> str:
        """
        Submit a signed transaction.

        Args:
            signed: Signed deployment transaction

        Returns:
            Transaction hash reported by the node

        Raises:
            BroadcastError: If the node rejects the transaction or cannot be reached.
                The node's own error text is kept verbatim.
        """
        self.logger.info("Broadcasting transaction to Umi Network...")
        try:
            tx_hash = await self.rpc.call("eth_sendRawTransaction", [signed.raw_transaction])
        except RPCResponseError as e:
            self.logger.error(f"Node rejected transaction: {e.message}")
            raise BroadcastError(
                f"Transaction broadcast failed: {e.message}",
                node_message=e.message,
                code=e.code,
            )
        except RPCTransportError as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise BroadcastError(f"Transaction broadcast failed: {str(e)}")

        if not isinstance(tx_hash, str) or not tx_hash:
            raise BroadcastError(f"Transaction broadcast failed: node returned no hash ({tx_hash!r})")

        self.logger.info(f"Transaction broadcasted: {tx_hash}")
        return tx_hash
