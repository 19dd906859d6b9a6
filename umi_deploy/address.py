"""
Contract address resolution for confirmed deployments.

The address of a contract created by a plain transaction depends only on the
sender and the nonce used:

    address = keccak256(rlp([sender, nonce]))[12:]

Receipt logs and transaction hashes play no part in it.
"""
import logging
from typing import Any, Dict, Optional

import rlp
from eth_utils import is_address, to_canonical_address
from web3 import Web3

from .exceptions import RPCError
from .models import AddressResolution, TransactionReceipt
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)

UNRESOLVED = AddressResolution(address=None, source="unresolved")


def compute_create_address(sender: str, nonce: int) -> str:
    """
    Derive the address of a contract deployed by ``sender`` at ``nonce``.

    Args:
        sender: Deployer address (hex, any case)
        nonce: Nonce of the deployment transaction

    Returns:
        Checksummed contract address

    Raises:
        ValueError: If the sender is not an address or the nonce is negative
    """
    if not is_address(sender):
        raise ValueError(f"Invalid sender address: {sender!r}")
    if nonce < 0:
        raise ValueError(f"nonce must be non-negative, got {nonce}")

    encoded = rlp.encode([to_canonical_address(sender), nonce])
    return Web3.to_checksum_address(Web3.keccak(encoded)[12:])


def _parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value, 16)
    except (TypeError, ValueError):
        return None


class AddressResolver:
    """
    Works out the deployed contract's address for a confirmed receipt.

    A ``contractAddress`` reported by the node is used directly. Otherwise the
    originating transaction is looked up to confirm it has no recipient and to
    read its sender and nonce, and the address is derived from those. When
    that is not possible the result is explicitly unresolved.
    """

    def __init__(self, rpc: JsonRpcClient, logger: Optional[logging.Logger] = None):
        self.rpc = rpc
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(
        self,
        tx_hash: str,
        receipt: TransactionReceipt,
        sender: Optional[str] = None,
        nonce: Optional[int] = None,
    ) -> AddressResolution:
        """
        Resolve the contract address for a confirmed deployment.

        Args:
            tx_hash: Deployment transaction hash
            receipt: Confirmed receipt
            sender: Locally known sender, used if the node lookup fails
            nonce: Locally known nonce, used if the node lookup fails

        Returns:
            AddressResolution with source "receipt", "derived" or "unresolved"
        """
        tx = await self._fetch_transaction(tx_hash)
        if tx is not None:
            if tx.get("to"):
                self.logger.warning(f"Transaction {tx_hash} has recipient {tx['to']}; not a deployment")
                return UNRESOLVED
            sender = tx.get("from") or sender
            tx_nonce = _parse_int(tx.get("nonce"))
            if tx_nonce is not None:
                nonce = tx_nonce

        derived = None
        if sender and nonce is not None and is_address(sender):
            derived = compute_create_address(sender, nonce)

        if receipt.contract_address and is_address(receipt.contract_address):
            reported = Web3.to_checksum_address(receipt.contract_address)
            if derived and derived != reported:
                self.logger.warning(
                    f"Node reported contract address {reported} but "
                    f"({sender}, {nonce}) derives {derived}"
                )
            return AddressResolution(address=reported, source="receipt")

        if derived is None:
            self.logger.warning(f"Cannot derive contract address for {tx_hash}: sender or nonce unknown")
            return UNRESOLVED

        self.logger.debug(f"Derived contract address {derived} from ({sender}, {nonce})")
        return AddressResolution(address=derived, source="derived")

    async def _fetch_transaction(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        try:
            tx = await self.rpc.call("eth_getTransactionByHash", [tx_hash])
        except RPCError as e:
            self.logger.warning(f"Could not fetch transaction {tx_hash}: {e}")
            return None
        if tx is not None and not isinstance(tx, dict):
            self.logger.warning(f"Ignoring malformed transaction for {tx_hash}: {tx!r}")
            return None
        return tx
