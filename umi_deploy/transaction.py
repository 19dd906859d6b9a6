"""
Assembly of unsigned deployment transactions.
"""
from typing import Optional

from web3 import Web3

from .models import DeploymentTransaction

DEFAULT_GAS_LIMIT = 3_000_000
DEFAULT_GAS_PRICE = Web3.to_wei(1, "gwei")


def build_deployment_transaction(
    data: str,
    nonce: int,
    chain_id: int,
    gas_limit: int = DEFAULT_GAS_LIMIT,
    gas_price: Optional[int] = None,
) -> DeploymentTransaction:
    """
    Build an unsigned contract-creation transaction.

    Args:
        data: 0x-prefixed envelope hex
        nonce: Sender's next usable nonce
        chain_id: Chain id from the network config
        gas_limit: Fixed gas limit
        gas_price: Gas price in wei (defaults to 1 gwei)

    Returns:
        DeploymentTransaction with a null recipient
    """
    if nonce < 0:
        raise ValueError(f"nonce must be non-negative, got {nonce}")

    return DeploymentTransaction(
        data=data,
        gas_limit=gas_limit,
        gas_price=DEFAULT_GAS_PRICE if gas_price is None else gas_price,
        nonce=nonce,
        chain_id=chain_id,
    )
