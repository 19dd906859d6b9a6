"""
Local private-key signer backed by eth-account.
"""
from typing import Any, Dict

from eth_account import Account
from eth_account.datastructures import SignedTransaction as EthSignedTransaction


class LocalSigner:
    """Signs transactions with an in-memory secp256k1 key"""

    def __init__(self, private_key: str):
        self._account = Account.from_key(private_key)
        self.address = self._account.address

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> EthSignedTransaction:
        """Sign transaction and return the eth-account signed tx object"""
        return self._account.sign_transaction(transaction_dict)

    def __repr__(self) -> str:
        # never expose the key
        return f"LocalSigner(address={self.address})"
