"""
Adapter between external wallet objects and transaction signing.

Wallets come in a few shapes: kit wallets exposing ``export_private_key()``
and ``get_address()``, plain objects or mappings carrying ``private_key``
(or ``privateKey``) and ``address``, or ready-made signers implementing the
:class:`Signer` protocol.
"""
import logging
import re
from typing import Any, Mapping, Optional, Tuple, Union

from ..exceptions import WalletError
from ..models import DeploymentTransaction, SignedTransaction
from .base import Signer
from .local import LocalSigner

logger = logging.getLogger(__name__)

_PRIVATE_KEY_RE = re.compile(r'^0x[0-9a-f]{64}$')


def normalize_private_key(raw_key: Union[str, bytes]) -> str:
    """
    Normalize key material to lowercase 0x-prefixed hex.

    Raises:
        WalletError: If the value is not a 32-byte key
    """
    if isinstance(raw_key, (bytes, bytearray)):
        key = "0x" + bytes(raw_key).hex()
    elif isinstance(raw_key, str):
        key = raw_key.strip().lower()
        if not key.startswith('0x'):
            key = '0x' + key
    else:
        raise WalletError(f"Private key must be str or bytes, got {type(raw_key).__name__}")

    if not _PRIVATE_KEY_RE.match(key):
        raise WalletError("Invalid wallet format - private key is not 32 bytes of hex")
    return key


def extract_private_key(wallet: Any) -> Tuple[str, Optional[str]]:
    """
    Pull key material and the declared address out of a wallet.

    Args:
        wallet: Wallet object or mapping

    Returns:
        Tuple of (normalized private key, declared address or None)

    Raises:
        WalletError: If no usable key material can be found
    """
    if wallet is None:
        raise WalletError("No wallet provided")

    raw_key = None
    address = None
    if callable(getattr(wallet, "export_private_key", None)):
        try:
            raw_key = wallet.export_private_key()
        except Exception as e:
            raise WalletError(f"Wallet failed to export private key: {str(e)}")
        if callable(getattr(wallet, "get_address", None)):
            address = wallet.get_address()
        else:
            address = getattr(wallet, "address", None)
    elif isinstance(wallet, Mapping):
        raw_key = wallet.get("private_key") or wallet.get("privateKey")
        address = wallet.get("address")
    else:
        raw_key = getattr(wallet, "private_key", None) or getattr(wallet, "privateKey", None)
        address = getattr(wallet, "address", None)

    if not raw_key:
        raise WalletError("Invalid wallet format - cannot extract private key")

    return normalize_private_key(raw_key), address


def signer_from_wallet(wallet: Any) -> Signer:
    """
    Build a signer for a wallet.

    Objects that already implement the Signer protocol (``address`` plus
    ``sign_transaction``) and carry no exportable key are used as-is.

    Raises:
        WalletError: If the wallet yields neither key material nor a signer
    """
    try:
        private_key, declared_address = extract_private_key(wallet)
    except WalletError:
        if callable(getattr(wallet, "sign_transaction", None)) and getattr(wallet, "address", None):
            return wallet
        raise

    try:
        signer = LocalSigner(private_key)
    except (ValueError, TypeError) as e:
        raise WalletError(f"Private key rejected by eth-account: {str(e)}")

    if declared_address and str(declared_address).lower() != signer.address.lower():
        logger.warning(
            f"Wallet address {declared_address} does not match its key "
            f"({signer.address}); using the key's address"
        )
    return signer


def _raw_bytes(signed: Any) -> bytes:
    if isinstance(signed, (bytes, bytearray)):
        return bytes(signed)
    if isinstance(signed, str):
        return bytes.fromhex(signed[2:] if signed.startswith('0x') else signed)
    raw = getattr(signed, "raw_transaction", None)
    if raw is None:
        raw = getattr(signed, "rawTransaction", None)
    if raw is None:
        raise WalletError(f"Signer returned an object without a raw transaction: {type(signed).__name__}")
    return bytes(raw)


def sign_deployment(tx: DeploymentTransaction, signer: Signer) -> SignedTransaction:
    """
    Sign a deployment transaction.

    Args:
        tx: Unsigned deployment transaction
        signer: Signer for the deploying account

    Returns:
        SignedTransaction holding the raw 0x-prefixed hex

    Raises:
        WalletError: If signing fails
    """
    try:
        signed = signer.sign_transaction(tx.to_signable())
        raw = _raw_bytes(signed)
    except WalletError:
        raise
    except Exception as e:
        logger.error(f"Transaction signing failed: {e}")
        raise WalletError(f"Failed to sign transaction: {str(e)}")

    return SignedTransaction(
        raw_transaction="0x" + raw.hex(),
        sender=signer.address,
        nonce=tx.nonce,
    )
