"""
Signers for deployment transactions.
"""
from .base import Signer
from .local import LocalSigner
from .wallet import extract_private_key, sign_deployment, signer_from_wallet

__all__ = ['Signer', 'LocalSigner', 'extract_private_key', 'signer_from_wallet', 'sign_deployment']
