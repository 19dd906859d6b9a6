"""
Shared helpers for the umi-deploy test-suite.
"""
from .fake_node import (
    FakeCompiler, FakeNode, KitWallet, NodeError,
    TEST_ABI, TEST_ADDRESS, TEST_BYTECODE, TEST_CHAIN_ID, TEST_PRIV_KEY, TEST_RPC_URL,
)

__all__ = [
    'FakeCompiler', 'FakeNode', 'KitWallet', 'NodeError',
    'TEST_ABI', 'TEST_ADDRESS', 'TEST_BYTECODE', 'TEST_CHAIN_ID', 'TEST_PRIV_KEY', 'TEST_RPC_URL',
]
