"""
umi-deploy - deploy Solidity contracts to Umi Network over raw JSON-RPC.
"""
from .address import AddressResolver, compute_create_address
from .broadcast import Broadcaster
from .compiler import Compiler, SolcCompiler, check_diagnostics
from .config import NetworkConfig, NetworkRegistry
from .confirmation import SUCCESS_STATUS, ConfirmationPoller, is_success_status
from .engine import DeploymentEngine, is_move_source, load_contracts
from .envelope import BytecodeKind, decode_envelope, encode_envelope, wrap_bytecode
from .exceptions import (
    BroadcastError, CompilationError, ConfigError, ConfirmationTimeoutError,
    DeploymentStageError, EncodingError, RPCError, RPCResponseError,
    RPCTransportError, UmiDeployError, UnsupportedBytecodeKind, WalletError
)
from .models import (
    AddressResolution, CompiledContract, Contract, DeploymentFailure,
    DeploymentResult, DeploymentTransaction, SignedTransaction, TransactionReceipt
)
from .nonce import NonceOracle
from .rpc import JsonRpcClient
from .signer import LocalSigner, Signer
from .transaction import build_deployment_transaction
from .version import __version__

__all__ = [
    'DeploymentEngine', 'NetworkConfig', 'NetworkRegistry', 'JsonRpcClient',
    'NonceOracle', 'Broadcaster', 'ConfirmationPoller', 'AddressResolver',
    'Compiler', 'SolcCompiler', 'check_diagnostics',
    'Signer', 'LocalSigner',
    'BytecodeKind', 'encode_envelope', 'decode_envelope', 'wrap_bytecode',
    'build_deployment_transaction', 'compute_create_address',
    'is_success_status', 'SUCCESS_STATUS', 'is_move_source', 'load_contracts',
    'Contract', 'CompiledContract', 'DeploymentTransaction', 'SignedTransaction',
    'TransactionReceipt', 'AddressResolution', 'DeploymentResult', 'DeploymentFailure',
    'UmiDeployError', 'ConfigError', 'CompilationError', 'WalletError',
    'EncodingError', 'BroadcastError', 'ConfirmationTimeoutError',
    'UnsupportedBytecodeKind', 'RPCError', 'RPCTransportError', 'RPCResponseError',
    'DeploymentStageError',
    '__version__',
]
