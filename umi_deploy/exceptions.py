"""
Exceptions for the umi-deploy package.
"""
from typing import Any, Dict, List, Optional


class UmiDeployError(Exception):
    """Base exception for all deployment errors."""
    pass


class ConfigError(UmiDeployError, ValueError):
    """Raised when a network name or endpoint cannot be used."""
    pass


class CompilationError(UmiDeployError):
    """Raised when the compiler reports fatal diagnostics."""

    def __init__(self, message: str, diagnostics: Optional[List[Dict[str, Any]]] = None):
        self.diagnostics = diagnostics or []
        super().__init__(message)


class WalletError(UmiDeployError):
    """Raised when no usable key material can be extracted from a wallet."""
    pass


class EncodingError(UmiDeployError):
    """Raised when bytecode cannot be wrapped into (or read from) an envelope."""
    pass


class BroadcastError(UmiDeployError):
    """Raised when the node rejects a raw transaction."""

    def __init__(self, message: str, node_message: Optional[str] = None, code: Optional[int] = None):
        self.node_message = node_message
        self.code = code
        super().__init__(message)


class ConfirmationTimeoutError(UmiDeployError):
    """Raised when no successful receipt shows up before the deadline."""

    def __init__(self, tx_hash: str, timeout: float, elapsed: float, attempts: int):
        self.tx_hash = tx_hash
        self.timeout = timeout
        self.elapsed = elapsed
        self.attempts = attempts
        super().__init__(
            f"Transaction confirmation timeout after {elapsed:.1f}s "
            f"(limit {timeout}s, {attempts} polls) for {tx_hash}"
        )


class UnsupportedBytecodeKind(UmiDeployError):
    """Raised for Move sources, which this engine does not deploy."""
    pass


class RPCError(UmiDeployError):
    """Base class for JSON-RPC failures."""
    pass


class RPCTransportError(RPCError):
    """Raised when the node cannot be reached or answers with garbage."""
    pass


class RPCResponseError(RPCError):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        self.message = message
        self.code = code
        self.data = data
        super().__init__(message)


class DeploymentStageError(UmiDeployError):
    """
    Wraps a failure raised by one pipeline stage of a single deployment.

    Attributes:
        contract_name: Name of the contract being deployed
        stage: Pipeline stage that failed (e.g. "compile", "broadcast")
        cause: The original exception
    """

    def __init__(self, contract_name: str, stage: str, cause: BaseException):
        self.contract_name = contract_name
        self.stage = stage
        self.cause = cause
        super().__init__(f"Deployment of '{contract_name}' failed at stage '{stage}': {cause}")
