"""
Solidity compilation.

The engine only needs something with ``compile(contract) -> CompiledContract``;
:class:`SolcCompiler` is the bundled implementation on top of py-solc-x, which
is an optional dependency:
    pip install umi-deploy[solc]
"""
import logging
from typing import Any, Dict, List, Optional, Protocol

from .exceptions import CompilationError
from .models import CompiledContract, Contract

logger = logging.getLogger(__name__)

DEFAULT_SOLC_VERSION = "0.8.21"


class Compiler(Protocol):
    """Protocol for contract compilers"""

    def compile(self, contract: Contract) -> CompiledContract:
        """Compile a contract or raise CompilationError"""
        ...


def ensure_solcx_installed():
    """
    Check that py-solc-x is importable.

    Raises ImportError with installation instructions if not found.
    """
    try:
        import solcx
        return solcx
    except ImportError:
        raise ImportError(
            "Solidity compilation requires py-solc-x. "
            "Please install with: pip install umi-deploy[solc]"
        )


def check_diagnostics(errors: Optional[List[Dict[str, Any]]]) -> List[str]:
    """
    Split compiler diagnostics by severity.

    Args:
        errors: The ``errors`` list of a solc standard-JSON output

    Returns:
        Messages of non-fatal diagnostics

    Raises:
        CompilationError: If any diagnostic has severity "error"
    """
    errors = errors or []
    fatal = [e for e in errors if e.get("severity") == "error"]
    if fatal:
        raise CompilationError(
            f"Compilation failed: {', '.join(e.get('message', '') for e in fatal)}",
            diagnostics=fatal,
        )
    return [e.get("message", "") for e in errors]


class SolcCompiler:
    """
    Compiles single-file Solidity contracts with solc's standard-JSON interface.

    Args:
        solc_version: solc release to use; installed on first use if missing
    """

    def __init__(self, solc_version: str = DEFAULT_SOLC_VERSION):
        self.solc_version = solc_version
        self._solc_ready = False

    def _ensure_solc(self):
        solcx = ensure_solcx_installed()
        if not self._solc_ready:
            installed = {str(v) for v in solcx.get_installed_solc_versions()}
            if self.solc_version not in installed:
                logger.info(f"Installing solc {self.solc_version}")
                solcx.install_solc(self.solc_version)
            self._solc_ready = True
        return solcx

    def compile(self, contract: Contract) -> CompiledContract:
        """
        Compile a contract.

        Args:
            contract: Contract whose source defines a contract named ``contract.name``

        Returns:
            CompiledContract with ABI and creation bytecode

        Raises:
            CompilationError: If solc reports errors or the contract is missing
        """
        solcx = self._ensure_solc()
        from solcx.exceptions import SolcError

        file_name = f"{contract.name}.sol"
        logger.info(f"Compiling Solidity contract {contract.name}...")

        input_json = {
            "language": "Solidity",
            "sources": {file_name: {"content": contract.source}},
            "settings": {
                "outputSelection": {
                    "*": {"*": ["abi", "evm.bytecode"]}
                }
            },
        }

        try:
            output = solcx.compile_standard(input_json, solc_version=self.solc_version)
        except SolcError as e:
            diagnostics = getattr(e, "error_dict", None) or []
            check_diagnostics(diagnostics)
            raise CompilationError(f"Compilation failed: {getattr(e, 'message', e)}", diagnostics=diagnostics)

        warnings = check_diagnostics(output.get("errors"))
        for warning in warnings:
            logger.warning(f"{contract.name}: {warning}")

        try:
            contract_output = output["contracts"][file_name][contract.name]
        except KeyError:
            raise CompilationError(f"Contract {contract.name} not found in compiler output for {file_name}")

        bytecode = contract_output["evm"]["bytecode"]["object"]
        if not bytecode:
            raise CompilationError(f"Contract {contract.name} has no bytecode (abstract or interface?)")

        return CompiledContract(
            name=contract.name,
            abi=contract_output["abi"],
            bytecode=bytecode,
            warnings=warnings,
        )
