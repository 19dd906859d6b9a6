"""
DeploymentEngine - deploys compiled Solidity contracts to Umi Network.

Each deployment runs the same pipeline, one stage at a time:

    compile -> encode -> wallet -> nonce -> build -> sign -> broadcast
            -> confirm -> resolve

Batches run contracts strictly one after another with a fresh nonce each,
and record per-contract failures instead of aborting.
"""
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .address import AddressResolver
from .broadcast import Broadcaster
from .compiler import Compiler
from .confirmation import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT, ConfirmationPoller
from .config import NetworkConfig, NetworkRegistry
from .envelope import wrap_bytecode
from .exceptions import (
    CompilationError, ConfigError, DeploymentStageError, UnsupportedBytecodeKind
)
from .models import CompiledContract, Contract, DeploymentFailure, DeploymentResult
from .nonce import NonceOracle
from .rpc import JsonRpcClient
from .signer import sign_deployment, signer_from_wallet
from .transaction import DEFAULT_GAS_LIMIT, build_deployment_transaction

logger = logging.getLogger(__name__)

MOVE_NOT_SUPPORTED = "Move contracts are not supported by this engine; use Solidity contracts"

# `module <addr>::<name> {` (or the `;` form) at the start of a line
_MOVE_MODULE_RE = re.compile(r'^\s*module\s+[\w:]+\s*[{;]', re.MULTILINE)

BatchResult = Dict[str, Union[DeploymentResult, DeploymentFailure]]


def is_move_source(source: str) -> bool:
    """Check whether source text is a Move module rather than Solidity."""
    return bool(_MOVE_MODULE_RE.search(source))


def load_contracts(directory: Union[str, Path]) -> List[Contract]:
    """
    Load every ``.sol`` and ``.move`` file in a directory.

    Args:
        directory: Directory holding contract sources

    Returns:
        Contracts named after their file stem, in file name order

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    path = Path(directory)
    if not path.is_dir():
        raise FileNotFoundError(f"Contracts directory not found: {path}")

    files = sorted(
        (p for p in path.iterdir() if p.is_file() and p.suffix in ('.sol', '.move')),
        key=lambda p: p.name,
    )
    contracts = [Contract(name=p.stem, source=p.read_text(encoding="utf-8")) for p in files]
    logger.debug(f"Loaded {len(contracts)} contract(s) from {path}")
    return contracts


class DeploymentEngine:
    """
    Deploys contracts to an Umi network over raw JSON-RPC.

    Args:
        network: NetworkConfig, or the name of a network in the registry
        compiler: Compiler used for uncompiled Contract inputs
        rpc: Optional pre-built JSON-RPC client (left open by aclose)
        gas_limit: Fixed gas limit for deployment transactions
        gas_price: Gas price in wei (defaults to 1 gwei)
        confirmation_timeout: Seconds to wait for a successful receipt
        poll_interval: Seconds between receipt polls
        logger: Optional logger instance

    Raises:
        ConfigError: If the network is unknown or misconfigured
    """

    def __init__(
        self,
        network: Union[NetworkConfig, str] = "devnet",
        *,
        compiler: Optional[Compiler] = None,
        rpc: Optional[JsonRpcClient] = None,
        gas_limit: int = DEFAULT_GAS_LIMIT,
        gas_price: Optional[int] = None,
        confirmation_timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        if isinstance(network, str):
            network = NetworkRegistry.get_network(network)
        elif not isinstance(network, NetworkConfig):
            raise ConfigError(f"Expected a NetworkConfig or network name, got {type(network).__name__}")

        self.network = network
        self.logger = logger or logging.getLogger(__name__)
        self.compiler = compiler
        self.gas_limit = gas_limit
        self.gas_price = gas_price
        self.confirmation_timeout = confirmation_timeout
        self.poll_interval = poll_interval

        self._owns_rpc = rpc is None
        self.rpc = rpc or JsonRpcClient(network.rpc_url)

        self.nonce_oracle = NonceOracle(self.rpc, logger=self.logger)
        self.broadcaster = Broadcaster(self.rpc, logger=self.logger)
        self.resolver = AddressResolver(self.rpc, logger=self.logger)

        self.logger.info(
            f"DeploymentEngine initialized for {network.name} "
            f"(rpc={network.rpc_url}, chain_id={network.chain_id})"
        )

    @property
    def chain_id(self) -> int:
        return self.network.chain_id

    async def deploy_one(
        self,
        contract: Union[Contract, CompiledContract],
        wallet: Any,
    ) -> DeploymentResult:
        """
        Deploy a single Solidity contract.

        Args:
            contract: Source contract (compiled with the engine's compiler) or
                an already compiled contract
            wallet: Deployer wallet or signer

        Returns:
            DeploymentResult; ``address`` is None if it could not be resolved

        Raises:
            DeploymentStageError: If any stage fails; ``stage`` names it and
                ``cause`` holds the original error
        """
        name = contract.name
        stage = "classify"
        self.logger.info(f"Deploying Solidity contract: {name}")
        try:
            if isinstance(contract, Contract) and is_move_source(contract.source):
                raise UnsupportedBytecodeKind(MOVE_NOT_SUPPORTED)

            stage = "compile"
            compiled = self._compile(contract)

            stage = "encode"
            data = wrap_bytecode(compiled.bytecode)

            stage = "wallet"
            signer = signer_from_wallet(wallet)

            stage = "nonce"
            nonce = await self.nonce_oracle.next_nonce(signer.address)

            stage = "build"
            tx = build_deployment_transaction(
                data,
                nonce=nonce,
                chain_id=self.chain_id,
                gas_limit=self.gas_limit,
                gas_price=self.gas_price,
            )

            stage = "sign"
            signed = sign_deployment(tx, signer)

            stage = "broadcast"
            tx_hash = await self.broadcaster.broadcast(signed)

            stage = "confirm"
            poller = ConfirmationPoller(
                self.rpc,
                timeout=self.confirmation_timeout,
                poll_interval=self.poll_interval,
                logger=self.logger,
            )
            receipt = await poller.wait(tx_hash)

            stage = "resolve"
            resolution = await self.resolver.resolve(
                tx_hash, receipt, sender=signed.sender, nonce=signed.nonce
            )
        except Exception as e:
            self.logger.error(f"Solidity deployment of {name} failed at {stage}: {e}")
            raise DeploymentStageError(name, stage, e) from e

        self.logger.info(f"Solidity contract deployed successfully: {name}")
        self.logger.info(f"Address: {resolution.address or 'unresolved'} (tx {tx_hash})")

        return DeploymentResult(
            address=resolution.address,
            hash=tx_hash,
            name=name,
            abi=compiled.abi,
            address_source=resolution.source,
        )

    async def deploy_many(
        self,
        contracts: Iterable[Union[Contract, CompiledContract]],
        wallet: Any,
    ) -> BatchResult:
        """
        Deploy contracts one after another.

        Every contract gets an entry in the result: a DeploymentResult, or a
        DeploymentFailure carrying the error message. Move sources are
        recorded as unsupported without being compiled. Names that occur more
        than once get a single failure record and none of them is deployed,
        since results are keyed by name.

        Args:
            contracts: Contracts to deploy, in order
            wallet: Deployer wallet shared by the whole batch

        Returns:
            Mapping of contract name to result or failure record
        """
        contracts = list(contracts)
        names = [c.name for c in contracts]
        duplicates = {n for n in names if names.count(n) > 1}

        results: BatchResult = {}
        for contract in contracts:
            if contract.name in duplicates:
                if contract.name not in results:
                    self.logger.warning(f"Skipping {contract.name} - name used more than once in batch")
                    results[contract.name] = DeploymentFailure(
                        name=contract.name,
                        error=f"Duplicate contract name in batch: {contract.name}",
                        stage="classify",
                    )
                continue

            if isinstance(contract, Contract) and is_move_source(contract.source):
                self.logger.warning(f"Skipping Move contract {contract.name} - not supported")
                results[contract.name] = DeploymentFailure(
                    name=contract.name, error=MOVE_NOT_SUPPORTED, stage="classify"
                )
                continue

            try:
                results[contract.name] = await self.deploy_one(contract, wallet)
            except DeploymentStageError as e:
                results[contract.name] = DeploymentFailure(
                    name=contract.name, error=str(e), stage=e.stage
                )

        succeeded = sum(isinstance(r, DeploymentResult) for r in results.values())
        self.logger.info(f"Batch finished: {succeeded}/{len(results)} contract(s) deployed")
        return results

    async def deploy_directory(self, directory: Union[str, Path], wallet: Any) -> BatchResult:
        """Deploy every contract source found in a directory as one batch."""
        return await self.deploy_many(load_contracts(directory), wallet)

    async def deploy_move_contract(self, contract: Contract, wallet: Any) -> DeploymentResult:
        """
        Move deployment is not implemented.

        Raises:
            UnsupportedBytecodeKind: Always
        """
        self.logger.warning(f"Move contract deployment requested for {contract.name}")
        raise UnsupportedBytecodeKind(MOVE_NOT_SUPPORTED)

    def _compile(self, contract: Union[Contract, CompiledContract]) -> CompiledContract:
        if isinstance(contract, CompiledContract):
            return contract
        if self.compiler is None:
            raise CompilationError(f"No compiler configured to compile {contract.name}")

        output = self.compiler.compile(contract)
        if isinstance(output, Mapping):
            output = CompiledContract(name=contract.name, abi=output["abi"], bytecode=output["bytecode"])
        return output

    async def aclose(self) -> None:
        """Release the RPC client if the engine created it."""
        if self._owns_rpc:
            await self.rpc.aclose()

    async def __aenter__(self) -> "DeploymentEngine":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
