"""
Data models for the umi-deploy package.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Contract(BaseModel):
    """Contract source before compilation"""
    model_config = ConfigDict(frozen=True)

    name: str
    source: str


class CompiledContract(BaseModel):
    """Compiler output for a single contract"""
    model_config = ConfigDict(frozen=True)

    name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    warnings: List[str] = Field(default_factory=list)


class DeploymentTransaction(BaseModel):
    """
    Unsigned contract-creation transaction.

    ``to`` is always null: a missing recipient is what makes the node treat
    the transaction as a deployment rather than a call.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: None = None
    data: str
    gas_limit: int = Field(..., alias="gasLimit")
    gas_price: int = Field(..., alias="gasPrice")
    nonce: int
    chain_id: int = Field(..., alias="chainId")

    def to_signable(self) -> Dict[str, Any]:
        """
        Transaction dict in the shape eth-account signs.

        The recipient is left out; eth-account encodes a missing ``to`` as the
        empty creation address.
        """
        return {
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "value": 0,
            "data": self.data,
            "chainId": self.chain_id,
        }


class SignedTransaction(BaseModel):
    """Signed raw transaction ready for eth_sendRawTransaction"""
    model_config = ConfigDict(frozen=True)

    raw_transaction: str
    sender: str
    nonce: int


class TransactionReceipt(BaseModel):
    """Receipt as returned by eth_getTransactionReceipt"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    status: Optional[Union[str, int]] = None
    logs: List[Dict[str, Any]] = Field(default_factory=list)
    contract_address: Optional[str] = Field(None, alias="contractAddress")
    tx_hash: Optional[str] = Field(None, alias="transactionHash")
    block_number: Optional[Union[str, int]] = Field(None, alias="blockNumber")
    from_address: Optional[str] = Field(None, alias="from")
    to_address: Optional[str] = Field(None, alias="to")


class AddressResolution(BaseModel):
    """
    Outcome of contract address resolution.

    ``address`` is None exactly when ``source`` is "unresolved".
    """
    model_config = ConfigDict(frozen=True)

    address: Optional[str] = None
    source: str = "unresolved"

    @property
    def resolved(self) -> bool:
        return self.address is not None


class DeploymentResult(BaseModel):
    """Externally visible record of a successful deployment"""
    model_config = ConfigDict(frozen=True)

    address: Optional[str]
    hash: str
    name: str
    type: str = "solidity"
    initialized: bool = True
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    abi: List[Dict[str, Any]] = Field(default_factory=list)
    address_source: str = "derived"


class DeploymentFailure(BaseModel):
    """Per-contract error record in a batch result"""
    model_config = ConfigDict(frozen=True)

    name: str
    error: str
    stage: Optional[str] = None
