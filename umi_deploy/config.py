"""
Network configuration for the umi-deploy package.

Networks are shipped as package data (``networks.json``) and looked up by
name. The resulting :class:`NetworkConfig` is immutable and handed to each
engine at construction.
"""
import importlib.resources
import json
import logging
import os
import urllib.parse
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


def validate_rpc_url(url: str) -> str:
    """
    Check that an RPC URL uses https, unless it points at the local machine.

    Args:
        url: Endpoint URL to check

    Returns:
        The URL unchanged

    Raises:
        ConfigError: If the URL is not https and not localhost/127.0.0.1
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ''
    is_local = host in ('localhost', '127.0.0.1')
    if parsed.scheme != 'https' and not (is_local and parsed.scheme == 'http'):
        raise ConfigError(f"rpc_url must use https:// for security (got: {url})")
    return url


class NetworkConfig(BaseModel):
    """Connection settings for a single network."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    rpc_url: str = Field(..., alias="rpc")
    chain_id: int = Field(..., alias="chainId")

    @classmethod
    def from_name(cls, network: str, rpc_url: Optional[str] = None) -> "NetworkConfig":
        """Shortcut for :meth:`NetworkRegistry.get_network`."""
        return NetworkRegistry.get_network(network, rpc_url=rpc_url)


class NetworkRegistry:
    """Lookup of network settings shipped in networks.json."""

    # Class-level cache of the parsed networks.json
    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network registry from package data.

        Returns:
            Mapping of network name to raw settings
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("umi_deploy").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug(f"Loaded {len(cls._networks_cache)} network(s) from networks.json")
        return cls._networks_cache

    @classmethod
    def supported_networks(cls) -> List[str]:
        """Names of all networks in the registry."""
        return sorted(cls.load_networks())

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL for a network.

        Precedence: explicit override, then ``<NETWORK>_RPC_URL`` from the
        environment, then the registry entry.

        Args:
            network: Network name
            override: Optional explicit URL

        Returns:
            RPC URL

        Raises:
            ConfigError: If the network is unknown
        """
        entry = cls._lookup(network)
        if override:
            return override
        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        env_value = os.environ.get(env_var)
        if env_value:
            logger.debug(f"Using RPC URL from {env_var}")
            return env_value
        return entry["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        """Chain id for a network."""
        return int(cls._lookup(network)["chainId"])

    @classmethod
    def get_network(cls, network: str, rpc_url: Optional[str] = None) -> NetworkConfig:
        """
        Build the immutable configuration for a named network.

        Args:
            network: Network name (e.g. "devnet")
            rpc_url: Optional RPC URL override

        Returns:
            NetworkConfig instance

        Raises:
            ConfigError: If the network is unknown
        """
        return NetworkConfig(
            name=network,
            rpc_url=cls.get_rpc_url(network, override=rpc_url),
            chain_id=cls.get_chain_id(network),
        )

    @classmethod
    def _lookup(cls, network: str) -> Dict[str, Any]:
        networks = cls.load_networks()
        if network not in networks:
            raise ConfigError(
                f"Unsupported network: {network}. Supported: {', '.join(sorted(networks))}"
            )
        return networks[network]
