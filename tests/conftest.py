"""
Pytest fixtures for the umi-deploy tests.
"""
import httpx
import pytest
import pytest_asyncio

from umi_deploy._rate_limited_log import reset_rate_limits
from umi_deploy.config import NetworkConfig, NetworkRegistry
from umi_deploy.engine import DeploymentEngine
from umi_deploy.rpc import JsonRpcClient
from tests.test_helpers import (
    FakeCompiler, FakeNode, KitWallet, TEST_CHAIN_ID, TEST_PRIV_KEY, TEST_RPC_URL,
)


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Registry cache and rate-limit memory must not leak between tests."""
    NetworkRegistry._networks_cache = None
    reset_rate_limits()
    yield
    NetworkRegistry._networks_cache = None
    reset_rate_limits()


@pytest.fixture
def fake_node():
    return FakeNode()


@pytest_asyncio.fixture
async def rpc_client(fake_node):
    """JsonRpcClient wired to the fake node"""
    http_client = httpx.AsyncClient(transport=fake_node.transport())
    client = JsonRpcClient(TEST_RPC_URL, http_client=http_client)
    yield client
    await http_client.aclose()


@pytest.fixture
def test_network():
    return NetworkConfig(name="test-network", rpc_url=TEST_RPC_URL, chain_id=TEST_CHAIN_ID)


@pytest.fixture
def fake_compiler():
    return FakeCompiler()


@pytest.fixture
def wallet():
    return KitWallet(TEST_PRIV_KEY)


@pytest.fixture
def engine(test_network, rpc_client, fake_compiler):
    """Engine with fast polling against the fake node"""
    return DeploymentEngine(
        test_network,
        compiler=fake_compiler,
        rpc=rpc_client,
        confirmation_timeout=2.0,
        poll_interval=0.01,
    )
