#!/usr/bin/env python3
"""
Example of deploying a directory of contracts to Umi devnet.
"""
import asyncio
import logging
import os
import sys

from umi_deploy import (
    DeploymentEngine,
    DeploymentFailure,
    NetworkRegistry,
    SolcCompiler,
)


async def main():
    """
    Demonstrate batch deployment with DeploymentEngine.

    This example shows how to:
    1. Pick a network from the bundled registry
    2. Compile and deploy every contract in a directory
    3. Inspect per-contract results and failures
    """
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    CONTRACTS_DIR = sys.argv[1] if len(sys.argv) > 1 else "contracts"

    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    print("Available networks:")
    for network_name in NetworkRegistry.supported_networks():
        print(f"  - {network_name}")
    print()

    wallet = {"private_key": PRIVATE_KEY}

    async with DeploymentEngine("devnet", compiler=SolcCompiler()) as engine:
        print(f"Deploying contracts from {CONTRACTS_DIR} (chain id {engine.chain_id})")
        results = await engine.deploy_directory(CONTRACTS_DIR, wallet)

    for name, result in results.items():
        if isinstance(result, DeploymentFailure):
            print(f"  {name}: FAILED at {result.stage}: {result.error}")
        else:
            print(f"  {name}: {result.address or 'address unresolved'} (tx {result.hash})")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
