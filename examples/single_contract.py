#!/usr/bin/env python3
"""
Deploy one inline Solidity contract and print where it landed.
"""
import asyncio
import os

from umi_deploy import Contract, DeploymentEngine, DeploymentStageError, SolcCompiler

COUNTER = """
// SPDX-License-Identifier: MIT
pragma solidity ^0.8.0;

contract Counter {
    uint256 public count;

    function increment() public {
        count += 1;
    }
}
"""


async def main():
    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    RPC_URL = os.environ.get("DEVNET_RPC_URL")  # optional override

    if not PRIVATE_KEY:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    if RPC_URL:
        print(f"Using RPC endpoint {RPC_URL}")

    async with DeploymentEngine("devnet", compiler=SolcCompiler(), confirmation_timeout=90) as engine:
        try:
            result = await engine.deploy_one(
                Contract(name="Counter", source=COUNTER),
                {"private_key": PRIVATE_KEY},
            )
        except DeploymentStageError as e:
            print(f"Deployment failed at {e.stage}: {e.cause}")
            return

    print("Contract deployed successfully!")
    print(f"Address: {result.address} ({result.address_source})")
    print(f"Transaction hash: {result.hash}")
    print(f"Deployed at: {result.timestamp}")


if __name__ == "__main__":
    asyncio.run(main())
