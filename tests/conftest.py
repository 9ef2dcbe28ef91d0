import json
import os
import sys
from unittest.mock import MagicMock

import pytest

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from asset_deploy.config import DeployConfig

# Hardhat's first default development account
HARDHAT_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
HARDHAT_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

ASSET_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
MARKETPLACE_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"

ASSET_ABI = [
    {
        "inputs": [
            {"internalType": "string", "name": "name", "type": "string"},
            {"internalType": "string", "name": "symbol", "type": "string"}
        ],
        "stateMutability": "nonpayable",
        "type": "constructor"
    }
]


def write_artifact(artifacts_dir, contract_name, abi=None, bytecode="0x6080604052"):
    """Write a Hardhat style artifact and return its path"""
    contract_dir = artifacts_dir / "contracts" / f"{contract_name}.sol"
    contract_dir.mkdir(parents=True, exist_ok=True)
    path = contract_dir / f"{contract_name}.json"
    path.write_text(json.dumps({
        "_format": "hh-sol-artifact-1",
        "contractName": contract_name,
        "sourceName": f"contracts/{contract_name}.sol",
        "abi": abi if abi is not None else [],
        "bytecode": bytecode,
        "deployedBytecode": bytecode,
    }))
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    root = tmp_path / "artifacts"
    write_artifact(root, "Asset", ASSET_ABI)
    write_artifact(root, "AssetMarketplace")
    return root


@pytest.fixture
def config(artifacts_dir):
    return DeployConfig(artifacts_dir=str(artifacts_dir), tx_timeout=5)


@pytest.fixture
def mock_web3():
    """web3 client backed by a node that manages one account"""
    web3 = MagicMock()
    web3.is_connected.return_value = True
    web3.eth.accounts = [HARDHAT_ADDRESS.lower()]
    web3.eth.chain_id = 31337
    web3.eth.get_balance.return_value = 10000 * 10**18
    web3.eth.get_transaction_count.return_value = 0

    constructor = web3.eth.contract.return_value.constructor.return_value
    constructor.transact.side_effect = [b"\x01" * 32, b"\x02" * 32]
    constructor.build_transaction.side_effect = lambda params: dict(params, data="0x6080604052")
    web3.eth.account.sign_transaction.return_value = MagicMock(raw_transaction=b"signed")
    web3.eth.send_raw_transaction.side_effect = [b"\x01" * 32, b"\x02" * 32]

    web3.eth.wait_for_transaction_receipt.side_effect = [
        {"status": 1, "contractAddress": ASSET_ADDRESS.lower(), "blockNumber": 1, "gasUsed": 1200000},
        {"status": 1, "contractAddress": MARKETPLACE_ADDRESS.lower(), "blockNumber": 2, "gasUsed": 900000},
    ]
    return web3
