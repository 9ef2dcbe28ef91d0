"""
Deployment Sequencer
Deploys Asset, then AssetMarketplace, and reports their addresses
"""

import asyncio
import logging
import sys
from typing import Callable, Dict, Tuple

from asset_deploy.config import DeployConfig, load_config, setup_logging
from asset_deploy.contract_integration import ContractDeployer

logger = logging.getLogger(__name__)


class DeploymentRequest:
    def __init__(self, contract_name: str, args: Tuple = ()):
        self.contract_name = contract_name
        self.args = tuple(args)

    def __str__(self):
        return f"{self.contract_name}{self.args}"


# Asset is confirmed before AssetMarketplace is requested
DEPLOYMENT_PLAN: Tuple[DeploymentRequest, ...] = (
    DeploymentRequest("Asset", ("Asset", "AST")),
    DeploymentRequest("AssetMarketplace"),
)


async def deploy_contracts(deployer: ContractDeployer,
                           emit: Callable[[str], None] = print,
                           plan: Tuple[DeploymentRequest, ...] = DEPLOYMENT_PLAN) -> Dict[str, str]:
    """Deploy every request of the plan in order, waiting for each to be mined"""
    addresses = {}
    for request in plan:
        factory = deployer.get_contract_factory(request.contract_name)
        contract = await factory.deploy(*request.args)
        await contract.deployed()

        addresses[request.contract_name] = contract.address
        emit(f"{request.contract_name} contract deployed at: {contract.address}")
    return addresses


async def main(config: DeployConfig, emit: Callable[[str], None] = print) -> Dict[str, str]:
    deployer = ContractDeployer(config)
    signer = await deployer.initialize()
    emit(f"Deploying contracts with the account: {signer}")
    return await deploy_contracts(deployer, emit)


def run():
    """Console entry point; exits 0 on success and 1 on any failure"""
    try:
        config = load_config()
        setup_logging(config.log_level)
        logger.debug(f"Configuration: {config.to_dict()}")
        asyncio.run(main(config))
    except KeyboardInterrupt:
        logger.error("Deployment interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.exception(f"Deployment failed: {e}")
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    run()
