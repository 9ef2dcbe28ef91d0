"""
Deployment errors
"""


class DeployError(Exception):
    """Base class for every failure raised by the deployer"""


class ConfigurationError(DeployError):
    """Network, environment or signer could not be resolved"""


class DeploymentError(DeployError):
    """A contract could not be deployed"""


class ArtifactNotFoundError(DeploymentError):
    def __init__(self, contract_name: str, artifacts_dir: str):
        self.contract_name = contract_name
        self.artifacts_dir = artifacts_dir
        super().__init__(
            f"Artifact for contract {contract_name} not found in {artifacts_dir}. "
            f"Compile the contracts first (npx hardhat compile)"
        )
