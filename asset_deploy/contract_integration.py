"""
Contract Integration Module
Handles the web3 connection, the deploying account and contract deployments
"""

import logging
from typing import Dict, Optional

from eth_account import Account
from eth_utils import to_checksum_address
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception

from asset_deploy.artifacts import ContractArtifact, load_artifact
from asset_deploy.config import DeployConfig
from asset_deploy.errors import ConfigurationError, DeploymentError

logger = logging.getLogger(__name__)

# web3 raises its own exceptions, ValueError for ABI/RPC problems and
# requests' OSError subclasses for transport failures
WEB3_ERRORS = (Web3Exception, ValueError, OSError)


class DeployedContract:
    """Handle of a submitted contract creation transaction"""

    def __init__(self, deployer: "ContractDeployer", contract_name: str, tx_hash):
        self.deployer = deployer
        self.contract_name = contract_name
        self.tx_hash = tx_hash
        self.address: Optional[str] = None
        self.receipt = None

    async def deployed(self) -> "DeployedContract":
        """Wait until the creation transaction is mined"""
        if self.address is not None:
            return self

        web3 = self.deployer.web3
        try:
            receipt = web3.eth.wait_for_transaction_receipt(
                self.tx_hash,
                timeout=self.deployer.config.tx_timeout
            )
        except TimeExhausted as e:
            raise DeploymentError(
                f"{self.contract_name} deployment {Web3.to_hex(self.tx_hash)} not mined "
                f"within {self.deployer.config.tx_timeout}s"
            ) from e
        except WEB3_ERRORS as e:
            raise DeploymentError(f"Failed to get receipt for {self.contract_name}: {e}") from e

        if receipt["status"] != 1:
            raise DeploymentError(
                f"{self.contract_name} deployment reverted "
                f"(tx {Web3.to_hex(self.tx_hash)}, gas used {receipt.get('gasUsed')})"
            )

        self.receipt = receipt
        self.address = to_checksum_address(receipt["contractAddress"])
        logger.info(f"{self.contract_name} mined in block {receipt.get('blockNumber')}: {self.address}")

        url = self.deployer.explorer_url(self.address)
        if url:
            logger.info(f"Explorer: {url}")
        return self


class ContractFactory:
    """Deploys instances of a single compiled contract"""

    def __init__(self, deployer: "ContractDeployer", artifact: ContractArtifact):
        self.deployer = deployer
        self.artifact = artifact
        self.contract = deployer.web3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

    async def deploy(self, *args) -> DeployedContract:
        """Submit the contract creation transaction"""
        deployer = self.deployer
        name = self.artifact.contract_name
        logger.info(f"Deploying {name} with arguments {list(args)}")

        try:
            constructor = self.contract.constructor(*args)
            if deployer.account is not None:
                tx_hash = self._send_signed(constructor)
            else:
                tx_hash = constructor.transact(deployer.build_tx_params())
        except WEB3_ERRORS as e:
            raise DeploymentError(f"Failed to deploy {name}: {e}") from e

        logger.info(f"{name} deployment transaction: {Web3.to_hex(tx_hash)}")
        return DeployedContract(deployer, name, tx_hash)

    def _send_signed(self, constructor):
        deployer = self.deployer
        web3 = deployer.web3
        params = deployer.build_tx_params()
        params["nonce"] = web3.eth.get_transaction_count(deployer.signer_address, "pending")

        tx = constructor.build_transaction(params)
        signed_tx = web3.eth.account.sign_transaction(tx, private_key=deployer.account.key)
        return web3.eth.send_raw_transaction(signed_tx.raw_transaction)


class ContractDeployer:
    def __init__(self, config: DeployConfig, web3: Optional[Web3] = None):
        self.config = config
        self.web3 = web3
        self.account = None
        self.signer_address: Optional[str] = None

    async def initialize(self) -> str:
        """Connect to the node and resolve the deploying account"""
        if self.web3 is None:
            self.web3 = Web3(Web3.HTTPProvider(self.config.rpc_url))

        try:
            connected = self.web3.is_connected()
        except WEB3_ERRORS as e:
            raise ConfigurationError(f"Failed to connect to {self.config.rpc_url}: {e}") from e
        if not connected:
            raise ConfigurationError(f"Failed to connect to {self.config.rpc_url}")

        if self.config.private_key:
            try:
                self.account = Account.from_key(self.config.private_key)
            except Exception as e:
                # eth_keys reports bad lengths with its own ValidationError
                raise ConfigurationError(f"Invalid PRIVATE_KEY: {e}") from e
            self.signer_address = self.account.address
        else:
            try:
                accounts = self.web3.eth.accounts
            except WEB3_ERRORS as e:
                raise ConfigurationError(f"Failed to list node accounts: {e}") from e
            if not accounts:
                raise ConfigurationError(
                    "No PRIVATE_KEY configured and the node manages no accounts"
                )
            self.signer_address = to_checksum_address(accounts[0])

        self.web3.eth.default_account = self.signer_address

        try:
            chain_id = self.web3.eth.chain_id
            balance = self.web3.eth.get_balance(self.signer_address)
        except WEB3_ERRORS as e:
            raise ConfigurationError(f"Failed to query {self.config.rpc_url}: {e}") from e

        logger.info(f"Connected to {self.config.rpc_url} (chain id {chain_id})")
        logger.info(f"Account: {self.signer_address}")
        logger.info(f"Account balance: {Web3.from_wei(balance, 'ether')} ETH")
        return self.signer_address

    def get_contract_factory(self, contract_name: str) -> ContractFactory:
        """Return a factory for the named contract artifact"""
        if self.signer_address is None:
            raise ConfigurationError("Deployer not initialized")

        artifact = load_artifact(contract_name, self.config.artifacts_dir)
        if not artifact.is_deployable:
            raise DeploymentError(
                f"{contract_name} has no bytecode; abstract contracts and interfaces cannot be deployed"
            )
        try:
            return ContractFactory(self, artifact)
        except WEB3_ERRORS as e:
            raise DeploymentError(f"Invalid ABI in {artifact.path}: {e}") from e

    def build_tx_params(self) -> Dict:
        """Base transaction parameters shared by every deployment"""
        params = {"from": self.signer_address}
        if self.config.gas_limit is not None:
            params["gas"] = self.config.gas_limit
        if self.config.gas_price_gwei is not None:
            params["gasPrice"] = Web3.to_wei(self.config.gas_price_gwei, "gwei")
        return params

    def explorer_url(self, address: str) -> Optional[str]:
        """Get explorer URL for a contract address"""
        if not self.config.explorer_url:
            return None
        return f"{self.config.explorer_url}/address/{address}"
