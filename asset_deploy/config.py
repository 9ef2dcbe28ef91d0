"""
Deployment Configuration
Reads network, account and logging settings from the environment
"""

import logging
import math
import os
from typing import Dict, Optional

from dotenv import find_dotenv, load_dotenv

from asset_deploy.errors import ConfigurationError

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_ARTIFACTS_DIR = "artifacts"
DEFAULT_TX_TIMEOUT = 120.0

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DeployConfig:
    def __init__(self,
                 rpc_url: str = DEFAULT_RPC_URL,
                 private_key: Optional[str] = None,
                 artifacts_dir: str = DEFAULT_ARTIFACTS_DIR,
                 tx_timeout: float = DEFAULT_TX_TIMEOUT,
                 gas_limit: Optional[int] = None,
                 gas_price_gwei: Optional[float] = None,
                 explorer_url: Optional[str] = None,
                 log_level: str = "INFO"):
        self.rpc_url = rpc_url
        self.private_key = private_key
        self.artifacts_dir = artifacts_dir
        self.tx_timeout = tx_timeout
        self.gas_limit = gas_limit
        self.gas_price_gwei = gas_price_gwei
        self.explorer_url = explorer_url.rstrip("/") if explorer_url else None
        self.log_level = log_level

    def to_dict(self) -> Dict:
        """Settings safe to log; the private key is never included"""
        return {
            'rpc_url': self.rpc_url,
            'signer': 'private key' if self.private_key else 'node account',
            'artifacts_dir': self.artifacts_dir,
            'tx_timeout': self.tx_timeout,
            'gas_limit': self.gas_limit,
            'gas_price_gwei': self.gas_price_gwei,
            'explorer_url': self.explorer_url,
        }


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _positive_number(name: str, value: Optional[str], cast):
    if value is None:
        return None
    try:
        number = cast(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {value!r}")
    return number


def load_config(env_file: Optional[str] = None) -> DeployConfig:
    """Build the configuration from environment variables and an optional .env file.

    Variables already present in the environment win over the .env file.
    """
    load_dotenv(env_file or find_dotenv(usecwd=True))

    log_level = (_env('LOG_LEVEL') or 'INFO').upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Unknown LOG_LEVEL: {log_level}")

    tx_timeout = _positive_number('TX_TIMEOUT', _env('TX_TIMEOUT'), float)

    return DeployConfig(
        rpc_url=_env('RPC_URL') or DEFAULT_RPC_URL,
        private_key=_env('PRIVATE_KEY'),
        artifacts_dir=_env('ARTIFACTS_DIR') or DEFAULT_ARTIFACTS_DIR,
        tx_timeout=tx_timeout if tx_timeout is not None else DEFAULT_TX_TIMEOUT,
        gas_limit=_positive_number('GAS_LIMIT', _env('GAS_LIMIT'), int),
        gas_price_gwei=_positive_number('GAS_PRICE_GWEI', _env('GAS_PRICE_GWEI'), float),
        explorer_url=_env('EXPLORER_URL'),
        log_level=log_level,
    )


def setup_logging(level: str = "INFO"):
    """Configure root logging to stderr"""
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )
