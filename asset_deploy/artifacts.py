"""
Contract Artifacts
Loads compiled Hardhat artifacts (ABI and bytecode) by contract name
"""

import json
import logging
import os
from typing import Dict, List, Optional

from asset_deploy.errors import ArtifactNotFoundError, DeploymentError

logger = logging.getLogger(__name__)


class ContractArtifact:
    def __init__(self, contract_name: str, abi: List[Dict], bytecode: str, path: Optional[str] = None):
        self.contract_name = contract_name
        self.abi = abi
        self.bytecode = bytecode
        self.path = path

    @property
    def is_deployable(self) -> bool:
        # interfaces and abstract contracts compile to empty bytecode
        return self.bytecode not in ("", "0x")

    def __str__(self):
        return self.contract_name


def _find_artifact_path(contract_name: str, artifacts_dir: str) -> Optional[str]:
    default_path = os.path.join(artifacts_dir, "contracts", f"{contract_name}.sol", f"{contract_name}.json")
    if os.path.isfile(default_path):
        return default_path

    file_name = f"{contract_name}.json"
    for root, _dirs, files in os.walk(artifacts_dir):
        if file_name in files:
            return os.path.join(root, file_name)
    return None


def load_artifact(contract_name: str, artifacts_dir: str) -> ContractArtifact:
    """Load the compiled artifact of a contract"""
    if not os.path.isdir(artifacts_dir):
        raise ArtifactNotFoundError(contract_name, artifacts_dir)

    path = _find_artifact_path(contract_name, artifacts_dir)
    if path is None:
        raise ArtifactNotFoundError(contract_name, artifacts_dir)

    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise DeploymentError(f"Failed to read artifact {path}: {e}") from e

    if not isinstance(data, dict) or 'abi' not in data or 'bytecode' not in data:
        raise DeploymentError(f"Artifact {path} has no abi or bytecode")

    name = data.get('contractName', contract_name)
    if name != contract_name:
        raise DeploymentError(f"Artifact {path} contains {name}, expected {contract_name}")

    logger.debug(f"Loaded artifact for {contract_name} from {path}")
    return ContractArtifact(contract_name, data['abi'], data['bytecode'], path)
