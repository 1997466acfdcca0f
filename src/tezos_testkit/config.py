"""Run configuration: config.json at the project root plus environment overrides.

The configuration is loaded at most once per session (RunConfigLoader) and the
USE_OLD_BUILD override is read once when the session is created, never per
contract.
"""

import json
import os
import threading
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tezos_testkit.errors import ConfigError
from tezos_testkit.signers import FaucetAccount

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = "config.json"
USE_OLD_BUILD_ENV = "USE_OLD_BUILD"


class RunConfig(BaseModel):
    """Parsed config.json. Keys are camelCase on disk."""

    auto_compile: bool = Field(default=True, alias="autoCompile")
    contracts_directory: str = Field(default="contracts", alias="contractsDirectory")
    output_directory: str = Field(default="build", alias="outputDirectory")
    ligo_version: str = Field(default="next", alias="ligoVersion")
    ligo_executable: str = Field(default="ligo", alias="ligoExecutable")
    dockerized: bool = False
    rpc_node: Optional[str] = Field(default=None, alias="rpcNode")
    default_signer: Optional[Union[FaucetAccount, str]] = Field(default=None, alias="defaultSigner")
    deployed_contracts: Dict[str, str] = Field(default_factory=dict, alias="deployedContracts")
    reuse_deployments: bool = Field(default=False, alias="reuseDeployments")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def load_config(path: Path) -> RunConfig:
    """Load and validate a config file.

    A missing file yields the defaults.

    Raises:
        ConfigError: If the file is not valid JSON or fails validation
    """
    if not path.exists():
        logger.debug("config_missing", path=str(path))
        return RunConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(
            f"ERROR: Unable to read {path.name}.",
            internal_details=f"{path}: {e}",
        ) from e

    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"ERROR: Invalid configuration in {path.name}: {e.error_count()} error(s).",
            internal_details=str(e),
        ) from e


class RunConfigLoader:
    """Memoized config loader: the first successful load is reused for the run."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._config: Optional[RunConfig] = None
        self._lock = threading.Lock()
        self.load_count = 0

    def get(self) -> RunConfig:
        with self._lock:
            if self._config is None:
                self._config = load_config(self.path)
                self.load_count += 1
            return self._config

    def preload(self, config: RunConfig) -> None:
        """Seed the memo, e.g. with a config object built in a test."""
        with self._lock:
            self._config = config


def use_old_build_from_env(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when USE_OLD_BUILD asks tests to run on stale builds."""
    env = os.environ if environ is None else environ
    return env.get(USE_OLD_BUILD_ENV, "").strip().lower() == "true"
