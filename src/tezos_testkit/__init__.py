"""tezos_testkit: build-freshness verification and deployment caching for contract tests."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("tezos-testkit")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from tezos_testkit.codes import ErrorCode, ValidationOutcome
from tezos_testkit.errors import ContractError, DeploymentError, TestkitError
from tezos_testkit.kernel.validator import classify
from tezos_testkit.session import Session, Workspace, to_bytes
from tezos_testkit.signers import FaucetAccount

__all__ = [
    "__version__",
    "classify",
    "to_bytes",
    "Session",
    "Workspace",
    "FaucetAccount",
    "ValidationOutcome",
    "ErrorCode",
    "TestkitError",
    "ContractError",
    "DeploymentError",
]
