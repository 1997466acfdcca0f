"""Per-run session: the single owner of every cache the core keeps.

A Session is built once per test run (the pytest plugin does it in a
session-scoped fixture). Its checked-contract cache, deployed-contract
registry, config memo and signer latch start empty and die with it.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from tezos_testkit._internal.io.artifact_store import ContractsBundle
from tezos_testkit.collaborators import (
    Compiler,
    ContractHandle,
    CredentialProvider,
    MichelsonCode,
    NetworkClient,
)
from tezos_testkit.compiler import LigoCompiler
from tezos_testkit.config import CONFIG_FILENAME, RunConfig, RunConfigLoader, use_old_build_from_env
from tezos_testkit.deployer import DeploymentCoordinator, SignerLatch
from tezos_testkit.resolver import FreshnessResolver
from tezos_testkit.signers import Signer


def to_bytes(text: str) -> str:
    """Encode text the way LIGO's bytes literals expect it: UTF-8, lowercase hex."""
    return text.encode("utf-8").hex()


class Workspace:
    """Freshness checking for one project root, without any network.

    Args:
        root: Project root holding config.json, sources and builds
        compiler: Compiler collaborator; LigoCompiler when omitted
        config: Use this configuration instead of reading config.json
        use_old_build: Stale-build override; read from USE_OLD_BUILD when None
        environ: Environment used for the override (os.environ when None)
    """

    def __init__(
        self,
        root: Union[str, Path],
        compiler: Optional[Compiler] = None,
        config: Optional[RunConfig] = None,
        use_old_build: Optional[bool] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.root = Path(root)
        self.config_loader = RunConfigLoader(self.root / CONFIG_FILENAME)
        if config is not None:
            self.config_loader.preload(config)
        self.config = self.config_loader.get()

        self.use_old_build = use_old_build_from_env(environ) if use_old_build is None else use_old_build

        self.bundle = ContractsBundle(
            self.root,
            contracts_directory=self.config.contracts_directory,
            output_directory=self.config.output_directory,
        )
        self.compiler = compiler if compiler is not None else LigoCompiler(self.bundle, self.config)
        self.resolver = FreshnessResolver(
            self.bundle,
            self.compiler,
            self.config_loader,
            use_old_build=self.use_old_build,
        )

    def ensure_fresh(self, contract_name: str) -> MichelsonCode:
        return self.resolver.ensure_fresh(contract_name)


class Session(Workspace):
    """Workspace plus deployment: what a test run talks to.

    Args:
        root: Project root
        network: Network collaborator, exposed to tests as `client`
        credentials: Credential collaborator behind the signer latch
        **kwargs: Passed to Workspace
    """

    def __init__(
        self,
        root: Union[str, Path],
        network: NetworkClient,
        credentials: CredentialProvider,
        **kwargs: Any,
    ) -> None:
        super().__init__(root, **kwargs)
        self.client = network
        self.signers = SignerLatch(credentials)
        self.registry = dict(self.config.deployed_contracts)
        self.deployer = DeploymentCoordinator(
            self.resolver,
            network,
            self.signers,
            self.config_loader,
            registry=self.registry,
            default_signer=self.config.default_signer,
        )

    def deploy_contract(self, contract_name: str, storage: Any, signer: Optional[Signer] = None) -> ContractHandle:
        return self.deployer.deploy(contract_name, storage, signer)

    to_bytes = staticmethod(to_bytes)
