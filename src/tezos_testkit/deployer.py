"""Deployment coordinator: hand tests a live contract, originating only when needed."""

import threading
from enum import Enum
from typing import Any, Dict, Optional, Set

import structlog

from tezos_testkit.collaborators import ContractHandle, CredentialProvider, NetworkClient
from tezos_testkit.config import RunConfigLoader
from tezos_testkit.errors import DeploymentFetchError, DeploymentSubmitError
from tezos_testkit.resolver import FreshnessResolver
from tezos_testkit.signers import FaucetAccount, Signer, signer_identity

logger = structlog.get_logger(__name__)


class SignerState(str, Enum):
    UNSET = "UNSET"
    ACTIVATING = "ACTIVATING"
    ACTIVE = "ACTIVE"


class SignerLatch:
    """Tracks which signer the credential collaborator currently uses.

    UNSET -> ACTIVATING -> ACTIVE. Activations serialize on a lock; asking for
    the signer that is already ACTIVE is a no-op. A faucet account is activated
    on chain at most once, later switches back to it reuse its secret key.
    """

    def __init__(self, credentials: CredentialProvider) -> None:
        self.credentials = credentials
        self.state = SignerState.UNSET
        self.active_identity: Optional[str] = None
        self._activated_faucets: Set[str] = set()
        self._default_established = False
        self._lock = threading.Lock()

    def activate(self, signer: Signer) -> bool:
        """Make `signer` the active signer.

        Returns:
            True if the credential collaborator was called, False if already active
        """
        with self._lock:
            return self._activate_locked(signer)

    def establish_default(self, signer: Signer) -> bool:
        """Activate the default signer the first time only.

        Later calls are no-ops even after a caller switched to another signer.
        A failed activation leaves the default unestablished.
        """
        with self._lock:
            if self._default_established:
                return False
            activated = self._activate_locked(signer)
            self._default_established = True
            return activated

    def _activate_locked(self, signer: Signer) -> bool:
        identity = signer_identity(signer)
        if self.state is SignerState.ACTIVE and self.active_identity == identity:
            return False

        previous = self.state
        self.state = SignerState.ACTIVATING
        try:
            self._apply(signer)
        except Exception:
            self.state = previous
            raise

        self.state = SignerState.ACTIVE
        self.active_identity = identity
        logger.info(
            "signer_activated",
            kind="faucet" if isinstance(signer, FaucetAccount) else "secret_key",
        )
        return True

    def _apply(self, signer: Signer) -> None:
        if isinstance(signer, FaucetAccount):
            if signer.pkh in self._activated_faucets:
                self.credentials.set_direct_signer(signer.secret)
            else:
                self.credentials.activate_faucet_identity(signer)
                self._activated_faucets.add(signer.pkh)
        else:
            self.credentials.set_direct_signer(signer)


class DeploymentCoordinator:
    """Deploys contracts for tests.

    Args:
        resolver: Provides validated Michelson code
        network: Network collaborator used to fetch and originate contracts
        signers: Latch over the credential collaborator
        config_loader: Memoized run configuration
        registry: Deployed-contract registry (name -> address), pinned entries win
        default_signer: Signer established once before the first deployment
    """

    def __init__(
        self,
        resolver: FreshnessResolver,
        network: NetworkClient,
        signers: SignerLatch,
        config_loader: RunConfigLoader,
        registry: Optional[Dict[str, str]] = None,
        default_signer: Optional[Signer] = None,
    ) -> None:
        self.resolver = resolver
        self.network = network
        self.signers = signers
        self.config_loader = config_loader
        self.registry: Dict[str, str] = {} if registry is None else registry
        self.default_signer = default_signer

    def _ensure_default_signer(self) -> None:
        if self.default_signer is not None:
            self.signers.establish_default(self.default_signer)

    def deploy(self, contract_name: str, storage: Any, signer: Optional[Signer] = None) -> ContractHandle:
        """Return a live handle for `contract_name`.

        A registry entry pins the contract to an existing address and skips
        validation entirely. Otherwise the build is checked for freshness and
        originated with `storage`, signed by `signer` (default signer if None).

        Raises:
            ContractError: The build could not be trusted (propagated unchanged)
            DeploymentFetchError: A pinned address could not be resolved
            DeploymentSubmitError: Origination failed
        """
        self._ensure_default_signer()

        address = self.registry.get(contract_name)
        if address:
            logger.info("contract_pinned", contract=contract_name, address=address)
            try:
                return self.network.fetch_contract(address)
            except Exception as e:
                raise DeploymentFetchError(contract_name, address, str(e)) from e

        config = self.config_loader.get()
        code = self.resolver.ensure_fresh(contract_name)

        deployer = signer if signer is not None else self.default_signer
        if deployer is not None:
            self.signers.activate(deployer)

        try:
            operation = self.network.originate(code, storage)
            contract = operation.confirm()
        except Exception as e:
            raise DeploymentSubmitError(contract_name, str(e)) from e

        logger.info("contract_originated", contract=contract_name, address=contract.address)
        if config.reuse_deployments:
            self.registry[contract_name] = contract.address
        return contract
