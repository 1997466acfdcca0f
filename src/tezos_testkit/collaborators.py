"""Interfaces of the external collaborators the core drives.

The core never talks to a node, a key store or a compiler directly. Hosts pass
objects satisfying these protocols to Session; tests pass in-memory fakes.
"""

from typing import Any, Dict, List, Protocol, Union

from tezos_testkit.kernel.build_record import BuildRecord
from tezos_testkit.signers import FaucetAccount

# Parsed JSON-Michelson: a sequence of opaque instruction records
MichelsonCode = List[Dict[str, Any]]


class ContractHandle(Protocol):
    """A live contract on the network."""

    address: str


class PendingOrigination(Protocol):
    def confirm(self) -> ContractHandle:
        """Wait for on-chain confirmation and return the originated contract."""
        ...


class NetworkClient(Protocol):
    def fetch_contract(self, address: str) -> ContractHandle:
        ...

    def originate(self, code: MichelsonCode, storage: Any) -> PendingOrigination:
        ...


class CredentialProvider(Protocol):
    def activate_faucet_identity(self, account: FaucetAccount) -> None:
        """Activate a faucet account on chain and make it the signer."""
        ...

    def set_direct_signer(self, secret_key: str) -> None:
        ...


class Compiler(Protocol):
    def compile(self, contract_name: str) -> None:
        """Compile the contract and refresh its build record. Raises on failure."""
        ...


class ArtifactStore(Protocol):
    def exists(self, path: str) -> bool:
        ...

    def get_contract_file(self, contract_name: str) -> str:
        ...

    def read_contract(self, contract_name: str) -> bytes:
        ...

    def build_file_exists(self, contract_name: str) -> bool:
        ...

    def read_build_file(self, contract_name: str) -> BuildRecord:
        ...

    def generate_hash(self, content: Union[str, bytes]) -> str:
        ...
