"""Pytest configuration for tests.

No sys.path hacks - tests import from the installed tezos_testkit package.
Collaborators (compiler, network, credentials) are replaced by in-memory fakes.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytest

from tezos_testkit._internal.io.artifact_store import ContractsBundle
from tezos_testkit.kernel.build_record import BuildRecord
from tezos_testkit.kernel.hash_utils import hash_source

COUNTER_SOURCE = """type storage is int

type parameter is
  Increment of int
| Reset

function main (const action : parameter; const s : storage) : list (operation) * storage is
  ((nil : list (operation)), case action of [
    Increment (n) -> s + n
  | Reset -> 0
  ])
"""

COUNTER_MICHELSON = [
    {"prim": "parameter", "args": [{"prim": "or", "args": [{"prim": "int"}, {"prim": "unit"}]}]},
    {"prim": "storage", "args": [{"prim": "int"}]},
    {"prim": "code", "args": [[
        {"prim": "UNPAIR"},
        {"prim": "IF_LEFT", "args": [[{"prim": "ADD"}], [{"prim": "DROP", "args": [{"int": "2"}]}, {"prim": "PUSH", "args": [{"prim": "int"}, {"int": "0"}]}]]},
        {"prim": "NIL", "args": [{"prim": "operation"}]},
        {"prim": "PAIR"},
    ]]},
]

RECOMPILED_MICHELSON = [
    {"prim": "parameter", "args": [{"prim": "unit"}]},
    {"prim": "storage", "args": [{"prim": "int"}]},
    {"prim": "code", "args": [[{"prim": "CDR"}, {"prim": "NIL", "args": [{"prim": "operation"}]}, {"prim": "PAIR"}]]},
]


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class Project:
    """A contracts project laid out under a temporary root."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write_config(self, **config: Any) -> None:
        write_json(self.root / "config.json", config)

    def write_source(self, name: str, source: Union[str, bytes] = COUNTER_SOURCE, ext: str = ".ligo") -> str:
        path = self.root / "contracts" / f"{name}{ext}"
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(source, bytes):
            path.write_bytes(source)
        else:
            path.write_text(source, encoding="utf-8")
        return f"contracts/{name}{ext}"

    def write_build(
        self,
        name: str,
        source: Union[str, bytes] = COUNTER_SOURCE,
        source_path: Optional[str] = None,
        michelson: Any = COUNTER_MICHELSON,
    ) -> None:
        record = {
            "sourcePath": source_path or f"contracts/{name}.ligo",
            "hash": hash_source(source),
        }
        if michelson is not None:
            record["michelson"] = michelson if isinstance(michelson, str) else json.dumps(michelson)
        write_json(self.root / "build" / f"{name}.json", record)

    def add_compiled(self, name: str, source: Union[str, bytes] = COUNTER_SOURCE) -> None:
        self.write_source(name, source)
        self.write_build(name, source)


class CountingBundle(ContractsBundle):
    """ContractsBundle that counts build-file reads."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.build_reads = 0

    def read_build_file(self, contract_name: str) -> BuildRecord:
        self.build_reads += 1
        return super().read_build_file(contract_name)


class FakeCompiler:
    """Records compile calls and writes a fresh build record for the current source."""

    def __init__(self, bundle: ContractsBundle, michelson: Any = RECOMPILED_MICHELSON, error: Optional[Exception] = None) -> None:
        self.bundle = bundle
        self.michelson = michelson
        self.error = error
        self.calls: List[str] = []

    def compile(self, contract_name: str) -> None:
        self.calls.append(contract_name)
        if self.error is not None:
            raise self.error
        source_path = self.bundle.get_contract_file(contract_name)
        self.bundle.write_build_file(contract_name, BuildRecord(
            source_path=source_path,
            hash=self.bundle.generate_hash(self.bundle.read_contract(contract_name)),
            michelson=json.dumps(self.michelson),
        ))


class FakeContract:
    def __init__(self, address: str, code: Any = None, storage: Any = None) -> None:
        self.address = address
        self.code = code
        self.storage = storage


class FakePendingOrigination:
    def __init__(self, network: "FakeNetwork", code: Any, storage: Any) -> None:
        self.network = network
        self.code = code
        self.storage = storage

    def confirm(self) -> FakeContract:
        if self.network.confirm_error is not None:
            raise self.network.confirm_error
        self.network.originated += 1
        return FakeContract(f"KT1Fake{self.network.originated:04d}", self.code, self.storage)


class FakeNetwork:
    def __init__(self) -> None:
        self.fetched: List[str] = []
        self.originations: List[Dict[str, Any]] = []
        self.originated = 0
        self.unknown_addresses: set = set()
        self.originate_error: Optional[Exception] = None
        self.confirm_error: Optional[Exception] = None

    def fetch_contract(self, address: str) -> FakeContract:
        self.fetched.append(address)
        if address in self.unknown_addresses:
            raise RuntimeError(f"Http error response: (404) contract {address} not found")
        return FakeContract(address)

    def originate(self, code: Any, storage: Any) -> FakePendingOrigination:
        self.originations.append({"code": code, "storage": storage})
        if self.originate_error is not None:
            raise self.originate_error
        return FakePendingOrigination(self, code, storage)


class FakeCredentials:
    def __init__(self) -> None:
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    def activate_faucet_identity(self, account) -> None:
        if self.error is not None:
            raise self.error
        self.calls.append(("activate", account.pkh))

    def set_direct_signer(self, secret_key: str) -> None:
        if self.error is not None:
            raise self.error
        self.calls.append(("direct", secret_key))


@pytest.fixture
def project(tmp_path):
    return Project(tmp_path)


@pytest.fixture
def bundle(tmp_path):
    return CountingBundle(tmp_path)


@pytest.fixture
def compiler(bundle):
    return FakeCompiler(bundle)


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def credentials():
    return FakeCredentials()


@pytest.fixture
def faucet_account():
    from tezos_testkit.signers import FaucetAccount

    return FaucetAccount(
        mnemonic=["cart", "script", "ribbon", "usual", "fossil"],
        secret="0d6c5a5bd1b5a1a8c4bd1f7d0d5b39a1e4d6ce49",
        amount="59133416179",
        pkh="tz1VSUr8wwNhLAzempoch5d6hLRiTh8Cjcjb",
        password="Wkcqw0uN3R",
        email="qqgbgbgt.wlqlxpqm@tezos.example.org",
    )
