"""pytest plugin: exposes a tezos_testkit Session to test modules.

Loaded through the `pytest11` entry point. The network and credential
collaborators are project specific; provide them by overriding the
`tezos_network` and `tezos_credentials` fixtures in conftest.py. Tests that
need a session are skipped until both are provided.
"""

from pathlib import Path
from typing import Optional

import pytest

from tezos_testkit.session import Session, to_bytes as _to_bytes


def pytest_addoption(parser):
    """Add the stale-build override and project root options."""
    group = parser.getgroup("tezos-testkit")
    group.addoption(
        "--old-build",
        action="store_true",
        default=False,
        help="Run tests on the existing builds even if contract sources changed."
    )
    group.addoption(
        "--tezos-cwd",
        default=None,
        help="Project root holding config.json and the contracts (defaults to rootdir)."
    )


def resolve_old_build_option(flag: bool) -> Optional[bool]:
    """--old-build forces the override on; otherwise USE_OLD_BUILD decides."""
    return True if flag else None


@pytest.fixture(scope="session")
def tezos_network():
    pytest.skip("no network client configured: override the tezos_network fixture in conftest.py")


@pytest.fixture(scope="session")
def tezos_credentials():
    pytest.skip("no credential provider configured: override the tezos_credentials fixture in conftest.py")


@pytest.fixture(scope="session")
def tezos_compiler():
    """Compiler used for auto-compilation; None selects LigoCompiler."""
    return None


@pytest.fixture(scope="session")
def tezos_session(pytestconfig, tezos_network, tezos_credentials, tezos_compiler) -> Session:
    root = pytestconfig.getoption("--tezos-cwd") or pytestconfig.rootpath
    return Session(
        Path(root),
        tezos_network,
        tezos_credentials,
        compiler=tezos_compiler,
        use_old_build=resolve_old_build_option(pytestconfig.getoption("--old-build")),
    )


@pytest.fixture
def deploy_contract(tezos_session):
    return tezos_session.deploy_contract


@pytest.fixture
def tezos(tezos_session):
    return tezos_session.client


@pytest.fixture
def to_bytes():
    return _to_bytes
