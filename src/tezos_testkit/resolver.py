"""Freshness resolver: turn a contract name into trusted, parsed Michelson.

Validation results are cached per contract for the rest of the run. A failed
check is remembered as FAILED, never as a result: the next call runs every
check again and raises again until the underlying problem is fixed.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import structlog

from tezos_testkit.codes import ValidationOutcome
from tezos_testkit.collaborators import ArtifactStore, Compiler, MichelsonCode
from tezos_testkit.config import RunConfigLoader
from tezos_testkit.errors import (
    MalformedCodeError,
    MichelsonMissingError,
    NeverCompiledError,
    OutdatedBuildError,
    SourceMissingError,
    SourcePathMismatchError,
)
from tezos_testkit.kernel.build_record import BuildRecord
from tezos_testkit.kernel.validator import classify

logger = structlog.get_logger(__name__)


class CheckStatus(str, Enum):
    NOT_CHECKED = "NOT_CHECKED"
    FAILED = "FAILED"
    VALID = "VALID"


@dataclass(frozen=True)
class CheckState:
    """Entry of the checked-contract cache. `code` is set only when VALID."""

    status: CheckStatus
    code: Optional[MichelsonCode] = None

    @classmethod
    def valid(cls, code: MichelsonCode) -> "CheckState":
        return cls(CheckStatus.VALID, code)


NOT_CHECKED = CheckState(CheckStatus.NOT_CHECKED)
FAILED = CheckState(CheckStatus.FAILED)


def parse_michelson(contract_name: str, payload: str) -> MichelsonCode:
    """Parse the JSON-Michelson stored in a build record.

    Raises:
        MalformedCodeError: If the payload is not a JSON array of instructions
    """
    try:
        code = json.loads(payload)
    except json.JSONDecodeError as e:
        raise MalformedCodeError(contract_name, str(e)) from e

    if not isinstance(code, list):
        raise MalformedCodeError(
            contract_name,
            f"expected a list of Michelson instructions, got {type(code).__name__}",
        )
    return code


class FreshnessResolver:
    """Validates builds and owns the checked-contract cache.

    Args:
        store: Where sources and build records live
        compiler: Invoked when a stale build may be recompiled
        config_loader: Memoized run configuration (read only on a stale build)
        use_old_build: Run-wide override accepting stale builds as they are
    """

    def __init__(
        self,
        store: ArtifactStore,
        compiler: Compiler,
        config_loader: RunConfigLoader,
        use_old_build: bool = False,
    ) -> None:
        self.store = store
        self.compiler = compiler
        self.config_loader = config_loader
        self.use_old_build = use_old_build
        self._checked: Dict[str, CheckState] = {}

    def state(self, contract_name: str) -> CheckState:
        return self._checked.get(contract_name, NOT_CHECKED)

    def ensure_fresh(self, contract_name: str) -> MichelsonCode:
        """Return the parsed code of a contract whose build matches its source.

        Raises:
            ContractError: One subclass per unrecoverable condition
            CompilationError: If auto-compilation was attempted and failed (also a ContractError)
        """
        cached = self.state(contract_name)
        if cached.status is CheckStatus.VALID:
            logger.debug("contract_check_cached", contract=contract_name)
            return cached.code

        # Stays FAILED unless every step below succeeds
        self._checked[contract_name] = FAILED

        source_path = self.store.get_contract_file(contract_name)
        if not self.store.exists(source_path):
            raise SourceMissingError(contract_name)

        if not self.store.build_file_exists(contract_name):
            raise NeverCompiledError(contract_name)

        current_hash = self.store.generate_hash(self.store.read_contract(contract_name))
        build_record = self.store.read_build_file(contract_name)

        outcome = classify(source_path, current_hash, build_record)
        if outcome is ValidationOutcome.CODE_MISSING:
            raise MichelsonMissingError(contract_name)
        if outcome is ValidationOutcome.PATH_MISMATCH:
            raise SourcePathMismatchError(contract_name, source_path, build_record.source_path)
        if outcome is ValidationOutcome.HASH_MISMATCH:
            build_record = self._handle_outdated_build(contract_name, build_record)

        code = parse_michelson(contract_name, build_record.michelson or "")

        self._checked[contract_name] = CheckState.valid(code)
        logger.info("contract_validated", contract=contract_name, outcome=outcome.value)
        return code

    def _handle_outdated_build(self, contract_name: str, build_record: BuildRecord) -> BuildRecord:
        logger.info("build_outdated", contract=contract_name)

        if self.use_old_build:
            logger.warning("using_old_build", contract=contract_name)
            return build_record

        config = self.config_loader.get()
        if not config.auto_compile:
            raise OutdatedBuildError(contract_name)

        logger.info("auto_compile_started", contract=contract_name)
        self.compiler.compile(contract_name)

        # The compiler just wrote this record; it is not classified again
        fresh_record = self.store.read_build_file(contract_name)
        if not fresh_record.has_code:
            raise MichelsonMissingError(contract_name)
        return fresh_record
