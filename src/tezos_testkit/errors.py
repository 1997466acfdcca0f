"""Exception hierarchy for tezos_testkit.

- TestkitError: base for every error raised by the package
- ContractError: a contract's build could not be trusted or rebuilt
- DeploymentError: the network collaborator could not deliver a contract handle

Every error carries a user-facing message (what the failing test shows) and a
machine-readable ErrorCode. Optional internal details are logged through
structlog and never become part of str(err).
"""

from typing import Optional

import structlog

from tezos_testkit.codes import ErrorCode

logger = structlog.get_logger(__name__)


class TestkitError(Exception):
    """Base exception for tezos_testkit.

    Args:
        user_message: Message shown to the test author.
        internal_details: Optional technical details, logged only.
    """

    # Keep pytest from collecting this class when imported into a test module
    __test__ = False

    code: ErrorCode = ErrorCode.CONFIG_LOAD_ERROR

    def __init__(self, user_message: str, *, internal_details: Optional[str] = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.internal_details = internal_details

        if internal_details:
            logger.error(
                "testkit_error",
                error_type=self.__class__.__name__,
                code=self.code.value,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigError(TestkitError):
    """Raised when config.json cannot be read or does not validate."""

    code = ErrorCode.CONFIG_LOAD_ERROR


class ContractError(TestkitError):
    """Base for failures to trust or rebuild a single contract."""

    def __init__(self, contract_name: str, user_message: str, *, internal_details: Optional[str] = None) -> None:
        self.contract_name = contract_name
        super().__init__(user_message, internal_details=internal_details)


class SourceMissingError(ContractError):
    code = ErrorCode.SOURCE_MISSING

    def __init__(self, contract_name: str) -> None:
        super().__init__(
            contract_name,
            f'ERROR: Specified contract "{contract_name}" doesn\'t exist.',
        )


class SourceUnreadableError(ContractError):
    """The source exists but its bytes could not be read."""

    code = ErrorCode.SOURCE_UNREADABLE

    def __init__(self, contract_name: str, source_path: str, reason: str) -> None:
        self.source_path = source_path
        super().__init__(
            contract_name,
            f'ERROR: Unable to read source "{source_path}" of contract "{contract_name}": {reason}',
        )


class NeverCompiledError(ContractError):
    code = ErrorCode.NEVER_COMPILED

    def __init__(self, contract_name: str) -> None:
        super().__init__(
            contract_name,
            f'ERROR: Specified contract "{contract_name}" has never been compiled.',
        )


class MichelsonMissingError(ContractError):
    code = ErrorCode.MICHELSON_MISSING

    def __init__(self, contract_name: str) -> None:
        super().__init__(
            contract_name,
            f'ERROR: Invalid contract "{contract_name}", Michelson code is missing!',
        )


class SourcePathMismatchError(ContractError):
    """The build record was compiled from a different source file."""

    code = ErrorCode.SOURCE_PATH_MISMATCH

    def __init__(self, contract_name: str, expected_path: str, recorded_path: str) -> None:
        self.expected_path = expected_path
        self.recorded_path = recorded_path
        super().__init__(
            contract_name,
            f'ERROR: The compiled version for "{contract_name}" was compiled from a '
            f'different source path "{recorded_path}" (expected "{expected_path}")!',
        )


class OutdatedBuildError(ContractError):
    """The source changed since the last compilation and auto-compile is off."""

    code = ErrorCode.HASH_MISMATCH

    def __init__(self, contract_name: str) -> None:
        super().__init__(
            contract_name,
            f'ERROR: It seems the contract "{contract_name}" has been edited since last compilation.\n'
            'You can turn on "autoCompile" in config.json, compile it manually or ask the tests '
            "to be run on old version passing --old-build to the test command.",
        )


class MalformedCodeError(ContractError):
    code = ErrorCode.MALFORMED_CODE

    def __init__(self, contract_name: str, reason: str) -> None:
        self.reason = reason
        super().__init__(
            contract_name,
            f"ERROR: Failed to parse JSON-Michelson for contract {contract_name}, "
            f"given error was: {reason}",
        )


class CompilationError(ContractError):
    """Raised by the compiler collaborator when a contract fails to compile."""

    code = ErrorCode.COMPILATION_FAILED


class DeploymentError(TestkitError):
    """Base for failures talking to the network collaborator."""

    def __init__(self, contract_name: str, user_message: str, *, internal_details: Optional[str] = None) -> None:
        self.contract_name = contract_name
        super().__init__(user_message, internal_details=internal_details)


class DeploymentFetchError(DeploymentError):
    """A pinned contract address could not be resolved on the network."""

    code = ErrorCode.DEPLOYMENT_FETCH_FAILED

    def __init__(self, contract_name: str, address: str, reason: str) -> None:
        self.address = address
        super().__init__(
            contract_name,
            f'ERROR while accessing contract "{contract_name}" at "{address}":\n\n\t{reason}.',
        )


class DeploymentSubmitError(DeploymentError):
    """Origination was rejected or never confirmed."""

    code = ErrorCode.DEPLOYMENT_SUBMIT_FAILED

    def __init__(self, contract_name: str, reason: str) -> None:
        super().__init__(
            contract_name,
            f"ERROR while deploying contract {contract_name}:\n\n\t{reason}.\n\n"
            "Please review test's storage configuration and make sure it matches "
            "contract's expected values.",
        )
