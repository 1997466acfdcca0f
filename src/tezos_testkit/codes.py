"""Outcome and error code constants for tezos_testkit.

These constants prevent stringly-typed codes and ensure client code
(tests, the CLI, report consumers) matches on the correct values.
"""

from enum import Enum


class ValidationOutcome(str, Enum):
    """Relationship between a build record and the source it claims to come from.

    Members are listed in the order the freshness resolver reacts to them.
    """

    VALID = "VALID"
    HASH_MISMATCH = "HASH_MISMATCH"
    PATH_MISMATCH = "PATH_MISMATCH"
    CODE_MISSING = "CODE_MISSING"


class ErrorCode(str, Enum):
    """Error codes carried by every TestkitError."""

    # Configuration
    CONFIG_LOAD_ERROR = "CONFIG_LOAD_ERROR"

    # Freshness checks (blocking, scoped to one contract)
    SOURCE_MISSING = "SOURCE_MISSING"
    SOURCE_UNREADABLE = "SOURCE_UNREADABLE"
    NEVER_COMPILED = "NEVER_COMPILED"
    MICHELSON_MISSING = "MICHELSON_MISSING"
    SOURCE_PATH_MISMATCH = "SOURCE_PATH_MISMATCH"
    HASH_MISMATCH = "HASH_MISMATCH"
    MALFORMED_CODE = "MALFORMED_CODE"

    # Compiler collaborator
    COMPILATION_FAILED = "COMPILATION_FAILED"

    # Network collaborator
    DEPLOYMENT_FETCH_FAILED = "DEPLOYMENT_FETCH_FAILED"
    DEPLOYMENT_SUBMIT_FAILED = "DEPLOYMENT_SUBMIT_FAILED"
