"""Build validation: classify a build record against the current source.

Pure functions only. Reading files and deciding what to do about a stale
build belong to the freshness resolver.
"""

from tezos_testkit.codes import ValidationOutcome
from tezos_testkit.kernel.build_record import BuildRecord
from tezos_testkit.kernel.hash_utils import strip_hash_prefix


def classify(source_path: str, current_hash: str, build_record: BuildRecord) -> ValidationOutcome:
    """Classify the relationship between a source and its build record.

    First match wins:
    1. Missing or empty code -> CODE_MISSING (fatal whatever the hash says)
    2. Different source path -> PATH_MISMATCH (the hash would compare unrelated files)
    3. Different hash -> HASH_MISMATCH
    4. Otherwise -> VALID

    Args:
        source_path: Project-relative path of the source being checked
        current_hash: Content hash of that source as it is now
        build_record: Record loaded from the build directory

    Returns:
        The ValidationOutcome
    """
    if not build_record.has_code:
        return ValidationOutcome.CODE_MISSING

    if build_record.source_path != source_path:
        return ValidationOutcome.PATH_MISMATCH

    if strip_hash_prefix(build_record.hash) != strip_hash_prefix(current_hash):
        return ValidationOutcome.HASH_MISMATCH

    return ValidationOutcome.VALID
