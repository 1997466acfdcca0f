"""Canonical JSON serialization for files written by tezos_testkit.

Build records and CLI reports go through here so that rewriting a record with
the same content produces the same bytes.
"""

import json
from pathlib import Path
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """
    Canonical JSON serialization.

    Rules:
    - Sorted keys
    - Stable separators (",", ":")
    - Non-ASCII kept as UTF-8
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )


def write_canonical_json(path: Path, obj: Any) -> None:
    """Write obj to path as canonical JSON followed by a newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(canonical_dumps(obj) + "\n", encoding="utf-8")
