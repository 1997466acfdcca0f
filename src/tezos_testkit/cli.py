"""tezos-testkit CLI: check build freshness outside of a test run."""

import argparse
import logging
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import List, Optional

import structlog

from tezos_testkit.errors import TestkitError


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        # stderr is looked up per logger so stdout stays clean for --json
        logger_factory=lambda *args: structlog.PrintLogger(file=sys.stderr),
    )


def _check_contracts(args) -> int:
    from ._internal.canonical_json import canonical_dumps
    from .session import Workspace

    workspace = Workspace(args.cwd, use_old_build=True if args.old_build else None)
    if args.no_compile:
        workspace.config_loader.preload(workspace.config.model_copy(update={"auto_compile": False}))

    results = []
    for name in args.contracts:
        try:
            code = workspace.ensure_fresh(name)
            results.append({"contract": name, "ok": True, "instructions": len(code)})
        except TestkitError as e:
            results.append({
                "contract": name,
                "ok": False,
                "code": e.code.value,
                "message": e.user_message,
            })

    if args.json:
        print(canonical_dumps(results))
    elif not args.quiet:
        for result in results:
            print(f"[{'OK' if result['ok'] else 'FAILED'}] {result['contract']}")
            print(f"  Status: {'OK' if result['ok'] else 'FAILED'}")
            if result["ok"]:
                print(f"  Instructions: {result['instructions']}")
            else:
                print(f"  Code: {result['code']}")
                print(f"  Message: {result['message']}")

    return 0 if all(r["ok"] for r in results) else 1


def _hash_contract(args) -> int:
    from .session import Workspace

    workspace = Workspace(args.cwd)
    source_path = workspace.bundle.get_contract_file(args.contract)
    if not workspace.bundle.exists(source_path):
        print(f'Error: source for "{args.contract}" not found at {source_path}', file=sys.stderr)
        return 1
    print(workspace.bundle.generate_hash(workspace.bundle.read_contract(args.contract)))
    return 0


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point for tezos-testkit commands."""
    try:
        testkit_version = get_version("tezos-testkit")
    except PackageNotFoundError:
        testkit_version = "dev"

    parser = argparse.ArgumentParser(
        prog="tezos-testkit",
        description="tezos-testkit: build freshness checks for Tezos contract tests"
    )
    parser.add_argument("--version", action="version", version=f"tezos-testkit {testkit_version}")
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--cwd",
        type=Path,
        default=Path("."),
        help="Project root holding config.json (defaults to the current directory)"
    )
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every check to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser(
        "check",
        help="Verify that contract builds match their sources",
        parents=[parent_parser]
    )
    check_parser.add_argument("contracts", nargs="+", help="Contract names")
    check_parser.add_argument(
        "--old-build",
        action="store_true",
        help="Accept builds whose source changed since compilation"
    )
    check_parser.add_argument(
        "--no-compile",
        action="store_true",
        help="Never recompile, even if autoCompile is set in config.json"
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as canonical JSON"
    )

    hash_parser = subparsers.add_parser(
        "hash",
        help="Print the content hash of a contract source",
        parents=[parent_parser]
    )
    hash_parser.add_argument("contract", help="Contract name")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose)

    try:
        if args.command == "check":
            status = _check_contracts(args)
        else:
            status = _hash_contract(args)
    except TestkitError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if status != 0:
        sys.exit(status)


if __name__ == "__main__":
    main()
