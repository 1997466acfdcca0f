"""CLI tests for the check and hash subcommands."""

import json

import pytest

from tezos_testkit import cli
from tezos_testkit.kernel.hash_utils import hash_source

from conftest import COUNTER_SOURCE


def _run_cli(args):
    return cli.main(args)


def test_check_ok(project, capsys):
    project.add_compiled("Counter")
    _run_cli(["check", "Counter", "--cwd", str(project.root)])
    out = capsys.readouterr().out
    assert "[OK] Counter" in out
    assert "Status: OK" in out


def test_check_failure_exits_1(project, capsys):
    project.add_compiled("Counter")
    with pytest.raises(SystemExit) as excinfo:
        _run_cli(["check", "Counter", "Missing", "--cwd", str(project.root)])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "Status: FAILED" in out
    assert "Code: SOURCE_MISSING" in out


def test_check_no_compile_reports_outdated(project, capsys):
    project.write_source("Counter", COUNTER_SOURCE + "// edited\n")
    project.write_build("Counter")
    project.write_config(autoCompile=True)

    with pytest.raises(SystemExit):
        _run_cli(["check", "Counter", "--no-compile", "--cwd", str(project.root)])
    out = capsys.readouterr().out
    assert "Code: HASH_MISMATCH" in out


def test_check_old_build(project, capsys, monkeypatch):
    monkeypatch.delenv("USE_OLD_BUILD", raising=False)
    project.write_source("Counter", COUNTER_SOURCE + "// edited\n")
    project.write_build("Counter")
    _run_cli(["check", "Counter", "--old-build", "--cwd", str(project.root)])
    assert "Status: OK" in capsys.readouterr().out


def test_check_json(project, capsys):
    project.add_compiled("Counter")
    project.write_source("Broken")
    project.write_build("Broken", michelson=None)

    with pytest.raises(SystemExit):
        _run_cli(["check", "Counter", "Broken", "--json", "--cwd", str(project.root)])
    results = json.loads(capsys.readouterr().out)
    assert results[0] == {"contract": "Counter", "instructions": 3, "ok": True}
    assert results[1]["ok"] is False
    assert results[1]["code"] == "MICHELSON_MISSING"


def test_check_invalid_config(project, capsys):
    (project.root / "config.json").write_text("{", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        _run_cli(["check", "Counter", "--cwd", str(project.root)])
    assert excinfo.value.code == 1
    assert "Unable to read config.json" in capsys.readouterr().err


def test_hash(project, capsys):
    project.write_source("Counter")
    _run_cli(["hash", "Counter", "--cwd", str(project.root)])
    assert capsys.readouterr().out.strip() == hash_source(COUNTER_SOURCE)


def test_hash_missing_source(project, capsys):
    with pytest.raises(SystemExit) as excinfo:
        _run_cli(["hash", "Counter", "--cwd", str(project.root)])
    assert excinfo.value.code == 1


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        _run_cli([])
    assert excinfo.value.code == 1
    assert "usage: tezos-testkit" in capsys.readouterr().out


def test_check_and_hash_non_utf8_source(project, capsys):
    raw = b"// caf\xe9\n" + COUNTER_SOURCE.encode("utf-8")
    project.add_compiled("Counter", raw)

    _run_cli(["check", "Counter", "--cwd", str(project.root)])
    assert "Status: OK" in capsys.readouterr().out

    _run_cli(["hash", "Counter", "--cwd", str(project.root)])
    assert capsys.readouterr().out.strip() == hash_source(raw)
