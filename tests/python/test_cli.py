"""Tests for the dscript command-line interface."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from dscript.orchestrator import cli


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_compile_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write(tmp_path, "main.d", "fn add(a, b): number\nreturn 5\n}\n")
    assert cli.main(["compile", str(source)]) == 0
    assert (tmp_path / "main.js").read_text(encoding="utf-8") == "function add(a, b)\nreturn 5\n}\n"
    assert "Compiled" in capsys.readouterr().out


def test_compile_command_with_explicit_output(tmp_path: Path) -> None:
    source = _write(tmp_path, "main.d", "let a : number = 1\n")
    target = tmp_path / "dist" / "bundle.js"
    assert cli.main(["compile", str(source), "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == "let a = 1\n"


def test_type_errors_are_printed_and_fail(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "bad.d", "let x : number = \"hello\"\nconst y : string = true\n")
    assert cli.main(["compile", str(source)]) == 1
    err = capsys.readouterr().err.splitlines()
    assert err == [
        "Type Error on line 1: x is declared as 'number' but assigned a 'string'",
        "Type Error on line 2: y is declared as 'string' but assigned a 'boolean'",
    ]
    assert not (tmp_path / "bad.js").exists()


def test_check_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    good = _write(tmp_path, "good.d", "let a : any = 1\n")
    bad = _write(tmp_path, "bad.d", "fn f(): string\nreturn 1\n}\n")
    assert cli.main(["check", str(good)]) == 0
    assert cli.main(["check", str(bad)]) == 1
    assert "f is declared as 'string' but returns a 'number'" in capsys.readouterr().err


def test_run_command_reports_failing_exit_status(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "prog.d", "import sys\nsys.exit(2)\n")
    argv = [
        "--set",
        f"runtime.command={[sys.executable]!r}",
        "--set",
        f"runtime.temp_root={str(tmp_path)!r}",
        "run",
        str(source),
    ]
    assert cli.main(argv) == 2
    assert "Execution failed with exit code 2" in capsys.readouterr().err


def test_missing_source_file_is_an_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["check", str(tmp_path / "nope.d")]) == 1
    assert capsys.readouterr().err.startswith("[dscript] error:")


def test_parse_overrides() -> None:
    overrides = cli._parse_overrides(["runtime.timeout=2.5", "output.suffix=.cjs"])
    assert overrides == {"runtime": {"timeout": 2.5}, "output": {"suffix": ".cjs"}}
    with pytest.raises(ValueError):
        cli._parse_overrides(["runtime.timeout"])


def test_subcommand_is_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])


def test_zero_timeout_override_is_reported(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "prog.d", "print(1)\n")
    assert cli.main(["--set", "runtime.timeout=0", "run", str(source)]) == 1
    assert "runtime.timeout must be positive" in capsys.readouterr().err
