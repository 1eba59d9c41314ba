from __future__ import annotations

import json
from pathlib import Path

import pytest

from relpr.core.result import Err, Ok, Result
from relpr.output.console import MockConsole, Style
from relpr.platform.process import ProcessError
from relpr.services.release import change_tool as tool_mod
from relpr.services.release.change_tool import CHANGESETS_CLI_DIR, bump, changesets_bump_command, publish


def _install_cli(root: Path, version: str) -> Path:
    cli_dir = root / CHANGESETS_CLI_DIR
    cli_dir.mkdir(parents=True)
    (cli_dir / "package.json").write_text(json.dumps({"name": "@changesets/cli", "version": version}))
    return cli_dir


class RecordingRun:
    def __init__(self, result: Result[str, ProcessError] | None = None) -> None:
        self.calls: list[tuple[list[str], Path]] = []
        self._result = result if result is not None else Ok("")

    def __call__(
        self, cmd: list[str], cwd: Path, env: dict[str, str] | None = None, *, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        del env, timeout
        self.calls.append((cmd, cwd))
        return self._result


def test_changesets_2_uses_version(tmp_path: Path) -> None:
    cli_dir = _install_cli(tmp_path, "2.27.1")
    assert changesets_bump_command(tmp_path) == Ok(["node", str(cli_dir / "bin.js"), "version"])


def test_changesets_1_uses_bump(tmp_path: Path) -> None:
    cli_dir = _install_cli(tmp_path, "1.4.0")
    assert changesets_bump_command(tmp_path) == Ok(["node", str(cli_dir / "bin.js"), "bump"])


def test_missing_cli(tmp_path: Path) -> None:
    result = changesets_bump_command(tmp_path)
    assert isinstance(result, Err)
    assert result.error.kind == "config_error"
    assert result.error.hint == "Have you forgotten to install @changesets/cli?"


def test_bump_with_script(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    fake = RecordingRun()
    monkeypatch.setattr(tool_mod, "run_process", fake)
    console = MockConsole()

    result = bump(tmp_path, script="pnpm run 'version packages'", console=console)

    assert result == Ok(None)
    assert fake.calls == [(["pnpm", "run", "version packages"], tmp_path)]
    assert console.find("pnpm run version packages")[0].style == Style.DIM


def test_bump_defaults_to_changesets(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    cli_dir = _install_cli(tmp_path, "2.0.0")
    fake = RecordingRun()
    monkeypatch.setattr(tool_mod, "run_process", fake)

    assert bump(tmp_path, script=None, console=MockConsole()) == Ok(None)
    assert fake.calls[0][0] == ["node", str(cli_dir / "bin.js"), "version"]


def test_bump_failure_is_tool_failed(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    error = ProcessError(command=("pnpm", "bump"), returncode=1, stdout="", stderr="no changesets\n")
    monkeypatch.setattr(tool_mod, "run_process", RecordingRun(Err(error)))

    result = bump(tmp_path, script="pnpm bump", console=MockConsole())

    assert isinstance(result, Err)
    assert result.error.kind == "tool_failed"
    assert result.error.hint == "no changesets"


def test_invalid_script(tmp_path: Path) -> None:
    result = bump(tmp_path, script="pnpm 'unterminated", console=MockConsole())
    assert isinstance(result, Err)
    assert result.error.kind == "config_error"


def test_publish_returns_stdout(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    stdout = "🦋  New tag:  pkg-a@1.0.0\n"
    monkeypatch.setattr(tool_mod, "run_process", RecordingRun(Ok(stdout)))
    console = MockConsole()

    assert publish(tmp_path, script="npm run release", console=console) == Ok(stdout)
    assert console.find("New tag:")
