from __future__ import annotations

import ast
import os
from pathlib import Path

import pytest

# Every git, gh and change tool call goes through the Result-returning runner.
_ALLOWLIST = {"platform/process.py"}


def _require_arch_checks_enabled() -> None:
    if os.getenv("RELPR_ARCH_CHECKS") != "1":
        pytest.skip("architecture checks are opt-in; set RELPR_ARCH_CHECKS=1 to enable")


def _relpr_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _iter_source_files(root: Path) -> list[Path]:
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def _direct_subprocess_lines(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            if any(alias.name == "subprocess" for alias in node.names):
                lines.append(node.lineno)
        elif isinstance(node, ast.ImportFrom) and node.module == "subprocess":
            lines.append(node.lineno)
    return lines


def test_subprocess_is_only_imported_by_the_process_runner() -> None:
    _require_arch_checks_enabled()

    root = _relpr_root()
    offenders: list[str] = []
    for file_path in _iter_source_files(root):
        rel = file_path.relative_to(root).as_posix()
        if rel in _ALLOWLIST:
            continue
        tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
        for line in _direct_subprocess_lines(tree):
            offenders.append(f"{rel}:{line}: subprocess imported outside platform/process.py")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)


def test_services_do_not_import_rich() -> None:
    _require_arch_checks_enabled()

    root = _relpr_root()
    offenders: list[str] = []
    for file_path in _iter_source_files(root / "services"):
        tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
        for node in ast.walk(tree):
            module = None
            if isinstance(node, ast.ImportFrom):
                module = node.module
            elif isinstance(node, ast.Import):
                module = node.names[0].name
            if module is not None and (module == "rich" or module.startswith("rich.")):
                offenders.append(f"{file_path.relative_to(root).as_posix()}:{node.lineno}")

    assert not offenders, "services must print through ConsoleProtocol:\n" + "\n".join(offenders)
