"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from relpr.core.errors import ErrorCode
from relpr.core.result import Err, Result
from relpr.output.console import Style
from relpr.services.release.errors import ReleaseError, ReleaseErrorKind

if TYPE_CHECKING:
    from relpr.output.console import ConsoleProtocol

T = TypeVar("T")

_EXIT_CODES: dict[ReleaseErrorKind, ErrorCode] = {
    "parse_error": ErrorCode.PARSE_ERROR,
    "config_error": ErrorCode.CONFIG_ERROR,
    "lookup_error": ErrorCode.INTERNAL_ERROR,
    "io_error": ErrorCode.IO_ERROR,
    "git_failed": ErrorCode.REMOTE_ERROR,
    "host_failed": ErrorCode.REMOTE_ERROR,
    "tool_failed": ErrorCode.TOOL_ERROR,
}


def exit_code_for(error: ReleaseError) -> ErrorCode:
    return _EXIT_CODES.get(error.kind, ErrorCode.INTERNAL_ERROR)


def exit_on_error(result: Result[T, ReleaseError], console: ConsoleProtocol) -> T:
    """Return the value of an Ok result; report an Err and exit.

    The exit code follows the error kind (see ``ErrorCode``).
    """
    if isinstance(result, Err):
        error = result.error
        console.error(error.message)
        if error.hint:
            console.print(f"hint: {error.hint}", Style.DIM)
        exit_with_code(int(exit_code_for(error)))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    """Exit with given code. Explicit helper for clarity."""
    raise typer.Exit(code=code)
