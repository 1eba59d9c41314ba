from __future__ import annotations

import typer

from relpr import __version__
from relpr.cli.commands.publish_cmd import publish
from relpr.cli.commands.setup_git_cmd import setup_git
from relpr.cli.commands.version_cmd import version


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(version)
app.command()(publish)
app.command("setup-git")(setup_git)


def _show_version(value: bool) -> None:
    # Eager, so it runs before click asks for a subcommand.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    show_version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
) -> None:
    del show_version


def main() -> None:
    app()
