"""CLI application for managing cloud SQLite databases and their app links."""

import logging

import typer
from rich.logging import RichHandler

from cloudlink.cli.commands.link import link_app, unlink_app
from cloudlink.cli.commands.links import links_app
from cloudlink.cli.commands.sqlite import sqlite_app
from cloudlink.cli.common.output import err_console

app = typer.Typer(
    help="cloudlink - manage cloud SQLite databases and the apps linked to them",
    no_args_is_help=True,
)


@app.callback()
def _main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every catalog call"
    ),
):
    """Configure logging for the invocation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


app.add_typer(sqlite_app, name="sqlite")
app.add_typer(link_app, name="link")
app.add_typer(unlink_app, name="unlink")
app.add_typer(links_app, name="links")


if __name__ == "__main__":
    app()
