"""Commands for managing cloud SQLite databases."""

from enum import Enum

import typer

from cloudlink.cli.common.context import AppContext, build_context
from cloudlink.cli.common.exits import die, exit_from_exc, warn_exit
from cloudlink.cli.common.options import EnvironmentOpt, YesOpt
from cloudlink.cli.common.output import out
from cloudlink.core.databases import (
    GroupBy,
    build_listing,
    create_database,
    delete_database,
    find_database_by_label,
    get_database,
    links_by_database,
    listing_json,
    rename_database,
)
from cloudlink.core.errors import CloudLinkError

sqlite_app = typer.Typer(
    help="Manage cloud SQLite databases.",
    no_args_is_help=True,
)


class ListFormat(str, Enum):
    """Output format of `sqlite list`."""

    TABLE = "table"
    JSON = "json"


@sqlite_app.callback()
def _init(ctx: typer.Context, environment: str | None = EnvironmentOpt):
    """Manage cloud SQLite databases."""
    ctx.obj = build_context(ctx, environment)


@sqlite_app.command("create")
def create(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of database to create"),
):
    """Create a SQLite database."""
    appctx: AppContext = ctx.obj
    try:
        with out.status("Creating database..."):
            create_database(appctx.adapter, name)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)
    out.success(f'Database "{name}" created')


def _confirm_delete(name: str, links) -> bool:
    """Ask the user to type the database name; warn about apps still linked."""
    if links:
        apps = ", ".join(link.display_app_name() for link in links)
        out.warn(
            f'Database "{name}" is currently linked to the following apps: {apps}.\n'
            "It is recommended to use `cloudlink link sqlite` to link another "
            "database to those apps before deleting."
        )
    answer = out.text(
        f'The action is irreversible. Please type "{name}" for confirmation'
    )
    return answer == name


@sqlite_app.command("delete")
def delete(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of database to delete"),
    yes: bool = YesOpt,
):
    """Delete a SQLite database."""
    appctx: AppContext = ctx.obj
    try:
        if not yes:
            with out.status("Loading databases..."):
                database = get_database(appctx.adapter, name)
            if not _confirm_delete(name, database.links):
                warn_exit("Invalid confirmation. Will not delete database.")
        with out.status("Deleting database..."):
            delete_database(appctx.adapter, name)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)
    out.success(f'Database "{name}" deleted')


@sqlite_app.command("rename")
def rename(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Current name of database to rename"),
    new_name: str = typer.Argument(..., help="New name for the database"),
):
    """Rename a SQLite database."""
    appctx: AppContext = ctx.obj
    try:
        with out.status("Renaming database..."):
            rename_database(appctx.adapter, name, new_name)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)
    out.success(f'Database "{name}" is now named "{new_name}"')


@sqlite_app.command("find")
def find(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label the app uses for the database"),
    app: str = typer.Option(..., "--app", "-a", help="App to which the label relates"),
):
    """Show which database an app reaches under a label."""
    appctx: AppContext = ctx.obj
    try:
        with out.status("Loading databases..."):
            databases = appctx.adapter.get_databases()
        database = find_database_by_label(databases, label, app)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)
    out.print(database.name)


@sqlite_app.command("list")
def list_(
    ctx: typer.Context,
    app: str | None = typer.Option(None, "--app", "-a", help="Filter list by an app"),
    database: str | None = typer.Option(
        None, "--database", "-d", help="Filter list by a database"
    ),
    group_by: GroupBy | None = typer.Option(
        None,
        "--group-by",
        "-g",
        help="Grouping strategy of tabular list [default: app]",
        case_sensitive=False,
    ),
    format_: ListFormat = typer.Option(
        ListFormat.TABLE, "--format", help="Format of list", case_sensitive=False
    ),
):
    """List all your SQLite databases."""
    if format_ == ListFormat.JSON and group_by is not None:
        die("Grouping is not supported with JSON format output", code=2)

    appctx: AppContext = ctx.obj
    try:
        with out.status("Loading databases..."):
            databases = appctx.adapter.get_databases()
    except CloudLinkError as exc:
        exit_from_exc(exc, message=f"Problem listing databases: {exc}", code=1)

    if not databases:
        warn_exit("No databases")
    if database is not None:
        databases = [d for d in databases if d.name == database]
        if not databases:
            warn_exit(f"No database with name '{database}'")

    if format_ == ListFormat.JSON:
        out.json(listing_json(databases, app_name=app))
        return

    grouping = group_by or GroupBy.APP
    listing = build_listing(databases, app_name=app, group_by=grouping)
    if app is not None and not listing.links:
        warn_exit(f"No databases linked to an app named '{app}'")

    if grouping == GroupBy.APP:
        out.links_by_app_table(listing.links, title="Links")
        if listing.unlinked:
            out.databases_table(
                listing.unlinked, title="Databases not linked to any app"
            )
    else:
        out.links_by_database_table(
            links_by_database(listing.links), listing.unlinked, title="Databases"
        )
