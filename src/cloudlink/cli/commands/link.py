"""Commands for linking apps to databases and unlinking them."""

import typer

from cloudlink.cli.common.context import AppContext, build_context
from cloudlink.cli.common.exits import exit_from_exc, ok_exit
from cloudlink.cli.common.options import AppOpt, DatabaseOpt, EnvironmentOpt, YesOpt
from cloudlink.cli.common.output import out
from cloudlink.core.errors import CloudLinkError
from cloudlink.core.linking import LinkOutcome, link_database, unlink_database

link_app = typer.Typer(help="Link apps to resources.", no_args_is_help=True)
unlink_app = typer.Typer(help="Unlink apps from resources.", no_args_is_help=True)

LabelArg = typer.Argument(
    ..., help="The name by which the application refers to the database"
)


@link_app.callback()
def _init_link(ctx: typer.Context, environment: str | None = EnvironmentOpt):
    """Link apps to resources."""
    ctx.obj = build_context(ctx, environment)


@unlink_app.callback()
def _init_unlink(ctx: typer.Context, environment: str | None = EnvironmentOpt):
    """Unlink apps from resources."""
    ctx.obj = build_context(ctx, environment)


@link_app.command("sqlite")
def link_sqlite(
    ctx: typer.Context,
    label: str = LabelArg,
    app: str = AppOpt,
    database: str = DatabaseOpt,
    yes: bool = YesOpt,
):
    """Link an app to a SQLite database."""
    appctx: AppContext = ctx.obj
    app_id = appctx.app_id(app)

    def confirm_relink(question: str) -> bool:
        if yes:
            return True
        return out.confirm(question, default=False)

    try:
        outcome = link_database(
            appctx.adapter,
            app,
            app_id,
            database,
            label,
            confirm_relink=confirm_relink,
        )
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)

    if outcome == LinkOutcome.NOT_UPDATED:
        ok_exit("The link has not been updated")

    out.success(
        f'Database "{database}" is now linked to app "{app}" with the label "{label}"'
    )


@unlink_app.command("sqlite")
def unlink_sqlite(
    ctx: typer.Context,
    label: str = LabelArg,
    app: str = AppOpt,
):
    """Unlink an app from a SQLite database."""
    appctx: AppContext = ctx.obj
    app_id = appctx.app_id(app)

    try:
        with out.status("Unlinking database..."):
            link = unlink_database(appctx.adapter, app, app_id, label)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)

    out.success(f"Database '{link.database}' no longer linked to app {app}")
