"""Commands that reconcile the database labels an app declares."""

import typer

from cloudlink.cli.common.context import AppContext, build_context
from cloudlink.cli.common.exits import die, exit_from_exc, warn_exit
from cloudlink.cli.common.options import AppOpt, EnvironmentOpt, LinkDeclOpt
from cloudlink.cli.common.output import out
from cloudlink.core.errors import CloudLinkError
from cloudlink.core.orchestrator import (
    create_and_link_databases_for_existing_app,
    create_databases_for_new_app,
    link_databases,
)
from cloudlink.core.strategies import (
    Interactive,
    ResolutionStrategy,
    Scripted,
    parse_link_declaration,
)

links_app = typer.Typer(
    help="Reconcile the database labels declared by an app.",
    no_args_is_help=True,
)


@links_app.callback()
def _init(ctx: typer.Context, environment: str | None = EnvironmentOpt):
    """Reconcile the database labels declared by an app."""
    ctx.obj = build_context(ctx, environment)


def _build_strategy(declarations: list[str]) -> ResolutionStrategy:
    """Scripted when `--link` declarations are given, interactive otherwise."""
    if not declarations:
        return Interactive(out)
    try:
        return Scripted.from_declarations(declarations)
    except ValueError as exc:
        die(str(exc), code=2)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)


@links_app.command("reconcile")
def reconcile(
    ctx: typer.Context,
    app: str = AppOpt,
    label: list[str] = typer.Option(
        ...,
        "--label",
        "-l",
        help="Database label declared by the app. This is reusable.",
    ),
    link: list[str] = LinkDeclOpt,
):
    """
    Make sure every declared label resolves to a database.

    For a deployed app, missing labels are created or linked right away.
    For an app that does not exist yet, databases are created and the
    links to make after deployment are printed.
    """
    appctx: AppContext = ctx.obj
    strategy = _build_strategy(link)

    try:
        app_id = appctx.adapter.find_app_id(app)
        if app_id is not None:
            done = create_and_link_databases_for_existing_app(
                appctx.adapter, app, app_id, label, strategy
            )
            if not done:
                warn_exit("Cancelled")
            out.success(f'All database labels of app "{app}" are linked')
            return

        pending = create_databases_for_new_app(appctx.adapter, app, label, strategy)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)

    if pending is None:
        warn_exit("Cancelled")

    out.header(f'App "{app}" is not deployed yet; link after deploying with:')
    decls = " ".join(f"--link {lbl}={db}" for db, lbl in pending)
    out.print(f"  cloudlink links attach --app {app} {decls}")


@links_app.command("attach")
def attach(
    ctx: typer.Context,
    app: str = AppOpt,
    link: list[str] = LinkDeclOpt,
):
    """Link databases to a freshly deployed app (label=database pairs)."""
    appctx: AppContext = ctx.obj
    try:
        pairs = [
            (ref.name, lbl) for lbl, ref in (parse_link_declaration(d) for d in link)
        ]
    except ValueError as exc:
        die(str(exc), code=2)
    if not pairs:
        die("Nothing to link. Provide at least one --link label=database.", code=2)

    app_id = appctx.app_id(app)
    try:
        with out.status("Linking databases..."):
            link_databases(appctx.adapter, app, app_id, pairs)
    except CloudLinkError as exc:
        exit_from_exc(exc, code=1)

    out.success(f'Linked {len(pairs)} database(s) to app "{app}"')
