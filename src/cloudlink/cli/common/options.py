"""Common CLI options for the CLI."""

import typer

EnvironmentOpt = typer.Option(
    None,
    "--environment-name",
    envvar="CLOUDLINK_ENVIRONMENT",
    help="Saved cloud environment to use (defaults to the unnamed one)",
    hidden=True,
)

AppOpt = typer.Option(
    ...,
    "--app",
    "-a",
    help="The app that uses the database",
)

DatabaseOpt = typer.Option(
    ...,
    "--database",
    "-d",
    help="The database that the app will refer to by the label",
)

YesOpt = typer.Option(
    False,
    "--yes",
    "-y",
    help="Skip confirmation prompts",
)

LinkDeclOpt = typer.Option(
    [],
    "--link",
    help="Link a label to a database (label=database). This is reusable.",
    show_default=False,
)
