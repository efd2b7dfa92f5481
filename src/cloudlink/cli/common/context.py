"""Application context management for the CLI."""

from dataclasses import dataclass

import typer

from cloudlink.cli.common.exits import die, exit_from_exc
from cloudlink.cli.common.output import out
from cloudlink.core.catalog import CatalogAdapter
from cloudlink.core.errors import AuthError, UpstreamError
from cloudlink.core.auth import get_adapter


@dataclass
class AppContext:
    """Application context holding the environment name and catalog adapter."""

    environment: str | None
    adapter: CatalogAdapter

    def app_id(self, app_name: str) -> str:
        """Resolve an app name to its id, exiting if the app does not exist."""
        try:
            with out.status(f'Looking up app "{app_name}"...'):
                app_id = self.adapter.find_app_id(app_name)
        except UpstreamError as exc:
            exit_from_exc(exc, code=1)
        if app_id is None:
            die(f'No app found with name "{app_name}"', code=1)
        return app_id


def build_context(ctx: typer.Context, environment: str | None) -> AppContext:
    """Build the application context and close its adapter when the command ends.

    Args:
        ctx: Typer context of the invoking command group.
        environment: Optional saved environment name to connect to.

    Returns:
        AppContext: Context with a configured catalog adapter.
    """
    try:
        adapter = get_adapter(environment)
    except AuthError as exc:
        die(str(exc), code=1)
    ctx.call_on_close(adapter.close)
    return AppContext(environment=environment, adapter=adapter)
