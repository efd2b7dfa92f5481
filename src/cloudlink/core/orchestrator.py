"""Reconcile the database labels an app declares against the catalog.

Labels are processed one at a time in lexicographic order. A cancelled
selection stops the pass immediately; databases and links created by
earlier labels of the same pass are kept, nothing is rolled back.
"""

from __future__ import annotations

import logging
from typing import Iterable

from cloudlink.core.catalog import CatalogAdapter
from cloudlink.core.errors import UpstreamError
from cloudlink.core.linking import database_has_link
from cloudlink.core.models import Aborted, CreateNew, ResourceLabel, UseExisting
from cloudlink.core.strategies import ResolutionStrategy

logger = logging.getLogger(__name__)


def create_databases_for_new_app(
    adapter: CatalogAdapter,
    app_name: str,
    labels: Iterable[str],
    strategy: ResolutionStrategy,
) -> list[tuple[str, str]] | None:
    """
    Resolve a database for every label of an app that is not deployed yet.

    New databases are created unlinked, since the app does not exist yet.
    Pass the returned pairs to `link_databases` once the app is created.

    Args:
        adapter: Catalog adapter.
        app_name: Name of the app being deployed.
        labels: Distinct labels declared by the app.
        strategy: Strategy deciding existing vs. new per label.

    Returns:
        Ordered `(database, label)` pairs, or None if the user cancelled.
    """
    databases_to_link: list[tuple[str, str]] = []
    for label in sorted(set(labels)):
        databases = adapter.get_databases()
        selection = strategy.resolve(app_name, label, databases)
        if isinstance(selection, Aborted):
            logger.info("Database selection cancelled at label %r", label)
            return None
        if isinstance(selection, CreateNew):
            logger.info("Creating database %r for label %r", selection.name, label)
            adapter.create_database(selection.name)
        databases_to_link.append((selection.name, label))
    return databases_to_link


def create_and_link_databases_for_existing_app(
    adapter: CatalogAdapter,
    app_name: str,
    app_id: str,
    labels: Iterable[str],
    strategy: ResolutionStrategy,
) -> bool:
    """
    Create and link databases for labels newly declared by a deployed app.

    Labels already linked for this app are skipped.

    Returns:
        True when every label is satisfied, False if the user cancelled.
    """
    for label in sorted(set(labels)):
        resource_label = ResourceLabel(app_id=app_id, label=label, app_name=app_name)
        databases = adapter.get_databases()
        if any(database_has_link(d, label, app_name) for d in databases):
            logger.debug("Label %r of app %r is already linked", label, app_name)
            continue

        selection = strategy.resolve(app_name, label, databases)
        if isinstance(selection, Aborted):
            logger.info("Database selection cancelled at label %r", label)
            return False
        if isinstance(selection, CreateNew):
            logger.info(
                "Creating database %r linked to app %r as %r",
                selection.name,
                app_name,
                label,
            )
            adapter.create_database(selection.name, resource_label)
        elif isinstance(selection, UseExisting):
            logger.info(
                "Linking database %r to app %r as %r", selection.name, app_name, label
            )
            try:
                adapter.create_database_link(selection.name, resource_label)
            except UpstreamError as exc:
                raise UpstreamError(
                    f'Could not link database "{selection.name}" to app "{app_name}": {exc}'
                ) from exc
    return True


def link_databases(
    adapter: CatalogAdapter,
    app_name: str,
    app_id: str,
    database_labels: Iterable[tuple[str, str]],
) -> None:
    """
    Link `(database, label)` pairs to a freshly created app.

    Stops at the first failure; links created before it are kept.
    """
    for database, label in database_labels:
        resource_label = ResourceLabel(app_id=app_id, label=label, app_name=app_name)
        logger.info("Linking database %r to app %r as %r", database, app_name, label)
        try:
            adapter.create_database_link(database, resource_label)
        except UpstreamError as exc:
            raise UpstreamError(
                f'Failed to link database "{database}" to app "{app_name}": {exc}'
            ) from exc
