"""Database management workflows and list views.

Each workflow fetches the catalog once, validates the request against it
and only then issues the mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from cloudlink.core.catalog import CatalogAdapter
from cloudlink.core.errors import AlreadyExistsError, NotFoundError
from cloudlink.core.models import Database, Link, ResourceLabel

logger = logging.getLogger(__name__)


class GroupBy(str, Enum):
    """Grouping strategy for tabular database listings."""

    APP = "app"
    DATABASE = "database"


@dataclass(frozen=True)
class DatabaseListing:
    """Links and unlinked databases selected for display."""

    links: list[Link]
    unlinked: list[Database]


def _find(databases: Iterable[Database], name: str) -> Database | None:
    return next((d for d in databases if d.name == name), None)


def create_database(adapter: CatalogAdapter, name: str) -> None:
    """Create an unlinked database, refusing names that are already taken."""
    if _find(adapter.get_databases(), name) is not None:
        raise AlreadyExistsError(f'Database "{name}" already exists')
    logger.info("Creating database %r", name)
    adapter.create_database(name)


def get_database(adapter: CatalogAdapter, name: str) -> Database:
    """Return the database called `name`."""
    found = _find(adapter.get_databases(), name)
    if found is None:
        raise NotFoundError(f'No database found with name "{name}"')
    return found


def delete_database(adapter: CatalogAdapter, name: str) -> tuple[ResourceLabel, ...]:
    """
    Delete the database called `name`.

    Returns:
        The links the database had; those apps lose access to it.
    """
    database = get_database(adapter, name)
    logger.info("Deleting database %r (%d link(s))", name, len(database.links))
    adapter.delete_database(name)
    return database.links


def rename_database(adapter: CatalogAdapter, name: str, new_name: str) -> None:
    """Rename a database. Links follow the database."""
    get_database(adapter, name)
    logger.info("Renaming database %r to %r", name, new_name)
    adapter.rename_database(name, new_name)


def find_database_by_label(
    databases: Iterable[Database], label: str, app_name: str
) -> Database:
    """Return the database the app named `app_name` reaches under `label`."""
    for database in databases:
        if any(
            link.label == label and link.app_name == app_name for link in database.links
        ):
            return database
    raise NotFoundError(
        f'No database found with label "{label}" for app "{app_name}"'
    )


def all_links(databases: Iterable[Database]) -> list[Link]:
    """Flatten databases into one Link per resource label."""
    return [
        Link(resource_label=rl, database=d.name) for d in databases for rl in d.links
    ]


def build_listing(
    databases: list[Database],
    *,
    app_name: str | None = None,
    group_by: GroupBy = GroupBy.APP,
) -> DatabaseListing:
    """
    Select and order links for a tabular listing.

    Args:
        databases: All databases in the account.
        app_name: Keep only links to this app.
        group_by: Sort links by app name or by database name.
    """
    links = all_links(databases)
    if app_name is not None:
        links = [link for link in links if link.app_name() == app_name]

    if group_by == GroupBy.APP:
        links.sort(key=lambda link: link.app_name())
    else:
        links.sort(key=lambda link: link.database)

    unlinked = [d for d in databases if not d.links]
    return DatabaseListing(links=links, unlinked=unlinked)


def links_by_database(links: Iterable[Link]) -> dict[str, str]:
    """Map database name to a `app:label, app:label` summary, sorted by name."""
    summary: dict[str, list[str]] = {}
    for link in links:
        summary.setdefault(link.database, []).append(f"{link.app_name()}:{link.label}")
    return {name: ", ".join(summary[name]) for name in sorted(summary)}


def listing_json(
    databases: Iterable[Database], *, app_name: str | None = None
) -> list[dict[str, object]]:
    """JSON-ready records of databases and their links, without app ids."""
    records: list[dict[str, object]] = []
    for database in databases:
        if app_name is not None and not any(
            link.display_app_name() == app_name for link in database.links
        ):
            continue
        records.append(
            {
                "database": database.name,
                "links": [
                    {"label": link.label, "app": link.display_app_name()}
                    for link in database.links
                ],
            }
        )
    return records
