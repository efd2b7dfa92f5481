"""Link and unlink a single database to an (app, label) pair.

For a given app, each label points at no more than one database. Changing
which database a label points at is a relink: the old link is removed and
the new link is created in two separate catalog calls. The pair is not
atomic; if the second call fails the label is left unlinked.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Iterable

from cloudlink.core.catalog import CatalogAdapter
from cloudlink.core.errors import AlreadyLinkedError, ConflictError, NotFoundError
from cloudlink.core.models import Database, Link, ResourceLabel

logger = logging.getLogger(__name__)


class LinkOutcome(str, Enum):
    """
    Result of a link request that did not fail.

    Values:
        LINKED: A new link was created.
        RELINKED: The label was moved from another database.
        NOT_UPDATED: A relink was needed but the user declined it.
    """

    LINKED = "LINKED"
    RELINKED = "RELINKED"
    NOT_UPDATED = "NOT_UPDATED"


def find_database_link(
    database: Database, label: str, app_id: str | None = None
) -> Link | None:
    """Return the first link of `database` that uses `label`, optionally for one app."""
    for resource_label in database.links:
        if app_id is not None and resource_label.app_id != app_id:
            continue
        if resource_label.label == label:
            return Link(resource_label=resource_label, database=database.name)
    return None


def database_has_link(database: Database, label: str, app_name: str | None) -> bool:
    """True if `database` is linked to the app named `app_name` under `label`."""
    return any(
        link.label == label and link.app_name == app_name for link in database.links
    )


def _first_link(
    databases: Iterable[Database], label: str, app_id: str
) -> Link | None:
    for database in databases:
        link = find_database_link(database, label, app_id)
        if link is not None:
            return link
    return None


def link_database(
    adapter: CatalogAdapter,
    app_name: str,
    app_id: str,
    database: str,
    label: str,
    *,
    confirm_relink: Callable[[str], bool] | None = None,
) -> LinkOutcome:
    """
    Link `database` to the app under `label`.

    Args:
        adapter: Catalog adapter.
        app_name: Name of the app, used in messages and prompts.
        app_id: Identifier of the app.
        database: Name of the database to link.
        label: Label the app will use for the database.
        confirm_relink: Called with a question when the label already points
            at another database. None means no one can be asked, in which
            case the conflict is raised.

    Returns:
        LinkOutcome describing what changed.

    Raises:
        NotFoundError: If `database` does not exist.
        AlreadyLinkedError: If the label already points at `database`.
        ConflictError: If a relink is needed and `confirm_relink` is None.
    """
    databases = adapter.get_databases()
    if not any(d.name == database for d in databases):
        raise NotFoundError(f'Database "{database}" does not exist')

    databases_for_app = [
        d for d in databases if any(link.app_id == app_id for link in d.links)
    ]
    this_db = [d for d in databases_for_app if d.name == database]
    other_dbs = [d for d in databases_for_app if d.name != database]

    existing = _first_link(this_db, label, app_id)
    if existing is not None:
        raise AlreadyLinkedError(
            f'Database "{existing.database}" is already linked to app '
            f'"{existing.app_name()}" with the label "{existing.label}"'
        )

    resource_label = ResourceLabel(app_id=app_id, label=label, app_name=app_name)
    current = _first_link(other_dbs, label, app_id)
    if current is None:
        logger.info("Linking database %r to app %r as %r", database, app_name, label)
        adapter.create_database_link(database, resource_label)
        return LinkOutcome.LINKED

    question = (
        f'App "{current.app_name()}"\'s "{current.label}" label is currently linked to '
        f'"{current.database}". Change to link to database "{database}" instead?'
    )
    if confirm_relink is None:
        raise ConflictError(
            f'Label "{label}" of app "{app_name}" is already linked to database '
            f'"{current.database}"',
            current_database=current.database,
        )
    if not confirm_relink(question):
        return LinkOutcome.NOT_UPDATED

    # TODO: replace the two calls below with a single relink call once the catalog offers one.
    logger.info(
        "Relink step 1/2: removing link of %r from database %r",
        label,
        current.database,
    )
    adapter.remove_database_link(current.database, current.resource_label)
    logger.info("Relink step 2/2: linking database %r as %r", database, label)
    adapter.create_database_link(database, resource_label)
    return LinkOutcome.RELINKED


def unlink_database(
    adapter: CatalogAdapter, app_name: str, app_id: str, label: str
) -> Link:
    """
    Remove the link of the app's `label`.

    Returns:
        The link that was removed.

    Raises:
        NotFoundError: If no database is linked to the app with `label`.
    """
    for database in adapter.get_databases(app_id):
        for resource_label in database.links:
            if resource_label.label != label:
                continue
            if resource_label.app_id == app_id or resource_label.app_name == app_name:
                logger.info(
                    "Unlinking database %r from app %r (%r)",
                    database.name,
                    app_name,
                    label,
                )
                adapter.remove_database_link(database.name, resource_label)
                return Link(resource_label=resource_label, database=database.name)
    raise NotFoundError(
        f"no database was linked to app '{app_name}' with label '{label}'"
    )
