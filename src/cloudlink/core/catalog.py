"""Interface to the remote database catalog used by the core domain."""

from __future__ import annotations

from typing import Protocol

from cloudlink.core.models import Database, ResourceLabel


class CatalogAdapter(Protocol):
    """
    Interface for catalog lookups and mutations.

    Implementations raise `UpstreamError` naming the operation and the
    entity involved when the remote call fails.
    """

    def get_databases(self, app_id: str | None = None) -> list[Database]:
        """Return all databases, optionally only those linked to `app_id`."""
        ...

    def create_database(
        self, name: str, resource_label: ResourceLabel | None = None
    ) -> None:
        """Create a database; with a resource label it is linked in the same call."""
        ...

    def create_database_link(self, database: str, resource_label: ResourceLabel) -> None:
        """Link `database` to the app and label in `resource_label`."""
        ...

    def remove_database_link(self, database: str, resource_label: ResourceLabel) -> None:
        """Remove the link between `database` and `resource_label`."""
        ...

    def delete_database(self, name: str) -> None:
        """Delete a database by name."""
        ...

    def rename_database(self, name: str, new_name: str) -> None:
        """Rename a database."""
        ...

    def find_app_id(self, app_name: str) -> str | None:
        """Return the id of the app named `app_name`, or None if absent."""
        ...
