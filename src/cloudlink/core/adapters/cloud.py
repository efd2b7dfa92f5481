from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from cloudlink.core.errors import UpstreamError
from cloudlink.core.models import App, Database, ResourceLabel

_DATABASES = "/api/sqlite/databases"


def _db_path(name: str, *suffix: str) -> str:
    return "/".join([_DATABASES, quote(name, safe=""), *suffix])


class CloudCatalogAdapter:
    """Adapter around the cloud REST API for SQLite databases and apps."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def _send(
        self,
        operation: str,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue a request, turning transport and status failures into UpstreamError."""
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text.strip() or exc.response.reason_phrase
            raise UpstreamError(
                f"{operation} failed ({exc.response.status_code}): {detail}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"{operation} failed: {exc}") from exc
        return response

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(f"{operation} returned invalid JSON") from exc

    def get_databases(self, app_id: str | None = None) -> list[Database]:
        """List databases, optionally only those linked to `app_id`."""
        operation = "Fetching databases"
        params = {"appId": app_id} if app_id else None
        payload = self._json(
            operation, self._send(operation, "GET", _DATABASES, params=params)
        )
        items = payload.get("databases", []) if isinstance(payload, dict) else payload
        out: list[Database] = []
        for item in items or []:
            name = item.get("name")
            if not name:
                continue
            links = tuple(
                ResourceLabel.from_payload(link) for link in item.get("links") or []
            )
            out.append(Database(name=name, links=links))
        return out

    def create_database(
        self, name: str, resource_label: ResourceLabel | None = None
    ) -> None:
        """Create a database, linking it in the same call when a label is given."""
        body = {
            "name": name,
            "resourceLabel": resource_label.to_payload() if resource_label else None,
        }
        self._send(
            f'Creating database "{name}"', "POST", f"{_DATABASES}/create", json=body
        )

    def create_database_link(self, database: str, resource_label: ResourceLabel) -> None:
        """Link a database to an app label."""
        self._send(
            f'Linking database "{database}" as "{resource_label.label}"',
            "POST",
            _db_path(database, "links"),
            json=resource_label.to_payload(),
        )

    def remove_database_link(self, database: str, resource_label: ResourceLabel) -> None:
        """Remove a link between a database and an app label."""
        self._send(
            f'Unlinking database "{database}" from label "{resource_label.label}"',
            "DELETE",
            _db_path(database, "links"),
            json=resource_label.to_payload(),
        )

    def delete_database(self, name: str) -> None:
        """Delete a database by name."""
        self._send(f'Deleting database "{name}"', "DELETE", _db_path(name))

    def rename_database(self, name: str, new_name: str) -> None:
        """Rename a database."""
        self._send(
            f'Renaming database "{name}" to "{new_name}"',
            "PATCH",
            _db_path(name, "rename"),
            json={"name": new_name},
        )

    def list_apps(self, search: str | None = None) -> list[App]:
        """List apps visible to the current account."""
        operation = "Fetching apps"
        params = {"searchText": search} if search else None
        payload = self._json(
            operation, self._send(operation, "GET", "/api/apps", params=params)
        )
        items = payload.get("items", []) if isinstance(payload, dict) else payload
        return [
            App(id=str(item["id"]), name=item["name"])
            for item in items or []
            if item.get("id") and item.get("name")
        ]

    def find_app_id(self, app_name: str) -> str | None:
        """Return the id of the app named exactly `app_name`."""
        return next((a.id for a in self.list_apps(app_name) if a.name == app_name), None)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()
