import json

import httpx
import pytest

from cloudlink.core.adapters.cloud import CloudCatalogAdapter
from cloudlink.core.errors import UpstreamError
from cloudlink.core.models import Database, ResourceLabel


def _adapter(handler) -> CloudCatalogAdapter:
    client = httpx.Client(
        base_url="https://cloud.example.com", transport=httpx.MockTransport(handler)
    )
    return CloudCatalogAdapter(client)


def test_get_databases_parses_links_and_passes_app_filter():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        return httpx.Response(
            200,
            json={
                "databases": [
                    {
                        "name": "db1",
                        "links": [{"appId": "a1", "label": "email", "appName": "app"}],
                    },
                    {"name": "db2", "links": []},
                    {"links": []},
                ]
            },
        )

    databases = _adapter(handler).get_databases("a1")

    assert seen["url"].endswith("/api/sqlite/databases?appId=a1")
    assert databases == [
        Database("db1", (ResourceLabel(app_id="a1", label="email", app_name="app"),)),
        Database("db2"),
    ]


def test_create_database_sends_resource_label():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(201)

    label = ResourceLabel(app_id="a1", label="email", app_name="app")
    adapter = _adapter(handler)
    adapter.create_database("db1")
    adapter.create_database("db2", label)

    assert bodies == [
        ("POST", "/api/sqlite/databases/create", {"name": "db1", "resourceLabel": None}),
        (
            "POST",
            "/api/sqlite/databases/create",
            {
                "name": "db2",
                "resourceLabel": {"appId": "a1", "label": "email", "appName": "app"},
            },
        ),
    ]


def test_remove_database_link_uses_delete_with_body():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200)

    _adapter(handler).remove_database_link(
        "my db", ResourceLabel(app_id="a1", label="email")
    )

    assert seen == [
        (
            "DELETE",
            "/api/sqlite/databases/my db/links",
            {"appId": "a1", "label": "email", "appName": None},
        )
    ]


def test_http_error_is_wrapped_with_operation_and_entity():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, text="link exists")

    with pytest.raises(UpstreamError, match=r'Linking database "db1" as "email" failed \(409\): link exists'):
        _adapter(handler).create_database_link(
            "db1", ResourceLabel(app_id="a1", label="email")
        )


def test_transport_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError, match='Deleting database "db1" failed'):
        _adapter(handler).delete_database("db1")


def test_find_app_id_requires_exact_name():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["searchText"] == "app"
        return httpx.Response(
            200,
            json={"items": [{"id": "1", "name": "app-two"}, {"id": "2", "name": "app"}]},
        )

    adapter = _adapter(handler)

    assert adapter.find_app_id("app") == "2"


def test_find_app_id_missing_app_returns_none():
    adapter = _adapter(lambda request: httpx.Response(200, json={"items": []}))

    assert adapter.find_app_id("ghost") is None
