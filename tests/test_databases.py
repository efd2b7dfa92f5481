import pytest

from cloudlink.core.databases import (
    GroupBy,
    build_listing,
    create_database,
    delete_database,
    find_database_by_label,
    links_by_database,
    listing_json,
    rename_database,
)
from cloudlink.core.errors import AlreadyExistsError, NotFoundError
from cloudlink.core.models import Database, ResourceLabel
from fakes import FakeCatalog, rl


def _fake_dbs() -> list[Database]:
    return [
        Database("db1", (rl("messaging", "voicemail"), rl("attachment-manager", "email"))),
        Database("db2", (rl("docs", "notes"), rl("messaging", "email"))),
        Database("spare"),
    ]


def test_create_fails_if_database_exists():
    catalog = FakeCatalog([Database("db1"), Database("db2")])

    with pytest.raises(AlreadyExistsError, match='Database "db1" already exists'):
        create_database(catalog, "db1")

    assert catalog.mutations == []


def test_create_creates_unlinked_database():
    catalog = FakeCatalog([Database("db2")])

    create_database(catalog, "db1")

    assert catalog.mutations == [("create_database", "db1", None)]


def test_delete_missing_database_fails():
    catalog = FakeCatalog()

    with pytest.raises(NotFoundError, match='No database found with name "db1"'):
        delete_database(catalog, "db1")


def test_delete_returns_links_of_deleted_database():
    catalog = FakeCatalog(_fake_dbs())

    links = delete_database(catalog, "db2")

    assert [link.label for link in links] == ["notes", "email"]
    assert catalog.mutations == [("delete_database", "db2")]


def test_rename_missing_database_fails():
    catalog = FakeCatalog([Database("db1")])

    with pytest.raises(NotFoundError):
        rename_database(catalog, "nope", "db2")

    assert catalog.mutations == []


def test_rename_existing_database():
    catalog = FakeCatalog([Database("db1")])

    rename_database(catalog, "db1", "db9")

    assert catalog.mutations == [("rename_database", "db1", "db9")]


def test_find_database_by_label_resolves_app_label():
    assert find_database_by_label(_fake_dbs(), "email", "messaging").name == "db2"


def test_find_database_by_label_not_linked():
    with pytest.raises(NotFoundError, match='label "snailmail" for app "messaging"'):
        find_database_by_label(_fake_dbs(), "snailmail", "messaging")


def test_build_listing_groups_by_app():
    listing = build_listing(_fake_dbs())

    assert [link.app_name() for link in listing.links] == [
        "attachment-manager",
        "docs",
        "messaging",
        "messaging",
    ]
    assert [d.name for d in listing.unlinked] == ["spare"]


def test_build_listing_filters_by_app_and_groups_by_database():
    listing = build_listing(_fake_dbs(), app_name="messaging", group_by=GroupBy.DATABASE)

    assert [(link.database, link.label) for link in listing.links] == [
        ("db1", "voicemail"),
        ("db2", "email"),
    ]


def test_links_by_database_summary():
    summary = links_by_database(build_listing(_fake_dbs()).links)

    assert summary == {
        "db1": "attachment-manager:email, messaging:voicemail",
        "db2": "docs:notes, messaging:email",
    }


def test_listing_json_hides_app_ids_and_marks_unknown_apps():
    dbs = [Database("db1", (ResourceLabel(app_id="x", label="email"),)), Database("db2")]

    assert listing_json(dbs) == [
        {"database": "db1", "links": [{"label": "email", "app": "UNKNOWN"}]},
        {"database": "db2", "links": []},
    ]
    assert listing_json(dbs, app_name="UNKNOWN") == [
        {"database": "db1", "links": [{"label": "email", "app": "UNKNOWN"}]}
    ]
