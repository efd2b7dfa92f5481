"""In-memory catalog and prompter stubs shared by the tests."""

from __future__ import annotations

from typing import Sequence

from cloudlink.core.errors import UpstreamError
from cloudlink.core.models import Database, ResourceLabel


def rl(app: str, label: str, app_id: str | None = None) -> ResourceLabel:
    return ResourceLabel(app_id=app_id or f"{app}-id", label=label, app_name=app)


class FakeCatalog:
    """Records every call; mutations update the in-memory databases."""

    def __init__(self, databases: Sequence[Database] = (), apps: dict | None = None):
        self.databases = {d.name: d for d in databases}
        self.apps = apps or {}
        self.calls: list[tuple] = []
        self.fail_links: set[str] = set()
        self.closed = False

    @property
    def mutations(self) -> list[tuple]:
        return [c for c in self.calls if c[0] not in {"get_databases", "find_app_id"}]

    def get_databases(self, app_id: str | None = None) -> list[Database]:
        self.calls.append(("get_databases", app_id))
        dbs = list(self.databases.values())
        if app_id is None:
            return dbs
        return [d for d in dbs if any(link.app_id == app_id for link in d.links)]

    def create_database(self, name, resource_label=None) -> None:
        self.calls.append(("create_database", name, resource_label))
        links = (resource_label,) if resource_label else ()
        self.databases[name] = Database(name=name, links=links)

    def create_database_link(self, database, resource_label) -> None:
        self.calls.append(("create_database_link", database, resource_label))
        if database in self.fail_links:
            raise UpstreamError(f'Linking database "{database}" failed (500)')
        db = self.databases[database]
        self.databases[database] = Database(db.name, db.links + (resource_label,))

    def remove_database_link(self, database, resource_label) -> None:
        self.calls.append(("remove_database_link", database, resource_label))
        db = self.databases[database]
        links = tuple(link for link in db.links if link != resource_label)
        self.databases[database] = Database(db.name, links)

    def delete_database(self, name) -> None:
        self.calls.append(("delete_database", name))
        del self.databases[name]

    def rename_database(self, name, new_name) -> None:
        self.calls.append(("rename_database", name, new_name))
        db = self.databases.pop(name)
        self.databases[new_name] = Database(new_name, db.links)

    def find_app_id(self, app_name):
        self.calls.append(("find_app_id", app_name))
        return self.apps.get(app_name)

    def close(self) -> None:
        self.closed = True


class ScriptedPrompter:
    """Replays queued answers; `None` answers behave like a cancelled prompt."""

    def __init__(self, selects=(), texts=(), confirms=()):
        self.selects = list(selects)
        self.texts = list(texts)
        self.confirms = list(confirms)
        self.messages: list[str] = []

    def select_index(self, message, choices, *, default=0):
        self.messages.append(message)
        return self.selects.pop(0)

    def text(self, message, *, default=""):
        self.messages.append(message)
        answer = self.texts.pop(0) if self.texts else default
        return answer

    def confirm(self, message, *, default=False):
        self.messages.append(message)
        return self.confirms.pop(0)
