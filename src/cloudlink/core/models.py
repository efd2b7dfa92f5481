"""Core domain models for cloud SQLite databases and their links.

These models represent catalog entities in a simple, immutable form.
They are intentionally free of HTTP payload types and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

UNKNOWN_APP = "UNKNOWN"


@dataclass(frozen=True)
class ResourceLabel:
    """
    Wire identity of a link between an app and a database.

    Attributes:
        app_id: Opaque unique identifier of the app.
        label: Name by which the app refers to the database.
        app_name: Optional display name of the app.
    """

    app_id: str
    label: str
    app_name: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ResourceLabel:
        """Build a ResourceLabel from its camelCase API representation."""
        return cls(
            app_id=str(payload["appId"]),
            label=str(payload["label"]),
            app_name=payload.get("appName"),
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase API representation."""
        return {"appId": self.app_id, "label": self.label, "appName": self.app_name}

    def display_app_name(self) -> str:
        """Return the app name, or a placeholder when the catalog omitted it."""
        return self.app_name or UNKNOWN_APP


@dataclass(frozen=True)
class Database:
    """A uniquely named database together with the links it owns."""

    name: str
    links: tuple[ResourceLabel, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Link:
    """A resource label grouped with the database it points at."""

    resource_label: ResourceLabel
    database: str

    def app_name(self) -> str:
        return self.resource_label.display_app_name()

    @property
    def label(self) -> str:
        return self.resource_label.label


@dataclass(frozen=True)
class App:
    """Lightweight representation of a deployed app."""

    id: str
    name: str


@dataclass(frozen=True)
class UseExisting:
    """Selection outcome: link the label to an existing database."""

    name: str


@dataclass(frozen=True)
class CreateNew:
    """Selection outcome: create a database with this name and link to it."""

    name: str


class Aborted:
    """Selection outcome: the user cancelled the interaction."""

    _instance: Aborted | None = None

    def __new__(cls) -> Aborted:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABORTED"


ABORTED = Aborted()

DatabaseSelection = UseExisting | CreateNew | Aborted
