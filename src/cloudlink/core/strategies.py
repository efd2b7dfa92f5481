"""Resolution strategies that decide which database backs a label.

A resolution strategy turns an (app, label) pair plus the databases that
are currently visible into a selection outcome: reuse an existing
database, create a new one, or abort. Two strategies exist:

- `Interactive` asks an operator through a `Prompter`.
- `Scripted` answers from labels declared up front (e.g. `--link email=db1`).

A single strategy is chosen per invocation and used for every label.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from cloudlink.core.errors import DuplicateDeclarationError, MissingDeclarationError
from cloudlink.core.models import (
    ABORTED,
    CreateNew,
    Database,
    DatabaseSelection,
    UseExisting,
)
from cloudlink.core.naming import NAME_GENERATION_MAX_ATTEMPTS, RandomNameGenerator


class Prompter(Protocol):
    """Terminal interaction surface. Cancelling any prompt returns None (or False)."""

    def select_index(
        self, message: str, choices: Sequence[str], *, default: int = 0
    ) -> int | None:
        """Return the index of the chosen item, or None if cancelled."""
        ...

    def text(self, message: str, *, default: str = "") -> str | None:
        """Return the entered text, or None if cancelled."""
        ...

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """Return True only if the user explicitly confirmed."""
        ...


class ResolutionStrategy(ABC):
    """
    Abstract base class for label resolution strategies.

    A strategy is consulted once per label that still needs a database.
    """

    @abstractmethod
    def resolve(
        self, app_name: str, label: str, databases: Sequence[Database]
    ) -> DatabaseSelection:
        """
        Decide which database the app should reach under `label`.

        Args:
            app_name: Name of the app declaring the label.
            label: Label the app uses to refer to the database.
            databases: All databases currently visible to the account.

        Returns:
            `UseExisting`, `CreateNew` or `ABORTED`.
        """
        ...


_EXISTING_OPTION = "Use an existing database and link app to it"
_CREATE_OPTION = "Create a new database and link the app to it"


class Interactive(ResolutionStrategy):
    """Strategy that asks the operator for each label."""

    def __init__(
        self,
        prompter: Prompter,
        name_generator: RandomNameGenerator | None = None,
    ) -> None:
        self.prompter = prompter
        self.name_generator = name_generator or RandomNameGenerator()

    def resolve(
        self, app_name: str, label: str, databases: Sequence[Database]
    ) -> DatabaseSelection:
        message = (
            f'App "{app_name}" accesses a database labeled "{label}"\n'
            "    Would you like to link an existing database or create a new database?"
        )
        index = self.prompter.select_index(
            message, [_EXISTING_OPTION, _CREATE_OPTION], default=1
        )
        if index is None:
            return ABORTED
        if index == 0:
            return self._prompt_for_existing_database(
                app_name, label, [d.name for d in databases]
            )
        return self._prompt_link_to_new_database(
            app_name, label, {d.name for d in databases}
        )

    def _prompt_for_existing_database(
        self, app_name: str, label: str, database_names: list[str]
    ) -> DatabaseSelection:
        message = (
            f'Which database would you like to link to {app_name} using the label "{label}"'
        )
        index = self.prompter.select_index(message, database_names, default=0)
        if index is None:
            return ABORTED
        return UseExisting(database_names[index])

    def _prompt_link_to_new_database(
        self, app_name: str, label: str, existing_names: set[str]
    ) -> DatabaseSelection:
        default_name = self.name_generator.generate_unique(
            existing_names, NAME_GENERATION_MAX_ATTEMPTS
        )
        message = (
            "What would you like to name your database?\n"
            "    Note: This name is used when managing your database at the account level. "
            f'The app "{app_name}" will refer to this database by the label "{label}".\n'
            "    Other apps can use different labels to refer to the same database."
        )
        # An edited name is not re-checked: a taken name behaves like UseExisting.
        name = self.prompter.text(message, default=default_name)
        if name is None:
            return ABORTED
        return CreateNew(name)


@dataclass(frozen=True)
class DatabaseRef:
    """Reference to a database by name, as declared for scripted runs."""

    name: str


def parse_link_declaration(declaration: str) -> tuple[str, DatabaseRef]:
    """Split a `label=database` declaration into its parts."""
    if "=" not in declaration:
        raise ValueError(
            f"Invalid link declaration: '{declaration}' (expected label=database)"
        )
    label, database = (part.strip() for part in declaration.split("=", 1))
    if not label or not database:
        raise ValueError(
            f"Invalid link declaration: '{declaration}' (expected label=database)"
        )
    return label, DatabaseRef(database)


class Scripted(ResolutionStrategy):
    """Strategy that resolves labels from declarations registered up front."""

    def __init__(self) -> None:
        self._labels_to_dbs: dict[str, DatabaseRef] = {}

    @classmethod
    def from_declarations(cls, declarations: Iterable[str]) -> Scripted:
        """Build a strategy from `label=database` strings."""
        scripted = cls()
        for declaration in declarations:
            label, db = parse_link_declaration(declaration)
            scripted.set_label_action(label, db)
        return scripted

    def set_label_action(self, label: str, db: DatabaseRef) -> None:
        """Register the database for `label`; each label may be declared once."""
        if label in self._labels_to_dbs:
            raise DuplicateDeclarationError(f"Label {label} is linked more than once")
        self._labels_to_dbs[label] = db

    def db_ref_for(self, label: str) -> DatabaseRef:
        try:
            return self._labels_to_dbs[label]
        except KeyError:
            raise MissingDeclarationError(
                f"No link specified for label '{label}'"
            ) from None

    def resolve(
        self, app_name: str, label: str, databases: Sequence[Database]
    ) -> DatabaseSelection:
        requested = self.db_ref_for(label).name
        if any(d.name == requested for d in databases):
            return UseExisting(requested)
        return CreateNew(requested)
