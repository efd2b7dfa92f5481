"""Output formatting and prompt utilities for the CLI."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from cloudlink.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_INPUT,
    QUESTIONARY_STYLE_SELECT,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, tables and prompts."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "instruction", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with err_console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        err_console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        err_console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def print(self, msg: str) -> None:
        """Print a raw Rich-formatted message to the console."""
        console.print(msg)

    def json(self, payload: Any) -> None:
        """Print a value as pretty JSON without Rich markup."""
        console.print_json(json.dumps(payload))

    def select_index(
        self, message: str, choices: Sequence[str], *, default: int = 0
    ) -> int | None:
        """
        Prompt the user to pick one item from a list.

        Returns:
            The index of the chosen item, or None if cancelled.
        """
        if not choices:
            self.warn("Nothing to choose from.")
            return None

        q_choices = [
            questionary.Choice(title=title, value=i) for i, title in enumerate(choices)
        ]
        prompt = self._q_try(
            questionary.select,
            message,
            choices=q_choices,
            default=q_choices[min(max(default, 0), len(q_choices) - 1)],
            style=QUESTIONARY_STYLE_SELECT,
            instruction="Use ↑/↓ then Enter",
            pointer="❯",
        )
        return prompt.ask()

    def text(self, message: str, *, default: str = "") -> str | None:
        """
        Prompt for free text with an editable default.

        Returns:
            The entered text, or None if cancelled.
        """
        prompt = self._q_try(
            questionary.text,
            message,
            default=default,
            style=QUESTIONARY_STYLE_INPUT,
        )
        return prompt.ask()

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for a yes/no answer.

        Cancelling the prompt counts as a "no".
        """
        prompt = self._q_try(
            questionary.confirm,
            message,
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            auto_enter=False,
        )
        return bool(prompt.ask())

    def links_by_app_table(self, links: Iterable[Any], title: str = "Links") -> None:
        """
        Expects objects with .app_name() .label .database (like cloudlink.core.models.Link)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("App", style="ok")
        t.add_column("Label")
        t.add_column("Database", style="title")

        for link in links:
            t.add_row(link.app_name(), link.label, link.database)

        console.print(t)

    def links_by_database_table(
        self,
        summary: Mapping[str, str],
        unlinked: Iterable[Any],
        title: str = "Databases",
    ) -> None:
        """Render one row per database with its `app:label` links."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="title")
        t.add_column("Links")

        for d in unlinked:
            t.add_row(d.name, "[meta]-[/]")
        for name, links in summary.items():
            t.add_row(name, links)

        console.print(t)

    def databases_table(self, databases: Iterable[Any], title: str = "Databases") -> None:
        """Render a single-column table of database names."""
        t = Table(title=title, show_lines=False)
        t.add_column("Database", style="title")

        for d in databases:
            t.add_row(getattr(d, "name", str(d)))

        console.print(t)


out = Out()
