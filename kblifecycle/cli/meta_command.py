"""Usage metadata commands: meta show/set/unset, lookup, survey."""

import argparse
import json
from datetime import datetime, UTC
from typing import Any

from rich.console import Console
from rich.table import Table

from kblifecycle.config import LifecycleSettings
from kblifecycle.core.models import InactiveUserMsgStatus, MetadataRecord
from kblifecycle.engagement.startup import StartupAdvisor
from kblifecycle.store.metadata import JsonMetadataStore

_TIME_FIELDS = {
    "firstInstall",
    "firstWsInitialize",
    "firstLookupTime",
    "lastLookupTime",
    "inactiveUserMsgSendTime",
}


def parse_value(text: str) -> Any:
    """Interpret a command line value as JSON (numbers, booleans), else a string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _format_value(alias: str, value: Any) -> str:
    if value is None:
        return "[dim]unset[/dim]"
    if alias in _TIME_FIELDS and isinstance(value, int):
        stamp = datetime.fromtimestamp(value, UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
        return f"{value} ({stamp})"
    return str(value)


class MetaCommand:
    """Read and edit the usage metadata file."""

    def __init__(self, settings: LifecycleSettings, console: Console = None):
        self.settings = settings
        self.console = console or Console()

    def _store(self) -> JsonMetadataStore:
        return JsonMetadataStore(self.settings.meta_path_expanded)

    def show(self, args: argparse.Namespace) -> int:
        with self._store() as store:
            stored = store.get_meta().to_storage()

        table = Table(title=f"Metadata ({self.settings.meta_path_expanded})", show_header=True)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        for alias in MetadataRecord.aliases():
            table.add_row(alias, _format_value(alias, stored.get(alias)))
        self.console.print(table)
        return 0

    def set_field(self, args: argparse.Namespace) -> int:
        value = parse_value(args.value)
        with self._store() as store:
            store.set_meta(args.field, value)
        self.console.print(f"[green]✓[/green] {args.field} = {value!r}")
        return 0

    def unset_field(self, args: argparse.Namespace) -> int:
        with self._store() as store:
            store.set_meta(args.field, None)
        self.console.print(f"[green]✓[/green] {args.field} unset")
        return 0

    def lookup(self, args: argparse.Namespace) -> int:
        """Record a note lookup now."""
        with self._store() as store:
            StartupAdvisor(store, self.settings).record_lookup()
        self.console.print("[green]✓ Lookup recorded[/green]")
        return 0

    def survey(self, args: argparse.Namespace) -> int:
        """Record the answer to the inactive user survey."""
        status = InactiveUserMsgStatus(args.status)
        with self._store() as store:
            StartupAdvisor(store, self.settings).record_survey_response(status)
        self.console.print(f"[green]✓ Survey {status.value}[/green]")
        return 0
