"""Config maintenance commands: backfill, deprecated, effective."""

import argparse

import yaml
from rich.console import Console

from kblifecycle.config import LifecycleSettings
from kblifecycle.engagement.startup import StartupAdvisor
from kblifecycle.migration.engine import detect_deprecated_configs
from kblifecycle.store.metadata import InMemoryMetadataStore
from kblifecycle.workspace.workspace import Workspace


class ConfigCommand:
    """Inspect and migrate a workspace's dendron.yml."""

    def __init__(self, settings: LifecycleSettings, console: Console = None):
        self.settings = settings
        self.console = console or Console()

    def _workspace(self, args: argparse.Namespace) -> Workspace:
        return Workspace(args.ws_root, home=self.settings.home_path)

    def _advisor(self) -> StartupAdvisor:
        # File migrations do not touch usage metadata.
        return StartupAdvisor(InMemoryMetadataStore().open(), self.settings)

    def _print_paths(self, header: str, paths) -> None:
        self.console.print(header)
        for path in paths:
            self.console.print(f"  • {path}", markup=False, highlight=False)

    def backfill(self, args: argparse.Namespace) -> int:
        """Add missing default keys to dendron.yml."""
        added = self._advisor().apply_backfill(self._workspace(args), dry_run=args.dry_run)
        if not added:
            self.console.print("[green]✓ No missing default config keys[/green]")
            return 0

        verb = "Would add" if args.dry_run else "Added"
        self._print_paths(f"{verb} {len(added)} default config key(s):", added)
        return 0

    def deprecated(self, args: argparse.Namespace) -> int:
        """List deprecated keys, or remove them with --remove."""
        workspace = self._workspace(args)
        if args.remove:
            removed = self._advisor().apply_deprecation_cleanup(workspace)
            if removed:
                self._print_paths(f"Removed {len(removed)} deprecated config key(s):", removed)
            else:
                self.console.print("[green]✓ No deprecated config keys[/green]")
            return 0

        found = detect_deprecated_configs(workspace.raw_config)
        if found:
            self._print_paths(f"[yellow]{len(found)} deprecated config key(s):[/yellow]", found)
        else:
            self.console.print("[green]✓ No deprecated config keys[/green]")
        return 0

    def effective(self, args: argparse.Namespace) -> int:
        """Print dendron.yml merged with its local overrides."""
        text = yaml.safe_dump(self._workspace(args).config, sort_keys=False, default_flow_style=False)
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)
        return 0
