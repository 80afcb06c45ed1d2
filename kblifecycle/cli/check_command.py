"""Activation check: record the activation and list the notices that are due."""

import argparse
from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kblifecycle.config import LifecycleSettings
from kblifecycle.core.models import InstallStatus, Notice
from kblifecycle.engagement.startup import StartupAdvisor
from kblifecycle.logging.structured_logger import get_logger
from kblifecycle.store.metadata import JsonMetadataStore
from kblifecycle.workspace.workspace import Workspace

logger = get_logger(__name__)


class CheckCommand:
    """Run one activation pass against a workspace and print the notices."""

    def __init__(self, settings: LifecycleSettings, console: Console = None):
        self.settings = settings
        self.console = console or Console()

    def run(self, args: argparse.Namespace) -> int:
        workspace = Workspace(args.ws_root, home=self.settings.home_path)
        current_version = args.version or self.settings.extension_version

        with JsonMetadataStore(self.settings.meta_path_expanded) as store:
            advisor = StartupAdvisor(store, self.settings)
            status = advisor.record_activation(
                workspace if workspace.exists() else None,
                current_version,
            )
            if args.install_status:
                status = InstallStatus(args.install_status)
                logger.info_ctx("Install status overridden", install_status=status.value)

            notices = advisor.evaluate(workspace if workspace.exists() else None, status)

        if not workspace.exists():
            self.console.print(
                f"[yellow]No dendron.yml in {workspace.ws_root}; config checks skipped[/yellow]"
            )
        self._print_notices(status, notices)
        return 0

    def _print_notices(self, status: InstallStatus, notices: List[Notice]) -> None:
        self.console.print(
            Panel.fit(f"Install status: [bold]{status.value}[/bold]", title="kb-lifecycle check")
        )
        if not notices:
            self.console.print("[green]✓ No notices due[/green]")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Notice")
        table.add_column("Message")
        table.add_column("Details")
        for notice in notices:
            table.add_row(notice.kind.value, notice.message, "\n".join(notice.details))
        self.console.print(table)
