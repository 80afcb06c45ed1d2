"""One activation pass: bookkeeping, install classification and notice selection."""

from typing import Callable, List, Optional

from kblifecycle.config import LifecycleSettings, get_config
from kblifecycle.core.exceptions import LifecycleError
from kblifecycle.core.models import (
    InactiveUserMsgStatus,
    InstallStatus,
    Notice,
    NoticeKind,
)
from kblifecycle.engagement.heuristic import (
    decide_inactive_user_survey,
    now_seconds,
    should_display_deprecated_config_message,
    should_display_missing_default_config_message,
)
from kblifecycle.engagement.install_status import get_install_status
from kblifecycle.logging.structured_logger import get_logger
from kblifecycle.migration.engine import (
    detect_deprecated_configs,
    detect_missing_defaults,
    remove_deprecated_configs,
)
from kblifecycle.store.metadata import MetadataStore
from kblifecycle.workspace.config_file import write_config
from kblifecycle.workspace.workspace import Workspace

logger = get_logger(__name__)


class StartupAdvisor:
    """
    Runs the activation checks against an injected metadata store.

    "Read metadata, decide, write prompt metadata" must run once per
    activation; two concurrent activations sharing one store could both
    decide to prompt.
    """

    def __init__(
        self,
        store: MetadataStore,
        settings: Optional[LifecycleSettings] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize startup advisor.

        Args:
            store: Open metadata store
            settings: Settings (defaults to the global settings)
            clock: Returns the current epoch seconds (defaults to wall clock)

        Raises:
            ConfigurationError: If no settings are given and the global ones are invalid
        """
        self.store = store
        self.settings = settings or get_config()
        self.clock = clock or now_seconds

    def record_activation(self, workspace: Optional[Workspace], current_version: str) -> InstallStatus:
        """
        Record an activation and classify it against the stored version.

        Sets ``firstInstall`` once, ``firstWsInitialize`` once a workspace
        exists, marks the workspace activated and stores ``current_version``.
        """
        now = self.clock()
        meta = self.store.get_meta()

        if meta.first_install is None:
            self.store.set_meta("firstInstall", now)

        has_workspace = workspace is not None and workspace.exists()
        if has_workspace:
            if meta.first_ws_initialize is None:
                self.store.set_meta("firstWsInitialize", now)
            self.store.set_meta("dendronWorkspaceActivated", True)

        status = get_install_status(meta.extension_version, current_version)
        self.store.set_meta("extensionVersion", current_version)

        logger.info_ctx(
            "Activation recorded",
            version=current_version,
            install_status=status.value,
            has_workspace=has_workspace,
        )
        return status

    def evaluate(self, workspace: Optional[Workspace], install_status: InstallStatus) -> List[Notice]:
        """
        Return the notices due for this activation, in display order.

        Config notices come first (they can only fire on an upgrade), then
        the inactive user survey.
        """
        notices: List[Notice] = []

        if workspace is not None and self.settings.engagement.config_notices_enabled:
            notices.extend(self._config_notices(workspace, install_status))

        try:
            meta = self.store.get_meta()
        except LifecycleError as e:
            logger.warning(f"Cannot read metadata, skipping inactive user survey: {e}")
        else:
            if decide_inactive_user_survey(meta, self.clock(), self.settings.engagement):
                notices.append(
                    Notice(
                        kind=NoticeKind.INACTIVE_USER_SURVEY,
                        title="We miss you!",
                        message=(
                            "You haven't used lookup in a while. "
                            "Would you tell us what we could do better?"
                        ),
                    )
                )

        logger.info(f"Notices due: {[n.kind.value for n in notices] or 'none'}")
        return notices

    def _config_notices(self, workspace: Workspace, install_status: InstallStatus) -> List[Notice]:
        try:
            config = workspace.config
        except LifecycleError as e:
            logger.warning(f"Cannot read workspace config, skipping config notices: {e}")
            return []

        notices = []
        if should_display_missing_default_config_message(config, install_status):
            missing = detect_missing_defaults(config).missing_paths
            notices.append(
                Notice(
                    kind=NoticeKind.MISSING_DEFAULT_CONFIG,
                    title="Missing default config",
                    message=(
                        f"{len(missing)} config key(s) introduced by this version are not in "
                        "dendron.yml. Add them with their default values?"
                    ),
                    details=missing,
                )
            )
        if should_display_deprecated_config_message(config, install_status):
            deprecated = detect_deprecated_configs(config)
            notices.append(
                Notice(
                    kind=NoticeKind.DEPRECATED_CONFIG,
                    title="Deprecated config",
                    message=(
                        f"{len(deprecated)} config key(s) in your workspace are no longer used. "
                        "Remove them?"
                    ),
                    details=deprecated,
                )
            )
        return notices

    def record_lookup(self) -> None:
        """Record a note lookup (first and last lookup times)."""
        now = self.clock()
        if self.store.get_meta().first_lookup_time is None:
            self.store.set_meta("firstLookupTime", now)
        self.store.set_meta("lastLookupTime", now)

    def record_survey_response(self, status: InactiveUserMsgStatus) -> None:
        """Record the user's answer to the inactive user survey."""
        status = InactiveUserMsgStatus(status)
        self.store.set_meta("inactiveUserMsgStatus", status)
        self.store.set_meta("inactiveUserMsgSendTime", self.clock())
        logger.info(f"Inactive user survey {status.value}")

    def apply_backfill(self, workspace: Workspace, dry_run: bool = False) -> List[str]:
        """
        Add missing default keys to dendron.yml.

        Returns:
            Dotted paths that were (or with dry_run, would be) added
        """
        result = detect_missing_defaults(workspace.raw_config)
        if result.needs_backfill and not dry_run:
            write_config(workspace.ws_root, result.backfilled_config)
            logger.info(f"Backfilled {len(result.missing_paths)} default config key(s)")
        return result.missing_paths

    def apply_deprecation_cleanup(self, workspace: Workspace, dry_run: bool = False) -> List[str]:
        """
        Remove deprecated keys from dendron.yml.

        Returns:
            Dotted paths that were (or with dry_run, would be) removed
        """
        cleaned, removed = remove_deprecated_configs(workspace.raw_config)
        if removed and not dry_run:
            write_config(workspace.ws_root, cleaned)
        return removed
