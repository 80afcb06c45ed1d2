"""Decide which user-facing notices are due at activation.

These predicates only read: the caller records the outcome (prompt time,
survey status, persisted backfill) after acting on a ``True`` result.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any, Optional

from kblifecycle.config import EngagementSettings, get_config
from kblifecycle.core.exceptions import LifecycleError
from kblifecycle.core.models import InactiveUserMsgStatus, InstallStatus, MetadataRecord
from kblifecycle.migration.engine import detect_deprecated_configs, detect_missing_defaults
from kblifecycle.store.metadata import MetadataStore

logger = logging.getLogger(__name__)


def now_seconds() -> int:
    """Current time in epoch seconds."""
    return int(time.time())


def activity_baseline(meta: MetadataRecord) -> Optional[int]:
    """
    Timestamp of the user's most recent known activity.

    The last lookup if there was one, else the first lookup, else the
    install time. ``None`` when nothing is recorded.
    """
    for value in (meta.last_lookup_time, meta.first_lookup_time, meta.first_install):
        if value is not None:
            return value
    return None


def is_inactive(meta: MetadataRecord, now: int, engagement: EngagementSettings) -> bool:
    """True if there has been no activity for the whole inactivity window."""
    baseline = activity_baseline(meta)
    if baseline is None:
        return False
    return now - baseline >= engagement.inactivity_seconds


def decide_inactive_user_survey(
    meta: MetadataRecord,
    now: int,
    engagement: EngagementSettings,
) -> bool:
    """Pure decision behind should_display_inactive_user_survey."""
    if meta.dendron_workspace_activated is not True:
        return False

    status = meta.inactive_user_msg_status
    if status == InactiveUserMsgStatus.SUBMITTED:
        return False

    if not is_inactive(meta, now, engagement):
        return False

    send_time = meta.inactive_user_msg_send_time
    if send_time is None:
        return True

    # Prompted before and either cancelled or never answered.
    return now - send_time >= engagement.survey_cooldown_seconds


def should_display_inactive_user_survey(
    store: MetadataStore,
    now: Optional[int] = None,
    engagement: Optional[EngagementSettings] = None,
) -> bool:
    """
    Decide whether to show the inactive user survey.

    Args:
        store: Open metadata store
        now: Current epoch seconds (defaults to the wall clock)
        engagement: Time windows (defaults to the global settings)

    Returns:
        True if the survey should be shown. Never raises: invalid settings or
        a store failure are logged and count as "do not show".
    """
    if now is None:
        now = now_seconds()

    try:
        if engagement is None:
            engagement = get_config().engagement
        meta = store.get_meta()
    except LifecycleError as e:
        logger.warning(f"Cannot read settings or metadata, skipping inactive user survey: {e}")
        return False

    show = decide_inactive_user_survey(meta, now, engagement)
    logger.debug(f"Inactive user survey due: {show}")
    return show


def _effective_config(ext: Any) -> Any:
    """Effective config of a Workspace-like object, or the mapping itself."""
    if ext is None or isinstance(ext, Mapping):
        return ext
    return ext.config


def should_display_missing_default_config_message(ext: Any, extension_install_status) -> bool:
    """
    True iff this activation is an upgrade and the config lacks default keys.

    Args:
        ext: Workspace (anything with a ``config`` property) or a config mapping
        extension_install_status: InstallStatus of this activation
    """
    if InstallStatus(extension_install_status) != InstallStatus.UPGRADED:
        return False

    try:
        config = _effective_config(ext)
    except LifecycleError as e:
        logger.warning(f"Cannot read workspace config, skipping missing defaults check: {e}")
        return False

    return detect_missing_defaults(config).needs_backfill


def should_display_deprecated_config_message(ext: Any, extension_install_status) -> bool:
    """
    True iff this activation is an upgrade and the config holds deprecated keys.

    Args:
        ext: Workspace (anything with a ``config`` property) or a config mapping
        extension_install_status: InstallStatus of this activation
    """
    if InstallStatus(extension_install_status) != InstallStatus.UPGRADED:
        return False

    try:
        config = _effective_config(ext)
    except LifecycleError as e:
        logger.warning(f"Cannot read workspace config, skipping deprecated config check: {e}")
        return False

    return len(detect_deprecated_configs(config)) > 0
