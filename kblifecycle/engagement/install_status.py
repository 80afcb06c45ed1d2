"""Classify an activation as a fresh install, an upgrade or no version change."""

import logging
from typing import Optional

from packaging.version import InvalidVersion, Version

from kblifecycle.core.models import InstallStatus

logger = logging.getLogger(__name__)


def get_install_status(previous_version: Optional[str], current_version: str) -> InstallStatus:
    """
    Compare the version stored at the last activation with the running one.

    Any version change counts as UPGRADED, including a downgrade: both are
    a transition after which one-time config notices are due.
    """
    if not previous_version:
        return InstallStatus.INITIAL_INSTALL

    try:
        changed = Version(previous_version) != Version(current_version)
    except InvalidVersion:
        logger.debug(
            f"Non-PEP 440 version ({previous_version!r}, {current_version!r}), comparing as strings"
        )
        changed = previous_version.strip() != current_version.strip()

    return InstallStatus.UPGRADED if changed else InstallStatus.NO_CHANGE
