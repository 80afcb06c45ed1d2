"""Engagement heuristic, install classification and the startup pass."""

from kblifecycle.engagement.heuristic import (
    should_display_deprecated_config_message,
    should_display_inactive_user_survey,
    should_display_missing_default_config_message,
)
from kblifecycle.engagement.install_status import get_install_status
from kblifecycle.engagement.startup import StartupAdvisor

__all__ = [
    "StartupAdvisor",
    "get_install_status",
    "should_display_deprecated_config_message",
    "should_display_inactive_user_survey",
    "should_display_missing_default_config_message",
]
