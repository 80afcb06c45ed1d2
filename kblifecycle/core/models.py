"""Core data models for kb-lifecycle."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ConfigScope(str, Enum):
    """Origin of a configuration fragment, used for merge precedence."""

    WORKSPACE = "workspace"  # Workspace-local override next to dendron.yml
    LOCAL = "local"  # Machine-local override, same file location as WORKSPACE
    GLOBAL = "global"  # User-wide override under ~/.dendron


class InstallStatus(str, Enum):
    """Classification of the current activation relative to the last one."""

    INITIAL_INSTALL = "initial_install"
    UPGRADED = "upgraded"
    NO_CHANGE = "no_change"


class InactiveUserMsgStatus(str, Enum):
    """User response to the inactive user survey."""

    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class NoticeKind(str, Enum):
    """Kinds of user-facing notices the startup pass can request."""

    MISSING_DEFAULT_CONFIG = "missing_default_config"
    DEPRECATED_CONFIG = "deprecated_config"
    INACTIVE_USER_SURVEY = "inactive_user_survey"


@dataclass(frozen=True)
class DeprecatedPath:
    """A dotted config path that became obsolete at a schema version."""

    path: str
    since_version: int

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class ScopedOverride:
    """A partial config document tagged with the scope it came from."""

    scope: ConfigScope
    config: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "scope", ConfigScope(self.scope))


class MigrationResult(BaseModel):
    """Output of missing-default detection."""

    needs_backfill: bool
    backfilled_config: Dict[str, Any]
    missing_paths: List[str] = Field(default_factory=list)


class MetadataRecord(BaseModel):
    """
    Persisted usage metadata.

    Every field is optional: an unset field means the event never happened.
    Timestamps are epoch seconds. On disk the keys are camelCase
    (``firstInstall``, ``lastLookupTime``...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_install: Optional[int] = None
    first_ws_initialize: Optional[int] = None
    dendron_workspace_activated: Optional[bool] = None
    first_lookup_time: Optional[int] = None
    last_lookup_time: Optional[int] = None
    inactive_user_msg_status: Optional[InactiveUserMsgStatus] = None
    inactive_user_msg_send_time: Optional[int] = None
    extension_version: Optional[str] = None

    @classmethod
    def field_for(cls, name: str) -> Optional[str]:
        """Resolve a camelCase alias or snake_case name to the attribute name."""
        if name in cls.model_fields:
            return name
        for attr, info in cls.model_fields.items():
            if info.alias == name:
                return attr
        return None

    @classmethod
    def aliases(cls) -> List[str]:
        """All camelCase field names, in declaration order."""
        return [info.alias or attr for attr, info in cls.model_fields.items()]

    def to_storage(self) -> Dict[str, Any]:
        """Serialize set fields with their camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Notice(BaseModel):
    """A notice the host UI should render."""

    kind: NoticeKind
    title: str
    message: str
    details: List[str] = Field(default_factory=list)
