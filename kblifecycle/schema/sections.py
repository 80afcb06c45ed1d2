"""Typed schema for the workspace config document (dendron.yml, version 5).

Raw documents are handled as plain mappings by the migration and merge
code so that absent keys stay observable. These models are the typed view
of a document: any leaf may be omitted on input and validation fills the
default. Unknown keys are kept as extras so deprecated or user-custom keys
survive a round trip.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CURRENT_CONFIG_VERSION = 5


class ConfigSection(BaseModel):
    """Base for all config sections: camelCase keys, extras allowed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# Workspace section


class VaultEntry(ConfigSection):
    """One vault declared in ``workspace.vaults``."""

    fs_path: str
    name: Optional[str] = None
    seed: Optional[str] = None
    remote: Optional[Dict[str, Any]] = None


AddBehavior = Literal["childOfDomain", "childOfDomainNamespace", "childOfCurrent", "asOwnDomain"]


class JournalConfig(ConfigSection):
    daily_domain: str = "daily"
    name: str = "journal"
    date_format: str = "y.MM.dd"
    add_behavior: AddBehavior = "childOfDomain"


class ScratchConfig(ConfigSection):
    name: str = "scratch"
    date_format: str = "y.MM.dd.HHmmss"
    add_behavior: AddBehavior = "asOwnDomain"


def _default_status_symbols() -> Dict[str, str]:
    return {
        "": " ",
        "wip": "w",
        "done": "x",
        "assigned": "a",
        "moved": "m",
        "blocked": "b",
        "delegated": "l",
        "dropped": "d",
        "pending": "y",
    }


def _default_priority_symbols() -> Dict[str, str]:
    return {"H": "high", "M": "medium", "L": "low"}


class TaskConfig(ConfigSection):
    name: str = "task"
    date_format: str = "y.MM.dd"
    add_behavior: AddBehavior = "asOwnDomain"
    status_symbols: Dict[str, str] = Field(default_factory=_default_status_symbols)
    priority_symbols: Dict[str, str] = Field(default_factory=_default_priority_symbols)
    todo_integration: bool = False
    create_task_selection_type: Literal["selection2link", "selectionExtract", "none"] = "selection2link"


class GraphConfig(ConfigSection):
    zoom_speed: float = 1


def _default_vaults() -> List[VaultEntry]:
    return [VaultEntry(fs_path="vault")]


class WorkspaceSection(ConfigSection):
    """Vaults, naming policies for journal/scratch/task notes, feature toggles."""

    vaults: List[VaultEntry] = Field(default_factory=_default_vaults)
    seeds: Optional[Dict[str, Any]] = None
    journal: JournalConfig = Field(default_factory=JournalConfig)
    scratch: ScratchConfig = Field(default_factory=ScratchConfig)
    task: TaskConfig = Field(default_factory=TaskConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    enable_auto_create_on_definition: bool = False
    enable_x_vault_wiki_link: bool = False
    enable_remote_vault_init: bool = True
    enable_user_tags: bool = True
    enable_hash_tags: bool = True
    workspace_vault_sync_mode: Literal["skip", "noPush", "noCommit", "sync"] = "noCommit"
    enable_auto_fold_frontmatter: bool = False
    enable_editor_decorations: bool = True
    max_previews_cached: int = 10
    max_note_length: int = 204800
    enable_full_hierarchy_note_title: bool = False


# Commands section


class LookupNoteConfig(ConfigSection):
    selection_mode: Literal["extract", "link", "none"] = "extract"
    confirm_vault_on_create: bool = True
    vault_selection_mode_on_create: Literal["smart", "alwaysPrompt"] = "smart"
    leave_trace: bool = False
    bubble_up_create_new: bool = True
    fuzz_threshold: float = 0.2


class LookupConfig(ConfigSection):
    note: LookupNoteConfig = Field(default_factory=LookupNoteConfig)


class RandomNoteConfig(ConfigSection):
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class CopyNoteLinkConfig(ConfigSection):
    non_note_file: Optional[Dict[str, Any]] = None


class InsertNoteConfig(ConfigSection):
    initial_value: str = "templates"


class InsertNoteLinkConfig(ConfigSection):
    alias_mode: Literal["snippet", "selection", "title", "prompt", "none"] = "none"
    enable_multi_select: bool = False


class InsertNoteIndexConfig(ConfigSection):
    enable_marker: bool = False


class CommandsSection(ConfigSection):
    """Per-command option objects."""

    lookup: LookupConfig = Field(default_factory=LookupConfig)
    random_note: RandomNoteConfig = Field(default_factory=RandomNoteConfig)
    copy_note_link: CopyNoteLinkConfig = Field(default_factory=CopyNoteLinkConfig)
    insert_note: InsertNoteConfig = Field(default_factory=InsertNoteConfig)
    insert_note_link: InsertNoteLinkConfig = Field(default_factory=InsertNoteLinkConfig)
    insert_note_index: InsertNoteIndexConfig = Field(default_factory=InsertNoteIndexConfig)


# Preview and publishing sections


class PreviewSection(ConfigSection):
    enable_fm_title: bool = Field(default=True, alias="enableFMTitle")
    enable_note_title_for_link: bool = True
    enable_frontmatter_tags: bool = True
    enable_hashes_for_fm_tags: bool = Field(default=False, alias="enableHashesForFMTags")
    enable_mermaid: bool = True
    enable_pretty_refs: bool = True
    enable_katex: bool = True
    automatically_show_preview: bool = False


class SeoConfig(ConfigSection):
    title: str = "Dendron"
    description: str = "Personal Knowledge Space"


class GithubConfig(ConfigSection):
    enable_edit_link: bool = True
    edit_link_text: str = "Edit this page on GitHub"
    edit_branch: str = "main"
    edit_view_mode: Literal["tree", "edit"] = "tree"


class DuplicateNoteBehavior(ConfigSection):
    action: Literal["useVault"] = "useVault"
    payload: List[str] = Field(default_factory=lambda: ["vault"])


class PublishingSection(ConfigSection):
    enable_fm_title: bool = Field(default=True, alias="enableFMTitle")
    enable_frontmatter_tags: bool = True
    enable_hashes_for_fm_tags: bool = Field(default=False, alias="enableHashesForFMTags")
    enable_katex: bool = True
    enable_mermaid: bool = True
    enable_note_title_for_link: bool = True
    copy_assets: bool = True
    enable_pretty_refs: bool = True
    site_hierarchies: List[str] = Field(default_factory=lambda: ["root"])
    write_stubs: bool = False
    site_root_dir: str = "docs"
    seo: SeoConfig = Field(default_factory=SeoConfig)
    github: GithubConfig = Field(default_factory=GithubConfig)
    enable_site_last_modified: bool = True
    enable_randomly_colored_tags: bool = True
    enable_pretty_links: bool = True
    duplicate_note_behavior: DuplicateNoteBehavior = Field(default_factory=DuplicateNoteBehavior)


class DevSection(ConfigSection):
    enable_preview_v2: bool = True


class DendronConfig(ConfigSection):
    """Typed view of a complete workspace config document."""

    version: int = CURRENT_CONFIG_VERSION
    dev: DevSection = Field(default_factory=DevSection)
    commands: CommandsSection = Field(default_factory=CommandsSection)
    workspace: WorkspaceSection = Field(default_factory=WorkspaceSection)
    preview: PreviewSection = Field(default_factory=PreviewSection)
    publishing: PublishingSection = Field(default_factory=PublishingSection)

    def to_raw(self) -> Dict[str, Any]:
        """Dump as a raw document with camelCase keys, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
