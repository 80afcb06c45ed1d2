"""Test configuration and shared fixtures."""

import pytest
import yaml
from pathlib import Path

import kblifecycle.config as config_module
from kblifecycle.config import LifecycleSettings, set_config
from kblifecycle.schema.defaults import gen_default_config
from kblifecycle.store.metadata import InMemoryMetadataStore
from kblifecycle.workspace.workspace import Workspace


# =============================================================================
# TEST CONSTANTS
# =============================================================================
# Fixed "now" for heuristic tests: 2023-11-14T22:13:20Z
NOW = 1_700_000_000
WEEK = 604800


def write_yaml(path: Path, data) -> Path:
    """Write ``data`` as YAML, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)
    return path


def read_yaml(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Give every test its own settings with storage under tmp_path."""
    monkeypatch.setattr(config_module, "_USER_CONFIG_PATH", tmp_path / "home" / ".dendron" / "lifecycle.json")
    for var in (
        "KB_LIFECYCLE_LOG_LEVEL",
        "KB_LIFECYCLE_JSON_LOGS",
        "KB_LIFECYCLE_META_PATH",
        "KB_LIFECYCLE_HOME_DIR",
        "KB_LIFECYCLE_EXTENSION_VERSION",
        "KB_LIFECYCLE_ENGAGEMENT__INACTIVITY_WEEKS",
        "KB_LIFECYCLE_ENGAGEMENT__SURVEY_COOLDOWN_WEEKS",
        "KB_LIFECYCLE_ENGAGEMENT__CONFIG_NOTICES_ENABLED",
    ):
        monkeypatch.delenv(var, raising=False)

    home = tmp_path / "home"
    home.mkdir()
    settings = LifecycleSettings(
        home_dir=str(home),
        meta_path=str(home / ".dendron" / "meta.json"),
    )
    set_config(settings)
    yield settings
    set_config(None)


@pytest.fixture
def settings(isolated_config):
    return isolated_config


@pytest.fixture
def home_dir(settings) -> Path:
    return settings.home_path


@pytest.fixture
def ws_root(tmp_path) -> Path:
    """Workspace root holding a complete default dendron.yml."""
    root = tmp_path / "notes"
    root.mkdir()
    write_yaml(root / "dendron.yml", gen_default_config())
    return root


@pytest.fixture
def workspace(ws_root, home_dir) -> Workspace:
    return Workspace(ws_root, home=home_dir)


@pytest.fixture
def store():
    """Open in-memory metadata store."""
    s = InMemoryMetadataStore()
    s.open()
    yield s
    s.close()


@pytest.fixture
def clock():
    """Settable clock returning NOW until changed."""

    class FixedClock:
        def __init__(self):
            self.now = NOW

        def __call__(self) -> int:
            return self.now

        def advance(self, seconds: int) -> None:
            self.now += seconds

    return FixedClock()
