"""Tests for the activation pass (StartupAdvisor)."""

import pytest

from kblifecycle.config import EngagementSettings, LifecycleSettings
from kblifecycle.core.models import InactiveUserMsgStatus, InstallStatus, NoticeKind
from kblifecycle.engagement.startup import StartupAdvisor
from kblifecycle.migration.paths import MISSING, get_path
from kblifecycle.schema.defaults import gen_default_config
from kblifecycle.workspace.config_file import read_raw_config, write_config
from kblifecycle.workspace.workspace import Workspace

WEEK = 604800


@pytest.fixture
def advisor(store, settings, clock):
    return StartupAdvisor(store, settings, clock=clock)


@pytest.fixture
def outdated_workspace(workspace, ws_root):
    """Workspace whose dendron.yml lacks a default key and holds a deprecated one."""
    config = gen_default_config()
    del config["workspace"]["workspaceVaultSyncMode"]
    config["dev"]["enableWebUI"] = True
    write_config(ws_root, config)
    return workspace


class TestRecordActivation:
    """Test StartupAdvisor.record_activation()."""

    def test_first_activation(self, advisor, store, workspace, clock):
        status = advisor.record_activation(workspace, "0.1.0")

        meta = store.get_meta()
        assert status == InstallStatus.INITIAL_INSTALL
        assert meta.first_install == clock.now
        assert meta.first_ws_initialize == clock.now
        assert meta.dendron_workspace_activated is True
        assert meta.extension_version == "0.1.0"

    def test_same_version(self, advisor, workspace):
        advisor.record_activation(workspace, "0.1.0")
        assert advisor.record_activation(workspace, "0.1.0") == InstallStatus.NO_CHANGE

    def test_upgrade(self, advisor, store, workspace):
        advisor.record_activation(workspace, "0.1.0")

        assert advisor.record_activation(workspace, "0.2.0") == InstallStatus.UPGRADED
        assert store.get_meta().extension_version == "0.2.0"

    def test_first_timestamps_are_kept(self, advisor, store, workspace, clock):
        first = clock.now
        advisor.record_activation(workspace, "0.1.0")
        clock.advance(WEEK)

        advisor.record_activation(workspace, "0.1.0")

        meta = store.get_meta()
        assert meta.first_install == first
        assert meta.first_ws_initialize == first

    def test_without_workspace(self, advisor, store, tmp_path):
        advisor.record_activation(Workspace(tmp_path / "empty"), "0.1.0")
        advisor.record_activation(None, "0.1.0")

        meta = store.get_meta()
        assert meta.first_install is not None
        assert meta.first_ws_initialize is None
        assert meta.dendron_workspace_activated is None


class TestEvaluate:
    """Test StartupAdvisor.evaluate()."""

    def test_upgrade_with_outdated_config(self, advisor, outdated_workspace):
        notices = advisor.evaluate(outdated_workspace, InstallStatus.UPGRADED)

        assert [n.kind for n in notices] == [NoticeKind.MISSING_DEFAULT_CONFIG, NoticeKind.DEPRECATED_CONFIG]
        assert notices[0].details == ["workspace.workspaceVaultSyncMode"]
        assert notices[1].details == ["dev.enableWebUI"]

    @pytest.mark.parametrize("status", [InstallStatus.NO_CHANGE, InstallStatus.INITIAL_INSTALL])
    def test_no_config_notices_without_upgrade(self, advisor, outdated_workspace, status):
        assert advisor.evaluate(outdated_workspace, status) == []

    def test_config_notices_can_be_disabled(self, store, clock, outdated_workspace):
        settings = LifecycleSettings(engagement=EngagementSettings(config_notices_enabled=False))
        advisor = StartupAdvisor(store, settings, clock=clock)

        assert advisor.evaluate(outdated_workspace, InstallStatus.UPGRADED) == []

    def test_local_override_fills_missing_key(self, advisor, outdated_workspace, ws_root):
        (ws_root / "dendronrc.yml").write_text("workspace:\n  workspaceVaultSyncMode: sync\n")

        notices = advisor.evaluate(outdated_workspace, InstallStatus.UPGRADED)

        assert [n.kind for n in notices] == [NoticeKind.DEPRECATED_CONFIG]

    def test_unreadable_config_skips_config_notices(self, advisor, workspace, ws_root):
        (ws_root / "dendron.yml").write_text("- not\n- a mapping\n")

        assert advisor.evaluate(workspace, InstallStatus.UPGRADED) == []

    def test_inactive_user_survey(self, advisor, store, workspace, clock):
        advisor.record_activation(workspace, "0.1.0")
        clock.advance(5 * WEEK)

        notices = advisor.evaluate(workspace, InstallStatus.NO_CHANGE)

        assert [n.kind for n in notices] == [NoticeKind.INACTIVE_USER_SURVEY]

    def test_active_user_gets_no_survey(self, advisor, workspace, clock):
        advisor.record_activation(workspace, "0.1.0")
        clock.advance(5 * WEEK)
        advisor.record_lookup()

        assert advisor.evaluate(workspace, InstallStatus.NO_CHANGE) == []

    def test_evaluate_does_not_write_metadata(self, advisor, store, workspace, clock):
        advisor.record_activation(workspace, "0.1.0")
        clock.advance(5 * WEEK)
        before = store.get_meta()

        advisor.evaluate(workspace, InstallStatus.NO_CHANGE)

        assert store.get_meta() == before


class TestUsageRecording:
    """Test lookup and survey bookkeeping."""

    def test_record_lookup(self, advisor, store, clock):
        advisor.record_lookup()
        first = clock.now
        clock.advance(100)
        advisor.record_lookup()

        meta = store.get_meta()
        assert meta.first_lookup_time == first
        assert meta.last_lookup_time == first + 100

    def test_record_survey_response(self, advisor, store, clock):
        advisor.record_survey_response(InactiveUserMsgStatus.CANCELLED)

        meta = store.get_meta()
        assert meta.inactive_user_msg_status == InactiveUserMsgStatus.CANCELLED
        assert meta.inactive_user_msg_send_time == clock.now

    def test_survey_cycle(self, advisor, workspace, clock):
        advisor.record_activation(workspace, "0.1.0")
        clock.advance(5 * WEEK)
        assert advisor.evaluate(workspace, InstallStatus.NO_CHANGE)

        advisor.record_survey_response("cancelled")
        assert advisor.evaluate(workspace, InstallStatus.NO_CHANGE) == []

        clock.advance(4 * WEEK)
        assert [n.kind for n in advisor.evaluate(workspace, InstallStatus.NO_CHANGE)] == [
            NoticeKind.INACTIVE_USER_SURVEY
        ]

        advisor.record_survey_response("submitted")
        clock.advance(52 * WEEK)
        assert advisor.evaluate(workspace, InstallStatus.NO_CHANGE) == []


class TestConfigMaintenance:
    """Test backfill and deprecation cleanup on dendron.yml."""

    def test_apply_backfill(self, advisor, outdated_workspace, ws_root):
        added = advisor.apply_backfill(outdated_workspace)

        assert added == ["workspace.workspaceVaultSyncMode"]
        raw = read_raw_config(ws_root)
        assert raw["workspace"]["workspaceVaultSyncMode"] == "noCommit"
        assert raw["dev"]["enableWebUI"] is True

    def test_apply_backfill_dry_run(self, advisor, outdated_workspace, ws_root):
        added = advisor.apply_backfill(outdated_workspace, dry_run=True)

        assert added == ["workspace.workspaceVaultSyncMode"]
        assert get_path(read_raw_config(ws_root), "workspace.workspaceVaultSyncMode") is MISSING

    def test_backfill_ignores_local_overrides(self, advisor, outdated_workspace, ws_root):
        (ws_root / "dendronrc.yml").write_text("workspace:\n  workspaceVaultSyncMode: sync\n")

        advisor.apply_backfill(outdated_workspace)

        assert read_raw_config(ws_root)["workspace"]["workspaceVaultSyncMode"] == "noCommit"
        assert outdated_workspace.config["workspace"]["workspaceVaultSyncMode"] == "sync"

    def test_apply_deprecation_cleanup(self, advisor, outdated_workspace, ws_root):
        removed = advisor.apply_deprecation_cleanup(outdated_workspace)

        assert removed == ["dev.enableWebUI"]
        assert get_path(read_raw_config(ws_root), "dev.enableWebUI") is MISSING

    def test_cleanup_dry_run(self, advisor, outdated_workspace, ws_root):
        assert advisor.apply_deprecation_cleanup(outdated_workspace, dry_run=True) == ["dev.enableWebUI"]
        assert read_raw_config(ws_root)["dev"]["enableWebUI"] is True

    def test_no_notices_after_maintenance(self, advisor, outdated_workspace):
        advisor.apply_backfill(outdated_workspace)
        advisor.apply_deprecation_cleanup(outdated_workspace)

        assert advisor.evaluate(outdated_workspace, InstallStatus.UPGRADED) == []
