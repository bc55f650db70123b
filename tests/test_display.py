"""Tests for pure display helpers used by the TUI cards."""

import logging

from hangar_dashboard.config.schema import IdentityConfig
from hangar_dashboard.display.logging_config import SecretRedactionFilter
from hangar_dashboard.errors import ApiError
from hangar_dashboard.models import CurrentUser, ProjectMetrics
from hangar_dashboard.tui.app import resolve_identity
from hangar_dashboard.tui.screens.home import parse_project_id
from hangar_dashboard.tui.widgets.error_message import remediation_link
from hangar_dashboard.tui.widgets.metrics_panel import memory_percent
from hangar_dashboard.tui.widgets.project_info import app_url, info_lines
from hangar_dashboard.tui.widgets.status_badge import badge_markup


class TestRemediationLink:
    def test_github_account_not_linked(self):
        link = remediation_link(ApiError("GITHUB_ACCOUNT_NOT_LINKED"), "my-app")
        assert link == "https://github.com/apps/my-app/installations/new"

    def test_repo_not_accessible(self):
        assert remediation_link(ApiError("GITHUB_REPO_NOT_ACCESSIBLE")) == "https://github.com/settings/installations"

    def test_other_codes(self):
        assert remediation_link(ApiError("IMAGE_SCAN_FAILED", "report")) is None


class TestBadge:
    def test_loading_before_first_value(self, i18n):
        assert "Loading..." in badge_markup(None, i18n)

    def test_unknown_status_uses_unknown_label(self, i18n):
        markup = badge_markup("zombie", i18n)
        assert "Unknown" in markup
        assert "grey50" in markup

    def test_running(self, i18n):
        assert badge_markup("running", i18n) == "[green]● Running[/green]"


class TestProjectInfo:
    def test_app_url(self):
        assert app_url("webapp", "apps.example.com") == "https://webapp.apps.example.com"

    def test_lines(self, make_details, i18n):
        details = make_details(
            source="github",
            source_branch="dev",
            persistent_volume_path="/data",
        )
        text = "\n".join(info_lines(details, i18n, "apps.example.com"))
        assert "Created on: 2024-05-01" in text
        assert "dev" in text
        assert "/data" in text
        assert "https://webapp.apps.example.com" in text
        assert "bob" in text

    def test_no_participant_line_when_empty(self, make_details, i18n):
        text = "\n".join(info_lines(make_details(participants=[]), i18n))
        assert "Participants:" not in text


class TestMemoryPercent:
    def test_ratio(self):
        assert memory_percent(ProjectMetrics(memory_usage=128, memory_limit=512)) == 25.0

    def test_zero_limit(self):
        assert memory_percent(ProjectMetrics(memory_usage=128, memory_limit=0)) == 0.0


class TestParseProjectId:
    def test_valid(self):
        assert parse_project_id(" 42 ") == 42

    def test_invalid(self):
        assert parse_project_id("abc") is None
        assert parse_project_id("0") is None
        assert parse_project_id("-3") is None


class TestResolveIdentity:
    def test_configured_login_replaces_fetched(self):
        user = resolve_identity(CurrentUser(login="bob"), IdentityConfig(login="alice", is_admin=True))
        assert user == CurrentUser(login="alice", is_admin=True)

    def test_admin_flag_only(self):
        user = resolve_identity(CurrentUser(login="bob"), IdentityConfig(is_admin=True))
        assert user == CurrentUser(login="bob", is_admin=True)

    def test_nothing_known(self):
        assert resolve_identity(None, IdentityConfig()) is None


class TestSecretRedaction:
    def test_registered_secret_is_scrubbed(self):
        flt = SecretRedactionFilter()
        flt.register("s3cretpass")
        flt.register("abc")  # too short, ignored
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "pw=%s abc", ("s3cretpass",), None)
        flt.filter(record)
        assert record.getMessage() == "pw=***REDACTED*** abc"
