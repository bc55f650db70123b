"""Tests for the per-card controllers."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from hangar_dashboard.dashboard.actions import (
    ControlAction,
    ControlPanel,
    DangerZone,
    DatabaseManager,
    DeployMethod,
    EnvManager,
    ImageUpdateForm,
    LogViewer,
    ParticipantManager,
    PersonalDatabase,
    ProjectCreator,
    parse_participants,
)
from hangar_dashboard.errors import ApiError
from hangar_dashboard.models import OwnedProject


@pytest.fixture()
def client():
    return MagicMock()


# ── ControlPanel ─────────────────────────────────────────────────────────


class TestControlPanel:
    def test_success_sets_banner_and_schedules_reload(self, client):
        client.start_project = AsyncMock()
        on_update = MagicMock()
        schedule = MagicMock()
        panel = ControlPanel(client, 7, on_update, reload_delay=1.5, schedule=schedule)

        assert asyncio.run(panel.run(ControlAction.START)) is True
        client.start_project.assert_awaited_once_with(7)
        assert panel.success_key == "project_dashboard.start_success"
        assert panel.in_flight is False
        schedule.assert_called_once_with(1.5, on_update)
        on_update.assert_not_called()

    def test_reload_fires_after_delay(self, client):
        client.restart_project = AsyncMock()
        on_update = MagicMock()

        async def scenario():
            panel = ControlPanel(client, 7, on_update, reload_delay=0.1)
            await panel.run(ControlAction.RESTART)
            assert on_update.call_count == 0
            await asyncio.sleep(0.2)

        asyncio.run(scenario())
        on_update.assert_called_once_with()

    def test_shared_in_flight_flag_refuses_second_action(self, client):
        gate = asyncio.Event()

        async def slow_stop(project_id):
            await gate.wait()

        client.stop_project = AsyncMock(side_effect=slow_stop)
        client.start_project = AsyncMock()
        panel = ControlPanel(client, 7, MagicMock(), schedule=MagicMock())

        async def scenario():
            first = asyncio.ensure_future(panel.run(ControlAction.STOP))
            await asyncio.sleep(0)
            assert panel.in_flight is True
            second = await panel.run(ControlAction.START)
            gate.set()
            return await first, second

        assert asyncio.run(scenario()) == (True, False)
        client.start_project.assert_not_awaited()

    def test_failure_is_logged_only(self, client, caplog):
        client.stop_project = AsyncMock(side_effect=ApiError("HTTP_ERROR_500"))
        on_update = MagicMock()
        schedule = MagicMock()
        panel = ControlPanel(client, 7, on_update, schedule=schedule)

        assert asyncio.run(panel.run(ControlAction.STOP)) is False
        assert panel.success_key is None
        assert panel.in_flight is False
        schedule.assert_not_called()
        assert "HTTP_ERROR_500" in caplog.text

    def test_state_callback_sees_flag_toggle(self, client):
        client.start_project = AsyncMock()
        seen = []
        panel = ControlPanel(client, 7, MagicMock(), schedule=MagicMock(), on_state=lambda: seen.append(panel.in_flight))
        asyncio.run(panel.run(ControlAction.START))
        assert seen == [True, False]


# ── LogViewer ────────────────────────────────────────────────────────────


class TestLogViewer:
    def test_placeholders(self, client, i18n):
        viewer = LogViewer(client, 7, i18n)
        assert viewer.placeholder_key == "project_dashboard.logs_placeholder"

        client.get_project_logs = AsyncMock(return_value="")
        asyncio.run(viewer.fetch())
        assert viewer.placeholder_key == "project_dashboard.logs_empty"

    def test_fetch_error_interpolated(self, client, i18n):
        client.get_project_logs = AsyncMock(side_effect=ApiError("NOT_FOUND"))
        viewer = LogViewer(client, 7, i18n)
        asyncio.run(viewer.fetch())
        assert viewer.error == "Error fetching logs: NOT_FOUND"
        assert viewer.placeholder_key is None
        assert viewer.is_loading is False

    def test_lines_are_parsed(self, client, i18n):
        client.get_project_logs = AsyncMock(return_value="2024-01-01T00:00:00Z ERROR boom\n")
        viewer = LogViewer(client, 7, i18n)
        asyncio.run(viewer.fetch())
        assert [line.message for line in viewer.lines] == ["ERROR boom"]


# ── ParticipantManager ───────────────────────────────────────────────────


class TestParticipantManager:
    def test_empty_input_never_calls_api(self, client, i18n):
        client.add_participant = AsyncMock()
        manager = ParticipantManager(client, 7, MagicMock(), i18n)
        manager.new_participant = "   "
        assert asyncio.run(manager.add()) is False
        client.add_participant.assert_not_awaited()

    def test_add_success_clears_input_and_reloads(self, client, i18n):
        client.add_participant = AsyncMock()
        on_update = MagicMock()
        manager = ParticipantManager(client, 7, on_update, i18n)
        manager.new_participant = " carol "
        assert asyncio.run(manager.add()) is True
        client.add_participant.assert_awaited_once_with(7, "carol")
        assert manager.new_participant == ""
        on_update.assert_called_once_with()

    def test_add_failure_shown_inline(self, client, i18n):
        client.add_participant = AsyncMock(side_effect=ApiError("OWNER_CANNOT_BE_PARTICIPANT"))
        on_update = MagicMock()
        manager = ParticipantManager(client, 7, on_update, i18n)
        manager.new_participant = "alice"
        assert asyncio.run(manager.add()) is False
        assert manager.error == ApiError("OWNER_CANNOT_BE_PARTICIPANT")
        assert manager.new_participant == "alice"
        on_update.assert_not_called()

    def test_remove_failure_logged_not_shown(self, client, i18n, caplog):
        client.remove_participant = AsyncMock(side_effect=ApiError("HTTP_ERROR_500"))
        on_update = MagicMock()
        manager = ParticipantManager(client, 7, on_update, i18n)
        assert asyncio.run(manager.remove("bob")) is False
        assert manager.error is None
        on_update.assert_not_called()
        assert "bob" in caplog.text

    def test_removal_confirmation_names_participant(self, client, i18n):
        manager = ParticipantManager(client, 7, MagicMock(), i18n)
        assert manager.removal_confirmation("bob") == "Are you sure you want to remove bob from the project?"


# ── ImageUpdateForm ──────────────────────────────────────────────────────


class TestImageUpdateForm:
    def test_github_project_rebuilds_without_input(self, client, i18n, make_project):
        client.rebuild_project = AsyncMock()
        on_update = MagicMock()
        form = ImageUpdateForm(client, make_project(source="github", source_url="https://github.com/a/b"), on_update, i18n)

        assert form.is_github is True
        assert form.labels.button == "project_dashboard.rebuild_button"
        assert form.confirmation() == (
            "Are you sure you want to rebuild the project 'webapp'? This may take a few moments."
        )
        assert asyncio.run(form.submit()) is True
        client.rebuild_project.assert_awaited_once_with(7)
        on_update.assert_called_once_with()

    def test_direct_project_requires_url(self, client, i18n, make_project):
        client.update_project_image = AsyncMock()
        form = ImageUpdateForm(client, make_project(), MagicMock(), i18n)

        assert form.labels.button == "project_dashboard.update_image_button"
        assert form.can_submit() is False
        assert asyncio.run(form.submit()) is False
        client.update_project_image.assert_not_awaited()

        form.new_image_url = "ghcr.io/alice/webapp:2.0"
        assert asyncio.run(form.submit()) is True
        client.update_project_image.assert_awaited_once_with(7, "ghcr.io/alice/webapp:2.0")
        assert form.new_image_url == ""

    def test_failure_keeps_input_and_shows_error(self, client, i18n, make_project):
        client.update_project_image = AsyncMock(side_effect=ApiError("IMAGE_SCAN_FAILED", "CVE-1"))
        on_update = MagicMock()
        form = ImageUpdateForm(client, make_project(), on_update, i18n)
        form.new_image_url = "bad:image"
        assert asyncio.run(form.submit()) is False
        assert form.error == ApiError("IMAGE_SCAN_FAILED", "CVE-1")
        assert form.new_image_url == "bad:image"
        assert form.is_updating is False
        on_update.assert_not_called()


# ── EnvManager ───────────────────────────────────────────────────────────


class TestEnvManager:
    def test_save_scenario(self, client):
        client.update_env_vars = AsyncMock()
        on_update = MagicMock()
        manager = EnvManager(client, 7, {"OLD": "x"}, on_update)
        assert manager.text == "OLD=x"

        manager.edit("A=1\nBAD\nB = 2 \n=skip")
        assert asyncio.run(manager.save()) is True
        client.update_env_vars.assert_awaited_once_with(7, {"A": "1", "B": "2"})
        assert manager.success is True
        on_update.assert_called_once_with()

    def test_edit_after_success_clears_banner(self, client):
        client.update_env_vars = AsyncMock()
        manager = EnvManager(client, 7, None, MagicMock())
        asyncio.run(manager.save())
        assert manager.success is True
        manager.edit("A=2")
        assert manager.success is False

    def test_failure_shows_error(self, client):
        client.update_env_vars = AsyncMock(side_effect=ApiError("CLIENT_ERROR", "timeout"))
        on_update = MagicMock()
        manager = EnvManager(client, 7, None, on_update)
        assert asyncio.run(manager.save()) is False
        assert manager.error == ApiError("CLIENT_ERROR", "timeout")
        assert manager.success is False
        on_update.assert_not_called()


# ── DatabaseManager ──────────────────────────────────────────────────────


class TestDatabaseManager:
    def test_create_and_link(self, client, i18n, make_database):
        client.create_database = AsyncMock(return_value=make_database(id=11))
        client.link_database_to_project = AsyncMock()
        on_update = MagicMock()
        manager = DatabaseManager(client, 7, on_update, i18n)

        assert asyncio.run(manager.create_and_link()) is True
        client.link_database_to_project.assert_awaited_once_with(7, 11)
        on_update.assert_called_once_with()
        assert manager.error is None

    def test_link_failure_after_create_reports_link_failed(self, client, i18n, make_database):
        client.create_database = AsyncMock(return_value=make_database(id=11))
        client.link_database_to_project = AsyncMock(side_effect=ApiError("HTTP_ERROR_500"))
        on_update = MagicMock()
        manager = DatabaseManager(client, 7, on_update, i18n)

        assert asyncio.run(manager.create_and_link()) is False
        assert manager.error == ApiError("LINK_FAILED")
        assert manager.is_loading is False
        on_update.assert_not_called()

    def test_create_failure_reports_own_error(self, client, i18n):
        client.create_database = AsyncMock(side_effect=ApiError("DATABASE_ALREADY_EXISTS"))
        client.link_database_to_project = AsyncMock()
        manager = DatabaseManager(client, 7, MagicMock(), i18n)

        assert asyncio.run(manager.create_and_link()) is False
        assert manager.error == ApiError("DATABASE_ALREADY_EXISTS")
        client.link_database_to_project.assert_not_awaited()

    def test_unlink_delete_and_link_existing(self, client, i18n, make_database):
        client.unlink_database_from_project = AsyncMock()
        client.delete_linked_database = AsyncMock()
        client.link_database_to_project = AsyncMock()
        on_update = MagicMock()
        manager = DatabaseManager(client, 7, on_update, i18n)

        async def scenario():
            assert await manager.unlink()
            assert await manager.delete()
            assert await manager.link_existing(make_database(id=5))

        asyncio.run(scenario())
        client.unlink_database_from_project.assert_awaited_once_with(7)
        client.delete_linked_database.assert_awaited_once_with(7)
        client.link_database_to_project.assert_awaited_once_with(7, 5)
        assert on_update.call_count == 3

    def test_unlink_failure_is_silent(self, client, i18n):
        client.unlink_database_from_project = AsyncMock(side_effect=ApiError("HTTP_ERROR_500"))
        on_update = MagicMock()
        manager = DatabaseManager(client, 7, on_update, i18n)
        assert asyncio.run(manager.unlink()) is False
        assert manager.error is None
        on_update.assert_not_called()


# ── DangerZone ───────────────────────────────────────────────────────────


class TestDangerZone:
    def test_confirmation_with_linked_database(self, client, i18n):
        zone = DangerZone(client, 7, i18n, MagicMock())
        expected = (
            "Are you sure you want to permanently delete the project 'webapp'? "
            "This action is irreversible.\n\n"
            "The linked database will also be permanently deleted."
        )
        assert zone.confirmation("webapp", True) == expected
        assert "\n\n" not in zone.confirmation("webapp", False)

    def test_success_navigates(self, client, i18n):
        client.purge_project = AsyncMock()
        on_deleted = MagicMock()
        zone = DangerZone(client, 7, i18n, on_deleted)
        assert asyncio.run(zone.delete()) is True
        client.purge_project.assert_awaited_once_with(7)
        on_deleted.assert_called_once_with()

    def test_failure_shows_delete_failed(self, client, i18n):
        client.purge_project = AsyncMock(side_effect=ApiError("HTTP_ERROR_500"))
        on_deleted = MagicMock()
        zone = DangerZone(client, 7, i18n, on_deleted)
        assert asyncio.run(zone.delete()) is False
        assert zone.error == "Failed to delete the project."
        on_deleted.assert_not_called()


# ── PersonalDatabase ─────────────────────────────────────────────────────


class TestPersonalDatabase:
    def test_owned_projects_failure_only_disables_linking(self, client, make_database):
        client.get_my_database = AsyncMock(return_value=make_database())
        client.get_owned_projects = AsyncMock(side_effect=ApiError("HTTP_ERROR_500"))
        personal = PersonalDatabase(client)
        asyncio.run(personal.load())
        assert personal.database is not None
        assert personal.projects == []
        assert personal.error is None

    def test_load_error(self, client):
        client.get_my_database = AsyncMock(side_effect=ApiError("NOT_FOUND"))
        client.get_owned_projects = AsyncMock(return_value=[OwnedProject(id=1, name="p")])
        personal = PersonalDatabase(client)
        asyncio.run(personal.load())
        assert personal.database is None
        assert personal.error == ApiError("NOT_FOUND")

    def test_link_and_delete(self, client, make_database):
        client.get_my_database = AsyncMock(return_value=make_database(id=3))
        client.get_owned_projects = AsyncMock(return_value=[])
        client.link_database_to_project = AsyncMock()
        client.delete_database = AsyncMock()
        personal = PersonalDatabase(client)

        async def scenario():
            await personal.load()
            assert await personal.link(7)
            assert await personal.delete()

        asyncio.run(scenario())
        client.link_database_to_project.assert_awaited_once_with(7, 3)
        client.delete_database.assert_awaited_once_with(3)


# ── ProjectCreator ───────────────────────────────────────────────────────


class TestParseParticipants:
    def test_trims_and_drops_blanks_and_duplicates(self):
        assert parse_participants(" bob, ,carol,bob ,") == ["bob", "carol"]

    def test_empty(self):
        assert parse_participants("") == []


class TestProjectCreator:
    def _github_form(self, client, owner="alice"):
        creator = ProjectCreator(client, owner)
        creator.project_name = " webapp "
        creator.github_repo_url = " https://github.com/alice/webapp "
        return creator

    def test_github_deploy(self, client, make_details):
        client.deploy_project = AsyncMock(return_value=make_details(id=42))
        creator = self._github_form(client)
        creator.github_branch = "dev"
        creator.participants = "bob"
        creator.env_text = "TOKEN=ab\x0ccd\nBAD"
        creator.create_database = True

        assert asyncio.run(creator.submit()) is True
        payload = client.deploy_project.await_args.args[0]
        assert payload.model_dump(exclude_none=True) == {
            "project_name": "webapp",
            "participants": ["bob"],
            "github_repo_url": "https://github.com/alice/webapp",
            "github_branch": "dev",
            "env_vars": {"TOKEN": "ab\x0ccd"},
            "create_database": True,
        }
        assert creator.created_project_id == 42
        assert creator.created_database is None
        assert creator.is_loading is False

    def test_direct_deploy_omits_blank_optionals(self, client, make_details):
        client.deploy_project = AsyncMock(return_value=make_details())
        creator = ProjectCreator(client, "alice")
        creator.select_method(DeployMethod.DIRECT)
        creator.project_name = "webapp"
        creator.image_url = "ghcr.io/alice/webapp:2.0"
        creator.github_repo_url = "https://github.com/ignored/repo"
        creator.volume_path = "  "

        assert asyncio.run(creator.submit()) is True
        payload = client.deploy_project.await_args.args[0]
        assert payload.model_dump(exclude_none=True) == {
            "project_name": "webapp",
            "participants": [],
            "image_url": "ghcr.io/alice/webapp:2.0",
        }

    def test_required_fields_block_submit(self, client):
        client.deploy_project = AsyncMock()
        creator = ProjectCreator(client, "alice")
        assert creator.missing_fields() == ["project_name", "github_repo_url"]
        creator.select_method(DeployMethod.DIRECT)
        assert creator.missing_fields() == ["project_name", "image_url"]
        assert asyncio.run(creator.submit()) is False
        client.deploy_project.assert_not_awaited()

    def test_owner_cannot_be_participant(self, client):
        client.deploy_project = AsyncMock()
        creator = self._github_form(client)
        creator.participants = "bob, alice"
        assert asyncio.run(creator.submit()) is False
        assert creator.error == ApiError("OWNER_CANNOT_BE_PARTICIPANT")
        client.deploy_project.assert_not_awaited()

    def test_invalid_name_rejected_locally(self, client):
        client.deploy_project = AsyncMock()
        creator = self._github_form(client)
        creator.project_name = "my app!"
        assert asyncio.run(creator.submit()) is False
        assert creator.error == ApiError("INVALID_PROJECT_NAME")
        client.deploy_project.assert_not_awaited()

    def test_server_error_kept(self, client):
        client.deploy_project = AsyncMock(side_effect=ApiError("PROJECT_NAME_TAKEN"))
        creator = self._github_form(client)
        assert asyncio.run(creator.submit()) is False
        assert creator.error == ApiError("PROJECT_NAME_TAKEN")
        assert creator.created_project_id is None
        assert creator.is_loading is False

    def test_database_only(self, client, make_database):
        client.create_database = AsyncMock(return_value=make_database(id=9))
        client.deploy_project = AsyncMock()
        creator = ProjectCreator(client, "alice")
        creator.select_method(DeployMethod.DATABASE)
        assert creator.missing_fields() == []
        assert asyncio.run(creator.submit()) is True
        assert creator.created_database.id == 9
        assert creator.created_project_id is None
        client.deploy_project.assert_not_awaited()

    def test_method_switch_clears_error(self, client):
        on_state = MagicMock()
        creator = ProjectCreator(client, None, on_state=on_state)
        creator.error = ApiError("GITHUB_PACKAGE_NOT_PUBLIC")
        creator.select_method(DeployMethod.DIRECT)
        assert creator.error is None
        on_state.assert_called_once_with()
