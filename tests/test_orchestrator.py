"""Tests for the dashboard orchestrator and view derivation."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from hangar_dashboard.dashboard.linkage import DatabaseAction, LinkageState
from hangar_dashboard.dashboard.orchestrator import (
    DashboardOrchestrator,
    DashboardState,
    ErrorView,
    LoadingView,
    ReadyView,
    derive_view,
)
from hangar_dashboard.errors import ApiError
from hangar_dashboard.models import CurrentUser

ALICE = CurrentUser(login="alice")
BOB = CurrentUser(login="bob")
CAROL = CurrentUser(login="carol")


class TestDeriveView:
    def test_loading_before_details(self):
        assert isinstance(derive_view(DashboardState(), ALICE), LoadingView)

    def test_error_wins(self, make_details):
        state = DashboardState(details=make_details(), load_error="NOT_FOUND")
        assert derive_view(state, ALICE) == ErrorView("NOT_FOUND")

    def test_owner_sees_every_card(self, make_details):
        state = DashboardState(details=make_details(), personal_database_loaded=True)
        view = derive_view(state, ALICE)
        assert isinstance(view, ReadyView)
        cards = view.cards
        assert all(
            [cards.info, cards.database, cards.logs, cards.metrics, cards.controls,
             cards.participants, cards.env, cards.image, cards.danger]
        )

    def test_participant_sees_weak_cards_only(self, make_details):
        state = DashboardState(details=make_details(), personal_database_loaded=True)
        cards = derive_view(state, BOB).cards
        assert cards.controls and cards.env and cards.image
        assert not cards.participants and not cards.danger

    def test_stranger_is_read_only(self, make_details):
        state = DashboardState(details=make_details(), personal_database_loaded=True)
        view = derive_view(state, CAROL)
        cards = view.cards
        assert cards.info and cards.database and cards.logs and cards.metrics
        assert not any([cards.controls, cards.participants, cards.env, cards.image, cards.danger])
        assert view.database_actions == ()

    def test_linkage_pending_until_personal_database_loaded(self, make_details):
        view = derive_view(DashboardState(details=make_details()), ALICE)
        assert view.linkage is None
        assert view.database_actions == ()

    def test_linked_does_not_wait_for_personal_database(self, make_details, make_database):
        details = make_details(database=make_database(project_id=7))
        view = derive_view(DashboardState(details=details), ALICE)
        assert view.linkage is LinkageState.LINKED
        assert view.database_actions == (DatabaseAction.UNLINK, DatabaseAction.DELETE)

    def test_orphan_database_offers_link_existing(self, make_details, make_database):
        state = DashboardState(
            details=make_details(),
            personal_database_loaded=True,
            personal_database=make_database(),
        )
        view = derive_view(state, ALICE)
        assert view.linkage is LinkageState.PERSONAL_UNLINKED
        assert view.database_actions == (DatabaseAction.LINK_EXISTING,)


class TestDashboardOrchestrator:
    def test_load_fetches_both_concurrently(self, make_details, make_database):
        client = MagicMock()
        client.get_project_details = AsyncMock(return_value=make_details())
        client.get_my_database = AsyncMock(return_value=make_database())
        orch = DashboardOrchestrator(client, 7)

        asyncio.run(orch.load())
        client.get_project_details.assert_awaited_once_with(7)
        client.get_my_database.assert_awaited_once_with()
        assert orch.state.details is not None
        assert orch.state.personal_database_loaded is True
        assert orch.state.personal_database is not None

    def test_personal_database_failure_is_silent(self, make_details):
        client = MagicMock()
        client.get_project_details = AsyncMock(return_value=make_details())
        client.get_my_database = AsyncMock(side_effect=ApiError("NOT_FOUND"))
        orch = DashboardOrchestrator(client, 7)

        asyncio.run(orch.load())
        assert orch.state.personal_database_loaded is True
        assert orch.state.personal_database is None
        assert orch.state.load_error is None

    def test_details_failure_sets_error(self):
        client = MagicMock()
        client.get_project_details = AsyncMock(side_effect=ApiError("UNAUTHORIZED"))
        client.get_my_database = AsyncMock(return_value=None)
        orch = DashboardOrchestrator(client, 7)

        asyncio.run(orch.load())
        assert orch.view(ALICE) == ErrorView("UNAUTHORIZED")

    def test_each_reload_refetches(self, make_details):
        client = MagicMock()
        client.get_project_details = AsyncMock(
            side_effect=[make_details(participants=[]), make_details(participants=["bob", "dave"])]
        )
        client.get_my_database = AsyncMock(return_value=None)
        orch = DashboardOrchestrator(client, 7)

        async def scenario():
            await orch.load()
            assert orch.request_reload() == 1
            await orch.load()

        asyncio.run(scenario())
        assert client.get_project_details.await_count == 2
        assert orch.state.reload_counter == 1
        assert orch.state.details.participants == ["bob", "dave"]

    def test_overlapping_loads_last_write_wins(self, make_details):
        responses = iter([(0.1, ["slow"]), (0.0, ["fast"])])

        async def fetch(project_id):
            delay, participants = next(responses)
            await asyncio.sleep(delay)
            return make_details(participants=participants)

        client = MagicMock()
        client.get_project_details = AsyncMock(side_effect=fetch)
        client.get_my_database = AsyncMock(return_value=None)
        orch = DashboardOrchestrator(client, 7)

        async def scenario():
            await asyncio.gather(orch.load(), orch.load())

        asyncio.run(scenario())
        assert orch.state.details.participants == ["slow"]

    def test_state_callback(self, make_details):
        client = MagicMock()
        client.get_project_details = AsyncMock(return_value=make_details())
        client.get_my_database = AsyncMock(return_value=None)
        on_state = MagicMock()
        orch = DashboardOrchestrator(client, 7, on_state=on_state)
        asyncio.run(orch.load())
        assert on_state.call_count == 2
