"""Tests for the database linkage state machine."""

from hangar_dashboard.dashboard.linkage import (
    DatabaseAction,
    LinkageState,
    available_actions,
    linkage_state,
    shows_connection_details,
)


class TestLinkageState:
    def test_linked_when_project_has_database(self, make_details, make_database):
        details = make_details(database=make_database(project_id=7))
        assert linkage_state(details, None) is LinkageState.LINKED

    def test_linked_wins_over_personal(self, make_details, make_database):
        details = make_details(database=make_database(project_id=7))
        assert linkage_state(details, make_database(id=9)) is LinkageState.LINKED

    def test_personal_unlinked(self, make_details, make_database):
        assert linkage_state(make_details(), make_database()) is LinkageState.PERSONAL_UNLINKED

    def test_personal_linked_elsewhere_is_none(self, make_details, make_database):
        assert linkage_state(make_details(), make_database(project_id=99)) is LinkageState.NONE

    def test_none(self, make_details):
        assert linkage_state(make_details(), None) is LinkageState.NONE


class TestAvailableActions:
    def test_strong_access(self):
        assert available_actions(LinkageState.LINKED, True) == (DatabaseAction.UNLINK, DatabaseAction.DELETE)
        assert available_actions(LinkageState.PERSONAL_UNLINKED, True) == (DatabaseAction.LINK_EXISTING,)
        assert available_actions(LinkageState.NONE, True) == (DatabaseAction.CREATE_AND_LINK,)

    def test_read_only_without_strong_access(self):
        for state in LinkageState:
            assert available_actions(state, False) == ()

    def test_connection_details_only_when_linked(self):
        assert shows_connection_details(LinkageState.LINKED)
        assert not shows_connection_details(LinkageState.PERSONAL_UNLINKED)
        assert not shows_connection_details(LinkageState.NONE)
