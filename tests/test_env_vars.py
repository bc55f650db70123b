"""Tests for the environment-variable text buffer."""

from hangar_dashboard.dashboard.env_vars import env_to_text, parse_env_text


class TestEnvToText:
    def test_renders_lines_in_order(self):
        assert env_to_text({"A": "1", "B": "two"}) == "A=1\nB=two"

    def test_empty_or_missing(self):
        assert env_to_text(None) == ""
        assert env_to_text({}) == ""


class TestParseEnvText:
    def test_skips_invalid_lines_and_trims(self):
        assert parse_env_text("A=1\nBAD\nB = 2 \n=skip") == {"A": "1", "B": "2"}

    def test_splits_on_first_equals(self):
        assert parse_env_text("URL=postgres://u:p@h/db?x=1") == {"URL": "postgres://u:p@h/db?x=1"}

    def test_last_duplicate_wins(self):
        assert parse_env_text("A=1\nA=2") == {"A": "2"}

    def test_empty_value_kept(self):
        assert parse_env_text("EMPTY=") == {"EMPTY": ""}

    def test_blank_text(self):
        assert parse_env_text("\n  \n") == {}

    def test_rendered_map_parses_back(self):
        env = {"A": "1", "B": "x=y"}
        assert parse_env_text(env_to_text(env)) == env

    def test_only_newline_separates_entries(self):
        env = {"TOKEN": "ab\x0ccd", "SEP": "x\u2028y", "NEL": "p\x85q", "GS": "1\x1d2"}
        assert parse_env_text(env_to_text(env)) == env

    def test_crlf_line_endings(self):
        assert parse_env_text("A=1\r\nB=2\r\n") == {"A": "1", "B": "2"}
