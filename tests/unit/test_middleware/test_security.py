"""Unit tests for request parameter sanitation."""
from __future__ import annotations

import pytest

from app.core.exceptions.exceptions import InvalidCursorError, InvalidSearchQueryError
from app.config.settings import settings
from app.middleware.security import Security


@pytest.fixture
def sec():
    return Security(max_page_size=50, max_query_length=10)


class TestSearchQuery:

    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
    def test_blank_is_none(self, sec, raw):
        assert sec.clean_search_query(raw) is None

    def test_strips_whitespace_and_control_characters(self, sec):
        assert sec.clean_search_query("  rust\x00 ") == "rust"

    def test_too_long_is_rejected(self, sec):
        with pytest.raises(InvalidSearchQueryError):
            sec.clean_search_query("x" * 11)


class TestCursorValues:

    @pytest.mark.parametrize("page_size", [1, 20, 50])
    def test_page_size_in_range(self, sec, page_size):
        assert sec.check_page_size(page_size) == page_size

    @pytest.mark.parametrize("page_size", [0, -3, 51])
    def test_page_size_out_of_range(self, sec, page_size):
        with pytest.raises(InvalidCursorError):
            sec.check_page_size(page_size)

    def test_story_id(self, sec):
        assert sec.check_story_id("startAfterId", None) is None
        assert sec.check_story_id("startAfterId", 42) == 42
        with pytest.raises(InvalidCursorError):
            sec.check_story_id("startAfterId", 0)


class TestLimits:

    def test_defaults_come_from_settings(self):
        sec = Security()

        assert sec.max_page_size == settings.MAX_PAGE_SIZE
        assert sec.max_query_length == settings.MAX_SEARCH_QUERY_LENGTH

    def test_explicit_zero_is_kept(self):
        sec = Security(max_page_size=0, max_query_length=0)

        assert sec.max_page_size == 0
        with pytest.raises(InvalidCursorError):
            sec.check_page_size(1)
        with pytest.raises(InvalidSearchQueryError):
            sec.clean_search_query("a")
