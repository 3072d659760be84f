"""Tests for keyword categorization and the fallback category."""

import pytest

from finance_tracker.analytics.categorize import (
    auto_categorize,
    select_fallback_category,
)
from finance_tracker.analytics.records import CategoryKeywords
from finance_tracker.database import DEFAULT_CATEGORIES


@pytest.fixture
def defaults():
    return [
        CategoryKeywords(id=c["name"], name=c["name"], keywords=tuple(c["keywords"]), is_default=True)
        for c in DEFAULT_CATEGORIES
    ]


class TestAutoCategorize:
    @pytest.mark.parametrize(
        "description",
        ["Glovo Food Delivery Bucharest", "GLOVO FOOD DELIVERY BUCHAREST", "glovo*order 1234"],
    )
    def test_keyword_match_ignores_case(self, defaults, description):
        assert auto_categorize(description, defaults) == "Food"

    def test_first_category_by_name_wins(self, defaults):
        # "uber eats" is Food, "uber" is Transport
        assert auto_categorize("Uber Eats order", defaults) == "Food"
        assert auto_categorize("Netflix Subscription", defaults) == "Entertainment"

    def test_no_match(self, defaults):
        assert auto_categorize("XYZ 4411", defaults) is None

    def test_empty_description(self, defaults):
        assert auto_categorize("", defaults) is None
        assert auto_categorize(None, defaults) is None

    def test_empty_keywords_never_match(self):
        categories = [
            CategoryKeywords(id="a", name="Alpha", keywords=("", "  ")),
            CategoryKeywords(id="b", name="Beta", keywords=("coffee",)),
        ]
        assert auto_categorize("Morning coffee", categories) == "b"
        assert auto_categorize("Anything", categories) is None


class TestFallback:
    def test_default_other_preferred(self, defaults):
        mine = CategoryKeywords(id="mine", name="Other", keywords=(), is_default=False)
        assert select_fallback_category([mine] + defaults) == "Other"

    def test_any_other(self):
        categories = [
            CategoryKeywords(id="x", name="Food"),
            CategoryKeywords(id="y", name="Other"),
        ]
        assert select_fallback_category(categories) == "y"

    def test_first_by_name(self):
        categories = [CategoryKeywords(id="z", name="zoo"), CategoryKeywords(id="b", name="Bills")]
        assert select_fallback_category(categories) == "b"

    def test_no_categories(self):
        assert select_fallback_category([]) is None
