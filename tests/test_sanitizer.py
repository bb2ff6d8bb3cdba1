"""Tests for query sanitization."""

import pytest

from record_search.query.sanitizer import SUBSTITUTIONS, sanitize


class TestSanitize:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("who earns more than 50000", "who has greater than 50000"),
            ("Employees that earn a salary", "Employees that has a compensation"),
            ("income below average", "amount below average"),
            ("Payment over 100", "value over 100"),
            ("how much money", "how much amount"),
            ("age greater than or equal to 30", "age at least 30"),
            ("age less than or equal to 30", "age at most 30"),
            ("age LESS THAN 30", "age below 30"),
        ],
    )
    def test_substitutions(self, query, expected):
        assert sanitize(query) == expected

    def test_more_than_or_equal_to_chains_to_at_least(self):
        assert sanitize("more than or equal to 5") == "at least 5"

    def test_word_boundaries(self):
        assert sanitize("learnt moneyball") == "learnt moneyball"

    def test_unrelated_query_unchanged(self):
        assert sanitize("people in NYC") == "people in NYC"

    def test_idempotent(self):
        once = sanitize("salary more than 10 and income less than 5")
        assert sanitize(once) == once

    def test_non_string_input(self):
        assert sanitize(42) == "42"

    def test_table_order(self):
        replacements = [replacement for _, replacement in SUBSTITUTIONS]
        assert replacements == [
            "has",
            "compensation",
            "amount",
            "value",
            "amount",
            "greater than",
            "at least",
            "at most",
            "below",
        ]
