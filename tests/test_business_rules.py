"""Tests for pure catalog rules."""

from decimal import Decimal

import pytest

from src.models.stat import REVENUE_PER_STREAM, revenue_for
from src.services.business_rules import (
    CopyrightLedgerRules,
    ReleaseRules,
    compose_featuring_title,
    detect_awards_crossed,
    rank_top_genres,
    strip_featuring,
)


class TestCopyrightLedgerRules:
    def test_accepts_well_formed_entries(self):
        entries = [
            {"artist_id": 1, "role": "performer", "percentage": 60},
            {"owner_name": "Label Co", "role": "publisher", "percentage": 40},
        ]

        result = CopyrightLedgerRules.check_entries(entries)

        assert result.is_valid
        assert result.errors == []

    def test_rejects_entry_with_neither_owner(self):
        result = CopyrightLedgerRules.check_entries([{"role": "performer", "percentage": 100}])

        assert not result.is_valid
        assert result.errors[0].code == "INVALID_COPYRIGHT"
        assert result.errors[0].field == "copyrights[0]"

    def test_rejects_entry_with_both_owners(self):
        entries = [
            {"artist_id": 1, "role": "performer", "percentage": 50},
            {"artist_id": 2, "owner_name": "Someone", "role": "composer", "percentage": 50},
        ]

        result = CopyrightLedgerRules.check_entries(entries)

        assert not result.is_valid
        assert [error.field for error in result.errors] == ["copyrights[1]"]

    def test_blank_owner_name_counts_as_missing(self):
        result = CopyrightLedgerRules.check_entries(
            [{"owner_name": "   ", "role": "performer", "percentage": 100}]
        )

        assert not result.is_valid

    def test_rejects_out_of_range_percentage(self):
        result = CopyrightLedgerRules.check_entries(
            [{"artist_id": 1, "role": "performer", "percentage": 120}]
        )

        assert not result.is_valid
        assert result.errors[0].field == "copyrights[0].percentage"

    def test_rejects_more_than_three_decimal_places(self):
        result = CopyrightLedgerRules.check_entries([
            {"owner_name": "A", "role": "performer", "percentage": "33.3333"},
            {"owner_name": "B", "role": "composer", "percentage": "33.3333"},
            {"owner_name": "C", "role": "producer", "percentage": "33.3334"},
        ])

        assert not result.is_valid
        assert [error.field for error in result.errors] == [
            "copyrights[0].percentage",
            "copyrights[1].percentage",
            "copyrights[2].percentage",
        ]
        assert all(error.code == "INVALID_COPYRIGHT" for error in result.errors)

    def test_three_decimal_places_are_accepted(self):
        result = CopyrightLedgerRules.check_entries([
            {"owner_name": "A", "role": "performer", "percentage": "33.333"},
            {"owner_name": "B", "role": "composer", "percentage": "66.667"},
        ])

        assert result.is_valid

    def test_referenced_artist_ids_are_distinct(self):
        entries = [
            {"artist_id": 3, "role": "performer", "percentage": 30},
            {"owner_name": "Ext", "role": "composer", "percentage": 40},
            {"artist_id": 3, "role": "composer", "percentage": 30},
            {"artist_id": 1, "role": "producer", "percentage": 0},
        ]

        assert CopyrightLedgerRules.referenced_artist_ids(entries) == [3, 1]

    @pytest.mark.parametrize("percentages", [[100], [60, 40], [33.3, 33.3, 33.4], [50, 25.5, 24.5]])
    def test_total_of_exactly_one_hundred_passes(self, percentages):
        entries = [{"owner_name": "X", "role": "r", "percentage": p} for p in percentages]

        assert CopyrightLedgerRules.check_percentage_total(entries).is_valid

    @pytest.mark.parametrize("percentages", [[60, 30], [60, 40.001], [], [100, 0.5]])
    def test_other_totals_fail(self, percentages):
        entries = [{"owner_name": "X", "role": "r", "percentage": p} for p in percentages]

        result = CopyrightLedgerRules.check_percentage_total(entries)

        assert not result.is_valid
        assert result.errors[0].code == "COPYRIGHT_PERCENTAGE_ERROR"

    def test_mismatch_message_reports_current_total(self):
        entries = [
            {"owner_name": "A", "role": "r", "percentage": 60},
            {"owner_name": "B", "role": "r", "percentage": 30},
        ]

        result = CopyrightLedgerRules.check_percentage_total(entries)

        assert "current: 90%" in result.errors[0].message


class TestFeaturingTitle:
    def test_appends_featuring_names(self):
        assert compose_featuring_title("Midnight", ["Kai", "Rue"]) == "Midnight (feat. Kai, Rue)"

    def test_no_featuring_returns_stripped_title(self):
        assert compose_featuring_title("  Midnight  ", []) == "Midnight"

    def test_caller_supplied_fragment_is_replaced(self):
        assert compose_featuring_title("Midnight (Feat. Somebody)", ["Kai"]) == "Midnight (feat. Kai)"

    def test_fragment_in_the_middle_is_removed(self):
        assert strip_featuring("Midnight (feat. X) Remix") == "Midnight Remix"

    @pytest.mark.parametrize("title,names", [
        ("Midnight", ["Kai"]),
        ("Midnight (feat. Old)", ["Kai", "Rue"]),
        ("Midnight", []),
    ])
    def test_composing_is_idempotent(self, title, names):
        once = compose_featuring_title(title, names)

        assert compose_featuring_title(once, names) == once

    def test_other_parentheticals_survive(self):
        assert compose_featuring_title("Midnight (Live)", ["Kai"]) == "Midnight (Live) (feat. Kai)"


class TestGenreRanking:
    def test_top_three_by_count(self):
        # Singles with genres A, A, A, B, B, C, D
        counts = {1: 3, 2: 2, 3: 1, 4: 1}

        assert rank_top_genres(counts) == [1, 2, 3]

    def test_ties_broken_by_ascending_id(self):
        assert rank_top_genres({9: 2, 4: 2, 7: 2, 1: 1}) == [4, 7, 9]

    def test_empty_counts(self):
        assert rank_top_genres({}) == []

    def test_fewer_than_limit(self):
        assert rank_top_genres({5: 1}) == [5]


class TestAwards:
    def test_single_threshold(self):
        assert detect_awards_crossed(49999, 50000) == ["Gold"]

    def test_all_thresholds_in_ascending_order(self):
        assert detect_awards_crossed(40000, 2000000) == ["Gold", "Platinum", "Diamond"]

    def test_starting_on_a_threshold_does_not_fire_it(self):
        assert detect_awards_crossed(50000, 99999) == []

    def test_no_change(self):
        assert detect_awards_crossed(120000, 120000) == []


class TestReleaseRules:
    def test_title_required(self):
        result = ReleaseRules.validate_title("(feat. Someone)")

        assert not result.is_valid
        assert result.errors[0].code == "TITLE_REQUIRED"

    def test_title_length(self):
        result = ReleaseRules.validate_title("x" * 256)

        assert result.errors[0].code == "TITLE_TOO_LONG"

    def test_non_modifiable_warnings(self):
        warnings = ReleaseRules.non_modifiable_field_warnings(["genres", "artist_id"])

        assert [w["field"] for w in warnings] == ["artist_id", "genres"]
        assert all(w["code"] == "FIELD_NOT_MODIFIABLE" for w in warnings)


def test_revenue_is_listens_times_rate():
    assert REVENUE_PER_STREAM == Decimal("0.003")
    assert revenue_for(60000) == Decimal("180.000")
    assert revenue_for(0) == 0
