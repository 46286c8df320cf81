"""Unit tests for donation rule matching and point math."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from sfdsa.donations.rules import (
    calculate_points,
    ranges_overlap,
    rule_contains,
    select_rule,
    validate_non_overlap,
)
from sfdsa.errors import InvalidRuleError, RuleOverlapError


def _rule(id, min_amount, max_amount, ppd="1", multiplier="1.5", active=True):  # noqa: A002, ANN001
    return SimpleNamespace(
        id=id,
        name=f"rule-{id}",
        min_amount=Decimal(min_amount),
        max_amount=Decimal(max_amount) if max_amount is not None else None,
        points_per_dollar=Decimal(ppd),
        recurring_multiplier=Decimal(multiplier),
        is_active=active,
    )


STANDARD = _rule(1, "1", "100", ppd="1")
MAJOR = _rule(2, "100", None, ppd="2")


class TestRuleContains:
    def test_lower_bound_inclusive(self):
        assert rule_contains(STANDARD, Decimal("1"))

    def test_upper_bound_exclusive(self):
        assert not rule_contains(STANDARD, Decimal("100"))
        assert rule_contains(MAJOR, Decimal("100"))

    def test_unbounded_max(self):
        assert rule_contains(MAJOR, Decimal("1000000"))

    def test_below_min(self):
        assert not rule_contains(STANDARD, Decimal("0.99"))


class TestSelectRule:
    def test_boundary_picks_upper_rule(self):
        assert select_rule([STANDARD, MAJOR], Decimal("100")) is MAJOR

    def test_inactive_rules_ignored(self):
        inactive = _rule(3, "1", "100", active=False)
        assert select_rule([inactive], Decimal("50")) is None

    def test_no_rule_for_amount(self):
        assert select_rule([STANDARD, MAJOR], Decimal("0.50")) is None

    def test_legacy_overlap_lowest_min_wins(self):
        wide = _rule(5, "10", None)
        narrow = _rule(4, "50", "60")
        assert select_rule([narrow, wide], Decimal("55")) is wide

    def test_legacy_overlap_same_min_lowest_id_wins(self):
        a = _rule(7, "10", "20")
        b = _rule(6, "10", "30")
        assert select_rule([a, b], Decimal("15")) is b


class TestCalculatePoints:
    def test_major_donor_non_recurring(self):
        assert calculate_points(MAJOR, Decimal("150"), is_recurring=False) == 300

    def test_recurring_multiplier_floors(self):
        # 33 * 1 * 1.5 = 49.5
        assert calculate_points(STANDARD, Decimal("33"), is_recurring=True) == 49

    def test_fractional_amount_floors(self):
        assert calculate_points(STANDARD, Decimal("12.99"), is_recurring=False) == 12

    def test_no_rule_awards_nothing(self):
        assert calculate_points(None, Decimal("50"), is_recurring=False) == 0


class TestOverlapValidation:
    def test_adjacent_ranges_do_not_overlap(self):
        assert not ranges_overlap(STANDARD, MAJOR)

    def test_open_ended_ranges_overlap(self):
        assert ranges_overlap(MAJOR, _rule(9, "500", None))

    def test_overlapping_candidate_rejected(self):
        with pytest.raises(RuleOverlapError):
            validate_non_overlap([STANDARD, MAJOR], _rule(None, "50", "150"))

    def test_inactive_candidate_may_overlap(self):
        validate_non_overlap([STANDARD, MAJOR], _rule(None, "50", "150", active=False))

    def test_rule_does_not_overlap_itself(self):
        edited = _rule(1, "1", "99")
        validate_non_overlap([STANDARD, MAJOR], edited)

    def test_empty_range_rejected(self):
        with pytest.raises(InvalidRuleError):
            validate_non_overlap([], _rule(None, "100", "100"))

    def test_negative_min_rejected(self):
        with pytest.raises(InvalidRuleError):
            validate_non_overlap([], _rule(None, "-1", "10"))
