"""Donation point rule matching and point calculation.

Pure functions over rule objects (ORM rows or anything with the same
attributes). Ranges are half-open: ``min_amount <= amount < max_amount``,
with ``max_amount=None`` meaning unbounded.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Protocol

from sfdsa.errors import InvalidRuleError, RuleOverlapError

logger = logging.getLogger(__name__)


class RuleLike(Protocol):
    id: int | None
    name: str
    min_amount: Decimal
    max_amount: Decimal | None
    points_per_dollar: Decimal
    recurring_multiplier: Decimal
    is_active: bool


def rule_contains(rule: RuleLike, amount: Decimal) -> bool:
    if amount < rule.min_amount:
        return False
    return rule.max_amount is None or amount < rule.max_amount


def ranges_overlap(a: RuleLike, b: RuleLike) -> bool:
    """True when the half-open ranges of ``a`` and ``b`` intersect."""
    a_below_b = a.max_amount is not None and a.max_amount <= b.min_amount
    b_below_a = b.max_amount is not None and b.max_amount <= a.min_amount
    return not (a_below_b or b_below_a)


def select_rule(rules: Iterable[RuleLike], amount: Decimal) -> RuleLike | None:
    """Pick the active rule covering ``amount``.

    Overlaps are rejected when rules are written, but rows predating that
    check may still overlap: the lowest ``min_amount`` wins, then the
    lowest id.
    """
    matches = [r for r in rules if r.is_active and rule_contains(r, amount)]
    if not matches:
        return None
    matches.sort(key=lambda r: (r.min_amount, r.id if r.id is not None else 0))
    if len(matches) > 1:
        logger.warning(
            "Overlapping donation rules for amount %s: %s; using %s",
            amount,
            [r.id for r in matches],
            matches[0].id,
        )
    return matches[0]


def calculate_points(rule: RuleLike | None, amount: Decimal, is_recurring: bool) -> int:
    """floor(amount * points_per_dollar * recurring multiplier); 0 without a rule."""
    if rule is None:
        return 0
    multiplier = rule.recurring_multiplier if is_recurring else Decimal(1)
    return math.floor(Decimal(amount) * rule.points_per_dollar * multiplier)


def validate_rule_range(candidate: RuleLike) -> None:
    if candidate.min_amount < 0:
        raise InvalidRuleError("min_amount must be non-negative")
    if candidate.max_amount is not None and candidate.max_amount <= candidate.min_amount:
        raise InvalidRuleError("max_amount must be greater than min_amount")
    if candidate.points_per_dollar < 0:
        raise InvalidRuleError("points_per_dollar must be non-negative")
    if candidate.recurring_multiplier <= 0:
        raise InvalidRuleError("recurring_multiplier must be positive")


def validate_non_overlap(rules: Sequence[RuleLike], candidate: RuleLike) -> None:
    """Reject an active candidate whose range intersects another active rule."""
    validate_rule_range(candidate)
    if not candidate.is_active:
        return
    for rule in rules:
        if candidate.id is not None and rule.id == candidate.id:
            continue
        if rule.is_active and ranges_overlap(rule, candidate):
            raise RuleOverlapError(
                f"Rule range overlaps active rule {rule.id} ({rule.name})"
            )
