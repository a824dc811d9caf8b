"""Risk classifier — maps a resolved item set to a risk tier."""

from __future__ import annotations
from typing import Iterable

from .types import DetectedItem, PIICategory, RiskLevel

HIGH_RISK = frozenset({PIICategory.SSN, PIICategory.FINANCIAL})
MEDIUM_RISK = frozenset({PIICategory.ADDRESS, PIICategory.DOB})

# Three or more phone/email hits together are as sensitive as an address.
ESCALATION_COUNT = 3


def classify_risk(items: Iterable[DetectedItem]) -> RiskLevel:
    items = list(items)
    if not items:
        return RiskLevel.NONE

    categories = {item.category for item in items}
    if categories & HIGH_RISK:
        return RiskLevel.HIGH
    if categories & MEDIUM_RISK:
        return RiskLevel.MEDIUM
    if len(items) >= ESCALATION_COUNT:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
