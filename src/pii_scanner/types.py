"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PIICategory(str, Enum):
    """The six kinds of PII the catalog knows about."""
    PHONE = "phone"
    ADDRESS = "address"
    SSN = "ssn"
    EMAIL = "email"
    DOB = "dob"
    FINANCIAL = "financial"


class RiskLevel(str, Enum):
    """Coarse severity tier of a scan result: none < low < medium < high."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANK = {RiskLevel.NONE: 0, RiskLevel.LOW: 1, RiskLevel.MEDIUM: 2, RiskLevel.HIGH: 3}


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open [start, end) offsets into the scanned string."""
    start: int
    end: int

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class DetectedItem:
    """A single resolved PII finding."""
    category: PIICategory
    value: str             # content[span.start:span.end]
    span: Span
    confidence: float      # fixed per rule, 0.0–1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.category.value,
            "value": self.value,
            "position": {"start": self.span.start, "end": self.span.end},
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Result of scanning one string."""
    has_pii: bool
    items: tuple[DetectedItem, ...] = ()        # sorted by span.start
    risk_level: RiskLevel = RiskLevel.NONE
    requires_review: bool = False

    @classmethod
    def empty(cls) -> ScanResult:
        return cls(has_pii=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasPII": self.has_pii,
            "items": [item.to_dict() for item in self.items],
            "riskLevel": self.risk_level.value,
            "requiresReview": self.requires_review,
        }


@dataclass(frozen=True, slots=True)
class RedactedContent:
    """Result of scan_and_redact."""
    redacted_content: str
    scan_result: ScanResult


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class AllowlistEntry:
    """A value the user has approved for publication."""
    value: str                                  # case-folded, trimmed lookup key
    category: PIICategory | None = None
    reason: str | None = None
    added_at: datetime = field(default_factory=utcnow)
