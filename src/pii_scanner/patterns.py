"""Pattern catalog, matcher and overlap resolver.

Every rule is a plain data record (category, regex, confidence), so the
catalog can be tested rule-by-rule and extended without touching the
matcher.  Confidence is fixed per rule, never derived from the match.

All regexes are compiled with re.ASCII: \\d and \\b only see ASCII, so
non-Latin digits are never read as phone or card digits.  \\s is rewritten
to the full JavaScript whitespace set, so text copied out of HTML with
non-breaking or thin spaces still matches.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .types import DetectedItem, PIICategory, Span

_STREET_SUFFIX = (
    r"(?:Street|St|Avenue|Ave|Boulevard|Blvd|Road|Rd|Drive|Dr|Lane|Ln|Way|"
    r"Court|Ct|Circle|Cir|Place|Pl|Terrace|Ter|Highway|Hwy|Parkway|Pkwy)"
)
_MONTH = (
    r"(?:January|February|March|April|May|June|July|August|September|"
    r"October|November|December)"
)

# ASCII whitespace plus NBSP, the U+2000 spaces, line/paragraph separators and BOM
_WS_CHARS = r"\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"


def _expand_whitespace(regex: str) -> str:
    """Replace every \\s with _WS_CHARS, bracketed unless already inside a class."""
    out: list[str] = []
    in_class = False
    i = 0
    while i < len(regex):
        ch = regex[i]
        if ch == "\\":
            pair = regex[i:i + 2]
            if pair == r"\s":
                out.append(_WS_CHARS if in_class else f"[{_WS_CHARS}]")
            else:
                out.append(pair)
            i += 2
            continue
        if ch == "[":
            in_class = True
        elif ch == "]":
            in_class = False
        out.append(ch)
        i += 1
    return "".join(out)


@dataclass(frozen=True, slots=True)
class PatternRule:
    """One detection rule."""
    category: PIICategory
    pattern: re.Pattern
    confidence: float
    description: str

    def spans(self, text: str) -> list[tuple[int, int]]:
        """Every non-overlapping (start, end) this rule hits in text."""
        return [m.span() for m in self.pattern.finditer(text)]


def _rule(category: PIICategory, regex: str, confidence: float,
          description: str, flags: int = 0) -> PatternRule:
    pattern = re.compile(_expand_whitespace(regex), re.ASCII | flags)
    return PatternRule(category, pattern, confidence, description)


# Order is discovery order; ties between overlapping hits go to the earlier one.
PATTERNS: tuple[PatternRule, ...] = (
    # Phone
    _rule(PIICategory.PHONE, r"\(\d{3}\)\s*\d{3}[-.\s]?\d{4}",
          0.95, "Phone number in (XXX) XXX-XXXX format"),
    _rule(PIICategory.PHONE, r"\b\d{3}-\d{3}-\d{4}\b",
          0.9, "Phone number in XXX-XXX-XXXX format"),
    _rule(PIICategory.PHONE, r"\b\d{3}\.\d{3}\.\d{4}\b",
          0.9, "Phone number in XXX.XXX.XXXX format"),
    _rule(PIICategory.PHONE, r"\+1\s*\d{3}\s*\d{3}\s*\d{4}\b",
          0.95, "Phone number in +1XXXXXXXXXX format"),
    _rule(PIICategory.PHONE, r"\b1[-.\s]?\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b",
          0.9, "Phone number in 1-XXX-XXX-XXXX format"),

    # SSN — bare form skips area 000/666/9xx, group 00 and serial 0000
    _rule(PIICategory.SSN, r"\b\d{3}-\d{2}-\d{4}\b",
          0.95, "Social Security Number in XXX-XX-XXXX format"),
    _rule(PIICategory.SSN, r"\b(?!000|666|9\d{2})\d{3}(?!00)\d{2}(?!0000)\d{4}\b",
          0.7, "Potential SSN (9 consecutive digits)"),

    # Email
    _rule(PIICategory.EMAIL, r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b",
          0.95, "Email address"),

    # Address
    _rule(PIICategory.ADDRESS, r"\b\d{1,5}\s+(?:[A-Za-z]+\s+){1,4}" + _STREET_SUFFIX + r"\.?\b",
          0.85, "Street address", re.IGNORECASE),
    # Atomic: a comma can only follow the longest word run, so never backtrack into it.
    _rule(PIICategory.ADDRESS,
          r"\b(?>[A-Za-z]+(?:\s+[A-Za-z]+)*),\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?\b",
          0.9, "City, State ZIP format"),
    _rule(PIICategory.ADDRESS, r"\b\d{1,5}\s+[A-Za-z0-9\s,]+,\s*[A-Z]{2}\s+\d{5}(?:-\d{4})?\b",
          0.95, "Full address with ZIP code"),
    _rule(PIICategory.ADDRESS, r"\bP\.?O\.?\s*Box\s+\d+\b",
          0.9, "PO Box address", re.IGNORECASE),

    # Date of birth
    _rule(PIICategory.DOB, r"\b(?:0[1-9]|1[0-2])[-/](?:0[1-9]|[12]\d|3[01])[-/](?:19|20)\d{2}\b",
          0.8, "Date in MM/DD/YYYY format"),
    _rule(PIICategory.DOB, r"\b(?:19|20)\d{2}[-/](?:0[1-9]|1[0-2])[-/](?:0[1-9]|[12]\d|3[01])\b",
          0.75, "Date in YYYY-MM-DD format"),
    _rule(PIICategory.DOB, r"\b" + _MONTH + r"\s+\d{1,2},?\s+(?:19|20)\d{2}\b",
          0.7, "Date in Month DD, YYYY format", re.IGNORECASE),
    _rule(PIICategory.DOB, r"\b(?:DOB|Date\s+of\s+Birth|Birth\s*date|Born)[:\s]+[\d/\-]+\b",
          0.95, "Labeled date of birth", re.IGNORECASE),

    # Financial
    _rule(PIICategory.FINANCIAL,
          r"\b(?:4\d{3}|5[1-5]\d{2}|6(?:011|5\d{2})|3[47]\d{2})[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b",
          0.95, "Credit card number"),
    _rule(PIICategory.FINANCIAL, r"\b\d{4}[-\s]\d{4}[-\s]\d{4}[-\s]\d{4}\b",
          0.85, "Potential credit card number (16 digits)"),
    _rule(PIICategory.FINANCIAL, r"(?:account|acct)\.?\s*(?:#\s*)?:?\s*\d{8,17}",
          0.9, "Bank account number", re.IGNORECASE),
    _rule(PIICategory.FINANCIAL, r"\b(?:routing|ABA)\.?\s*#?\s*:?\s*\d{9}\b",
          0.9, "Bank routing number", re.IGNORECASE),
)


def find_matches(
    text: str,
    rules: Iterable[PatternRule] = PATTERNS,
    is_allowlisted: Callable[[str], bool] | None = None,
) -> list[DetectedItem]:
    """Run every rule over text.  Returns raw hits in discovery order.

    Rules are applied independently, so the same substring may be hit by
    several rules.  Allowlisted values are dropped here, before overlap
    resolution.
    """
    hits: list[DetectedItem] = []
    for rule in rules:
        for start, end in rule.spans(text):
            value = text[start:end]
            if is_allowlisted is not None and is_allowlisted(value):
                continue
            hits.append(DetectedItem(
                category=rule.category,
                value=value,
                span=Span(start, end),
                confidence=rule.confidence,
            ))
    return hits


def resolve_overlaps(hits: Sequence[DetectedItem]) -> list[DetectedItem]:
    """Fold hits into a non-overlapping set, sorted by start.

    A hit that collides with accepted items replaces them only if its
    confidence is strictly greater than every one of theirs; on a tie the
    incumbent stays.
    """
    accepted: dict[Span, DetectedItem] = {}
    for hit in hits:
        clashing = [item for span, item in accepted.items() if span.overlaps(hit.span)]
        if clashing:
            if not all(hit.confidence > item.confidence for item in clashing):
                continue
            for item in clashing:
                del accepted[item.span]
        accepted[hit.span] = hit
    return sorted(accepted.values(), key=lambda item: item.span.start)
