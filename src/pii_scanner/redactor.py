"""Redactor — replaces detected items with fixed category placeholders.

Usage:
    from pii_scanner import PIIScanner

    scanner = PIIScanner()
    result = scanner.scan("SSN: 123-45-6789")
    print(scanner.redact("SSN: 123-45-6789", result.items))
    # "SSN: [SSN REDACTED]"

Everything outside the detected spans is returned untouched.
"""

from __future__ import annotations
from typing import Sequence

from .types import DetectedItem, PIICategory

PLACEHOLDERS: dict[PIICategory, str] = {
    PIICategory.PHONE: "[PHONE REDACTED]",
    PIICategory.ADDRESS: "[ADDRESS REDACTED]",
    PIICategory.SSN: "[SSN REDACTED]",
    PIICategory.EMAIL: "[EMAIL REDACTED]",
    PIICategory.DOB: "[DOB REDACTED]",
    PIICategory.FINANCIAL: "[FINANCIAL INFO REDACTED]",
}


def placeholder_for(category: PIICategory | str) -> str:
    return PLACEHOLDERS[PIICategory(category)]


def redact(content: str, items: Sequence[DetectedItem]) -> str:
    """Return content with every item's span replaced by its placeholder.

    items must come from a scan of this exact content.  Replacement runs
    right-to-left so earlier offsets stay valid.
    """
    if not items:
        return content

    result = content
    for item in sorted(items, key=lambda i: i.span.start, reverse=True):
        result = result[:item.span.start] + placeholder_for(item.category) + result[item.span.end:]
    return result
