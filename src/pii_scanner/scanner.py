"""PIIScanner — the main API.

Usage:
    from pii_scanner import PIIScanner

    scanner = PIIScanner("~/.pii-scanner/allowlist.json")
    await scanner.load_allowlist()

    result = scanner.scan("Call me at (555) 123-4567")
    result.risk_level        # RiskLevel.LOW
    result.requires_review   # True

    scanner.add_to_allowlist("public@company.com", "email", "Company inbox")
    await scanner.save_allowlist()

Pipeline: matcher (catalog + allowlist) → overlap resolver → risk classifier.
Each caller builds and holds its own scanner; there is no shared instance.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from .allowlist import AllowlistStore
from .patterns import PATTERNS, PatternRule, find_matches, resolve_overlaps
from .redactor import redact
from .risk import classify_risk
from .types import AllowlistEntry, DetectedItem, PIICategory, RedactedContent, ScanResult

logger = logging.getLogger(__name__)


class PIIScanner:
    """Detects, classifies and redacts PII, honoring an allowlist."""

    def __init__(
        self,
        allowlist_path: str | Path | None = None,
        *,
        allowlist: AllowlistStore | None = None,
        rules: Sequence[PatternRule] = PATTERNS,
    ) -> None:
        self.allowlist = allowlist if allowlist is not None else AllowlistStore()
        if allowlist_path is not None:
            self.allowlist.path = allowlist_path
        self.rules = tuple(rules)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def scan(self, content: str) -> ScanResult:
        """Scan content for PII.  Pure apart from reading the allowlist."""
        hits = find_matches(content, self.rules, self.allowlist.is_allowlisted)
        items = resolve_overlaps(hits)
        if not items:
            return ScanResult.empty()

        risk = classify_risk(items)
        logger.debug("Scan found %d item(s) from %d hit(s), risk=%s",
                     len(items), len(hits), risk.value)
        return ScanResult(
            has_pii=True,
            items=tuple(items),
            risk_level=risk,
            requires_review=True,
        )

    def scan_batch(self, contents: Iterable[str]) -> list[ScanResult]:
        return [self.scan(content) for content in contents]

    def redact(self, content: str, items: Sequence[DetectedItem]) -> str:
        return redact(content, items)

    def scan_and_redact(self, content: str) -> RedactedContent:
        result = self.scan(content)
        return RedactedContent(
            redacted_content=redact(content, result.items),
            scan_result=result,
        )

    # ------------------------------------------------------------------
    # Allowlist
    # ------------------------------------------------------------------

    def add_to_allowlist(
        self,
        value: str,
        category: PIICategory | str | None = None,
        reason: str | None = None,
    ) -> None:
        self.allowlist.add(value, category, reason)

    def remove_from_allowlist(self, value: str) -> None:
        self.allowlist.remove(value)

    def clear_allowlist(self) -> None:
        self.allowlist.clear()

    def get_allowlist(self) -> list[str]:
        return self.allowlist.values()

    def get_allowlist_entries(self) -> list[AllowlistEntry]:
        return self.allowlist.entries()

    def get_allowlist_entry(self, value: str) -> AllowlistEntry | None:
        return self.allowlist.get(value)

    def set_allowlist(self, values: Iterable[str]) -> None:
        self.allowlist.set_values(values)

    def set_allowlist_entries(self, entries: Iterable[AllowlistEntry | Mapping[str, Any]]) -> None:
        self.allowlist.set_entries(entries)

    def is_allowlisted(self, value: str) -> bool:
        return self.allowlist.is_allowlisted(value)

    async def save_allowlist(self, path: str | Path | None = None) -> None:
        await self.allowlist.save(path)

    async def load_allowlist(self, path: str | Path | None = None) -> bool:
        return await self.allowlist.load(path)

    def get_allowlist_path(self) -> str | None:
        return self.allowlist.path

    def set_allowlist_path(self, path: str | Path) -> None:
        self.allowlist.path = path
