"""Allowlist store — user-approved values that are never reported as PII.

Design goals:
  - Normalized: values are trimmed and case-folded, one entry per value
  - Fast: the matcher only ever does a dict lookup
  - Durable: save/load a versioned JSON document, atomically replacing state

Persisted document:

    {
      "version": "1.0",
      "lastModified": "2024-05-01T12:00:00+00:00",
      "entries": [
        {"value": "public@company.com", "type": "email",
         "reason": "Company public email", "addedAt": "2024-05-01T11:59:00+00:00"}
      ]
    }

Not safe for concurrent writers; callers serialize mutations.
"""

from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

import aiofiles

from .errors import AllowlistConfigError, AllowlistFormatError
from .types import AllowlistEntry, PIICategory, utcnow

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"


def normalize(value: str) -> str:
    """Lookup key for a value: trimmed and case-folded."""
    return value.strip().casefold()


def _coerce_category(category: PIICategory | str | None) -> PIICategory | None:
    if category is None:
        return None
    return PIICategory(category)


def _coerce_timestamp(value: Any) -> datetime:
    """Turn a datetime, ISO-8601 string or epoch seconds into an aware UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = datetime.fromisoformat(value)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise ValueError(f"timestamp {value!r} is out of range") from exc
    else:
        raise TypeError(f"cannot read a timestamp from {type(value).__name__}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _entry_from_mapping(raw: Any) -> AllowlistEntry:
    if not isinstance(raw, Mapping):
        raise TypeError("entry is not an object")
    value = raw.get("value")
    if not isinstance(value, str):
        raise TypeError("entry has no string 'value'")

    raw_type = raw.get("type", raw.get("category"))
    try:
        category = _coerce_category(raw_type)
    except ValueError:
        # Newer writers may know categories we don't; keep the approval, drop the type.
        logger.warning("Allowlist entry has unknown type %r, keeping it untyped", raw_type)
        category = None

    added_at = raw.get("addedAt", raw.get("added_at"))
    return AllowlistEntry(
        value=normalize(value),
        category=category,
        reason=raw.get("reason"),
        added_at=utcnow() if added_at is None else _coerce_timestamp(added_at),
    )


def _entry_to_dict(entry: AllowlistEntry) -> dict[str, Any]:
    out: dict[str, Any] = {"value": entry.value}
    if entry.category is not None:
        out["type"] = entry.category.value
    if entry.reason is not None:
        out["reason"] = entry.reason
    out["addedAt"] = entry.added_at.isoformat()
    return out


class AllowlistStore:
    """Normalized value → AllowlistEntry map with JSON persistence."""

    __slots__ = ("_entries", "_path")

    def __init__(self, path: str | Path | None = None) -> None:
        self._entries: dict[str, AllowlistEntry] = {}   # "public@company.com" → entry
        self._path: str | None = str(path) if path is not None else None

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    def add(
        self,
        value: str,
        category: PIICategory | str | None = None,
        reason: str | None = None,
    ) -> AllowlistEntry:
        """Upsert a value.  A later add of the same normalized value wins."""
        key = normalize(value)
        entry = AllowlistEntry(value=key, category=_coerce_category(category), reason=reason)
        self._entries[key] = entry
        return entry

    def remove(self, value: str) -> None:
        self._entries.pop(normalize(value), None)

    def clear(self) -> None:
        self._entries.clear()

    def is_allowlisted(self, value: str) -> bool:
        return normalize(value) in self._entries

    def get(self, value: str) -> AllowlistEntry | None:
        return self._entries.get(normalize(value))

    def set_values(self, values: Iterable[str]) -> None:
        """Replace the whole allowlist with bare values (no metadata)."""
        entries: dict[str, AllowlistEntry] = {}
        for value in values:
            key = normalize(value)
            entries[key] = AllowlistEntry(value=key)
        self._entries = entries

    def set_entries(self, entries: Iterable[AllowlistEntry | Mapping[str, Any]]) -> None:
        """Replace the whole allowlist, re-normalizing every value.

        Accepts AllowlistEntry objects or their persisted dict form.
        Nothing changes if any entry is invalid.
        """
        replaced: dict[str, AllowlistEntry] = {}
        for raw in entries:
            if isinstance(raw, AllowlistEntry):
                entry = AllowlistEntry(
                    value=normalize(raw.value),
                    category=_coerce_category(raw.category),
                    reason=raw.reason,
                    added_at=_coerce_timestamp(raw.added_at),
                )
            else:
                entry = _entry_from_mapping(raw)
            replaced[entry.value] = entry
        self._entries = replaced

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def path(self) -> str | None:
        return self._path

    @path.setter
    def path(self, path: str | Path | None) -> None:
        self._path = str(path) if path is not None else None

    def _resolve_path(self, path: str | Path | None) -> Path:
        target = path if path is not None else self._path
        if not target:
            raise AllowlistConfigError()
        return Path(target).expanduser()

    def to_document(self) -> dict[str, Any]:
        return {
            "version": FORMAT_VERSION,
            "lastModified": utcnow().isoformat(),
            "entries": [_entry_to_dict(e) for e in self._entries.values()],
        }

    async def save(self, path: str | Path | None = None) -> Path:
        """Write the allowlist document, creating parent directories."""
        target = self._resolve_path(path)
        body = json.dumps(self.to_document(), ensure_ascii=False, indent=2)

        target.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(target, mode="w", encoding="utf-8") as fh:
            await fh.write(body)
        logger.info("Saved allowlist with %d entries to %s", len(self._entries), target)
        return target

    async def load(self, path: str | Path | None = None) -> bool:
        """Replace the allowlist from a document on disk.

        Returns False if the file does not exist.  Raises
        AllowlistFormatError (leaving state untouched) if it is malformed.
        """
        target = self._resolve_path(path)
        if not target.exists():
            logger.debug("No allowlist at %s", target)
            return False

        async with aiofiles.open(target, mode="r", encoding="utf-8") as fh:
            raw = await fh.read()

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise AllowlistFormatError(f"not JSON ({exc.msg})") from exc
        if not isinstance(document, dict) or not document.get("version"):
            raise AllowlistFormatError("missing 'version'")
        if not isinstance(document.get("entries"), list):
            raise AllowlistFormatError("'entries' is not a list")
        if document["version"] != FORMAT_VERSION:
            logger.warning("Allowlist %s has version %r, reading as %s",
                           target, document["version"], FORMAT_VERSION)

        try:
            entries = [_entry_from_mapping(raw_entry) for raw_entry in document["entries"]]
        except (TypeError, ValueError) as exc:
            raise AllowlistFormatError(str(exc)) from exc

        self.set_entries(entries)
        logger.info("Loaded allowlist with %d entries from %s", len(self._entries), target)
        return True

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def values(self) -> list[str]:
        return list(self._entries)

    def entries(self) -> list[AllowlistEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, str) and self.is_allowlisted(value)
