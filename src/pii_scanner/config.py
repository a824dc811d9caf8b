"""YAML/dict config loader for pii-scanner.

Supports loading from a YAML file or a plain dict (for embedding in a
larger site-builder config).

Example YAML:

    pii_scanner:
      allowlist_path: ~/.pii-scanner/allowlist.json
      allow_list:
        - public@company.com
        - (555) 010-0000
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .scanner import PIIScanner

logger = logging.getLogger(__name__)

DEFAULT_ALLOWLIST = os.environ.get(
    "PII_SCANNER_ALLOWLIST",
    str(Path.home() / ".pii-scanner" / "allowlist.json"),
)

CONFIG_REASON = "config"


def load_config(data: dict[str, Any] | None) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    data = data or {}
    # Support nested under "pii_scanner" key or flat
    if "pii_scanner" in data:
        data = data["pii_scanner"] or {}

    path = data.get("allowlist_path")
    return {
        "allowlist_path": str(Path(path).expanduser()) if path else None,
        "allow_list": [str(v) for v in data.get("allow_list") or []],
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    with open(path, encoding="utf-8") as f:
        return load_config(yaml.safe_load(f))


def create_scanner(config: dict[str, Any]) -> PIIScanner:
    """Create a scanner from a config dict.

    Inline allow_list values are added in memory only; they are written to
    the allowlist file only if the caller saves.
    """
    cfg = load_config(config)

    scanner = PIIScanner(cfg["allowlist_path"])
    for value in cfg["allow_list"]:
        scanner.add_to_allowlist(value, reason=CONFIG_REASON)
    return scanner


async def open_scanner(config: dict[str, Any], allowlist_path: str | None = None) -> PIIScanner:
    """Create a scanner, load its allowlist file, then add inline allow_list values.

    allowlist_path overrides the config's path.  Inline values go in after
    the load, so the file never replaces them.
    """
    cfg = load_config(config)
    path = allowlist_path or cfg["allowlist_path"]

    scanner = PIIScanner(path)
    if path and not await scanner.load_allowlist():
        logger.debug("No allowlist file at %s, starting empty", path)
    for value in cfg["allow_list"]:
        scanner.add_to_allowlist(value, reason=CONFIG_REASON)
    return scanner
