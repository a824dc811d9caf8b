"""CLI interface for pii-scanner — called by the site build before publishing.

Usage:
    # Scan text (stdin: text, stdout: JSON scan result)
    echo 'Call me at (555) 123-4567' | python -m pii_scanner.cli scan

    # Redact text (stdin: text, stdout: redacted text)
    echo 'SSN: 123-45-6789' | python -m pii_scanner.cli redact

    # Approve a value for publication
    python -m pii_scanner.cli allow public@company.com --category email --reason "Company inbox"

    # Dump the allowlist
    python -m pii_scanner.cli allowlist

The allowlist is persisted as JSON so approvals survive across calls.
"""

from __future__ import annotations
import argparse
import asyncio
import json
import logging
import sys

from .config import DEFAULT_ALLOWLIST, load_config, load_from_yaml, open_scanner
from .errors import AllowlistError
from .scanner import PIIScanner
from .types import PIICategory


def _build_scanner(args: argparse.Namespace) -> PIIScanner:
    config = load_config(load_from_yaml(args.config) if args.config else {})
    path = args.allowlist or config["allowlist_path"] or DEFAULT_ALLOWLIST
    return asyncio.run(open_scanner(config, path))


def _write_json(data: object) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_scan(scanner: PIIScanner, args: argparse.Namespace) -> None:
    """Scan plain text on stdin."""
    _write_json(scanner.scan(sys.stdin.read()).to_dict())


def cmd_redact(scanner: PIIScanner, args: argparse.Namespace) -> None:
    """Redact plain text on stdin."""
    sys.stdout.write(scanner.scan_and_redact(sys.stdin.read()).redacted_content)


def cmd_scan_redact(scanner: PIIScanner, args: argparse.Namespace) -> None:
    """Output both the redacted text and the scan result."""
    result = scanner.scan_and_redact(sys.stdin.read())
    _write_json({
        "redactedContent": result.redacted_content,
        "scanResult": result.scan_result.to_dict(),
    })


def cmd_allow(scanner: PIIScanner, args: argparse.Namespace) -> None:
    scanner.add_to_allowlist(args.value, args.category, args.reason)
    asyncio.run(scanner.save_allowlist())


def cmd_disallow(scanner: PIIScanner, args: argparse.Namespace) -> None:
    scanner.remove_from_allowlist(args.value)
    asyncio.run(scanner.save_allowlist())


def cmd_allowlist(scanner: PIIScanner, args: argparse.Namespace) -> None:
    """Dump allowlist entries as JSON."""
    _write_json([
        {
            "value": e.value,
            "type": e.category.value if e.category else None,
            "reason": e.reason,
            "addedAt": e.added_at.isoformat(),
        }
        for e in scanner.get_allowlist_entries()
    ])


def cmd_clear(scanner: PIIScanner, args: argparse.Namespace) -> None:
    scanner.clear_allowlist()
    asyncio.run(scanner.save_allowlist())
    sys.stderr.write(f"Cleared allowlist {scanner.get_allowlist_path()}\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="pii-scanner",
        description="Detect and redact PII before publishing content",
    )
    parser.add_argument("--allowlist", default=None,
                        help=f"Allowlist JSON path (default: {DEFAULT_ALLOWLIST})")
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("scan", help="Scan plain text (stdin), print JSON result")
    sub.add_parser("redact", help="Redact plain text (stdin)")
    sub.add_parser("scan-redact", help="Print redacted text and scan result as JSON")
    allow = sub.add_parser("allow", help="Add a value to the allowlist")
    allow.add_argument("value")
    allow.add_argument("--category", choices=[c.value for c in PIICategory])
    allow.add_argument("--reason")
    disallow = sub.add_parser("disallow", help="Remove a value from the allowlist")
    disallow.add_argument("value")
    sub.add_parser("allowlist", help="Dump allowlist entries")
    sub.add_parser("clear", help="Remove every allowlist entry")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    cmds = {
        "scan": cmd_scan,
        "redact": cmd_redact,
        "scan-redact": cmd_scan_redact,
        "allow": cmd_allow,
        "disallow": cmd_disallow,
        "allowlist": cmd_allowlist,
        "clear": cmd_clear,
    }
    try:
        scanner = _build_scanner(args)
        cmds[args.command](scanner, args)
    except AllowlistError as e:
        sys.stderr.write(f"pii-scanner: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
