"""PII Scanner — pattern-based PII detection and redaction for published content."""

from .scanner import PIIScanner
from .allowlist import AllowlistStore
from .patterns import PATTERNS, PatternRule
from .redactor import PLACEHOLDERS, redact
from .risk import classify_risk
from .config import create_scanner, load_config, load_from_yaml, open_scanner
from .errors import AllowlistError, AllowlistConfigError, AllowlistFormatError
from .types import (
    AllowlistEntry, DetectedItem, PIICategory, RedactedContent, RiskLevel, ScanResult, Span,
)

__all__ = [
    "PIIScanner",
    "AllowlistStore",
    "PATTERNS", "PatternRule",
    "PLACEHOLDERS", "redact",
    "classify_risk",
    "create_scanner", "load_config", "load_from_yaml", "open_scanner",
    "AllowlistError", "AllowlistConfigError", "AllowlistFormatError",
    "AllowlistEntry", "DetectedItem", "PIICategory", "RedactedContent",
    "RiskLevel", "ScanResult", "Span",
]
__version__ = "0.1.0"
