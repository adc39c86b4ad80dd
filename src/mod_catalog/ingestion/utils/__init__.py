"""
Utility modules for ingestion.

Provides release tag normalization, ignore-rule matching,
and timestamp formatting.
"""

from mod_catalog.ingestion.utils.timestamps import format_timestamp, utc_now
from mod_catalog.ingestion.utils.versions import (
    IgnoreRule,
    IgnoreRuleKind,
    find_ignore_match,
    normalize_tag,
    parse_version,
)

__all__ = [
    "format_timestamp",
    "utc_now",
    "IgnoreRule",
    "IgnoreRuleKind",
    "find_ignore_match",
    "normalize_tag",
    "parse_version",
]
