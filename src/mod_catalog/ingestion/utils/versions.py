"""
Release tag normalization and ignore-rule matching.

Tags are compared as semantic versions (https://semver.org), never as
strings: "1.2.0" and "1.2.0+build.5" are equal, "1.10.0" sorts after
"1.9.0".
"""

from dataclasses import dataclass
from enum import Enum

import semver


class IgnoreRuleKind(str, Enum):
    """How an ignore rule matches a version."""

    EXACT = "exact"
    LESS_THAN = "less_than"


LESS_THAN_PREFIX = "<"


def normalize_tag(tag: str) -> str:
    """Strip a single leading "v" from a release tag."""
    if tag.startswith("v"):
        return tag[1:]
    return tag


def parse_version(tag: str) -> semver.Version | None:
    """
    Parse a normalized release tag as a semantic version.

    Args:
        tag: Tag with any leading "v" already stripped

    Returns:
        The parsed version, or None if the tag is not valid semver
    """
    try:
        return semver.Version.parse(tag)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class IgnoreRule:
    """A configured version exclusion, either an exact match or an upper bound."""

    raw: str
    kind: IgnoreRuleKind
    bound: semver.Version

    @classmethod
    def parse(cls, raw: str) -> "IgnoreRule":
        """
        Parse an ignore rule such as "1.2.0" or "<1.2.0".

        Raises:
            ValueError: If the version part is not valid semver
        """
        text = raw.strip()
        kind = IgnoreRuleKind.EXACT
        if text.startswith(LESS_THAN_PREFIX):
            kind = IgnoreRuleKind.LESS_THAN
            text = text[len(LESS_THAN_PREFIX) :].strip()

        bound = parse_version(normalize_tag(text))
        if bound is None:
            raise ValueError(f"'{raw}' is not a valid ignore rule, expected 'X.Y.Z' or '<X.Y.Z'")
        return cls(raw=raw, kind=kind, bound=bound)

    def matches(self, version: semver.Version) -> bool:
        """Check whether `version` is excluded by this rule."""
        if self.kind == IgnoreRuleKind.LESS_THAN:
            return version < self.bound
        return version == self.bound


def find_ignore_match(version: semver.Version, rules: list[IgnoreRule]) -> IgnoreRule | None:
    """Return the first rule, in configured order, that excludes `version`."""
    for rule in rules:
        if rule.matches(version):
            return rule
    return None
