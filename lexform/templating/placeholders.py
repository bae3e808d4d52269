"""Placeholder extraction and substitution for document templates.

Templates mark substitution points with ``{{identifier}}`` tokens. An
identifier is any run of characters other than ``}``; it is matched
exactly and case-sensitively. There is no escape syntax and no nesting.

Neither function here raises for any input: unterminated tokens are
simply not placeholders, and tokens with no value are left in place so a
reviewer can see what is still missing.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from lexform.utils.logger import get_logger

logger = get_logger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


@dataclass
class MergeResult:
    """Merged template text with a summary of what was substituted."""

    content: str
    resolved: list[str] = field(default_factory=list)
    unresolved: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.unresolved


def format_placeholder(identifier: str) -> str:
    """Return the token form of an identifier, e.g. ``{{name}}``."""
    return "{{" + identifier + "}}"


def extract_placeholders(text: str) -> list[str]:
    """List the distinct placeholder identifiers in a template.

    Args:
        text: Template body.

    Returns:
        Identifiers without braces, in order of first appearance.
    """
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(text):
        seen.setdefault(match.group(1), None)
    return list(seen)


def merge_fields(text: str, fields: Mapping[str, str]) -> str:
    """Substitute field values into every matching placeholder.

    Replacement is a single left-to-right pass over the original text, so a
    value that itself looks like ``{{...}}`` is inserted literally and never
    expanded. Tokens whose identifier is not a key of ``fields`` are kept
    verbatim.

    Args:
        text: Template body.
        fields: Field Map of identifier to value.

    Returns:
        The merged text.
    """

    def _substitute(match: re.Match[str]) -> str:
        identifier = match.group(1)
        if identifier in fields:
            return str(fields[identifier])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, text)


def find_unresolved(text: str, fields: Mapping[str, str]) -> list[str]:
    """Return placeholder identifiers in ``text`` that ``fields`` does not cover."""
    return [name for name in extract_placeholders(text) if name not in fields]


def render(text: str, fields: Mapping[str, str]) -> MergeResult:
    """Merge ``fields`` into ``text`` and report resolved/unresolved identifiers.

    Args:
        text: Template body.
        fields: Field Map of identifier to value.

    Returns:
        MergeResult with the merged content.
    """
    placeholders = extract_placeholders(text)
    resolved = [name for name in placeholders if name in fields]
    unresolved = [name for name in placeholders if name not in fields]

    if unresolved:
        logger.debug(
            "Merged %d placeholders, %d left unresolved: %s",
            len(resolved),
            len(unresolved),
            ", ".join(unresolved),
        )
    return MergeResult(
        content=merge_fields(text, fields),
        resolved=resolved,
        unresolved=unresolved,
    )
