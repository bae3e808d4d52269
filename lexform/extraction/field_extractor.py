"""Structured field extraction from OCR text.

Pulls names, addresses, dates, Aadhaar/PAN numbers, case numbers, court
names and amounts out of the free text Tesseract returns for Indian
identity documents and court papers.

Every rule is an independent regular expression applied once to the whole
text. A rule is satisfied by its first match and later matches are
ignored. Rules never look at each other's results. Label rules need a
field label such as ``Name:`` in front of the value; shape rules match an
identity number by its digit/letter layout alone.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from lexform.utils.logger import get_logger

logger = get_logger(__name__)

LABEL = "label"
SHAPE = "shape"

# Optional abbreviation dot and colon after a label, staying on the same line.
_SEP = r"\.?[ \t]*:?[ \t]*"
_ID_SUFFIX = r"(?:[ \t]+(?:no|number))?"
_MONTHS = r"(?i:(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*)"

FieldMap = dict[str, str]


@dataclass
class ExtractedField:
    """A field value located in OCR text."""

    field_name: str
    value: str
    start_pos: int
    end_pos: int
    extraction_method: str


def _strip(value: str) -> str:
    return value.strip()


def _collapse_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def _remove_whitespace(value: str) -> str:
    return re.sub(r"\s+", "", value)


def _strip_trailing_punctuation(value: str) -> str:
    return value.strip().rstrip(".,")


@dataclass(frozen=True)
class FieldRule:
    """One extraction rule: a pattern whose first group is the value."""

    field_name: str
    pattern: re.Pattern[str]
    method: str
    normalize: Callable[[str], str] = _strip

    def apply(self, text: str) -> ExtractedField | None:
        match = self.pattern.search(text)
        if match is None:
            return None
        value = self.normalize(match.group(1))
        if not value:
            return None
        return ExtractedField(
            field_name=self.field_name,
            value=value,
            start_pos=match.start(1),
            end_pos=match.end(1),
            extraction_method=self.method,
        )


def _label_rule(
    field_name: str,
    label: str,
    value: str,
    normalize: Callable[[str], str] = _strip,
) -> FieldRule:
    pattern = re.compile(rf"\b(?i:{label})\b{_SEP}({value})")
    return FieldRule(field_name, pattern, LABEL, normalize)


def _shape_rule(
    field_name: str,
    shape: str,
    normalize: Callable[[str], str] = _strip,
) -> FieldRule:
    return FieldRule(field_name, re.compile(rf"\b({shape})\b"), SHAPE, normalize)


# Order is fixed and rules are independent; see module docstring.
DEFAULT_RULES: tuple[FieldRule, ...] = (
    _label_rule("name", "name", r"[^\s:][^\n\r]*"),
    _label_rule(
        "address",
        "address",
        r"[^\s:][^\n\r]*(?:[\n\r]+[^\n\r]+){0,3}",
        _collapse_whitespace,
    ),
    _label_rule(
        "date",
        "date",
        rf"(?:\d{{1,2}}[/-]\d{{1,2}}[/-]\d{{2,4}}"
        rf"|\d{{1,2}}[ \t]+{_MONTHS}[ \t]+\d{{2,4}})(?!\d)",
    ),
    _label_rule(
        "aadhaar",
        rf"(?:aadhaar|aadhar|uid){_ID_SUFFIX}",
        r"\d{4}[ \t]?\d{4}[ \t]?\d{4}(?!\d)",
        _remove_whitespace,
    ),
    _label_rule("pan", rf"pan{_ID_SUFFIX}", r"[A-Z0-9]{10}\b"),
    _label_rule(
        "case_number",
        r"case[ \t]+(?:no|number)",
        r"[A-Za-z0-9][A-Za-z0-9 \t/\-]*",
    ),
    _label_rule("court", "court", r"[^\s:][^\n\r]*"),
    _label_rule(
        "amount",
        r"amount|rs|inr",
        r"\d[\d,.]*",
        _strip_trailing_punctuation,
    ),
    _shape_rule("aadhaar_number", r"\d{4} ?\d{4} ?\d{4}", _remove_whitespace),
    _shape_rule("pan_number", r"[A-Z]{5}\d{4}[A-Z]"),
    _shape_rule("date_of_birth", r"\d{2}[/-]\d{2}[/-]\d{4}"),
)


class FieldExtractor:
    """Applies the ordered rule list to OCR text.

    Args:
        rules: Rules to apply, in order. Defaults to ``DEFAULT_RULES``.
    """

    def __init__(self, rules: tuple[FieldRule, ...] = DEFAULT_RULES) -> None:
        self.rules = rules

    @property
    def field_names(self) -> list[str]:
        return [rule.field_name for rule in self.rules]

    def extract_fields(
        self, text: str, fields: list[str] | None = None
    ) -> list[ExtractedField]:
        """Run each rule once and collect the values it found.

        Args:
            text: OCR text to search.
            fields: Restrict to these field names. Unknown names are ignored.

        Returns:
            One entry per rule that matched, in rule order.
        """
        results: list[ExtractedField] = []
        for rule in self.rules:
            if fields is not None and rule.field_name not in fields:
                continue
            found = rule.apply(text)
            if found is not None:
                results.append(found)

        logger.info(
            "Field extraction found %d of %d fields", len(results), len(self.rules)
        )
        return results

    def extract(self, text: str, fields: list[str] | None = None) -> FieldMap:
        """Build a Field Map from OCR text.

        Args:
            text: OCR text to search. Any string is accepted.
            fields: Restrict to these field names.

        Returns:
            Mapping of field name to value. Fields that were not found are
            absent; an empty mapping means nothing was recognized.
        """
        return {f.field_name: f.value for f in self.extract_fields(text, fields)}


def extract_fields(text: str) -> FieldMap:
    """Extract a Field Map with the default rules."""
    return FieldExtractor().extract(text)
