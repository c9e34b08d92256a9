from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal, Sequence

FieldKind = Literal["text", "score"]

BOLD_ASTERISKS = re.compile(r"\*\*(.+?)\*\*")
WRAPPING_MARKERS = ("**", "__", "~~", "*", "_", "`")
# Label anywhere in a line. The value may start on the next line, after an optional bullet.
LABEL_BOUNDARY = r"(?<!\w)"
VALUE_LEAD = r"[*_ \t]*:(?:[ \t]*[*_]*[ \t]*(\r?\n)[ \t]*(?:[-*][ \t]+)?)?[ \t]*"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    default: str = ""
    kind: FieldKind = "text"
    min_value: int = 0
    max_value: int = 100
    aliases: tuple[str, ...] = ()

    @property
    def labels(self) -> tuple[str, ...]:
        return (self.label, *self.aliases)

    def pattern(self) -> re.Pattern[str]:
        labels = "|".join(re.escape(label) for label in self.labels)
        head = LABEL_BOUNDARY + rf"(?:{labels})" + VALUE_LEAD
        if self.kind == "score":
            return re.compile(head + r"[^\d\n]*?(\d{1,3})(?!\d)", re.IGNORECASE | re.MULTILINE)
        return re.compile(head + r"(.+?)[ \t]*$", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class FieldSchema:
    fields: Sequence[FieldSpec]

    @property
    def names(self) -> list[str]:
        return [spec.name for spec in self.fields]

    def label_line_pattern(self) -> re.Pattern[str]:
        labels = "|".join(re.escape(label) for spec in self.fields for label in spec.labels)
        return re.compile(rf"^[ \t>#*_\-\d.)]*(?:{labels})[*_ \t]*:", re.IGNORECASE)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass
class ParsedFields:
    values: dict[str, str] = field(default_factory=dict)
    raw_response: str = ""
    matched: list[str] = field(default_factory=list)

    def __getitem__(self, name: str) -> str:
        return self.values[name]


def strip_emphasis(value: str) -> str:
    """Remove markdown emphasis that wraps words or the whole value; inner ``__`` and backticks stay."""
    cleaned = BOLD_ASTERISKS.sub(r"\1", value).strip()
    unwrapped = True
    while unwrapped:
        unwrapped = False
        for marker in WRAPPING_MARKERS:
            size = len(marker)
            if len(cleaned) > 2 * size and cleaned.startswith(marker) and cleaned.endswith(marker):
                cleaned = cleaned[size:-size].strip()
                unwrapped = True
                break
    return cleaned.strip(" \t*")


def _match_value(spec: FieldSpec, match: re.Match[str], label_line: re.Pattern[str]) -> str | None:
    crossed_line, captured = match.group(1), match.group(2)
    # A value on the next line must not be another field's label line.
    if crossed_line and label_line.match(captured):
        return None
    if spec.kind == "score":
        number = int(captured)
        if number < spec.min_value or number > spec.max_value:
            return None
        return str(number)
    return strip_emphasis(captured) or None


def _parse_one(spec: FieldSpec, raw_response: str, label_line: re.Pattern[str]) -> str | None:
    for match in spec.pattern().finditer(raw_response):
        value = _match_value(spec, match, label_line)
        if value is not None:
            return value
    return None


def parse_fields(raw_response: str | None, schema: FieldSchema) -> ParsedFields:
    """Best-effort extraction of ``Label: value`` lines from a model reply.

    Every schema field is present in the result; fields that do not match fall
    back to their default. Never raises on malformed input.
    """
    text = raw_response if isinstance(raw_response, str) else ""
    parsed = ParsedFields(raw_response=text)
    label_line = schema.label_line_pattern()
    for spec in schema.fields:
        value = _parse_one(spec, text, label_line)
        if value is None:
            parsed.values[spec.name] = spec.default
            continue
        parsed.values[spec.name] = value
        parsed.matched.append(spec.name)
    return parsed


def first_list_item(value: str) -> str:
    for item in (value or "").split(","):
        cleaned = strip_emphasis(item).strip("[]\"' ")
        if cleaned:
            return cleaned
    return ""
