"""Output field extraction from the SELECT list."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from typedsql.core.types import IssueKind, SchemaIssue

_SELECT = re.compile(r"(?<!\S)select(?= )", re.IGNORECASE)
_FROM = re.compile(r"(?<= )from(?= )", re.IGNORECASE)
_ALIAS = re.compile(r" as ", re.IGNORECASE)

FIELD_SEPARATOR = ","
NAME_DELIMITERS = (".", " ")
NAME_TRIM_CHARS = " '"


@dataclass
class FieldExtraction:
    """Result of field extraction."""

    fields: list[str] = field(default_factory=list)
    """Distinct field names in order of first appearance."""

    issues: list[SchemaIssue] = field(default_factory=list)
    """Entries that resolved to an empty name."""

    warnings: list[str] = field(default_factory=list)
    """Non-fatal notes (duplicates, wildcards)."""


def select_span(text: str) -> str:
    """Return the text between the first SELECT and the first FROM after it.

    Both keywords are matched case-insensitively as whole, space-delimited
    words. Returns an empty string when either keyword is missing.
    """
    select = _SELECT.search(text)
    if select is None:
        return ""
    from_ = _FROM.search(text, select.end())
    if from_ is None:
        return ""
    return text[select.end() : from_.start()]


def resolve_field_name(entry: str) -> str:
    """Resolve one SELECT list entry to its output name.

    ``x AS y`` resolves to what follows the last ``AS``; otherwise the name is
    whatever follows the last ``.`` or space (``t.col`` -> ``col``,
    ``expr alias`` -> ``alias``). Surrounding spaces and single quotes are
    trimmed from the result, which may be empty.
    """
    entry = entry.strip(" ")
    aliases = list(_ALIAS.finditer(entry))
    if aliases:
        name = entry[aliases[-1].end() :]
    else:
        cut = max(entry.rfind(delimiter) for delimiter in NAME_DELIMITERS)
        name = entry[cut + 1 :]
    return name.strip(NAME_TRIM_CHARS)


def extract_fields(text: str) -> FieldExtraction:
    """Extract output field names from analyzer-ready text.

    Expects text that has been sanitized, stripped of subqueries and stripped
    of noise keywords; commas are split naively because parenthesized commas
    are gone by then.

    Args:
        text: Prepared SQL text

    Returns:
        FieldExtraction with distinct names, issues and warnings
    """
    result = FieldExtraction()
    span = select_span(text)
    if not span:
        return result

    seen: set[str] = set()
    for position, entry in enumerate(span.split(FIELD_SEPARATOR)):
        name = resolve_field_name(entry)
        if not name:
            result.issues.append(
                SchemaIssue(
                    kind=IssueKind.EMPTY_FIELD,
                    position=position,
                    raw=entry.strip(" "),
                    message=f"SELECT list entry {position} resolves to an empty field name",
                )
            )
            continue
        if name in seen:
            result.warnings.append(
                f"Field '{name}' is selected more than once; rows expose a single '{name}'."
            )
            continue
        if name == "*":
            result.warnings.append(
                "Wildcard selection cannot be resolved to field names. "
                "List the columns explicitly to read them from result rows."
            )
        seen.add(name)
        result.fields.append(name)

    return result
