"""Named parameter (``:name``) extraction."""

from __future__ import annotations

from collections.abc import Collection, Iterator
from dataclasses import dataclass, field

from typedsql.core.types import IssueKind, SchemaIssue

PLACEHOLDER_MARK = ":"
TOKEN_END = " "


@dataclass
class ParameterExtraction:
    """Result of parameter extraction."""

    parameters: list[str] = field(default_factory=list)
    """Distinct parameter names in order of first appearance."""

    issues: list[SchemaIssue] = field(default_factory=list)
    """Placeholders that reduced to an empty name."""


def iter_placeholder_tokens(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, token)`` for every ``:token`` run in sanitized text.

    A token runs from just after the ``:`` up to the next space; scanning
    resumes after that space. A ``:`` with no space after it is ignored,
    which cannot happen for sanitized text thanks to its trailing sentinel.
    """
    cursor = 0
    while True:
        mark = text.find(PLACEHOLDER_MARK, cursor)
        if mark == -1:
            return
        end = text.find(TOKEN_END, mark + 1)
        if end == -1:
            return
        yield mark, text[mark + 1 : end]
        cursor = end + 1


def extract_parameters(text: str, allowed_chars: Collection[str]) -> ParameterExtraction:
    """Extract named parameters from sanitized text.

    Run this on sanitized text *before* subquery elimination so placeholders
    inside subqueries are kept. Each captured token is reduced to the
    characters in ``allowed_chars``; trailing punctuation such as ``,`` or
    ``)`` is dropped.

    Args:
        text: Sanitized SQL text
        allowed_chars: Characters a parameter name may contain

    Returns:
        ParameterExtraction with distinct names and issues
    """
    result = ParameterExtraction()
    seen: set[str] = set()
    for offset, token in iter_placeholder_tokens(text):
        name = "".join(char for char in token if char in allowed_chars)
        if not name:
            result.issues.append(
                SchemaIssue(
                    kind=IssueKind.EMPTY_PARAMETER,
                    position=offset,
                    raw=f"{PLACEHOLDER_MARK}{token}",
                    message=f"Placeholder at offset {offset} has no valid parameter name",
                )
            )
            continue
        if name not in seen:
            seen.add(name)
            result.parameters.append(name)
    return result
