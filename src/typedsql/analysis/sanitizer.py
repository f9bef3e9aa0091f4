"""Text normalization stages that run before field and parameter extraction.

Every stage is a pure ``str -> str`` transformation. The bracket-style stages
share :func:`replace_between`, which pairs the first prefix with the first
suffix after it and does not balance nested pairs::

    >>> replace_between("a (b (c) d) e", "(", ")")
    'a   d) e'

The stray ``d)`` is intentional; callers rely on this exact behavior.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

BLOCK_COMMENT = ("/*", "*/")
LINE_COMMENT = ("--", "\n")
CONTROL_CHARACTERS = ("\r", "\n", "\t")

_SPACE_RUN = re.compile(r" {2,}")


def replace_between(text: str, prefix: str, suffix: str, value: str = " ") -> str:
    """Replace every prefix...suffix span (inclusive) with ``value``.

    Scans left to right: the first ``prefix`` is paired with the first
    ``suffix`` that follows it, the span is spliced out, and scanning resumes
    right after the splice. A prefix with no suffix after it ends the scan
    and leaves the rest of the text untouched.

    Args:
        text: Text to scan
        prefix: Opening marker (e.g. "/*")
        suffix: Closing marker (e.g. "*/")
        value: Replacement for each matched span

    Returns:
        Text with every matched span replaced
    """
    parts: list[str] = []
    cursor = 0
    while True:
        start = text.find(prefix, cursor)
        if start == -1:
            break
        end = text.find(suffix, start + len(prefix))
        if end == -1:
            break
        parts.append(text[cursor:start])
        parts.append(value)
        cursor = end + len(suffix)
    parts.append(text[cursor:])
    return "".join(parts)


def strip_block_comments(text: str) -> str:
    return replace_between(text, *BLOCK_COMMENT)


def strip_line_comments(text: str) -> str:
    # Bound a comment on the last line by a newline of its own
    return replace_between(f"{text}\n", *LINE_COMMENT)


def strip_control_characters(text: str) -> str:
    for char in CONTROL_CHARACTERS:
        text = text.replace(char, " ")
    return text


def pad_brackets(text: str) -> str:
    return text.replace("(", " ( ").replace(")", " ) ")


def collapse_spaces(text: str) -> str:
    """Collapse space runs and append the trailing sentinel space."""
    return f"{_SPACE_RUN.sub(' ', text)} "


def sanitize(text: str) -> str:
    """Normalize raw SQL text for the extractors.

    Applies, in order: block comment removal, line comment removal, control
    character replacement, bracket padding and space collapsing. The result
    always ends with a sentinel space so every token, including the last one,
    is followed by a space.

    Args:
        text: Raw SQL text

    Returns:
        Sanitized text
    """
    text = strip_block_comments(text)
    text = strip_line_comments(text)
    text = strip_control_characters(text)
    text = pad_brackets(text)
    return collapse_spaces(text)


def strip_subqueries(text: str) -> str:
    """Remove parenthesized sub-expressions from sanitized text.

    Uses the same first-open/first-close pairing as :func:`replace_between`,
    so a group containing nested parentheses is only partially removed.
    Only used for field derivation; parameters inside subqueries must
    survive for parameter extraction.
    """
    return replace_between(text, "(", ")")


def strip_keywords(text: str, keywords: Iterable[str]) -> str:
    """Remove space-padded noise keywords from sanitized text.

    Each keyword is matched in its all-uppercase and all-lowercase spelling
    only; ``Distinct`` is left in place.

    Args:
        text: Sanitized text
        keywords: Keywords to remove (any case)

    Returns:
        Text with each ``" KEYWORD "`` occurrence replaced by a single space
    """
    for keyword in keywords:
        for spelling in (keyword.upper(), keyword.lower()):
            text = text.replace(f" {spelling} ", " ")
    return text
