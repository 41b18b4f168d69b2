"""Split raw inline Markdown text into formatting spans.

Five inline constructs are recognised, in this priority order:

1. hyperlink      ``[text](url)``
2. strikethrough  ``~~text~~``
3. bold           ``**text**``
4. italic         ``*text*`` (never part of a ``**`` pair)
5. inline code    ```text```

Scanning runs left to right.  At each cursor every rule looks for its
next occurrence; the occurrence that starts first wins, and when several
rules start at the same position the one earlier in the list wins.  Text
between the cursor and the winning match becomes a :class:`PlainText`
span.

Matches never nest: the inner text of a bold span is not scanned again
for italic or code markers.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from docxify.models import (
    Bold,
    Hyperlink,
    InlineCode,
    Italic,
    PlainText,
    Span,
    Strikethrough,
)


@dataclass(frozen=True)
class InlineRule:
    """A named inline pattern and the span it produces."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], Span]


INLINE_RULES: tuple[InlineRule, ...] = (
    InlineRule(
        "hyperlink",
        re.compile(r"\[([^\]]+)\]\(([^)]+)\)"),
        lambda m: Hyperlink(m.group(1), m.group(2)),
    ),
    InlineRule(
        "strikethrough",
        re.compile(r"~~(.+?)~~"),
        lambda m: Strikethrough(m.group(1)),
    ),
    InlineRule(
        "bold",
        re.compile(r"\*\*(.+?)\*\*"),
        lambda m: Bold(m.group(1)),
    ),
    InlineRule(
        "italic",
        re.compile(r"(?<!\*)\*([^*\n]+)\*(?!\*)"),
        lambda m: Italic(m.group(1)),
    ),
    InlineRule(
        "inline_code",
        re.compile(r"`([^`\n]+)`"),
        lambda m: InlineCode(m.group(1)),
    ),
)


def parse_spans(
    text: str,
    rules: Sequence[InlineRule] = INLINE_RULES,
) -> list[Span]:
    """Convert raw inline Markdown to an ordered list of spans.

    Never fails: text that matches no rule is returned as a single
    :class:`PlainText` span, so the result is never empty (an empty
    *text* yields ``[PlainText("")]``).
    """
    spans: list[Span] = []
    cursor = 0

    while cursor < len(text):
        found = _next_match(text, cursor, rules)
        if found is None:
            break
        rule, match = found
        if match.start() > cursor:
            spans.append(PlainText(text[cursor:match.start()]))
        spans.append(rule.build(match))
        cursor = match.end()

    if cursor < len(text):
        spans.append(PlainText(text[cursor:]))

    if not spans:
        spans.append(PlainText(text))
    return spans


def _next_match(
    text: str,
    cursor: int,
    rules: Sequence[InlineRule],
) -> tuple[InlineRule, re.Match[str]] | None:
    """Return the earliest match at or after *cursor*; ties go to rule order."""
    best: tuple[InlineRule, re.Match[str]] | None = None
    for rule in rules:
        match = rule.pattern.search(text, cursor)
        if match is None:
            continue
        if best is None or match.start() < best[1].start():
            best = (rule, match)
    return best


def span_text(spans: Iterable[Span]) -> str:
    """Concatenate the literal (marker-free) text of *spans*."""
    return "".join(span.text for span in spans)
