"""Code masking: keep fenced blocks and inline code out of link rewriting.

Masking splits text into a flat sequence of ``Literal`` and ``CodeSpan``
segments. Later stages only ever look inside ``Literal`` segments, so nothing
that sits in code, including text that resembles a wikilink or an image
embed, can be rewritten. ``unmask`` joins the segments back together.
"""

import re
from typing import Iterable, List

from loguru import logger

from obsidian_hugo.core.models import CodeSpan, Literal, Segment, SpanKind, Token

# Opening fence of 3+ backticks or tildes (up to 3 spaces of indent), an
# optional info string, an optional body, and a closing fence of the same
# character that is at least as long.
FENCED_CODE_PATTERN = re.compile(
    r'^ {0,3}(?P<fence>(?P<char>[`~])(?P=char){2,})(?!(?P=char))[^\n]*\n'
    r'(?:.*?\n)??'
    r' {0,3}(?P=fence)(?P=char)*[ \t]*$',
    re.MULTILINE | re.DOTALL,
)

# Single-backtick span on one line
INLINE_CODE_PATTERN = re.compile(r'`[^`\n]+?`')


def _split(segments: Iterable[Segment], pattern: re.Pattern, kind: SpanKind) -> List[Segment]:
    result: List[Segment] = []
    count = 0

    for segment in segments:
        if not isinstance(segment, Literal):
            result.append(segment)
            continue

        text = segment.text
        position = 0
        for match in pattern.finditer(text):
            if match.start() > position:
                result.append(Literal(text[position:match.start()]))
            result.append(CodeSpan(kind=kind, index=count, text=match.group(0)))
            logger.debug(f"Masked {kind.value} code span #{count}")
            count += 1
            position = match.end()
        if position < len(text):
            result.append(Literal(text[position:]))

    return result


def mask(text: str) -> List[Segment]:
    """Split text into literal and code segments.

    Fenced blocks are found first, inline spans second, and inline spans are
    only searched for in what the fenced pass left as literal text.
    """
    segments = _split([Literal(text)], FENCED_CODE_PATTERN, SpanKind.FENCED)
    return _split(segments, INLINE_CODE_PATTERN, SpanKind.INLINE)


def unmask(segments: Iterable[Token]) -> str:
    """Join segments back into text, restoring every code span exactly once.

    Spans are restored last-in first-out: inline spans in reverse order, then
    fenced blocks in reverse order. Any token that is neither a ``Literal``
    nor a ``CodeSpan`` must have been rendered to a ``Literal`` beforehand.
    """
    parts: List[str] = []
    inline_slots: List[int] = []
    fenced_slots: List[int] = []
    spans = {}

    for token in segments:
        if isinstance(token, Literal):
            parts.append(token.text)
        elif isinstance(token, CodeSpan):
            slots = inline_slots if token.kind is SpanKind.INLINE else fenced_slots
            slots.append(len(parts))
            spans[len(parts)] = token
            parts.append('')
        else:
            raise TypeError(f"Cannot unmask unrendered token: {token!r}")

    for slot in reversed(inline_slots):
        parts[slot] = spans[slot].text
    for slot in reversed(fenced_slots):
        parts[slot] = spans[slot].text

    return ''.join(parts)
