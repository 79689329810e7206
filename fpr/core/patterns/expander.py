# fpr/core/patterns/expander.py
"""
Recursive expander for the grouping syntax.

    pattern   := span
    span      := (TEXT | group)*
    group     := '(' segment (',' segment)* ')'
    segment   := ['-' | '^'] span        ; leading marker = exclusion

`(`, `)` and `,` are reserved and assumed never to appear in real filenames.
"""
from dataclasses import dataclass
from typing import List, Set, Tuple
import structlog

from fpr.exceptions import UnmatchedParenthesisError

log = structlog.get_logger(__name__)

GROUP_OPEN = "("
GROUP_CLOSE = ")"
GROUP_SEPARATOR = ","
EXCLUSION_MARKERS = ("-", "^")


@dataclass(frozen=True)
class ExpansionPair:
    # one fully expanded string and whether any enclosing segment excluded it.
    text: str
    excluded: bool = False


def _expand_span(span: str, pattern: str, offset: int) -> List[ExpansionPair]:
    # scans literal text and groups, growing every partial string in lockstep.
    acc: List[ExpansionPair] = [ExpansionPair("")]
    i = 0

    while i < len(span):
        ch = span[i]
        if ch == GROUP_OPEN:
            group_items, i = _parse_group(span, i + 1, pattern, offset)
            acc = [
                ExpansionPair(prefix.text + suffix.text, prefix.excluded or suffix.excluded)
                for prefix in acc
                for suffix in group_items
            ]
        else:
            acc = [ExpansionPair(item.text + ch, item.excluded) for item in acc]
            i += 1
    return acc


def _split_group(
    span: str,
    start: int,
    pattern: str,
    offset: int,
) -> Tuple[List[Tuple[str, int]], int]:
    # splits the body of a group at top-level commas; returns (segment, start index) pairs
    # and the index just past the closing ')'.
    segments: List[Tuple[str, int]] = []
    depth = 0
    seg_start = start
    i = start

    while i < len(span):
        ch = span[i]
        if ch == GROUP_OPEN:
            depth += 1
        elif ch == GROUP_CLOSE:
            if depth == 0:
                segments.append((span[seg_start:i], seg_start))
                return segments, i + 1
            depth -= 1
        elif ch == GROUP_SEPARATOR and depth == 0:
            segments.append((span[seg_start:i], seg_start))
            seg_start = i + 1
        i += 1

    raise UnmatchedParenthesisError(pattern, offset + start - 1)


def _parse_group(
    span: str,
    start: int,
    pattern: str,
    offset: int,
) -> Tuple[List[ExpansionPair], int]:
    # parses the comma-separated list inside `(` ... `)`, starting just after the `(`.
    segments, next_i = _split_group(span, start, pattern, offset)

    out: List[ExpansionPair] = []
    for raw_segment, seg_start in segments:
        body = raw_segment.strip()
        if not body:
            continue
        body_offset = offset + seg_start + (len(raw_segment) - len(raw_segment.lstrip()))
        is_excluded = body.startswith(EXCLUSION_MARKERS)
        if is_excluded:
            body = body[1:]
            body_offset += 1
        for item in _expand_span(body, pattern, body_offset):
            out.append(ExpansionPair(item.text, is_excluded or item.excluded))
    return out, next_i


def expand_pairs(pattern: str) -> List[ExpansionPair]:
    """Expands a pattern into every (text, excluded) pair, before exclusions are applied."""
    return _expand_span(pattern, pattern, 0)


def expand_group_pattern(pattern: str) -> List[str]:
    """
    Expands a single argument that may use parenthetical grouping and exclusions.

    Returns the concrete path or glob strings **after** exclusions are applied,
    in the order they were first produced. A string that is excluded anywhere
    in the pattern never appears in the result, even if it is also included.

    Raises:
        UnmatchedParenthesisError: if a `(` is never closed.
    """
    pairs = expand_pairs(pattern)

    includes: List[str] = []
    excludes: Set[str] = set()
    for pair in pairs:
        if pair.excluded:
            excludes.add(pair.text)
        else:
            includes.append(pair.text)

    result = [text for text in includes if text not in excludes]
    log.debug(
        "group_pattern_expanded",
        pattern=pattern,
        produced=len(pairs),
        excluded=len(excludes),
        kept=len(result),
    )
    return result
