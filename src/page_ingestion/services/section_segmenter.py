"""
Heading-based section segmentation over plain text.

Headings are recognised from line shape alone: a line shorter than
``MAX_HEADING_LENGTH`` that satisfies any of ``HEADING_PREDICATES``. Each
predicate is a pure ``str -> bool`` function so heuristics can be tested
and swapped independently of the windower.
"""

import re
from typing import Callable, List, Optional, Sequence

from page_ingestion.models.chunk import Section

MAX_HEADING_LENGTH = 100
# A heading only closes the current section once it holds more than this many characters.
MIN_SECTION_CHARS = 200
MAX_ANCHOR_LENGTH = 50

HeadingPredicate = Callable[[str], bool]

_CAPITALIZED_NO_PERIOD_RE = re.compile(r"^[A-Z][^.]*$")
_ORDINAL_RE = re.compile(r"^\d+\.")
_ANCHOR_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")


def starts_with_capital_no_period(line: str) -> bool:
    """Title-like line: leading uppercase letter and no period anywhere."""
    return bool(_CAPITALIZED_NO_PERIOD_RE.match(line))


def starts_with_ordinal(line: str) -> bool:
    """Numbered heading such as ``1.`` or ``12. Scope``."""
    return bool(_ORDINAL_RE.match(line))


def ends_with_colon(line: str) -> bool:
    """Label-style heading such as ``Prerequisites:``."""
    return line.endswith(":")


HEADING_PREDICATES: Sequence[HeadingPredicate] = (
    starts_with_capital_no_period,
    starts_with_ordinal,
    ends_with_colon,
)


def is_heading(line: str, predicates: Sequence[HeadingPredicate] = HEADING_PREDICATES) -> bool:
    """Return True when ``line`` is short enough and matches any predicate."""
    return len(line) < MAX_HEADING_LENGTH and any(predicate(line) for predicate in predicates)


def text_to_anchor(text: str) -> str:
    """
    Build a URL-safe slug from a heading line.

    ``text_to_anchor("Getting Started: Overview!") == "getting-started-overview"``
    """
    slug = _ANCHOR_STRIP_RE.sub("", text.lower())
    slug = _WHITESPACE_RE.sub("-", slug)
    return slug.strip("-")[:MAX_ANCHOR_LENGTH]


def segment(
    text: str,
    predicates: Sequence[HeadingPredicate] = HEADING_PREDICATES,
) -> List[Section]:
    """
    Split plain text into ordered sections at heading-shaped lines.

    A closed section carries the anchor of the heading that opened it; text
    before the first qualifying heading has no anchor. When no section is
    produced the whole input is returned as one anchorless section.
    """
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    sections: List[Section] = []
    buffer: List[str] = []
    buffer_chars = 0
    anchor: Optional[str] = None

    for line in lines:
        if is_heading(line, predicates) and buffer_chars > MIN_SECTION_CHARS:
            sections.append(Section(text="\n".join(buffer), anchor=anchor))
            buffer = [line]
            buffer_chars = len(line) + 1
            anchor = text_to_anchor(line) or None
        else:
            buffer.append(line)
            buffer_chars += len(line) + 1

    if buffer:
        sections.append(Section(text="\n".join(buffer), anchor=anchor))

    if not sections:
        return [Section(text=text)]
    return sections
