"""Markup-to-plain-text normalization."""

import re

_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style[^>]*>.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize(markup: str) -> str:
    """
    Strip markup down to whitespace-collapsed plain text.

    Script and style elements are removed together with their content,
    every other tag is replaced by a space, and whitespace runs (newlines
    included) collapse to a single space. Malformed markup degrades to a
    best-effort extraction; this function does not raise.
    """
    if markup is None:
        return ""
    if not isinstance(markup, str):
        markup = str(markup)

    text = _SCRIPT_RE.sub("", markup)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
