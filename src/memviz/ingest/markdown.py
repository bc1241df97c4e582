"""Markdown scanners.

Each scanner makes one pass over the raw text and yields the matches for a
single entity kind, so they can be tested (and reasoned about) in isolation.
"""

from __future__ import annotations

import re
from typing import Iterator


# [[Concept]] on a single line.
_WIKILINK_RE = re.compile(r"\[\[(.*?)\]\]")

# #tag at the start of the text or after whitespace; "file.md#frag" is not a tag.
_TAG_RE = re.compile(r"(?<!\S)#([A-Za-z0-9_-]+)")

# Level-2 headings only; "### x" and "#x" do not match.
_H2_RE = re.compile(r"^##[ \t]+(.*)$", re.MULTILINE)

_MD_LINK_RE = re.compile(r"\[[^\]]*\]\(([^)]+)\)")
_AUTOLINK_RE = re.compile(r"<([^>]+)>")

# Keyword extraction
_FENCE_RE = re.compile(r"```.*?```", re.DOTALL)
_INLINE_CODE_RE = re.compile(r"`[^`]*`")
_LINK_TEXT_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_URL_RE = re.compile(r"https?://\S+")
_NON_TOKEN_RE = re.compile(r"[^a-z0-9_\-\s]")

MIN_KEYWORD_CHARS = 4

STOPWORDS = frozenset(
    """
    the and that with this from have your you for are was were will just not but
    what when where who why how into onto over under than then them they their
    there here been being can could should would about also only some more most
    much very like its itself our out off because while within without across
    after before during between through these those such may might must shall
    dont doesnt didnt cant wont im ive id we us
    """.split()
)


def shorten(text: str | None, max_chars: int = 42) -> str:
    s = str(text or "").strip()
    if not s:
        return ""
    if len(s) <= max_chars:
        return s
    return s[: max(0, max_chars - 1)].rstrip() + "…"


def iter_wikilinks(text: str) -> Iterator[str]:
    for m in _WIKILINK_RE.finditer(text):
        name = m.group(1).strip()
        if name:
            yield name


def iter_tags(text: str) -> Iterator[str]:
    for m in _TAG_RE.finditer(text):
        yield m.group(1)


def iter_headers(text: str) -> Iterator[str]:
    for m in _H2_RE.finditer(text):
        header = m.group(1).strip()
        if header:
            yield header


def iter_markdown_links(text: str) -> Iterator[str]:
    for m in _MD_LINK_RE.finditer(text):
        target = m.group(1).strip()
        if target:
            yield target


def iter_autolinks(text: str) -> Iterator[str]:
    for m in _AUTOLINK_RE.finditer(text):
        target = m.group(1).strip()
        if target:
            yield target


def iter_link_targets(text: str) -> Iterator[str]:
    """Raw `[text](target)` and `<target>` targets, unfiltered."""
    yield from iter_markdown_links(text)
    yield from iter_autolinks(text)


def extract_keywords(text: str, *, cap: int = 4000) -> frozenset[str]:
    """Bag-of-words used for similarity scoring.

    Code and URLs are dropped, link syntax is reduced to its visible text.
    Unique tokens are kept in first-occurrence order up to `cap`.
    """
    t = _FENCE_RE.sub(" ", text)
    t = _INLINE_CODE_RE.sub(" ", t)
    t = _LINK_TEXT_RE.sub(r"\1", t)
    t = _URL_RE.sub(" ", t)
    t = _NON_TOKEN_RE.sub(" ", t.lower())

    seen: dict[str, None] = {}
    for tok in t.split():
        if len(tok) < MIN_KEYWORD_CHARS or tok in STOPWORDS:
            continue
        if tok in seen:
            continue
        seen[tok] = None
        if len(seen) >= cap:
            break
    return frozenset(seen)
