"""HTML to plain text reduction."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

MAX_CONTENT_LENGTH = 8000
TRUNCATION_MARKER = "... [content truncated]"
STRIPPED_TAGS = ("script", "style", "nav", "header", "footer")

_WHITESPACE = re.compile(r"\s+")


class ContentReducer:
    """Strips non-content markup from HTML and returns bounded plain text.

    Elements named in ``stripped_tags`` are removed wherever they are nested,
    all remaining text nodes are concatenated, whitespace runs collapse to a
    single space, and the result is cut to ``max_length`` characters with
    ``marker`` appended when anything was dropped.
    """

    def __init__(
        self,
        max_length: int = MAX_CONTENT_LENGTH,
        marker: str = TRUNCATION_MARKER,
        stripped_tags: tuple[str, ...] = STRIPPED_TAGS,
        parser: str = "html.parser",
    ) -> None:
        self.max_length = max_length
        self.marker = marker
        self.stripped_tags = stripped_tags
        self.parser = parser

    def reduce(self, html: str) -> str:
        soup = BeautifulSoup(html, self.parser)

        for element in soup(list(self.stripped_tags)):
            # Already gone if an enclosing stripped tag was decomposed first.
            if not element.decomposed:
                element.decompose()

        text = _WHITESPACE.sub(" ", soup.get_text()).strip()

        if len(text) > self.max_length:
            text = text[: self.max_length] + self.marker

        return text


def html_to_text(html: str) -> str:
    """Reduce ``html`` with the default limits."""
    return ContentReducer().reduce(html)


__all__ = [
    "ContentReducer",
    "html_to_text",
    "MAX_CONTENT_LENGTH",
    "TRUNCATION_MARKER",
    "STRIPPED_TAGS",
]
