"""
Metadata Resolver - Book Title and Author Identification

Resolves a book's title and author from an arbitrary novel page using an
ordered chain of strategies: meta tags, common selectors, the document
``<title>`` (title only) and an inline "作者：" byline (author only). The first
candidate that validates wins; the chain never raises and ends in a sentinel.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional

import structlog

from .patterns import AUTHOR_SENTINEL, TITLE_SENTINEL, PatternLibrary, default_pattern_library
from .protocols import DocumentNode

logger = structlog.get_logger(__name__)

_SEPARATOR_TAIL = re.compile(r"\s*[-_|].*$", re.DOTALL)
_PAREN_ASIDE = re.compile(r"[(（].*?[)）]")
_BOOK_BRACKETS = re.compile(r"[《》]")
_AUTHOR_PREFIX = re.compile(r"作\s*者[：:]\s*")


def clean_title(title: str) -> str:
    """Strip site suffixes, asides and book-title brackets from a title."""
    title = _SEPARATOR_TAIL.sub("", title)
    title = _PAREN_ASIDE.sub("", title)
    title = _BOOK_BRACKETS.sub("", title)
    return title.strip()


def clean_author(author: str) -> str:
    """Strip site suffixes, asides and an "作者:" prefix from an author name."""
    author = _SEPARATOR_TAIL.sub("", author)
    author = _PAREN_ASIDE.sub("", author)
    author = _AUTHOR_PREFIX.sub("", author)
    return author.strip()


class MetadataResolver:
    """
    Multi-strategy title and author resolution.

    Strategies are tried in declared priority order; no scoring happens
    between candidates.
    """

    def __init__(self, patterns: Optional[PatternLibrary] = None) -> None:
        self.patterns = patterns or default_pattern_library()
        self.logger = logger.bind(component="MetadataResolver")

    def is_valid(self, value: Optional[str]) -> bool:
        """Reject missing, blank and placeholder values."""
        if value is None or not value.strip():
            return False
        return not self.patterns.is_placeholder(value)

    def resolve_title(self, doc: DocumentNode) -> str:
        title = self._first_valid(
            "title",
            self._candidates(doc, self.patterns.title_meta_names, self.patterns.title_selectors),
            clean_title,
        )
        if title is not None:
            return title

        title_element = doc.select_first("title")
        if title_element is not None:
            title = self._accept(title_element.text, clean_title)
            if title is not None:
                self.logger.debug("Title resolved from <title>", title=title)
                return title

        self.logger.warning("No valid title found")
        return TITLE_SENTINEL

    def resolve_author(self, doc: DocumentNode) -> str:
        author = self._first_valid(
            "author",
            self._candidates(doc, self.patterns.author_meta_names, self.patterns.author_selectors),
            clean_author,
        )
        if author is not None:
            return author

        match = self.patterns.author_text_pattern.search(doc.text)
        if match:
            author = self._accept(match.group(1), clean_author)
            if author is not None:
                self.logger.debug("Author resolved from byline text", author=author)
                return author

        self.logger.warning("No valid author found")
        return AUTHOR_SENTINEL

    def _candidates(
        self,
        doc: DocumentNode,
        meta_names: Iterable[str],
        selectors: Iterable[str],
    ) -> Iterable[tuple[str, Optional[str]]]:
        """Yield (source, raw value) pairs lazily in priority order."""
        metas = doc.select("meta")
        for name in meta_names:
            meta = self._find_meta(metas, name)
            if meta is not None:
                yield f"meta:{name}", meta.attr("content")

        for selector in selectors:
            element = doc.select_first(selector)
            if element is None:
                continue
            content = element.attr("content")
            yield f"selector:{selector}", content if content else element.text

    @staticmethod
    def _find_meta(metas: list[DocumentNode], name: str) -> Optional[DocumentNode]:
        for meta in metas:
            if meta.attr("property").strip().lower() == name or meta.attr("name").strip().lower() == name:
                return meta
        return None

    def _first_valid(
        self,
        field: str,
        candidates: Iterable[tuple[str, Optional[str]]],
        cleaner: Callable[[str], str],
    ) -> Optional[str]:
        for source, raw in candidates:
            value = self._accept(raw, cleaner)
            if value is not None:
                self.logger.debug("Metadata resolved", field=field, source=source, value=value)
                return value
            self.logger.debug("Rejected metadata candidate", field=field, source=source, raw=raw)
        return None

    def _accept(self, raw: Optional[str], cleaner: Callable[[str], str]) -> Optional[str]:
        if raw is None or not self.is_valid(raw):
            return None
        cleaned = cleaner(raw)
        if not self.is_valid(cleaned):
            return None
        return cleaned
