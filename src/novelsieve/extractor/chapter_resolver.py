"""
Chapter List Resolver - Catalog Container Detection

Locates the element wrapping a book's chapter index and turns its anchors
into an ordered list of chapter links. Containers are only accepted when
enough of their links look like chapter headings.
"""

from __future__ import annotations

from typing import List, Optional

import structlog

from ..utils.urls import resolve_http_url
from .models import ChapterLink
from .patterns import PatternLibrary, default_pattern_library
from .protocols import DocumentNode

logger = structlog.get_logger(__name__)

MIN_CHAPTER_LINKS = 3


class ChapterListResolver:
    """Selector-driven chapter index extraction."""

    def __init__(
        self,
        patterns: Optional[PatternLibrary] = None,
        min_chapter_links: int = MIN_CHAPTER_LINKS,
    ) -> None:
        self.patterns = patterns or default_pattern_library()
        self.min_chapter_links = min_chapter_links
        self.logger = logger.bind(component="ChapterListResolver")

    def has_valid_chapters(self, container: DocumentNode) -> bool:
        """True when at least ``min_chapter_links`` anchors carry chapter titles."""
        valid = 0
        for link in container.select("a"):
            if self.patterns.is_chapter_title(link.text):
                valid += 1
                if valid >= self.min_chapter_links:
                    return True
        return False

    def find_container(self, doc: DocumentNode) -> Optional[DocumentNode]:
        for selector in self.patterns.chapter_container_selectors:
            for container in doc.select(selector):
                if self.has_valid_chapters(container):
                    self.logger.debug("Chapter container found", selector=selector)
                    return container
                self.logger.debug("Rejected chapter container", selector=selector)
        self.logger.info("No chapter container matched")
        return None

    def extract_chapters(self, container: DocumentNode, base_url: str = "") -> List[ChapterLink]:
        """Collect chapter links from ``container`` in document order.

        ``base_url`` resolves relative hrefs when the container carries no
        document URL of its own.
        """
        chapters: List[ChapterLink] = []
        for link in container.select("a"):
            title = link.text.strip()
            url = link.abs_url("href")
            if not url and base_url:
                url = resolve_http_url(base_url, link.attr("href"))
            if title and url and self.patterns.is_chapter_title(title):
                chapters.append(ChapterLink(title=title, url=url))
        return chapters

    def resolve_chapter_list(self, doc: DocumentNode, base_url: str = "") -> List[ChapterLink]:
        container = self.find_container(doc)
        if container is None:
            return []
        chapters = self.extract_chapters(container, base_url)
        self.logger.debug("Chapters extracted", count=len(chapters))
        return chapters

