"""
Extraction pipeline for novelsieve.

Runs the metadata, chapter-list and content-density resolvers against one
document and assembles a single result. Resolvers never raise for missing
data; only a document that cannot be parsed surfaces as an ExtractionError.
"""

from __future__ import annotations

import asyncio
import time
from functools import partial
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple, Union

import structlog
from structlog.contextvars import bound_contextvars

from .chapter_resolver import ChapterListResolver
from .content_text import node_to_text
from .density_resolver import ContentDensityResolver
from .errors import ExtractionError, MalformedDocumentError
from .metadata_resolver import MetadataResolver
from .models import BookInfo, ChapterContent
from .patterns import PatternLibrary, default_pattern_library
from .protocols import DocumentNode
from .soup_document import parse_document

if TYPE_CHECKING:
    from ..config.config import ExtractionSettings

logger = structlog.get_logger(__name__)

RawHtml = Union[str, bytes]


class ExtractionPipeline:
    """
    Orchestrates the heuristic resolvers for book and chapter pages.

    Instances hold only immutable configuration, so one pipeline can serve
    many threads at once.
    """

    def __init__(
        self,
        settings: Optional[ExtractionSettings] = None,
        patterns: Optional[PatternLibrary] = None,
    ) -> None:
        if settings is None:
            from ..config import settings as global_settings

            settings = global_settings.extraction
        self.settings = settings
        self.patterns = patterns or default_pattern_library()
        self.logger = logger.bind(component="ExtractionPipeline")

        self.metadata = MetadataResolver(self.patterns)
        self.chapters = ChapterListResolver(self.patterns, min_chapter_links=settings.min_chapter_links)
        self.content = ContentDensityResolver(self.patterns, settings.density_thresholds())
        self._scrub_patterns: Tuple[str, ...] = tuple(settings.scrub_patterns)

    # --- Parsed documents ---

    def extract_book_info(self, doc: DocumentNode, url: str) -> BookInfo:
        """Resolve title, author and chapter index of a book page."""
        start_time = time.perf_counter()
        base_url = url or doc.base_url

        title = self.metadata.resolve_title(doc)
        author = self.metadata.resolve_author(doc)
        chapters = self.chapters.resolve_chapter_list(doc, base_url)

        self.logger.info(
            "Book page extracted",
            url=url,
            title=title,
            author=author,
            chapter_count=len(chapters),
            extraction_time=round(time.perf_counter() - start_time, 4),
        )
        return BookInfo(url=url, title=title, author=author, chapters=tuple(chapters))

    def extract_chapter_content(self, doc: DocumentNode) -> str:
        """Text of the main content node, or "" when the page has none."""
        start_time = time.perf_counter()
        node = self.content.find_main_content(doc)
        if node is None:
            self.logger.info("No chapter content found")
            return ""

        text = node_to_text(node, self._scrub_patterns)
        self.logger.info(
            "Chapter content extracted",
            text_length=len(text),
            extraction_time=round(time.perf_counter() - start_time, 4),
        )
        return text

    # --- Raw HTML ---

    def parse(self, html: RawHtml, url: str) -> DocumentNode:
        """Parse ``html``, re-raising parse failures with the source URL attached."""
        try:
            return parse_document(html, url, parser=self.settings.parser)
        except MalformedDocumentError as e:
            self.logger.error(
                "Document could not be parsed",
                event_type="malformed_document",
                url=url,
                error=str(e),
            )
            raise ExtractionError(f"Malformed document: {e}", url=url) from e

    def extract_book(self, html: RawHtml, url: str) -> BookInfo:
        with bound_contextvars(source_url=url):
            return self.extract_book_info(self.parse(html, url), url)

    def extract_chapter(self, html: RawHtml, url: str) -> ChapterContent:
        with bound_contextvars(source_url=url):
            doc = self.parse(html, url)
            return ChapterContent(url=url, content=self.extract_chapter_content(doc))

    # --- Async helpers ---

    async def extract_book_async(self, html: RawHtml, url: str) -> BookInfo:
        """Run ``extract_book`` in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self.extract_book, html, url))

    async def extract_chapter_async(self, html: RawHtml, url: str) -> ChapterContent:
        """Run ``extract_chapter`` in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self.extract_chapter, html, url))

    async def preload_chapters(
        self,
        pages: Iterable[Tuple[str, RawHtml]],
    ) -> List[Union[ChapterContent, ExtractionError]]:
        """
        Extract many already-fetched chapter pages concurrently.

        Results come back in input order. A malformed page yields its
        ExtractionError in place without cancelling the others.
        """
        pages = list(pages)
        results = await asyncio.gather(
            *(self.extract_chapter_async(html, url) for url, html in pages),
            return_exceptions=True,
        )

        outcomes: List[Union[ChapterContent, ExtractionError]] = []
        for result in results:
            if isinstance(result, (ChapterContent, ExtractionError)):
                outcomes.append(result)
            elif isinstance(result, BaseException):
                raise result
        self.logger.info(
            "Chapter preload finished",
            pages=len(pages),
            failures=sum(1 for outcome in outcomes if isinstance(outcome, ExtractionError)),
        )
        return outcomes
