"""
novelsieve Extraction Module - Heuristic Novel Page Extraction

This module extracts book metadata, chapter indices and chapter text from
novel sites it has never seen before, using heuristics instead of
per-site selectors:

1. Metadata: ordered meta-tag / selector / <title> strategies with sentinels
2. Chapter lists: catalog containers validated by chapter-title patterns
3. Content: known content containers, then a text-density scan

Features:
- One immutable pattern library shared by every resolver
- BeautifulSoup-backed DOM adapter behind a capability protocol
- Charset selection for mislabelled GBK/Big5 pages
- Sync API plus executor-backed async helpers for concurrent preloading
"""

from .chapter_resolver import ChapterListResolver
from .content_text import node_to_text
from .density_resolver import ContentDensityResolver, DensityThresholds
from .encoding import decode_html
from .errors import ExtractionError, MalformedDocumentError
from .metadata_resolver import MetadataResolver
from .models import BookInfo, ChapterContent, ChapterLink, DensityScore, ExtractionResult
from .patterns import AUTHOR_SENTINEL, TITLE_SENTINEL, PatternLibrary, default_pattern_library
from .pipeline import ExtractionPipeline
from .protocols import DocumentNode
from .soup_document import SoupNode, parse_document

__all__ = [
    "AUTHOR_SENTINEL",
    "TITLE_SENTINEL",
    "BookInfo",
    "ChapterContent",
    "ChapterLink",
    "ChapterListResolver",
    "ContentDensityResolver",
    "DensityScore",
    "DensityThresholds",
    "DocumentNode",
    "ExtractionError",
    "ExtractionPipeline",
    "ExtractionResult",
    "MalformedDocumentError",
    "MetadataResolver",
    "PatternLibrary",
    "SoupNode",
    "decode_html",
    "default_pattern_library",
    "node_to_text",
    "parse_document",
]
