"""
novelsieve - Heuristic book, chapter-index and chapter-text extraction for web novels.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import BookInfo, ChapterContent, ChapterLink, ExtractionError, ExtractionPipeline

__all__ = [
    "__version__",
    "BookInfo",
    "ChapterContent",
    "ChapterLink",
    "Config",
    "ExtractionError",
    "ExtractionPipeline",
]
