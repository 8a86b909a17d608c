"""
Exceptions raised by the extraction layer.

Only malformed input crosses the extraction boundary; "not found" outcomes
are modelled as sentinel values and empty results.
"""

from __future__ import annotations


class MalformedDocumentError(ValueError):
    """The raw HTML could not be decoded or parsed into a usable tree."""


class ExtractionError(Exception):
    """Extraction failed for a specific source URL."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(f"{message} (url={url or '<unknown>'})")
        self.url = url
