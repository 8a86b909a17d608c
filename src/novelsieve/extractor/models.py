"""
Data models for extraction results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .protocols import DocumentNode


@dataclass(frozen=True, eq=False)
class ChapterLink:
    """One entry of a book's chapter index. Equal when the URLs are equal."""

    title: str
    url: str

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("ChapterLink title must not be empty")
        if not self.url:
            raise ValueError("ChapterLink url must not be empty")
        object.__setattr__(self, "title", self.title.strip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChapterLink):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url}


@dataclass(frozen=True)
class BookInfo:
    """Result of extracting a book or catalog page."""

    url: str
    title: str
    author: str
    chapters: Tuple[ChapterLink, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "url": self.url,
            "title": self.title,
            "author": self.author,
            "chapters": [chapter.to_dict() for chapter in self.chapters],
        }


@dataclass(frozen=True)
class ChapterContent:
    """Result of extracting a single chapter page."""

    url: str
    content: str

    @property
    def found(self) -> bool:
        return bool(self.content)


ExtractionResult = Union[BookInfo, ChapterContent]


@dataclass(slots=True)
class DensityScore:
    """Ranking entry used while scanning for the main content node."""

    node: DocumentNode
    score: float
