"""
Capability protocol for parsed DOM nodes.

Resolvers only read the document through this interface, so any HTML backend
that can answer these questions can drive the extraction heuristics.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class DocumentNode(Protocol):
    """Read-only view of one element in a parsed HTML document."""

    @property
    def tag(self) -> str:
        """Lower-case tag name."""
        ...

    @property
    def text(self) -> str:
        """Concatenated descendant text with whitespace collapsed."""
        ...

    @property
    def own_text(self) -> str:
        """Text of direct child strings only."""
        ...

    @property
    def class_name(self) -> str: ...

    @property
    def id(self) -> str: ...

    @property
    def html_length(self) -> int:
        """Length of the serialized inner markup."""
        ...

    @property
    def base_url(self) -> str: ...

    def attr(self, name: str) -> str:
        """Attribute value, or an empty string when absent."""
        ...

    def abs_url(self, name: str) -> str:
        """Attribute resolved against the document URL, or an empty string."""
        ...

    def children(self) -> List["DocumentNode"]: ...

    def descendants(self) -> Iterator["DocumentNode"]:
        """Element descendants in document order."""
        ...

    def select(self, selector: str) -> List["DocumentNode"]: ...

    def select_first(self, selector: str) -> Optional["DocumentNode"]: ...

    def text_lines(self, skip_tags: Iterable[str] = ()) -> List[str]:
        """Visible text split at block-level elements, one entry per line."""
        ...
