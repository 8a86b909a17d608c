"""
BeautifulSoup-backed implementation of the DocumentNode protocol.
"""

from __future__ import annotations

import logging
import re
from functools import cached_property
from typing import Iterable, Iterator, List, Optional, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction
from soupsieve import SelectorSyntaxError

from ..utils.urls import resolve_http_url
from .encoding import decode_html
from .errors import MalformedDocumentError

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "html.parser"

# Containers whose strings are never visible text.
HIDDEN_TEXT_PARENTS = frozenset({"script", "style", "noscript", "template"})

# Elements that start a new line when rendering text.
BLOCK_TAGS = frozenset(
    {
        "p", "div", "br", "section", "article", "li", "ul", "ol", "dl", "dd", "dt", "tr", "td", "th",
        "table", "blockquote", "pre", "h1", "h2", "h3", "h4", "h5", "h6", "header", "footer", "nav",
        "main", "aside", "form", "hr", "html", "head", "body", "title",
    }
)

_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)

# At least one start tag; lxml and html5lib invent elements around bare text.
_START_TAG = re.compile(r"<[A-Za-z][^>]*>")


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


class SoupNode:
    """Wraps a bs4 ``Tag`` and answers the DocumentNode capability queries."""

    def __init__(self, tag: Tag, base_url: str = "") -> None:
        self._tag = tag
        self._base_url = base_url

    def __repr__(self) -> str:
        return f"<SoupNode {self.tag} class={self.class_name!r} id={self.id!r}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SoupNode):
            return NotImplemented
        return self._tag is other._tag

    def __hash__(self) -> int:
        return id(self._tag)

    @property
    def raw(self) -> Tag:
        """The underlying bs4 element."""
        return self._tag

    @property
    def tag(self) -> str:
        return (self._tag.name or "").lower()

    @cached_property
    def text(self) -> str:
        # Block boundaries become single spaces.
        return " ".join(self.text_lines())

    @property
    def own_text(self) -> str:
        parts = [
            str(child)
            for child in self._tag.children
            if isinstance(child, NavigableString) and not isinstance(child, _NON_TEXT_STRINGS)
        ]
        return collapse_whitespace("".join(parts))

    @property
    def class_name(self) -> str:
        return self.attr("class")

    @property
    def id(self) -> str:
        return self.attr("id")

    @cached_property
    def html_length(self) -> int:
        return len(self._tag.decode_contents())

    @property
    def base_url(self) -> str:
        return self._base_url

    def attr(self, name: str) -> str:
        value = self._tag.get(name)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return str(value)

    def abs_url(self, name: str) -> str:
        return resolve_http_url(self._base_url, self.attr(name))

    def _wrap(self, tag: Tag) -> "SoupNode":
        return SoupNode(tag, self._base_url)

    def children(self) -> List["SoupNode"]:
        return [self._wrap(child) for child in self._tag.children if isinstance(child, Tag)]

    def descendants(self) -> Iterator["SoupNode"]:
        for element in self._tag.descendants:
            if isinstance(element, Tag):
                yield self._wrap(element)

    def select(self, selector: str) -> List["SoupNode"]:
        try:
            return [self._wrap(tag) for tag in self._tag.select(selector)]
        except SelectorSyntaxError as e:
            logger.debug("Invalid selector %r: %s", selector, e)
            return []

    def select_first(self, selector: str) -> Optional["SoupNode"]:
        try:
            tag = self._tag.select_one(selector)
        except SelectorSyntaxError as e:
            logger.debug("Invalid selector %r: %s", selector, e)
            return None
        return self._wrap(tag) if tag is not None else None

    def text_lines(self, skip_tags: Iterable[str] = ()) -> List[str]:
        skipped = HIDDEN_TEXT_PARENTS | {name.lower() for name in skip_tags}
        lines: List[str] = []
        buffer: List[str] = []

        def flush() -> None:
            line = collapse_whitespace("".join(buffer))
            buffer.clear()
            if line:
                lines.append(line)

        def walk(tag: Tag) -> None:
            for child in tag.children:
                if isinstance(child, Tag):
                    if child.name in skipped:
                        continue
                    if child.name in BLOCK_TAGS:
                        flush()
                        walk(child)
                        flush()
                    else:
                        walk(child)
                elif isinstance(child, NavigableString) and not isinstance(child, _NON_TEXT_STRINGS):
                    buffer.append(str(child))

        walk(self._tag)
        flush()
        return lines


def parse_document(html: Union[str, bytes], url: str = "", parser: str = DEFAULT_PARSER) -> SoupNode:
    """Parse raw HTML into a SoupNode rooted at the document.

    Raises:
        MalformedDocumentError: when the payload is empty, cannot be decoded
            or parsed, or yields no elements at all.
    """
    if isinstance(html, bytes):
        html = decode_html(html)
    if html is None or not html.strip():
        raise MalformedDocumentError("Empty document payload")
    if not _START_TAG.search(html):
        raise MalformedDocumentError("Document contains no elements")

    try:
        soup = BeautifulSoup(html, parser)
    except Exception as e:
        raise MalformedDocumentError(f"HTML parser '{parser}' failed: {e}") from e

    if soup.find(True) is None:
        raise MalformedDocumentError("Document contains no elements")

    base_url = url or ""
    base_tag = soup.find("base", href=True)
    if base_tag is not None:
        base_url = urljoin(base_url, str(base_tag["href"]))

    return SoupNode(soup, base_url)
