"""
Pattern library for novel-page heuristics.

Holds the chapter-title expressions, noise keywords, selector lists and the
CJK punctuation class shared by every resolver. The library is an immutable
value built once and handed to resolvers by reference.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Pattern, Tuple

# Arabic digits plus the CJK numerals that appear in chapter headings.
_NUMERALS = "0-9０-９零〇一二两三四五六七八九十百千万亿"

CHAPTER_TITLE_PATTERNS: Tuple[str, ...] = (
    rf"第[{_NUMERALS}]+[章节卷集].*",
    r"[0-9]+[、.][^0-9]*",
    rf"第[{_NUMERALS}]+回.*",
    r"[序楔终]章.*",
    r"[前序楔]言.*",
    r"[后终]记.*",
)

NOISE_KEYWORDS: Tuple[str, ...] = (
    "copyright",
    "footer",
    "header",
    "comment",
    "menu",
    "nav",
    "sidebar",
    "ad",
    "author",
    "meta",
    "recommend",
    "related",
    "share",
    "tag",
    "tool",
)

CONTENT_SELECTORS: Tuple[str, ...] = (
    "div.content",
    "div.article",
    "article",
    "div.post-content",
    "div.entry-content",
    "div.main-content",
    "div.article-content",
    "div#content",
    "div#article",
    "div.chapter-content",
    "div.read-content",
    "div.chapter",
    "div.txt",
    "div.text",
    "div#BookText",
    "div#booktext",
    "div#htmlContent",
    "div#chaptercontent",
    "div.showtxt",
    "div#content_1",
    "div.box_con",
    "div.contentbox",
    "div.content_read",
    "div.box_con #content",
    "div#content1",
)

CHAPTER_CONTAINER_SELECTORS: Tuple[str, ...] = (
    "div.catalog",
    "div.directory",
    "div.chapter-list",
    "div.novel-list",
    "div.volume-list",
    "ul.chapter-list",
    "ul.volume-list",
    "div#list",
    "div.listmain",
    "div#chapterlist",
)

DENSITY_TAGS: Tuple[str, ...] = ("article", "div", "p", "section")

TITLE_META_NAMES: Tuple[str, ...] = (
    "og:title",
    "og:novel:title",
    "og:book:title",
    "title",
    "twitter:title",
)

AUTHOR_META_NAMES: Tuple[str, ...] = (
    "og:author",
    "og:novel:author",
    "og:book:author",
    "author",
    "twitter:creator",
)

TITLE_SELECTORS: Tuple[str, ...] = (
    "h1",
    "h2.title",
    "div.book-title",
    "div.title",
    "span.title",
    "div#info h1",
    "meta[property='og:title']",
)

AUTHOR_SELECTORS: Tuple[str, ...] = (
    "meta[name='author']",
    "a.author",
    "span.author",
    "div.author",
    "p.author",
    "meta[property='og:novel:author']",
    "meta[property='og:author']",
)

TITLE_SENTINEL = "未知标题"
AUTHOR_SENTINEL = "未知作者"

PLACEHOLDER_VALUES: Tuple[str, ...] = ("untitled", "unknown", TITLE_SENTINEL, AUTHOR_SENTINEL)

# Sentence-ending, quoting and bracketing marks used in CJK prose.
CJK_PUNCTUATION = (
    "[。！？，、；：“”‘’（）"
    "《》〈〉【】『』「」﹃﹄"
    "〔〕…—～﹏￥]"
)

AUTHOR_TEXT_PATTERN = r"作\s*者[：:]\s*(\S+)"


@dataclass(frozen=True)
class PatternLibrary:
    """Read-only bundle of the heuristics' static tables."""

    chapter_title_patterns: Tuple[Pattern[str], ...]
    noise_keywords: Tuple[str, ...]
    content_selectors: Tuple[str, ...]
    chapter_container_selectors: Tuple[str, ...]
    density_tags: Tuple[str, ...]
    title_meta_names: Tuple[str, ...]
    author_meta_names: Tuple[str, ...]
    title_selectors: Tuple[str, ...]
    author_selectors: Tuple[str, ...]
    placeholder_values: Tuple[str, ...]
    punctuation: Pattern[str]
    author_text_pattern: Pattern[str]

    def is_chapter_title(self, text: str | None) -> bool:
        """Return True when the trimmed text matches any chapter-title pattern."""
        if not text:
            return False
        text = text.strip()
        if not text:
            return False
        return any(pattern.fullmatch(text) for pattern in self.chapter_title_patterns)

    def has_noise_keyword(self, class_name: str, element_id: str) -> bool:
        class_name = class_name.lower()
        element_id = element_id.lower()
        return any(keyword in class_name or keyword in element_id for keyword in self.noise_keywords)

    def is_placeholder(self, value: str) -> bool:
        value = value.strip().lower()
        return any(value == placeholder.lower() for placeholder in self.placeholder_values)

    def count_punctuation(self, text: str) -> int:
        return len(self.punctuation.findall(text))


@lru_cache(maxsize=1)
def default_pattern_library() -> PatternLibrary:
    """Build the process-wide pattern library once."""
    return PatternLibrary(
        chapter_title_patterns=tuple(re.compile(p) for p in CHAPTER_TITLE_PATTERNS),
        noise_keywords=NOISE_KEYWORDS,
        content_selectors=CONTENT_SELECTORS,
        chapter_container_selectors=CHAPTER_CONTAINER_SELECTORS,
        density_tags=DENSITY_TAGS,
        title_meta_names=TITLE_META_NAMES,
        author_meta_names=AUTHOR_META_NAMES,
        title_selectors=TITLE_SELECTORS,
        author_selectors=AUTHOR_SELECTORS,
        placeholder_values=PLACEHOLDER_VALUES,
        punctuation=re.compile(CJK_PUNCTUATION),
        author_text_pattern=re.compile(AUTHOR_TEXT_PATTERN),
    )
