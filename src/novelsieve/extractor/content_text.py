"""
Plain-text rendering of a chapter's content node.

Keeps the node's own line structure, drops embedded navigation links and
frames, and removes site watermarks that mirrors inject into the prose.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Pattern, Tuple

from .protocols import DocumentNode

# Tags whose text never belongs to the chapter body.
CONTENT_SKIP_TAGS: Tuple[str, ...] = ("a", "iframe", "script", "style", "noscript", "button", "select")

DEFAULT_SCRUB_PATTERNS: Tuple[str, ...] = (
    r"https?://[A-Za-z0-9._~:/?#\[\]@!$&'()*+,;=%\-]+",
    r"www\.[A-Za-z0-9.\-/]+",
    r"(八八中文网|88中文网|求书网|新笔趣阁|笔趣阁|顶点小说|番茄小说)[^，。！？]*",
    r"最新章节！",
)


@lru_cache(maxsize=32)
def _compile(patterns: Tuple[str, ...]) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(pattern, re.IGNORECASE) for pattern in patterns)


def node_to_text(node: DocumentNode, scrub_patterns: Iterable[str] = DEFAULT_SCRUB_PATTERNS) -> str:
    """Render ``node`` as newline-separated lines of visible body text."""
    compiled = _compile(tuple(scrub_patterns))
    lines = []
    for line in node.text_lines(skip_tags=CONTENT_SKIP_TAGS):
        for pattern in compiled:
            line = pattern.sub("", line)
        line = line.strip()
        if line:
            lines.append(line)
    return "\n".join(lines)
