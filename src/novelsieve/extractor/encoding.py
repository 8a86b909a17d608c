"""
Charset selection for raw novel pages.

Chinese novel mirrors frequently mislabel their encoding, so decoding tries
several candidates and keeps the one that produces the least garbage.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import List, Optional

import charset_normalizer
from bs4 import BeautifulSoup

from .errors import MalformedDocumentError

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ("utf-8", "gb18030", "gbk", "big5")

_META_CHARSET = re.compile(rb"""<meta[^>]+charset\s*=\s*["']?\s*([A-Za-z0-9_\-]+)""", re.IGNORECASE)

MOJIBAKE_MARKERS = ("锟斤拷", "烫烫烫", "屯屯屯")
BOX_GLYPHS = ("□", "▯")

# Punctuation that unicodedata does not classify as P* on every platform.
EXTRA_PUNCTUATION = frozenset("。，！？；：“”‘’（）【】《》、～…—―")


def _is_punctuation(ch: str) -> bool:
    return ch in EXTRA_PUNCTUATION or unicodedata.category(ch).startswith("P")


def _is_han(ch: str) -> bool:
    code = ord(ch)
    return (
        0x4E00 <= code <= 0x9FFF
        or 0x3400 <= code <= 0x4DBF
        or 0x20000 <= code <= 0x2A6DF
        or 0xF900 <= code <= 0xFAFF
    )


def garbage_score(text: str) -> int:
    """Score how likely ``text`` is mis-decoded; lower is better."""
    if not text:
        return 2**31 - 1

    score = 0
    han = 0
    for ch in text:
        if _is_han(ch):
            han += 1
        if not (ch.isalnum() or ch.isspace() or _is_punctuation(ch)):
            score += 1

    if han / len(text) < 0.5:
        score += 1000
    if "\ufffd" in text:
        score += 500
    for glyph in BOX_GLYPHS:
        if glyph in text:
            score += 200
    if any(marker in text for marker in MOJIBAKE_MARKERS):
        score += 300
    return score


def visible_text(html: str) -> str:
    """Text a reader would see in ``html``; markup and scripts are dropped."""
    soup = BeautifulSoup(html, "html.parser")
    for hidden in soup.find_all(["script", "style", "noscript", "template", "title"]):
        hidden.decompose()
    root = soup.body or soup
    return " ".join(root.get_text(" ").split())


def declared_charset(raw: bytes) -> Optional[str]:
    """Charset named by the page's own ``<meta>`` declaration, if any."""
    match = _META_CHARSET.search(raw[:4096])
    if not match:
        return None
    return match.group(1).decode("ascii", errors="ignore").lower() or None


def _candidate_encodings(raw: bytes) -> List[str]:
    candidates: List[str] = []

    # Ties go to the earliest candidate, so the page's own declaration leads.
    declared = declared_charset(raw)
    if declared:
        candidates.append(declared)

    best = charset_normalizer.from_bytes(raw).best()
    if best is not None and best.encoding:
        candidates.append(best.encoding)

    candidates.extend(FALLBACK_ENCODINGS)

    seen = set()
    unique: List[str] = []
    for name in candidates:
        key = name.lower().replace("_", "-")
        if key not in seen:
            seen.add(key)
            unique.append(name)
    return unique


def decode_html(raw: bytes) -> str:
    """Decode raw page bytes using the least-garbled candidate charset."""
    if not raw:
        raise MalformedDocumentError("Empty document payload")

    best_text: Optional[str] = None
    best_score = 0
    best_encoding = None

    for encoding in _candidate_encodings(raw):
        try:
            text = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
        score = garbage_score(visible_text(text))
        if best_text is None or score < best_score:
            best_text, best_score, best_encoding = text, score, encoding

    if best_text is None:
        raise MalformedDocumentError("Unable to decode document with any candidate charset")

    logger.debug("Decoded document as %s (garbage score %d)", best_encoding, best_score)
    return best_text
