"""
Content Density Resolver - Main Text Detection

Finds the element most likely to hold a chapter's body text. A fast path
tries well-known content containers; when none qualifies, every structural
element is scored by text density and the best non-noise candidate wins.

Two density measures are in play:

* ``text_density`` - visible text length over inner markup length. Used by
  the validity predicate and for ranking.
* ``adjusted_density`` - non-link text per descendant tag, halved for short
  or sparsely punctuated text. Used as the stricter gate of the scan, where
  link farms and navigation blocks have to be filtered out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import structlog

from .models import DensityScore
from .patterns import PatternLibrary, default_pattern_library
from .protocols import DocumentNode

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class DensityThresholds:
    """Threshold sets for the basic and the strict validity checks."""

    min_text_length: int = 50
    min_text_density: float = 0.3
    strict_min_text_length: int = 100
    min_adjusted_density: float = 0.5
    min_punctuation_density: float = 0.02


def text_density(node: DocumentNode) -> float:
    return len(node.text) / max(node.html_length, 1)


def link_text_length(node: DocumentNode) -> int:
    return sum(len(link.text) for link in node.select("a"))


class ContentDensityResolver:
    """
    Text-density based main content detection.

    Returns ``None`` when a page carries no narrative content; callers treat
    that as a normal outcome.
    """

    def __init__(
        self,
        patterns: Optional[PatternLibrary] = None,
        thresholds: Optional[DensityThresholds] = None,
    ) -> None:
        self.patterns = patterns or default_pattern_library()
        self.thresholds = thresholds or DensityThresholds()
        self.logger = logger.bind(component="ContentDensityResolver")

    # --- Scoring ---

    def punctuation_density(self, node: DocumentNode) -> float:
        text = node.text
        if not text:
            return 0.0
        return self.patterns.count_punctuation(text) / len(text)

    def adjusted_density(self, node: DocumentNode) -> float:
        text_length = len(node.text)
        tag_count = sum(1 for _ in node.descendants())
        density = (text_length - link_text_length(node)) / (tag_count + 1)

        if (
            text_length < self.thresholds.strict_min_text_length
            or self.punctuation_density(node) < self.thresholds.min_punctuation_density
        ):
            density *= 0.5
        return density

    def is_valid_content(self, node: Optional[DocumentNode]) -> bool:
        """Basic predicate: enough text, and text outweighs markup."""
        if node is None:
            return False
        text_length = len(node.text)
        if text_length < self.thresholds.min_text_length:
            return False
        return text_density(node) >= self.thresholds.min_text_density

    def is_strict_content(self, node: DocumentNode) -> bool:
        """Basic predicate plus the link- and punctuation-aware density gate."""
        if not self.is_valid_content(node):
            return False
        return self.adjusted_density(node) >= self.thresholds.min_adjusted_density

    def is_noise(self, node: DocumentNode) -> bool:
        return self.patterns.has_noise_keyword(node.class_name, node.id)

    # --- Resolution ---

    def find_by_selectors(self, doc: DocumentNode) -> Optional[DocumentNode]:
        for selector in self.patterns.content_selectors:
            for element in doc.select(selector):
                if self.is_valid_content(element):
                    self.logger.debug("Content container matched", selector=selector)
                    return element
        return None

    def rank_candidates(self, doc: DocumentNode) -> List[DensityScore]:
        """Score every non-noise structural element, best first."""
        scores: List[DensityScore] = []
        for element in doc.select(", ".join(self.patterns.density_tags)):
            if self.is_noise(element):
                continue
            if not self.is_strict_content(element):
                continue
            scores.append(DensityScore(node=element, score=text_density(element) * len(element.text)))

        # sorted() is stable: ties keep document order
        return sorted(scores, key=lambda entry: entry.score, reverse=True)

    def find_by_density(self, doc: DocumentNode) -> Optional[DocumentNode]:
        ranked = self.rank_candidates(doc)
        if not ranked:
            self.logger.info("No content candidate survived the density scan")
            return None
        best = ranked[0]
        self.logger.debug(
            "Density scan picked content",
            candidates=len(ranked),
            score=round(best.score, 2),
            text_length=len(best.node.text),
        )
        return best.node

    def find_main_content(self, doc: DocumentNode) -> Optional[DocumentNode]:
        element = self.find_by_selectors(doc)
        if element is not None:
            return element
        return self.find_by_density(doc)
