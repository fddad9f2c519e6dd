import logging
from typing import List, Optional, Sequence

from ..lexicons import CONFLICT_CATEGORIES, ConflictCategory
from ..models import ConflictPoint
from ..text_processing.nlp_toolkit import NLPToolkit, get_toolkit


class ConflictDetector:
    """
    Finds sentences that carry dramatic conflict.

    Every sentence is tested against every category in ``CONFLICT_CATEGORIES``
    by plain substring search; a sentence matching two categories yields two
    conflict points at the same position. Intensity is the category's base
    intensity plus one per matched keyword, capped at 10.
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None,
                 categories: Sequence[ConflictCategory] = CONFLICT_CATEGORIES):
        self.logger = logging.getLogger(__name__)
        self.toolkit = toolkit or get_toolkit()
        self.categories = categories

    def detect_conflict_points(self, text: Optional[str]) -> List[ConflictPoint]:
        conflicts = []
        for sentence in self.toolkit.sentences(text or ''):
            sentence_text = sentence.text.lower()
            for category in self.categories:
                matched = [keyword for keyword in category.keywords if keyword in sentence_text]
                if not matched:
                    continue
                conflicts.append(ConflictPoint(
                    position=sentence.start,
                    intensity=min(10, category.base_intensity + len(matched)),
                    type=category.name,
                    description=category.description,
                    context=sentence.text,
                    keywords=matched,
                ))

        # sorted() is stable, so equal intensities keep document order
        conflicts = sorted(conflicts, key=lambda conflict: conflict.intensity, reverse=True)
        self.logger.debug(f"Detected {len(conflicts)} conflict points")
        return conflicts


def detect_conflict_points(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> List[ConflictPoint]:
    return ConflictDetector(toolkit).detect_conflict_points(text)
