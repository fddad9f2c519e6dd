import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from config import settings
from ..models import ChapterDialogueAnalysis, DialogueExtraction
from ..text_processing.dialogue_extractor import DialogueExtractor
from ..text_processing.document import ChapterContent, coerce_text
from ..text_processing.nlp_toolkit import NLPToolkit
from .character_resolver import CharacterAssignmentResolver, CharacterLike


def calculate_overall_confidence(dialogues: List[DialogueExtraction]) -> float:
    if not dialogues:
        return 0.0
    return sum(dialogue.confidence for dialogue in dialogues) / len(dialogues)


class ChapterDialogueAnalyzer:
    """
    Groups a chapter's dialogue by speaking character.

    Pipeline: flatten content -> extract and attribute dialogue -> resolve each
    speaker against the roster -> group by character id. A dialogue goes to
    ``unassigned_dialogues`` when its speaker does not resolve or its
    confidence is below ``min_confidence``.
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None, extractor: Optional[DialogueExtractor] = None,
                 min_confidence: Optional[float] = None):
        self.logger = logging.getLogger(__name__)
        self.extractor = extractor or DialogueExtractor(toolkit)
        self.min_confidence = settings.DIALOGUE_ASSIGNMENT_MIN_CONFIDENCE if min_confidence is None else min_confidence

    def analyze(self, content: ChapterContent, chapter_id: str,
                known_characters: Optional[Iterable[CharacterLike]] = None) -> ChapterDialogueAnalysis:
        plain_text = coerce_text(content)
        dialogues = self.extractor.extract_dialogues(plain_text)
        resolver = CharacterAssignmentResolver(known_characters)

        character_dialogues: Dict[str, List[DialogueExtraction]] = {}
        unassigned_dialogues: List[DialogueExtraction] = []

        for dialogue in dialogues:
            character = resolver.resolve(dialogue.speaker_name)
            if character is None or dialogue.confidence < self.min_confidence:
                unassigned_dialogues.append(dialogue)
                continue

            dialogue = replace(dialogue, speaker_id=character.id, speaker_name=character.name)
            character_dialogues.setdefault(character.id, []).append(dialogue)

        confidence = calculate_overall_confidence(dialogues)
        self.logger.info(
            f"Chapter {chapter_id}: {len(dialogues)} dialogues, "
            f"{len(dialogues) - len(unassigned_dialogues)} assigned to {len(character_dialogues)} characters "
            f"(confidence: {confidence:.2f})"
        )

        return ChapterDialogueAnalysis(
            chapter_id=chapter_id,
            character_dialogues=character_dialogues,
            unassigned_dialogues=unassigned_dialogues,
            total_dialogues=len(dialogues),
            confidence=confidence,
        )


def analyze_chapter_dialogues(content: ChapterContent, chapter_id: str,
                              known_characters: Optional[Iterable[CharacterLike]] = None,
                              toolkit: Optional[NLPToolkit] = None) -> ChapterDialogueAnalysis:
    """Extract, attribute and assign every dialogue of one chapter."""
    return ChapterDialogueAnalyzer(toolkit).analyze(content, chapter_id, known_characters)
