import re
import logging
from typing import List, Optional, Tuple

from config import settings
from ..attribution.speaker_attributor import SpeakerAttributor, calculate_dialogue_confidence
from ..lexicons import QUOTE_CONVENTIONS
from ..models import DialogueExtraction, DialogueMarkers
from .nlp_toolkit import NLPToolkit


class DialogueExtractor:
    """Finds quoted dialogue spans and hands them to the speaker attributor.

    Each quotation convention in ``QUOTE_CONVENTIONS`` is scanned separately
    over the whole (whitespace-collapsed) text and the results are merged.
    Spans are deduplicated on the exact ``(dialogue, position)`` pair only, so a
    「…」 nested inside “…” yields two overlapping candidates. That overlap is
    kept as-is and surfaced through ``overlapping_pairs``.

    Examples:
        >>> extractor = DialogueExtractor()
        >>> dialogues = extractor.extract_dialogues('她驚訝地回答：「真的嗎？」')
        >>> dialogues[0].dialogue
        '真的嗎？'
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None, attributor: Optional[SpeakerAttributor] = None):
        self.logger = logging.getLogger(__name__)
        self.attributor = attributor or SpeakerAttributor(toolkit)
        self.context_window = settings.DIALOGUE_CONTEXT_WINDOW
        self.quote_patterns = [
            (convention, re.compile(re.escape(convention.open_quote) + r'(.*?)' + re.escape(convention.close_quote)))
            for convention in QUOTE_CONVENTIONS
        ]

    @staticmethod
    def normalize_text(text: Optional[str]) -> str:
        """Collapse all whitespace runs to single spaces."""
        return re.sub(r'\s+', ' ', text or '').strip()

    def extract_dialogues(self, text: Optional[str]) -> List[DialogueExtraction]:
        """
        Extract and attribute every dialogue span in ``text``.

        Args:
            text: Raw chapter text; it is whitespace-normalized first

        Returns:
            Dialogues ordered by position in the normalized text
        """
        cleaned_text = self.normalize_text(text)
        if not cleaned_text:
            return []

        spans = self.find_quoted_spans(cleaned_text)
        dialogues = self.attributor.attribute_all(spans)

        overlaps = self.overlapping_pairs(dialogues)
        if overlaps:
            self.logger.debug(f"{len(overlaps)} overlapping dialogue spans kept from different quote conventions")

        self.logger.info(f"Extracted {len(dialogues)} dialogues from {len(cleaned_text)} characters")
        return dialogues

    def find_quoted_spans(self, cleaned_text: str) -> List[DialogueExtraction]:
        """Scan already-normalized text for quoted spans, without attribution."""
        spans = []
        for convention, pattern in self.quote_patterns:
            for match in pattern.finditer(cleaned_text):
                content = match.group(1).strip()
                if not content:
                    continue

                start, end = match.start(), match.end()
                context_start = max(0, start - self.context_window)
                context_end = min(len(cleaned_text), end + self.context_window)

                spans.append(DialogueExtraction(
                    dialogue=content,
                    position=start,
                    end_position=end,
                    context=cleaned_text[context_start:context_end],
                    confidence=calculate_dialogue_confidence(content, None, None),
                    markers=DialogueMarkers(open_quote=match.group(0)[0], close_quote=match.group(0)[-1]),
                ))

        unique_spans = self._remove_duplicates(spans)
        unique_spans.sort(key=lambda span: span.position)
        return unique_spans

    @staticmethod
    def overlapping_pairs(dialogues: List[DialogueExtraction]) -> List[Tuple[int, int]]:
        """Index pairs (i, j), i < j, of position-sorted dialogues whose spans overlap."""
        pairs = []
        for i, first in enumerate(dialogues):
            for j in range(i + 1, len(dialogues)):
                if dialogues[j].position >= first.end_position:
                    break
                pairs.append((i, j))
        return pairs

    @staticmethod
    def _remove_duplicates(spans: List[DialogueExtraction]) -> List[DialogueExtraction]:
        seen = set()
        unique = []
        for span in spans:
            key = (span.dialogue, span.position)
            if key in seen:
                continue
            seen.add(key)
            unique.append(span)
        return unique


def extract_dialogues(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> List[DialogueExtraction]:
    return DialogueExtractor(toolkit).extract_dialogues(text)
