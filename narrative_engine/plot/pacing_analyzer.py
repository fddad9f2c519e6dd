import re
import logging
from typing import List, Optional

from config import settings
from ..lexicons import (
    ACTION_VERBS,
    PACE_FAST_RECOMMENDATIONS,
    PACE_SLOW_RECOMMENDATIONS,
    QUOTE_CONVENTIONS,
    SENTENCE_TERMINATORS,
)
from ..models import PaceAnalysis, PaceSegment
from ..text_processing.nlp_toolkit import NLPToolkit, get_toolkit


class PacingAnalyzer:
    """Scores narrative speed from sentence length, dialogue density and action density.

    The overall score starts at ``settings.PACE_BASE_SCORE``; short sentences
    (average under 15 characters) add 2 and long ones (over 30) subtract 2,
    then ``dialogue_ratio * 3`` and ``action_ratio * 4`` are added and the
    result is clamped to [1, 10].

    The text is also cut into at most ``settings.PACE_SEGMENT_COUNT``
    contiguous windows of ``max(PACE_MIN_SEGMENT_SIZE, len // PACE_SEGMENT_COUNT)``
    characters; the last window absorbs any remainder. Segment ratios are taken
    per sentence terminator (。！？) inside the window.
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None):
        self.logger = logging.getLogger(__name__)
        self.toolkit = toolkit or get_toolkit()
        self.dialogue_pattern = re.compile('|'.join(
            re.escape(c.open_quote) + '[^' + re.escape(c.close_quote) + ']*' + re.escape(c.close_quote)
            for c in QUOTE_CONVENTIONS
        ))
        self.action_pattern = re.compile('|'.join(re.escape(verb) for verb in ACTION_VERBS))
        self.terminator_pattern = re.compile('[' + re.escape(SENTENCE_TERMINATORS) + ']')

    def analyze_pace(self, text: Optional[str]) -> PaceAnalysis:
        text = text or ''
        sentences = self.toolkit.sentences(text)

        pace_score = settings.PACE_BASE_SCORE
        if sentences:
            average_length = sum(len(sentence.text) for sentence in sentences) / len(sentences)
            dialogue_ratio = self.count_dialogues(text) / len(sentences)
            action_ratio = self.count_actions(text) / len(sentences)

            if average_length < 15:
                pace_score += 2
            elif average_length > 30:
                pace_score -= 2
            pace_score += dialogue_ratio * 3
            pace_score += action_ratio * 4
            pace_score = max(1.0, min(10.0, pace_score))

        overall_pace = self.classify_pace(pace_score)
        segments = self.analyze_segments(text)

        recommendations: List[str] = []
        if pace_score < 4:
            recommendations.extend(PACE_SLOW_RECOMMENDATIONS)
        if pace_score > 8:
            recommendations.extend(PACE_FAST_RECOMMENDATIONS)

        self.logger.debug(f"Pace: {overall_pace} ({pace_score:.1f}) over {len(sentences)} sentences, {len(segments)} segments")
        return PaceAnalysis(
            overall_pace=overall_pace,
            pace_score=round(pace_score, 1),
            segments=segments,
            recommendations=recommendations,
        )

    def analyze_segments(self, text: str) -> List[PaceSegment]:
        total_length = len(text)
        if total_length == 0:
            return []

        segment_size = max(settings.PACE_MIN_SEGMENT_SIZE, total_length // settings.PACE_SEGMENT_COUNT)
        segments = []
        start = 0
        while start < total_length:
            end = min(start + segment_size, total_length)
            if len(segments) == settings.PACE_SEGMENT_COUNT - 1:
                end = total_length
            segments.append(self._measure_segment(text, start, end))
            start = end
        return segments

    def _measure_segment(self, text: str, start: int, end: int) -> PaceSegment:
        segment = text[start:end]
        terminators = max(1, len(self.terminator_pattern.findall(segment)))
        dialogue_ratio = self.count_dialogues(segment) / terminators
        action_ratio = self.count_actions(segment) / terminators
        event_density = (dialogue_ratio + action_ratio) * 10

        if event_density > 7:
            pace = 'fast'
        elif event_density > 3:
            pace = 'moderate'
        else:
            pace = 'slow'

        return PaceSegment(
            start_position=start,
            end_position=end,
            pace=pace,
            event_density=event_density,
            dialogue_ratio=dialogue_ratio,
            action_ratio=action_ratio,
        )

    def count_dialogues(self, text: str) -> int:
        return len(self.dialogue_pattern.findall(text))

    def count_actions(self, text: str) -> int:
        return len(self.action_pattern.findall(text))

    @staticmethod
    def classify_pace(score: float) -> str:
        if score > 7:
            return 'fast'
        if score > 4:
            return 'moderate'
        return 'slow'


def analyze_pace(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> PaceAnalysis:
    return PacingAnalyzer(toolkit).analyze_pace(text)
