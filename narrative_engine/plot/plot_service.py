import logging
from typing import Any, Iterable, List, Mapping, Optional

from config import settings
from ..lexicons import (
    INSUFFICIENT_CONTENT_RECOMMENDATION,
    PLOT_SUGGESTION_TEMPLATES,
    SUGGESTION_PRIORITY_ORDER,
)
from ..models import (
    ChapterTrendAnalysis,
    ForeshadowingAnalysis,
    PaceAnalysis,
    PlotAnalysis,
    PlotSuggestion,
)
from ..text_processing.document import ChapterContent, coerce_text
from ..text_processing.nlp_toolkit import NLPToolkit
from .plot_analyzer import PlotAnalyzer


def empty_plot_analysis() -> PlotAnalysis:
    """Neutral result returned when there is too little text to analyze."""
    return PlotAnalysis(
        conflicts=[],
        pace=PaceAnalysis(overall_pace='moderate', pace_score=5.0, segments=[], recommendations=[]),
        foreshadowing=ForeshadowingAnalysis(setups=[], payoffs=[], orphaned_setups=[], connections=[]),
        overall_score=5.0,
        recommendations=[INSUFFICIENT_CONTENT_RECOMMENDATION],
    )


class PlotAnalysisService:
    """
    Entry point for plot analysis at chapter and project scope.

    Chapters are mappings with ``content`` (plain text or paragraph nodes) and,
    for trend analysis, ``id`` and ``title``. Content too short to analyze
    yields ``empty_plot_analysis()`` instead of a noisy score.

    Attributes:
        logger: Logger for service tracking
        analyzer: The composed conflict/pace/foreshadowing analyzer
        min_chapter_length: Minimum characters for a single-chapter analysis
        min_project_length: Minimum characters for a merged-project analysis
        min_trend_chapter_length: Chapters shorter than this are skipped
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None, analyzer: Optional[PlotAnalyzer] = None):
        self.logger = logging.getLogger(__name__)
        self.analyzer = analyzer or PlotAnalyzer(toolkit)
        self.min_chapter_length = settings.PLOT_MIN_CHAPTER_LENGTH
        self.min_project_length = settings.PLOT_MIN_PROJECT_LENGTH
        self.min_trend_chapter_length = settings.PLOT_MIN_TREND_CHAPTER_LENGTH

    def analyze_chapter_plot(self, content: ChapterContent) -> PlotAnalysis:
        plain_text = coerce_text(content)
        if len(plain_text) < self.min_chapter_length:
            self.logger.warning(f"Chapter too short for plot analysis ({len(plain_text)} characters), skipping")
            return empty_plot_analysis()
        return self.analyzer.analyze_plot(plain_text)

    def analyze_project_plot(self, chapters: Iterable[Mapping[str, Any]]) -> PlotAnalysis:
        """Analyze all chapters as one text, dropping chapters too short to matter."""
        texts = [coerce_text(chapter.get('content')) for chapter in chapters]
        merged = '\n\n'.join(text for text in texts if len(text) > self.min_trend_chapter_length)

        if len(merged) < self.min_project_length:
            self.logger.warning(f"Project content too short for plot analysis ({len(merged)} characters), skipping")
            return empty_plot_analysis()
        return self.analyzer.analyze_plot(merged)

    def analyze_chapter_trends(self, chapters: Iterable[Mapping[str, Any]]) -> List[ChapterTrendAnalysis]:
        trends = []
        for index, chapter in enumerate(chapters, start=1):
            plain_text = coerce_text(chapter.get('content'))
            if len(plain_text) < self.min_trend_chapter_length:
                analysis, trend = empty_plot_analysis(), 'stable'
            else:
                analysis = self.analyzer.analyze_plot(plain_text)
                trend = self.classify_trend(analysis.overall_score)

            trends.append(ChapterTrendAnalysis(
                chapter_id=str(chapter.get('id', index)),
                chapter_title=chapter.get('title') or '',
                chapter_index=index,
                analysis=analysis,
                trend=trend,
            ))

        self.logger.info(f"Chapter trends: {[t.trend for t in trends]}")
        return trends

    @staticmethod
    def classify_trend(overall_score: float) -> str:
        if overall_score > 7:
            return 'rising'
        if overall_score < 4:
            return 'declining'
        return 'stable'

    @staticmethod
    def generate_plot_improvement_suggestions(analysis: PlotAnalysis) -> List[PlotSuggestion]:
        """Turn an analysis into prioritized suggestions, highest priority first."""
        keys = []

        # Conflict
        if not analysis.conflicts:
            keys.append('no_conflict')
        elif len(analysis.conflicts) < 3:
            keys.append('sparse_conflict')

        # Pace
        if analysis.pace.overall_pace == 'slow' and analysis.pace.pace_score < 4:
            keys.append('slow_pace')
        elif analysis.pace.overall_pace == 'fast' and analysis.pace.pace_score > 8:
            keys.append('fast_pace')

        # Foreshadowing
        if analysis.foreshadowing.orphaned_setups:
            keys.append('orphaned_setups')

        # Overall
        if analysis.overall_score < 5:
            keys.append('low_overall')

        values = {'count': len(analysis.foreshadowing.orphaned_setups), 'score': analysis.overall_score}
        suggestions = []
        for key in keys:
            template = PLOT_SUGGESTION_TEMPLATES[key]
            suggestions.append(PlotSuggestion(
                type=template['type'],
                priority=template['priority'],
                title=template['title'],
                description=template['description'].format(**values),
                suggestion=template['suggestion'],
                impact=template['impact'],
            ))

        return sorted(suggestions, key=lambda s: SUGGESTION_PRIORITY_ORDER[s.priority], reverse=True)


def analyze_chapter_plot(content: ChapterContent, toolkit: Optional[NLPToolkit] = None) -> PlotAnalysis:
    return PlotAnalysisService(toolkit).analyze_chapter_plot(content)


def analyze_project_plot(chapters: Iterable[Mapping[str, Any]], toolkit: Optional[NLPToolkit] = None) -> PlotAnalysis:
    return PlotAnalysisService(toolkit).analyze_project_plot(chapters)


def analyze_chapter_trends(chapters: Iterable[Mapping[str, Any]],
                           toolkit: Optional[NLPToolkit] = None) -> List[ChapterTrendAnalysis]:
    return PlotAnalysisService(toolkit).analyze_chapter_trends(chapters)


def generate_plot_improvement_suggestions(analysis: PlotAnalysis) -> List[PlotSuggestion]:
    return PlotAnalysisService.generate_plot_improvement_suggestions(analysis)
