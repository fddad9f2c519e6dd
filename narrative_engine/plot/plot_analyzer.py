import logging
from typing import List, Optional

from ..lexicons import ADD_CONFLICT_RECOMMENDATION, ORPHANED_SETUP_RECOMMENDATION
from ..models import ConflictPoint, ForeshadowingAnalysis, PaceAnalysis, PlotAnalysis
from ..text_processing.nlp_toolkit import NLPToolkit, get_toolkit
from .conflict_detector import ConflictDetector
from .foreshadowing_tracker import ForeshadowingTracker
from .pacing_analyzer import PacingAnalyzer


def calculate_overall_score(conflicts: List[ConflictPoint], pace: PaceAnalysis,
                            foreshadowing: ForeshadowingAnalysis) -> float:
    """
    Weighted composite on a 1-10 scale, rounded to one decimal.

    5.0 + mean conflict intensity * 0.3 + pace score * 0.4
        + (connections / setups) * 10 * 0.3
    """
    score = 5.0

    if conflicts:
        score += sum(conflict.intensity for conflict in conflicts) / len(conflicts) * 0.3

    score += pace.pace_score * 0.4

    if foreshadowing.setups:
        completeness = len(foreshadowing.connections) / len(foreshadowing.setups) * 10
        score += completeness * 0.3

    return round(max(1.0, min(10.0, score)), 1)


class PlotAnalyzer:
    """
    Composes conflict detection, pacing and foreshadowing into one report.

    The three analyzers share a single toolkit and run sequentially on the
    same text; none of them keeps state between calls, so one ``PlotAnalyzer``
    can serve many chapters and threads.
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None):
        self.logger = logging.getLogger(__name__)
        toolkit = toolkit or get_toolkit()
        self.conflict_detector = ConflictDetector(toolkit)
        self.pacing_analyzer = PacingAnalyzer(toolkit)
        self.foreshadowing_tracker = ForeshadowingTracker(toolkit)

    def analyze_plot(self, text: Optional[str]) -> PlotAnalysis:
        self.logger.info(f"Starting plot analysis ({len(text or '')} characters)")

        conflicts = self.conflict_detector.detect_conflict_points(text)
        pace = self.pacing_analyzer.analyze_pace(text)
        foreshadowing = self.foreshadowing_tracker.track_foreshadowing(text)
        overall_score = calculate_overall_score(conflicts, pace, foreshadowing)

        recommendations = list(pace.recommendations)
        if not conflicts:
            recommendations.append(ADD_CONFLICT_RECOMMENDATION)
        if foreshadowing.orphaned_setups:
            recommendations.append(ORPHANED_SETUP_RECOMMENDATION.format(count=len(foreshadowing.orphaned_setups)))

        self.logger.info(
            f"Plot analysis complete: {len(conflicts)} conflicts, pace {pace.pace_score}, "
            f"{len(foreshadowing.setups)} setups, overall {overall_score}"
        )
        return PlotAnalysis(
            conflicts=conflicts,
            pace=pace,
            foreshadowing=foreshadowing,
            overall_score=overall_score,
            recommendations=list(dict.fromkeys(recommendations)),
        )


def analyze_plot(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> PlotAnalysis:
    return PlotAnalyzer(toolkit).analyze_plot(text)
