"""
Narrative text-analysis engine.

Stateless analyzers over prose chapters:
- Dialogue extraction with speaker attribution and character assignment
- Character-name consistency checking
- Plot analysis: conflict points, pacing and foreshadowing
"""

from .attribution.chapter_dialogue_analyzer import ChapterDialogueAnalyzer, analyze_chapter_dialogues
from .attribution.character_resolver import CharacterAssignmentResolver
from .attribution.speaker_attributor import SpeakerAttributor
from .consistency_checker import ConsistencyChecker, detect_consistency_issues
from .engine import NarrativeEngine
from .plot.conflict_detector import detect_conflict_points
from .plot.foreshadowing_tracker import track_foreshadowing
from .plot.pacing_analyzer import analyze_pace
from .plot.plot_analyzer import PlotAnalyzer, analyze_plot
from .plot.plot_service import (
    PlotAnalysisService,
    analyze_chapter_plot,
    analyze_chapter_trends,
    analyze_project_plot,
    generate_plot_improvement_suggestions,
)
from .text_processing.dialogue_extractor import DialogueExtractor, extract_dialogues
from .text_processing.document import slate_to_plain_text
from .text_processing.nlp_toolkit import NLPToolkit, get_toolkit, initialize, reset_toolkit
from .text_processing.text_stats import (
    analyze_text,
    calculate_sentence_similarity,
    calculate_writing_metrics,
    detect_repetitive_phrases,
    detect_sentiment,
    extract_entities,
    extract_keywords,
    generate_summary,
    get_part_of_speech,
    suggest_synonyms,
)

__version__ = '0.1.0'

__all__ = [
    'ChapterDialogueAnalyzer',
    'analyze_chapter_dialogues',
    'CharacterAssignmentResolver',
    'SpeakerAttributor',
    'ConsistencyChecker',
    'detect_consistency_issues',
    'NarrativeEngine',
    'detect_conflict_points',
    'track_foreshadowing',
    'analyze_pace',
    'PlotAnalyzer',
    'analyze_plot',
    'PlotAnalysisService',
    'analyze_chapter_plot',
    'analyze_chapter_trends',
    'analyze_project_plot',
    'generate_plot_improvement_suggestions',
    'DialogueExtractor',
    'extract_dialogues',
    'slate_to_plain_text',
    'NLPToolkit',
    'get_toolkit',
    'initialize',
    'reset_toolkit',
    'analyze_text',
    'calculate_sentence_similarity',
    'extract_entities',
    'get_part_of_speech',
    'calculate_writing_metrics',
    'detect_repetitive_phrases',
    'detect_sentiment',
    'extract_keywords',
    'generate_summary',
    'suggest_synonyms',
]
