import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Iterable, List, Mapping, Optional

from config import settings
from .attribution.chapter_dialogue_analyzer import ChapterDialogueAnalyzer
from .attribution.character_resolver import CharacterLike
from .models import ChapterReport
from .plot.plot_analyzer import PlotAnalyzer
from .text_processing.document import ChapterContent, coerce_text
from .text_processing.nlp_toolkit import NLPToolkit, get_toolkit


class NarrativeEngine:
    """
    Runs the dialogue pipeline and the plot pipeline over chapters.

    The two pipelines share one NLP toolkit but no mutable state, and both
    analyzers are reusable across calls, so chapters can be processed in
    parallel by a thread pool.

    Example:
        >>> engine = NarrativeEngine()
        >>> report = engine.analyze_chapter('他說：「走吧。」', 'ch-1', [{'id': '1', 'name': '他'}])
        >>> report.dialogues.total_dialogues
        1
    """

    def __init__(self, toolkit: Optional[NLPToolkit] = None, max_workers: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.toolkit = toolkit or get_toolkit()
        self.max_workers = max_workers or settings.MAX_PARALLEL_WORKERS
        self.dialogue_analyzer = ChapterDialogueAnalyzer(self.toolkit)
        self.plot_analyzer = PlotAnalyzer(self.toolkit)
        self.logger.info(f"NarrativeEngine ready (model: {self.toolkit.model_name}, workers: {self.max_workers})")

    def analyze_chapter(self, content: ChapterContent, chapter_id: str,
                        known_characters: Optional[Iterable[CharacterLike]] = None) -> ChapterReport:
        plain_text = coerce_text(content)
        dialogues = self.dialogue_analyzer.analyze(plain_text, chapter_id, known_characters)
        plot = self.plot_analyzer.analyze_plot(plain_text)
        return ChapterReport(chapter_id=chapter_id, dialogues=dialogues, plot=plot)

    def analyze_chapters(self, chapters: Iterable[Mapping[str, Any]],
                         known_characters: Optional[Iterable[CharacterLike]] = None) -> List[ChapterReport]:
        """
        Analyze many chapters concurrently.

        Args:
            chapters: Mappings with ``id`` and ``content`` (text or paragraph nodes)
            known_characters: Roster shared by every chapter

        Returns:
            One report per chapter, in input order
        """
        chapters = list(chapters)
        roster = list(known_characters or [])
        reports: List[Optional[ChapterReport]] = [None] * len(chapters)
        if not chapters:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(chapters))) as executor:
            future_to_index = {
                executor.submit(
                    self.analyze_chapter, chapter.get('content'), str(chapter.get('id', index)), roster
                ): index
                for index, chapter in enumerate(chapters)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    reports[index] = future.result()
                except Exception as e:
                    self.logger.error(f"Analysis failed for chapter {chapters[index].get('id', index)}: {e}")
                    raise

        self.logger.info(f"Analyzed {len(reports)} chapters")
        return reports
