"""Result records produced by the narrative analyzers.

All records are frozen dataclasses. Enrichment steps (speaker attribution,
character assignment) return new instances via ``dataclasses.replace`` rather
than mutating existing ones. Cross references between foreshadowing setups and
payoffs are array indices, which keeps every result acyclic so ``to_dict()``
output can go straight to ``json.dumps``.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

ConsistencyIssueType = Literal['character_name', 'number', 'date', 'terminology']
ConflictType = Literal['internal', 'external', 'interpersonal', 'societal']
PaceLevel = Literal['slow', 'moderate', 'fast']
SetupType = Literal['character', 'plot', 'theme', 'object']
AttributionType = Literal['pre', 'post', 'inserted', 'inferred']
TrendType = Literal['rising', 'declining', 'stable']
SentimentType = Literal['positive', 'negative', 'neutral']


class SerializableMixin:
    """Adds a JSON-ready ``to_dict`` to dataclass records."""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Dialogue
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DialogueMarkers(SerializableMixin):
    open_quote: str
    close_quote: str
    attribution: Optional[str] = None  # e.g. "他說", or "inferred"
    attribution_type: Optional[AttributionType] = None


@dataclass(frozen=True)
class DialogueExtraction(SerializableMixin):
    """A quoted span found in the normalized chapter text.

    ``position`` and ``end_position`` are offsets into the whitespace-collapsed
    text the extractor worked on, not into the caller's raw input.
    """
    dialogue: str
    position: int
    end_position: int
    context: str
    confidence: float
    markers: DialogueMarkers
    speaker_name: Optional[str] = None
    speaker_id: Optional[str] = None


@dataclass(frozen=True)
class Character(SerializableMixin):
    """A roster entry supplied by the caller."""
    id: str
    name: str
    aliases: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Character':
        return cls(
            id=str(data['id']),
            name=data['name'],
            aliases=tuple(data.get('aliases') or ()),
        )


@dataclass(frozen=True)
class ChapterDialogueAnalysis(SerializableMixin):
    chapter_id: str
    character_dialogues: Dict[str, List[DialogueExtraction]]
    unassigned_dialogues: List[DialogueExtraction]
    total_dialogues: int
    confidence: float


@dataclass(frozen=True)
class ConsistencyIssue(SerializableMixin):
    type: ConsistencyIssueType
    term: str
    variations: List[str]
    locations: List[int] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Plot
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConflictPoint(SerializableMixin):
    position: int
    intensity: int
    type: ConflictType
    description: str
    context: str
    keywords: List[str]


@dataclass(frozen=True)
class PaceSegment(SerializableMixin):
    start_position: int
    end_position: int
    pace: PaceLevel
    event_density: float
    dialogue_ratio: float
    action_ratio: float


@dataclass(frozen=True)
class PaceAnalysis(SerializableMixin):
    overall_pace: PaceLevel
    pace_score: float
    segments: List[PaceSegment]
    recommendations: List[str]


@dataclass(frozen=True)
class ForeshadowingSetup(SerializableMixin):
    position: int
    text: str
    keywords: List[str]
    intensity: int
    type: SetupType


@dataclass(frozen=True)
class ForeshadowingPayoff(SerializableMixin):
    position: int
    text: str
    keywords: List[str]
    impact: int


@dataclass(frozen=True)
class ForeshadowingConnection(SerializableMixin):
    setup_id: int   # index into ForeshadowingAnalysis.setups
    payoff_id: int  # index into ForeshadowingAnalysis.payoffs
    distance: int
    strength: int


@dataclass(frozen=True)
class ForeshadowingAnalysis(SerializableMixin):
    setups: List[ForeshadowingSetup]
    payoffs: List[ForeshadowingPayoff]
    orphaned_setups: List[ForeshadowingSetup]
    connections: List[ForeshadowingConnection]


@dataclass(frozen=True)
class PlotAnalysis(SerializableMixin):
    conflicts: List[ConflictPoint]
    pace: PaceAnalysis
    foreshadowing: ForeshadowingAnalysis
    overall_score: float
    recommendations: List[str]


@dataclass(frozen=True)
class ChapterTrendAnalysis(SerializableMixin):
    chapter_id: str
    chapter_title: str
    chapter_index: int  # 1-based
    analysis: PlotAnalysis
    trend: TrendType


@dataclass(frozen=True)
class PlotSuggestion(SerializableMixin):
    type: str
    priority: str
    title: str
    description: str
    suggestion: str
    impact: str


# ---------------------------------------------------------------------------
# Text statistics
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextAnalysis(SerializableMixin):
    sentences: int
    words: int
    characters: int
    paragraphs: int
    reading_time: int  # minutes
    complexity: str
    sentiment: Optional[SentimentType] = None


@dataclass(frozen=True)
class WritingMetrics(SerializableMixin):
    average_word_length: float
    average_sentence_length: float  # words per sentence
    vocabulary_richness: float  # unique words / words
    sentence_variety: float  # coefficient of variation of sentence length
    adverb_usage: float
    adjective_usage: float


@dataclass(frozen=True)
class EntityExtraction(SerializableMixin):
    people: List[str]
    places: List[str]
    organizations: List[str]
    dates: List[str]
    times: List[str]
    numbers: List[str]


@dataclass(frozen=True)
class POSTag(SerializableMixin):
    text: str
    tag: str
    normal: str


@dataclass(frozen=True)
class ChapterReport(SerializableMixin):
    """Both pipelines' results for one chapter."""
    chapter_id: str
    dialogues: ChapterDialogueAnalysis
    plot: PlotAnalysis
