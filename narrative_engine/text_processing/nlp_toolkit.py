import logging
import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional

import spacy
from spacy.language import Language
from spacy.tokens import Doc

from config import settings
from ..models import POSTag

PERSON_LABELS = frozenset({'PERSON', 'PER'})
ENTITY_PIPES = ('ner', 'entity_ruler')


@dataclass(frozen=True)
class Sentence:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Entity:
    text: str
    label: str
    start: int
    end: int


class NLPToolkit:
    """Thin wrapper over a spaCy pipeline exposing the primitives the analyzers need.

    The analyzers only ever ask for sentence boundaries, named entities, plain
    terms and part-of-speech tags, so everything spaCy-specific stays behind this
    class. A toolkit is safe to share between threads once constructed; it holds
    no per-call state.

    Pipelines without a dependency parser or senter get a ``sentencizer`` that
    splits on ``settings.SENTENCE_PUNCTUATION``. A blank pipeline therefore still
    segments sentences but recognizes no entities, which the attributor and
    consistency checker treat as "no person mentioned".
    """

    def __init__(self, nlp: Language):
        self.logger = logging.getLogger(__name__)
        self.nlp = nlp
        if not any(name in nlp.pipe_names for name in ('parser', 'senter', 'sentencizer')):
            nlp.add_pipe('sentencizer', config={'punct_chars': list(settings.SENTENCE_PUNCTUATION)})
        self.model_name = nlp.meta.get('name', 'blank')
        self.has_entities = any(name in nlp.pipe_names for name in ENTITY_PIPES)

    @classmethod
    def load(cls, model_name: Optional[str] = None) -> 'NLPToolkit':
        """Load a packaged spaCy model, falling back to a blank pipeline."""
        model_name = model_name or settings.SPACY_MODEL
        logger = logging.getLogger(__name__)
        try:
            nlp = spacy.load(model_name)
            logger.info(f"spaCy model '{model_name}' loaded successfully")
        except OSError:
            logger.warning(
                f"spaCy model '{model_name}' not found; using blank '{settings.SPACY_FALLBACK_LANGUAGE}' pipeline. "
                f"Person detection is disabled. For better results, run: python -m spacy download {model_name}"
            )
            nlp = spacy.blank(settings.SPACY_FALLBACK_LANGUAGE)
        return cls(nlp)

    @classmethod
    def blank(cls, language: Optional[str] = None) -> 'NLPToolkit':
        return cls(spacy.blank(language or settings.SPACY_FALLBACK_LANGUAGE))

    def parse(self, text: str) -> Doc:
        return self.nlp(text or '')

    def sentences(self, text: str) -> List[Sentence]:
        """Split text into sentences, dropping whitespace-only spans."""
        if not text or not text.strip():
            return []
        return [
            Sentence(sent.text, sent.start_char, sent.end_char)
            for sent in self.parse(text).sents
            if sent.text.strip()
        ]

    def entities(self, text: str, labels: Optional[Iterable[str]] = None) -> List[Entity]:
        if not text or not self.has_entities:
            return []
        wanted = set(labels) if labels is not None else None
        return [
            Entity(ent.text, ent.label_, ent.start_char, ent.end_char)
            for ent in self.parse(text).ents
            if wanted is None or ent.label_ in wanted
        ]

    def people(self, text: str) -> List[Entity]:
        """Person mentions in document order."""
        return self.entities(text, PERSON_LABELS)

    def terms(self, text: str) -> List[str]:
        """Word tokens with whitespace and punctuation removed."""
        if not text:
            return []
        return [token.text for token in self.parse(text) if not token.is_space and not token.is_punct]

    def tagged_terms(self, text: str) -> List[POSTag]:
        """Same tokens as ``terms`` with their coarse part-of-speech tag ('' when untagged)."""
        if not text:
            return []
        return [
            POSTag(text=token.text, tag=token.pos_, normal=token.lower_)
            for token in self.parse(text)
            if not token.is_space and not token.is_punct
        ]

    def pos_tags(self, text: str) -> List[POSTag]:
        if not text:
            return []
        return [
            POSTag(text=token.text, tag=token.pos_ or 'Unknown', normal=token.lower_)
            for token in self.parse(text)
            if not token.is_space
        ]


# Process-wide toolkit shared by analyzers constructed without an explicit one
_toolkit: Optional[NLPToolkit] = None
_toolkit_lock = threading.Lock()


def initialize(model_name: Optional[str] = None) -> NLPToolkit:
    """Load the shared toolkit once. Later calls return the same instance."""
    global _toolkit
    if _toolkit is not None:
        return _toolkit
    with _toolkit_lock:
        if _toolkit is None:
            _toolkit = NLPToolkit.load(model_name)
    return _toolkit


def get_toolkit() -> NLPToolkit:
    return initialize()


def reset_toolkit() -> None:
    """Drop the shared toolkit so the next ``initialize`` reloads it."""
    global _toolkit
    with _toolkit_lock:
        _toolkit = None
