"""General text statistics built on the shared NLP toolkit.

The writing metrics, keyword extraction and summarisation helpers read coarse
Universal POS tags (``token.pos_``). With a pipeline that has no tagger every
tag is empty, so those helpers degrade to zero counts rather than failing.
"""

import math
import re
from collections import Counter
from typing import Dict, List, Optional

from ..lexicons import NEGATIVE_WORDS, POSITIVE_WORDS, SENTIMENT_DOMINANCE_RATIO, SYNONYMS
from ..models import EntityExtraction, POSTag, SentimentType, TextAnalysis, WritingMetrics
from .nlp_toolkit import NLPToolkit, get_toolkit

CJK_CHARACTER_PATTERN = re.compile(r"[\u4e00-\u9fa5]")
LATIN_WORD_PATTERN = re.compile(r"[A-Za-z]+(?:'[A-Za-z]+)?")
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n+")

CJK_CHARACTERS_PER_MINUTE = 500
LATIN_WORDS_PER_MINUTE = 200

# spaCy entity label -> EntityExtraction field
ENTITY_LABEL_FIELDS: Dict[str, str] = {
    'PERSON': 'people',
    'PER': 'people',
    'GPE': 'places',
    'LOC': 'places',
    'FAC': 'places',
    'ORG': 'organizations',
    'NORP': 'organizations',
    'DATE': 'dates',
    'TIME': 'times',
    'CARDINAL': 'numbers',
    'ORDINAL': 'numbers',
    'QUANTITY': 'numbers',
    'MONEY': 'numbers',
    'PERCENT': 'numbers',
}

NOUN_TAGS = frozenset({'NOUN', 'PROPN'})
VERB_TAGS = frozenset({'VERB', 'AUX'})
ADJECTIVE_TAG = 'ADJ'
ADVERB_TAG = 'ADV'


def analyze_text(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> TextAnalysis:
    """
    Count sentences, words, characters and paragraphs and estimate reading time.

    Reading time assumes 500 Chinese characters or 200 Latin-script words per
    minute, rounded up. Complexity is judged from words per sentence:
    above 20 is ``complex``, above 12 ``moderate``, otherwise ``simple``.
    """
    text = text or ''
    toolkit = toolkit or get_toolkit()

    sentences = len(toolkit.sentences(text))
    words = len(toolkit.terms(text))
    paragraphs = len([p for p in PARAGRAPH_BREAK_PATTERN.split(text) if p.strip()])

    cjk_characters = len(CJK_CHARACTER_PATTERN.findall(text))
    latin_words = len(LATIN_WORD_PATTERN.findall(text))
    reading_time = math.ceil(cjk_characters / CJK_CHARACTERS_PER_MINUTE + latin_words / LATIN_WORDS_PER_MINUTE)

    average_sentence_length = words / sentences if sentences else 0
    if average_sentence_length > 20:
        complexity = 'complex'
    elif average_sentence_length > 12:
        complexity = 'moderate'
    else:
        complexity = 'simple'

    return TextAnalysis(
        sentences=sentences,
        words=words,
        characters=len(text),
        paragraphs=paragraphs,
        reading_time=reading_time,
        complexity=complexity,
        sentiment=detect_sentiment(text),
    )


def extract_entities(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> EntityExtraction:
    """Named entities grouped by kind, deduplicated in order of first appearance."""
    toolkit = toolkit or get_toolkit()
    grouped: Dict[str, List[str]] = {name: [] for name in set(ENTITY_LABEL_FIELDS.values())}

    for entity in toolkit.entities(text or ''):
        field_name = ENTITY_LABEL_FIELDS.get(entity.label)
        if field_name and entity.text not in grouped[field_name]:
            grouped[field_name].append(entity.text)

    return EntityExtraction(**grouped)


def calculate_sentence_similarity(first: str, second: str, toolkit: Optional[NLPToolkit] = None) -> float:
    """Jaccard similarity of the two texts' lowercase term sets; 0.0 when both are empty."""
    toolkit = toolkit or get_toolkit()
    first_terms = {term.lower() for term in toolkit.terms(first)}
    second_terms = {term.lower() for term in toolkit.terms(second)}

    union = first_terms | second_terms
    if not union:
        return 0.0
    return len(first_terms & second_terms) / len(union)


def get_part_of_speech(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> List[POSTag]:
    toolkit = toolkit or get_toolkit()
    return toolkit.pos_tags(text or '')


def calculate_writing_metrics(text: Optional[str], toolkit: Optional[NLPToolkit] = None) -> WritingMetrics:
    """
    Style metrics over the word tokens of a text.

    Sentence variety is the coefficient of variation (population standard
    deviation over mean) of words per sentence. Adverb and adjective usage are
    shares of all words. Every metric is 0.0 for text without words.
    """
    toolkit = toolkit or get_toolkit()
    text = text or ''
    words = toolkit.tagged_terms(text)
    if not words:
        return WritingMetrics(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    sentence_lengths = [len(toolkit.terms(sentence.text)) for sentence in toolkit.sentences(text)]
    average_sentence_length = sum(sentence_lengths) / len(sentence_lengths) if sentence_lengths else 0.0
    if average_sentence_length:
        variance = sum((length - average_sentence_length) ** 2 for length in sentence_lengths) / len(sentence_lengths)
        sentence_variety = math.sqrt(variance) / average_sentence_length
    else:
        sentence_variety = 0.0

    return WritingMetrics(
        average_word_length=sum(len(word.text) for word in words) / len(words),
        average_sentence_length=average_sentence_length,
        vocabulary_richness=len({word.normal for word in words}) / len(words),
        sentence_variety=sentence_variety,
        adverb_usage=sum(1 for word in words if word.tag == ADVERB_TAG) / len(words),
        adjective_usage=sum(1 for word in words if word.tag == ADJECTIVE_TAG) / len(words),
    )


def detect_repetitive_phrases(text: Optional[str], min_length: int = 3,
                              toolkit: Optional[NLPToolkit] = None) -> Dict[str, int]:
    """
    Word n-grams of ``min_length`` words that occur more than once.

    Phrases are the words joined by single spaces, ordered by count with ties
    kept in order of first appearance.
    """
    if min_length < 1:
        raise ValueError(f"min_length must be positive, got {min_length}")
    toolkit = toolkit or get_toolkit()
    words = toolkit.terms(text or '')

    counts = Counter(' '.join(words[i:i + min_length]) for i in range(len(words) - min_length + 1))
    repeated = [(phrase, count) for phrase, count in counts.items() if count > 1]
    return dict(sorted(repeated, key=lambda item: item[1], reverse=True))


def extract_keywords(text: Optional[str], limit: int = 10, toolkit: Optional[NLPToolkit] = None) -> List[str]:
    """
    Most frequent nouns and noun phrases, lowercased.

    A noun is a maximal run of NOUN/PROPN tokens; its noun phrase also takes a
    directly preceding adjective. Both forms are counted, so a bare noun run
    scores twice.
    """
    toolkit = toolkit or get_toolkit()
    doc = toolkit.parse(text or '')

    nouns, noun_phrases = [], []
    index = 0
    while index < len(doc):
        if doc[index].pos_ not in NOUN_TAGS:
            index += 1
            continue
        start = index
        while index < len(doc) and doc[index].pos_ in NOUN_TAGS:
            index += 1
        nouns.append(doc[start:index].text.lower())
        phrase_start = start - 1 if start > 0 and doc[start - 1].pos_ == ADJECTIVE_TAG else start
        noun_phrases.append(doc[phrase_start:index].text.lower())

    frequency = Counter(nouns + noun_phrases)
    ranked = sorted(frequency.items(), key=lambda item: item[1], reverse=True)
    return [keyword for keyword, _ in ranked[:limit]]


def detect_sentiment(text: Optional[str]) -> SentimentType:
    """Lexicon sentiment: one side wins when it outnumbers the other by half again."""
    text = text or ''
    positive = sum(text.count(word) for word in POSITIVE_WORDS)
    negative = sum(text.count(word) for word in NEGATIVE_WORDS)

    if positive > negative * SENTIMENT_DOMINANCE_RATIO:
        return 'positive'
    if negative > positive * SENTIMENT_DOMINANCE_RATIO:
        return 'negative'
    return 'neutral'


def generate_summary(text: Optional[str], sentence_count: int = 3, toolkit: Optional[NLPToolkit] = None) -> str:
    """
    Extractive summary: the ``sentence_count`` highest scoring sentences in text order.

    A sentence scores two points per noun and one per verb. Text with no more
    sentences than requested is returned unchanged.
    """
    toolkit = toolkit or get_toolkit()
    text = text or ''
    sentences = toolkit.sentences(text)
    if len(sentences) <= sentence_count:
        return text

    scores = []
    for sentence in sentences:
        tags = [word.tag for word in toolkit.tagged_terms(sentence.text)]
        scores.append(2 * sum(1 for tag in tags if tag in NOUN_TAGS) + sum(1 for tag in tags if tag in VERB_TAGS))

    best = sorted(range(len(sentences)), key=lambda i: scores[i], reverse=True)[:sentence_count]
    return ' '.join(sentences[i].text for i in sorted(best))


def suggest_synonyms(word: str) -> List[str]:
    return list(SYNONYMS.get(word, ()))
