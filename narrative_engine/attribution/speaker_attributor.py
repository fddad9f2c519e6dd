import re
import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from config import settings
from ..lexicons import (
    CLOSE_QUOTE_CHARS,
    DIALOGUE_PRONOUN_CHARS,
    DIALOGUE_PUNCTUATION_CHARS,
    INFERRED_ATTRIBUTION,
    NON_SPEAKING_COMPOUNDS,
    OPEN_QUOTE_CHARS,
    PERSONAL_PRONOUNS,
    QUOTE_CHARS,
    SENTENCE_TERMINATORS,
    SPEAKER_PARTICLES,
    SPEAKING_VERBS,
)
from ..models import DialogueExtraction
from ..text_processing.nlp_toolkit import NLPToolkit, get_toolkit

NAME_CHARACTER_PATTERN = re.compile(r"[\u4e00-\u9fffA-Za-z]")


def calculate_dialogue_confidence(dialogue: str, attribution: Optional[str], speaker_name: Optional[str]) -> float:
    """
    Additive 0-1 confidence for a dialogue span.

    Starts at 0.5, rewards a plausible length, an attribution phrase and a
    resolved speaker, terminal punctuation and personal pronouns.
    """
    confidence = 0.5

    # 1. Plausible dialogue length
    if 2 <= len(dialogue) <= 200:
        confidence += 0.2
    elif len(dialogue) >= 1:
        confidence += 0.1

    # 2. Explicit attribution
    if attribution and speaker_name:
        confidence += 0.3
    elif attribution or speaker_name:
        confidence += 0.1

    # 3. Content features
    if any(char in dialogue for char in DIALOGUE_PUNCTUATION_CHARS):
        confidence += 0.1
    if any(char in dialogue for char in DIALOGUE_PRONOUN_CHARS):
        confidence += 0.1

    return min(1.0, confidence)


def build_verb_alternation(verbs, excluded_compounds=()) -> str:
    """
    Regex alternation of speaking verbs, longest first.

    A verb that is part of an excluded compound (道 in 知道) is guarded by a
    lookbehind or lookahead so the compound never counts as speech.
    """
    alternatives = []
    for verb in sorted(verbs, key=len, reverse=True):
        lookbehinds, lookaheads = [], []
        for compound in excluded_compounds:
            index = compound.find(verb)
            if index < 0 or compound == verb:
                continue
            before, after = compound[:index], compound[index + len(verb):]
            if before and not after:
                lookbehinds.append(f'(?<!{re.escape(before)})')
            elif after and not before:
                lookaheads.append(f'(?!{re.escape(after)})')
        alternatives.append(''.join(lookbehinds) + re.escape(verb) + ''.join(lookaheads))
    return '|'.join(alternatives)


class SpeakerAttributor:
    """Infers who speaks a dialogue span from the narration around it.

    The context window of each ``DialogueExtraction`` is split at the quoted
    span into a *prefix* (narration before the opening quote) and a *suffix*
    (narration after the closing quote). Templates are tried in a fixed order
    and the first match wins:

        1. pre-attribution      她驚訝地回答：「真的嗎？」
        2. post-attribution     「真的嗎？」她驚訝地回答。
        3. inserted-attribution 「我知道，」他說，「但是來不及了。」
                                (matches the second half of the utterance)
        4. inferred             nearest person entity before the quote

    Subject phrases never cross a sentence terminator or a quote glyph, so a
    template cannot borrow the attribution of a neighbouring dialogue. A
    post-attribution clause that runs straight into the next opening quote
    (李華說：「...) is left to that quote.

    Attributes:
        logger: Logger for attribution tracking
        toolkit: NLP primitives used for person detection
        max_name_length: Longest cleaned subject phrase accepted as a name
    """

    PRE = 'pre'
    POST = 'post'
    INSERTED = 'inserted'
    INFERRED = 'inferred'

    def __init__(self, toolkit: Optional[NLPToolkit] = None):
        self.logger = logging.getLogger(__name__)
        self.toolkit = toolkit or get_toolkit()
        self.max_name_length = settings.SPEAKER_NAME_MAX_LENGTH

        # Longest verbs first so 低語 wins over a single-character prefix
        verbs = build_verb_alternation(SPEAKING_VERBS, NON_SPEAKING_COMPOUNDS)
        subject = '[^' + re.escape(SENTENCE_TERMINATORS + '!?\n' + QUOTE_CHARS) + ']'
        subject_no_comma = '[^' + re.escape(SENTENCE_TERMINATORS + '!?\n，,' + QUOTE_CHARS) + ']'
        open_quote = '[' + re.escape(OPEN_QUOTE_CHARS) + ']'
        close_quote = '[' + re.escape(CLOSE_QUOTE_CHARS) + ']'

        # 他輕聲說：「...
        self.pre_attribution_pattern = re.compile(rf'({subject}*?)({verbs})([：:]?)\s*$')
        # ...」，他輕聲說
        self.post_attribution_pattern = re.compile(rf'^([，,]?)\s*({subject}*?)({verbs})')
        # ...」李華說：「...  the clause runs into the next quote and belongs to it
        self.next_quote_lead_pattern = re.compile(rf'{subject_no_comma}*{open_quote}')
        # 「...，」他說，「...
        self.inserted_attribution_pattern = re.compile(
            rf'{close_quote}\s*[，,]?\s*({subject_no_comma}*?)({verbs})[，,]\s*$'
        )

    def attribute(self, dialogue: DialogueExtraction) -> DialogueExtraction:
        """Return a copy of ``dialogue`` with speaker, attribution and confidence filled in."""
        prefix, suffix = self._split_context(dialogue)
        speaker_name, attribution, attribution_type = self.identify_speaker(prefix, suffix)

        markers = replace(dialogue.markers, attribution=attribution, attribution_type=attribution_type)
        confidence = calculate_dialogue_confidence(dialogue.dialogue, attribution, speaker_name)

        if speaker_name:
            self.logger.debug(f"Dialogue at {dialogue.position}: '{speaker_name}' via {attribution_type} (confidence: {confidence:.2f})")
        return replace(dialogue, speaker_name=speaker_name, markers=markers, confidence=confidence)

    def attribute_all(self, dialogues: List[DialogueExtraction]) -> List[DialogueExtraction]:
        attributed = [self.attribute(dialogue) for dialogue in dialogues]
        resolved = sum(1 for d in attributed if d.speaker_name)
        self.logger.info(f"Speaker attribution: {resolved}/{len(attributed)} dialogues have a speaker candidate")
        return attributed

    def identify_speaker(self, prefix: str, suffix: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """
        Run the attribution templates against the narration around a quote.

        Returns:
            Tuple of (speaker_name, attribution_phrase, attribution_type); any may be None
        """
        # Method 1: Pre-attribution
        match = self.pre_attribution_pattern.search(prefix)
        if match:
            return self._from_subject(match.group(1), match.group(2), self.PRE)

        # Method 2: Post-attribution
        match = self.post_attribution_pattern.search(suffix)
        if match and not self.next_quote_lead_pattern.match(suffix, match.end()):
            return self._from_subject(match.group(2), match.group(3), self.POST)

        # Method 3: Inserted attribution
        match = self.inserted_attribution_pattern.search(prefix)
        if match:
            return self._from_subject(match.group(1), match.group(2), self.INSERTED)

        # Method 4: Infer from the most recent person mentioned before the quote
        people = self.toolkit.people(prefix)
        if people:
            nearest = max(people, key=lambda entity: entity.end)
            return nearest.text, INFERRED_ATTRIBUTION, self.INFERRED

        return None, None, None

    def extract_speaker_name(self, speaker_text: str) -> Optional[str]:
        """Clean a raw subject phrase into a speaker name, or None if it is not one."""
        cleaned = speaker_text
        for particle in SPEAKER_PARTICLES:
            cleaned = cleaned.replace(particle, '')
        cleaned = cleaned.strip()

        # Pronouns are valid speakers; resolving them is left to the roster
        if cleaned in PERSONAL_PRONOUNS:
            return cleaned

        people = self.toolkit.people(speaker_text)
        if people:
            return people[0].text

        if 1 <= len(cleaned) <= self.max_name_length and NAME_CHARACTER_PATTERN.search(cleaned):
            return cleaned

        return None

    def _from_subject(self, subject: str, verb: str, attribution_type: str) -> Tuple[Optional[str], str, str]:
        subject = subject.strip()
        return self.extract_speaker_name(subject), f"{subject}{verb}", attribution_type

    def _split_context(self, dialogue: DialogueExtraction) -> Tuple[str, str]:
        # The context window is clamped at the start of the text, so the quote
        # sits at min(position, window) within it
        quote_start = min(dialogue.position, settings.DIALOGUE_CONTEXT_WINDOW)
        quote_end = quote_start + (dialogue.end_position - dialogue.position)
        return dialogue.context[:quote_start], dialogue.context[quote_end:]
