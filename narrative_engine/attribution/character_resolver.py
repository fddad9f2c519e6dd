import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from fuzzywuzzy import fuzz, process

from config import settings
from ..models import Character

CharacterLike = Union[Character, Mapping[str, Any]]


def to_character(entry: CharacterLike) -> Character:
    if isinstance(entry, Character):
        return entry
    return Character.from_dict(entry)


class CharacterAssignmentResolver:
    """
    Maps a raw speaker name onto an entry of the caller's character roster.

    Matching runs in passes over the roster and the first pass with a hit wins;
    within a pass the first roster entry in iteration order wins:

        1. exact name
        2. exact alias
        3. containment (speaker name inside a roster name or the reverse)
        4. fuzzy ratio, only when ``settings.SPEAKER_FUZZY_MATCH_ENABLED``

    The roster is copied into ``Character`` records on construction and never
    modified.
    """

    def __init__(self, known_characters: Optional[Iterable[CharacterLike]] = None,
                 fuzzy_matching: Optional[bool] = None, fuzzy_threshold: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.characters: List[Character] = [to_character(entry) for entry in known_characters or []]
        self.fuzzy_matching = settings.SPEAKER_FUZZY_MATCH_ENABLED if fuzzy_matching is None else fuzzy_matching
        self.fuzzy_threshold = fuzzy_threshold if fuzzy_threshold is not None else settings.SPEAKER_FUZZY_MATCH_THRESHOLD

    def resolve(self, speaker_name: Optional[str]) -> Optional[Character]:
        """Return the roster entry for ``speaker_name``, or None."""
        if not speaker_name or not self.characters:
            return None

        # Pass 1: exact name
        for character in self.characters:
            if character.name == speaker_name:
                return character

        # Pass 2: exact alias
        for character in self.characters:
            if speaker_name in character.aliases:
                return character

        # Pass 3: containment in either direction
        for character in self.characters:
            if character.name and (speaker_name in character.name or character.name in speaker_name):
                return character

        if self.fuzzy_matching:
            return self._fuzzy_resolve(speaker_name)

        return None

    def _fuzzy_resolve(self, speaker_name: str) -> Optional[Character]:
        candidates = {}
        for character in self.characters:
            for label in (character.name, *character.aliases):
                if label and label not in candidates:
                    candidates[label] = character
        if not candidates:
            return None

        result = process.extractOne(speaker_name, list(candidates), scorer=fuzz.ratio)
        if result and result[1] >= self.fuzzy_threshold:
            self.logger.debug(f"Fuzzy match: '{speaker_name}' -> '{result[0]}' (score: {result[1]})")
            return candidates[result[0]]
        return None
