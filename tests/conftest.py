"""
Pytest configuration and shared fixtures for the narrative engine test suite.

Tests never depend on a downloaded spaCy model. They use a blank Chinese
pipeline (character segmentation plus sentencizer), an ``entity_ruler`` with a
fixed list of names where person detection matters, and a blank English
pipeline with an ``attribute_ruler`` where part-of-speech tags matter.
"""

import logging

import pytest
import spacy

from narrative_engine.models import Character
from narrative_engine.text_processing import nlp_toolkit
from narrative_engine.text_processing.nlp_toolkit import NLPToolkit

# Configure test logging
logging.basicConfig(level=logging.INFO)


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual analyzers"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests across both pipelines"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test file location."""
    for item in items:
        test_file = str(item.fspath)

        if "/integration/" in test_file:
            item.add_marker(pytest.mark.integration)

        if "/unit/" in test_file:
            item.add_marker(pytest.mark.unit)


# ============================================================================
# NLP Toolkit Fixtures
# ============================================================================

KNOWN_PEOPLE = ['王小明', '小明', '李華', '張老師']
KNOWN_PLACES = ['北京', '上海']


@pytest.fixture(scope="session")
def blank_toolkit():
    """Blank Chinese pipeline: sentences and terms, no entities."""
    return NLPToolkit.blank('zh')


@pytest.fixture(scope="session")
def entity_toolkit():
    """Blank Chinese pipeline with a rule-based recognizer for a few names and places."""
    nlp = spacy.blank('zh')
    ruler = nlp.add_pipe('entity_ruler')
    ruler.add_patterns(
        [{'label': 'PERSON', 'pattern': name} for name in KNOWN_PEOPLE]
        + [{'label': 'GPE', 'pattern': place} for place in KNOWN_PLACES]
    )
    return NLPToolkit(nlp)


TAGGED_WORDS = {
    'NOUN': ['cat', 'cats', 'dog', 'house', 'garden', 'fish'],
    'PROPN': ['alice'],
    'VERB': ['sat', 'ran', 'saw', 'ate', 'slept'],
    'ADJ': ['black', 'old', 'big'],
    'ADV': ['quickly', 'slowly'],
}


@pytest.fixture(scope="session")
def tagged_toolkit():
    """Blank English pipeline whose part-of-speech tags come from an ``attribute_ruler``."""
    nlp = spacy.blank('en')
    nlp.add_pipe('sentencizer')
    ruler = nlp.add_pipe('attribute_ruler')
    for pos, words in TAGGED_WORDS.items():
        ruler.add(patterns=[[{'LOWER': {'IN': words}}]], attrs={'POS': pos})
    return NLPToolkit(nlp)


@pytest.fixture
def clean_toolkit_latch():
    """Reset the process-wide toolkit before and after a test."""
    nlp_toolkit.reset_toolkit()
    yield
    nlp_toolkit.reset_toolkit()


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def pronoun_roster():
    """Roster whose names are bare pronouns."""
    return [
        {'id': '1', 'name': '他'},
        {'id': '2', 'name': '她'},
    ]


@pytest.fixture
def named_roster():
    return [
        Character(id='c1', name='王小明', aliases=('小明',)),
        Character(id='c2', name='李華'),
    ]


@pytest.fixture
def love_scene_text():
    return '他看著她，輕聲說：「我愛你。」她驚訝地回答：「真的嗎？」'


@pytest.fixture
def long_narrative_text():
    """A 703-character chapter of slow, dialogue-free narration."""
    return '他慢慢地走著。' * 100 + '天黑了'


@pytest.fixture
def sample_chapters(love_scene_text):
    return [
        {'id': 'ch-1', 'title': '第一章', 'content': love_scene_text},
        {'id': 'ch-2', 'title': '第二章', 'content': [
            {'type': 'paragraph', 'children': [{'text': '他在戰鬥中內心掙扎。'}]},
            {'type': 'paragraph', 'children': [{'text': '「快跑！」'}, {'text': '她喊道。'}]},
        ]},
        {'id': 'ch-3', 'title': '第三章', 'content': ''},
    ]
