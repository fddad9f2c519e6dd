"""Unit tests for speaker attribution templates and confidence scoring."""

import pytest

from narrative_engine.attribution.speaker_attributor import SpeakerAttributor, calculate_dialogue_confidence
from narrative_engine.text_processing.dialogue_extractor import DialogueExtractor


def extract(toolkit, text):
    return DialogueExtractor(toolkit).extract_dialogues(text)


class TestAttributionTemplates:
    """Each template is tried in order and the first match wins."""

    def test_pre_attribution(self, blank_toolkit):
        dialogue = extract(blank_toolkit, '她驚訝地回答：「真的嗎？」')[0]

        assert dialogue.markers.attribution_type == 'pre'
        assert dialogue.markers.attribution == '她驚訝地回答'
        # 地 is stripped as a particle
        assert dialogue.speaker_name == '她驚訝回'

    def test_pre_attribution_with_pronoun_subject(self, blank_toolkit):
        dialogue = extract(blank_toolkit, '他說：「走吧。」')[0]

        assert dialogue.speaker_name == '他'
        assert dialogue.markers.attribution == '他說'

    def test_post_attribution_takes_first_verb(self, blank_toolkit):
        dialogue = extract(blank_toolkit, '「真的嗎？」她驚訝地回答。')[0]

        assert dialogue.markers.attribution_type == 'post'
        assert dialogue.speaker_name == '她'
        assert dialogue.markers.attribution == '她驚'

    def test_post_attribution_after_comma(self, blank_toolkit):
        dialogue = extract(blank_toolkit, '「走吧」，李華低語。')[0]

        assert dialogue.markers.attribution_type == 'post'
        assert dialogue.speaker_name == '李華'
        assert dialogue.markers.attribution == '李華低語'

    def test_inserted_attribution_covers_second_half(self, blank_toolkit):
        first, second = extract(blank_toolkit, '「我知道，」他說，「但是來不及了。」')

        assert first.markers.attribution_type == 'post'
        assert first.speaker_name == '他'
        assert second.markers.attribution_type == 'inserted'
        assert second.speaker_name == '他'
        assert second.markers.attribution == '他說'

    def test_next_speakers_attribution_is_not_borrowed(self, blank_toolkit):
        """A clause leading into the next quote attributes that quote, not this one."""
        dialogues = extract(blank_toolkit, '「我知道，」他說，「但是來不及了。」李華說：「嗯。」')

        assert [(d.speaker_name, d.markers.attribution_type) for d in dialogues] == [
            ('他', 'post'), ('他', 'inserted'), ('李華', 'pre'),
        ]

    def test_verb_phrase_leading_into_quote_is_pre_attribution(self, blank_toolkit):
        first, second = extract(blank_toolkit, '「走吧。」李華笑著說：「好。」')

        assert first.speaker_name is None
        assert first.markers.attribution_type is None
        assert second.markers.attribution_type == 'pre'

    @pytest.mark.parametrize("text", ['「好」他知道這件事。', '「好」他走上道路。', '「好」難道不是嗎。'])
    def test_compounds_are_not_speaking_verbs(self, blank_toolkit, text):
        dialogue = extract(blank_toolkit, text)[0]

        assert dialogue.speaker_name is None
        assert dialogue.markers.attribution is None

    def test_attribution_does_not_cross_sentences(self, blank_toolkit):
        """A verb in an earlier sentence never attributes a later quote."""
        dialogue = extract(blank_toolkit, '老師說過這件事。大家都沉默了。「為什麼？」')[0]

        assert dialogue.speaker_name is None
        assert dialogue.markers.attribution is None
        assert dialogue.markers.attribution_type is None

    def test_inferred_from_nearest_person(self, entity_toolkit):
        dialogue = extract(entity_toolkit, '李華看了看王小明，王小明站在門口。「快走吧！」')[0]

        assert dialogue.markers.attribution_type == 'inferred'
        assert dialogue.markers.attribution == 'inferred'
        assert dialogue.speaker_name == '王小明'

    def test_no_person_no_speaker(self, blank_toolkit):
        dialogue = extract(blank_toolkit, '門外傳來腳步聲。「快走吧！」')[0]
        assert dialogue.speaker_name is None


class TestExtractSpeakerName:
    """Test cases for subject-phrase cleanup."""

    @pytest.fixture
    def attributor(self, blank_toolkit):
        return SpeakerAttributor(blank_toolkit)

    @pytest.mark.parametrize("phrase,expected", [
        ('他', '他'),
        ('她們', '她們'),
        ('那位老人', '老人'),
        ('一個陌生人', '陌生人'),
        ('Alice', 'Alice'),
    ])
    def test_accepts_names_and_pronouns(self, attributor, phrase, expected):
        assert attributor.extract_speaker_name(phrase) == expected

    @pytest.mark.parametrize("phrase", ['', '！！', '12345', '站在最遠處角落裡的那個穿著灰色長袍的老人'])
    def test_rejects_non_names(self, attributor, phrase):
        assert attributor.extract_speaker_name(phrase) is None

    def test_prefers_recognized_person(self, entity_toolkit):
        attributor = SpeakerAttributor(entity_toolkit)
        assert attributor.extract_speaker_name('憤怒的李華') == '李華'


class TestDialogueConfidence:
    """Test cases for the additive confidence score."""

    def test_base_with_length_bonus(self):
        assert calculate_dialogue_confidence('hello', None, None) == pytest.approx(0.7)

    def test_single_character_gets_smaller_length_bonus(self):
        assert calculate_dialogue_confidence('a', None, None) == pytest.approx(0.6)

    def test_attribution_without_name(self):
        assert calculate_dialogue_confidence('hello', '說', None) == pytest.approx(0.8)

    def test_full_attribution(self):
        assert calculate_dialogue_confidence('hello', '他說', '他') == pytest.approx(1.0)

    def test_punctuation_and_pronoun_bonuses(self):
        assert calculate_dialogue_confidence('你好。', None, None) == pytest.approx(0.9)

    def test_capped_at_one(self):
        assert calculate_dialogue_confidence('我愛你。', '他說', '他') == 1.0

    def test_overlong_dialogue(self):
        assert calculate_dialogue_confidence('a' * 300, None, None) == pytest.approx(0.6)
