"""Unit tests for conflict detection, pacing, foreshadowing and plot aggregation."""

import json

import pytest

from narrative_engine.lexicons import (
    ADD_CONFLICT_RECOMMENDATION,
    PACE_FAST_RECOMMENDATIONS,
    PACE_SLOW_RECOMMENDATIONS,
    ForeshadowingCategory,
)
from narrative_engine.models import ConflictPoint, ForeshadowingAnalysis, ForeshadowingSetup, PaceAnalysis
from narrative_engine.plot.conflict_detector import ConflictDetector, detect_conflict_points
from narrative_engine.plot.foreshadowing_tracker import ForeshadowingTracker, track_foreshadowing
from narrative_engine.plot.pacing_analyzer import PacingAnalyzer, analyze_pace
from narrative_engine.plot.plot_analyzer import analyze_plot, calculate_overall_score

SLOW_SENTENCE = '窗外的雨靜靜地下著，遠處的山巒籠罩在一片灰濛濛的霧氣之中，整座城市彷彿陷入了漫長而安靜的沉睡。'


class TestConflictDetector:
    """Test cases for ConflictDetector class."""

    def test_one_sentence_two_categories(self, blank_toolkit):
        conflicts = detect_conflict_points('他在戰鬥中內心掙扎。', toolkit=blank_toolkit)

        assert [(c.type, c.intensity) for c in conflicts] == [('external', 9), ('internal', 7)]
        assert all(c.position == 0 for c in conflicts)
        assert conflicts[0].keywords == ['戰鬥']
        assert conflicts[1].description == '檢測到內心衝突'

    def test_intensity_grows_with_matches_and_caps(self, blank_toolkit):
        conflicts = detect_conflict_points('革命與抗議反抗壓迫和不公的制度。', toolkit=blank_toolkit)

        assert len(conflicts) == 1
        assert conflicts[0].type == 'societal'
        assert conflicts[0].intensity == 10

    def test_sorted_by_intensity_stable(self, blank_toolkit):
        text = '她很猶豫。敵人來了。他很矛盾。'
        conflicts = detect_conflict_points(text, toolkit=blank_toolkit)

        assert [(c.type, c.position) for c in conflicts] == [('external', 5), ('internal', 0), ('internal', 10)]

    def test_context_is_sentence(self, blank_toolkit):
        conflicts = detect_conflict_points('天晴了。他們發生了爭吵。', toolkit=blank_toolkit)

        assert conflicts[0].context == '他們發生了爭吵。'
        assert conflicts[0].position == 4

    def test_no_conflict(self, blank_toolkit):
        assert ConflictDetector(blank_toolkit).detect_conflict_points('花開了。') == []
        assert ConflictDetector(blank_toolkit).detect_conflict_points(None) == []


class TestPacingAnalyzer:
    """Test cases for PacingAnalyzer class."""

    def test_fast_action_text(self, blank_toolkit):
        pace = analyze_pace('他跑了。她跳了。', toolkit=blank_toolkit)

        assert pace.pace_score == 10.0
        assert pace.overall_pace == 'fast'
        assert pace.recommendations == list(PACE_FAST_RECOMMENDATIONS)

    def test_slow_descriptive_text(self, blank_toolkit):
        pace = analyze_pace(SLOW_SENTENCE, toolkit=blank_toolkit)

        assert pace.pace_score == 3.0
        assert pace.overall_pace == 'slow'
        assert pace.recommendations == list(PACE_SLOW_RECOMMENDATIONS)

    def test_dialogue_raises_score(self, blank_toolkit):
        pace = analyze_pace('「你好。」他點頭了。', toolkit=blank_toolkit)

        # 2 sentences, average 5 characters: 5 + 2 + (1 / 2) * 3
        assert pace.pace_score == 8.5
        assert pace.overall_pace == 'fast'

    @pytest.mark.parametrize("text", [None, '', '   '])
    def test_empty_text_is_neutral(self, blank_toolkit, text):
        pace = analyze_pace(text, toolkit=blank_toolkit)

        assert pace.pace_score == 5.0
        assert pace.overall_pace == 'moderate'
        assert pace.recommendations == []

    def test_long_text_has_five_contiguous_segments(self, blank_toolkit, long_narrative_text):
        segments = analyze_pace(long_narrative_text, toolkit=blank_toolkit).segments

        assert len(segments) == 5
        assert segments[0].start_position == 0
        assert segments[-1].end_position == len(long_narrative_text)
        for previous, current in zip(segments, segments[1:]):
            assert current.start_position == previous.end_position

    @pytest.mark.parametrize("length", [500, 501, 504, 999, 1234])
    def test_segment_count_for_long_inputs(self, blank_toolkit, length):
        text = ('他走了。' * 400)[:length]
        segments = PacingAnalyzer(blank_toolkit).analyze_segments(text)

        assert len(segments) == 5
        assert segments[-1].end_position == length

    def test_short_text_uses_minimum_segment_size(self, blank_toolkit):
        segments = PacingAnalyzer(blank_toolkit).analyze_segments('字' * 250)
        assert [(s.start_position, s.end_position) for s in segments] == [(0, 100), (100, 200), (200, 250)]

    def test_segment_event_density(self, blank_toolkit):
        segment = PacingAnalyzer(blank_toolkit).analyze_segments('他跑。她跳。')[0]

        assert segment.action_ratio == 1.0
        assert segment.dialogue_ratio == 0.0
        assert segment.event_density == 10.0
        assert segment.pace == 'fast'

    def test_segment_without_terminators(self, blank_toolkit):
        segment = PacingAnalyzer(blank_toolkit).analyze_segments('他跑')[0]
        assert segment.action_ratio == 1.0

    def test_narration_segments_are_slow(self, blank_toolkit, long_narrative_text):
        segments = analyze_pace(long_narrative_text, toolkit=blank_toolkit).segments
        assert {s.pace for s in segments} == {'slow'}


class TestForeshadowingTracker:
    """Test cases for ForeshadowingTracker class."""

    def test_setup_and_unrelated_payoff_do_not_connect(self, blank_toolkit):
        analysis = track_foreshadowing('村裡流傳著一個預言。多年後，一切都應驗了。', toolkit=blank_toolkit)

        assert [(s.type, s.keywords, s.intensity, s.position) for s in analysis.setups] == [('plot', ['預言'], 3, 0)]
        assert [(p.keywords, p.impact, p.position) for p in analysis.payoffs] == [(['應驗'], 4, 10)]
        assert analysis.connections == []
        assert analysis.orphaned_setups == analysis.setups

    def test_sentence_can_be_setup_and_payoff(self, blank_toolkit):
        analysis = track_foreshadowing('原來那個神秘人的秘密身份是國王。', toolkit=blank_toolkit)

        assert analysis.setups[0].keywords == ['神秘', '秘密', '身份']
        assert analysis.setups[0].intensity == 9
        assert analysis.payoffs[0].keywords == ['原來']

    def test_scores_are_capped(self, blank_toolkit):
        analysis = track_foreshadowing('神秘的隱藏秘密來自過去的身份。', toolkit=blank_toolkit)
        assert analysis.setups[0].intensity == 10

    def test_connections_link_later_payoffs(self, blank_toolkit):
        categories = [ForeshadowingCategory('plot', ('秘密',), ('秘密揭曉',))]
        tracker = ForeshadowingTracker(blank_toolkit, categories=categories)
        analysis = tracker.track_foreshadowing('他藏著一個秘密。最後秘密揭曉了。')

        assert len(analysis.setups) == 2
        assert len(analysis.payoffs) == 1
        assert [(c.setup_id, c.payoff_id, c.distance, c.strength) for c in analysis.connections] == [(0, 0, 8, 3)]
        assert analysis.orphaned_setups == [analysis.setups[1]]

    def test_distances_are_non_negative(self, blank_toolkit):
        categories = [ForeshadowingCategory('object', ('古劍',), ('古劍', '劍'))]
        tracker = ForeshadowingTracker(blank_toolkit, categories=categories)
        analysis = tracker.track_foreshadowing('古劍在牆上。他拔出劍。古劍發光。劍斷了。')

        assert analysis.connections
        for connection in analysis.connections:
            assert connection.distance > 0


class TestPlotAnalyzer:
    """Test cases for the plot aggregator."""

    def test_overall_score_formula(self):
        conflicts = [ConflictPoint(0, 9, 'external', '', '', []), ConflictPoint(0, 7, 'internal', '', '', [])]
        pace = PaceAnalysis('moderate', 6.0, [], [])
        setup = ForeshadowingSetup(0, '', [], 3, 'plot')
        foreshadowing = ForeshadowingAnalysis(setups=[setup, setup], payoffs=[], orphaned_setups=[], connections=[object()])

        # 5 + 8 * 0.3 + 6 * 0.4 + (1 / 2) * 10 * 0.3
        assert calculate_overall_score(conflicts, pace, foreshadowing) == 10.0
        assert calculate_overall_score([], PaceAnalysis('slow', 1.0, [], []),
                                       ForeshadowingAnalysis([], [], [], [])) == 5.4

    def test_fast_text_without_conflict(self, blank_toolkit):
        analysis = analyze_plot('他跑了。她跳了。', toolkit=blank_toolkit)

        assert analysis.overall_score == 9.0
        assert analysis.recommendations == list(PACE_FAST_RECOMMENDATIONS) + [ADD_CONFLICT_RECOMMENDATION]

    def test_orphaned_setup_warning(self, blank_toolkit):
        analysis = analyze_plot('村裡流傳著一個預言。', toolkit=blank_toolkit)
        assert '發現 1 個未回收的伏筆，建議安排回收' in analysis.recommendations

    def test_recommendations_are_unique(self, blank_toolkit):
        analysis = analyze_plot(SLOW_SENTENCE * 3, toolkit=blank_toolkit)
        assert len(analysis.recommendations) == len(set(analysis.recommendations))

    def test_empty_text(self, blank_toolkit):
        analysis = analyze_plot('', toolkit=blank_toolkit)

        assert analysis.conflicts == []
        assert analysis.pace.pace_score == 5.0
        assert analysis.pace.overall_pace == 'moderate'
        assert analysis.foreshadowing.setups == []
        assert analysis.foreshadowing.payoffs == []

    def test_idempotent(self, blank_toolkit):
        text = '他在戰鬥中內心掙扎。「快跑！」她喊道。村裡流傳著一個預言。'
        assert analyze_plot(text, toolkit=blank_toolkit) == analyze_plot(text, toolkit=blank_toolkit)

    def test_result_is_json_serializable(self, blank_toolkit):
        analysis = analyze_plot('他在戰鬥中內心掙扎。村裡流傳著一個預言。', toolkit=blank_toolkit)
        payload = json.loads(json.dumps(analysis.to_dict(), ensure_ascii=False))

        assert payload['conflicts'][0]['type'] == 'external'
        assert payload['foreshadowing']['setups'][0]['type'] == 'plot'
