"""
Tests for assembling the full bracket view and its text rendering.
"""
import logging
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.bracket_view import build_bracket_view
from core.models import Match, Participant
from core.text_render import render_bracket_text


def _warning_kinds(view):
    return [w['kind'] for w in view['warnings']]


class TestSixteenPlayerScenario:
    """16 participants, round 1 fully played, round 2 not created yet."""

    @pytest.fixture
    def view(self, sixteen_participants, sixteen_first_round_played):
        return build_bracket_view(sixteen_first_round_played, sixteen_participants)

    def test_total_rounds(self, view):
        assert view['summary']['total_rounds'] == 4
        assert [r['name'] for r in view['rounds']] == ["Round of 16", "Quarterfinal", "Semifinal", "Final"]

    def test_round_two_projections(self, view):
        """Four round-2 entries holding only the declared winners."""
        potential = view['potential_matches']
        assert sorted(potential.keys()) == ["2-0", "2-1", "2-2", "2-3"]
        winners = {1, 3, 5, 7, 9, 11, 13, 15}
        for index in range(4):
            entry = potential[f"2-{index}"]
            assert entry['possible_participants'] == [index * 4 + 1, index * 4 + 3]
            assert set(entry['possible_participants']) <= winners

    def test_round_one_positions(self, view):
        """8 evenly spaced offsets spanning round_height(1)."""
        layout = view['layout']
        tops = [slot['top'] for slot in view['rounds'][0]['slots']]
        assert len(tops) == 8
        assert len({b - a for a, b in zip(tops, tops[1:])}) == 1
        assert tops[0] > 0
        assert tops[-1] + layout['cell_height'] < layout['canvas_height']

    def test_round_two_placeholders(self, view):
        slots = view['rounds'][1]['slots']
        assert [s['kind'] for s in slots] == ['placeholder'] * 4
        assert slots[0]['label'] == "Player 1 vs Player 3"
        assert slots[0]['possible_participants'] == [1, 3]

    def test_later_rounds_await_results(self, view):
        slot = view['rounds'][2]['slots'][0]
        assert slot['label'] == "Awaiting results"
        assert slot['possible_participants'] is None

    def test_missing_rounds_reported(self, view):
        assert _warning_kinds(view) == ['missing_data'] * 3

    def test_connectors(self, view):
        assert [len(r['connectors']) for r in view['rounds']] == [4, 2, 1, 0]


class TestSelectionInView:
    """Highlight flags follow the selected participant."""

    def test_match_and_side_flags(self, eight_participants, first_round_of_eight):
        view = build_bracket_view(first_round_of_eight, eight_participants, selected_participant_id=4)
        slots = view['rounds'][0]['slots']
        assert [s['highlighted'] for s in slots] == [False, True, False, False]
        assert [side['is_selected'] for side in slots[1]['sides']] == [False, True]

    def test_placeholder_flag(self, eight_participants, first_round_of_eight):
        view = build_bracket_view(first_round_of_eight, eight_participants, selected_participant_id=8)
        round_two = view['rounds'][1]['slots']
        assert [s['highlighted'] for s in round_two] == [False, True]
        assert round_two[1]['label'] == "Frank vs Grace/Heidi"

    def test_connector_flags(self, eight_participants, first_round_of_eight):
        view = build_bracket_view(first_round_of_eight, eight_participants, selected_participant_id=1)
        flags = [c['highlighted'] for c in view['rounds'][0]['connectors']]
        assert flags == [True, False]

    def test_without_selection(self, eight_participants, first_round_of_eight):
        view = build_bracket_view(first_round_of_eight, eight_participants)
        assert not any(s['highlighted'] for r in view['rounds'] for s in r['slots'])


class TestMatchCards:
    """Names, scores and winner markers on recorded matches."""

    def test_sides(self, eight_participants, first_round_of_eight):
        view = build_bracket_view(first_round_of_eight, eight_participants)
        first = view['rounds'][0]['slots'][0]
        assert first['kind'] == 'match'
        assert first['match_id'] == 1
        assert [(s['name'], s['score'], s['is_winner']) for s in first['sides']] == [
            ("Alice", 3, True),
            ("Bob", 1, False),
        ]

    def test_unknown_and_bye(self, eight_participants):
        matches = [Match(id=1, round_number=1, participant_a=42)]
        view = build_bracket_view(matches, eight_participants)
        sides = view['rounds'][0]['slots'][0]['sides']
        assert sides[0]['name'] == "Unknown player"
        assert sides[1]['name'] == "BYE"

    def test_custom_labels(self, eight_participants):
        view = build_bracket_view([], eight_participants, labels={'awaiting_results': 'TBD'})
        assert view['rounds'][0]['slots'][0]['label'] == 'TBD'

    def test_champion(self):
        participants = [Participant(1, "Alice"), Participant(2, "Bob")]
        matches = [Match(id=1, round_number=1, participant_a=1, participant_b=2, winner_id=2)]
        view = build_bracket_view(matches, participants)
        assert view['summary']['champion'] == {'id': 2, 'name': "Bob"}
        assert view['potential_matches'] == {}


class TestIrregularData:
    """The view is best effort and never raises for bad data."""

    def test_degenerate_bracket(self):
        view = build_bracket_view([Match(id=1, round_number=1)], [Participant(1, "Solo")])
        assert view['summary']['total_rounds'] == 0
        assert view['rounds'] == []
        assert view['potential_matches'] == {}
        assert _warning_kinds(view) == ['degenerate_bracket', 'out_of_range_round']

    def test_no_participants(self):
        view = build_bracket_view([], [])
        assert view['rounds'] == []
        assert view['layout']['canvas_height'] == 0

    def test_out_of_range_round(self, eight_participants, first_round_of_eight, caplog):
        matches = first_round_of_eight + [Match(id=99, round_number=5, participant_a=1, participant_b=6)]
        with caplog.at_level(logging.WARNING, logger='core.bracket_view'):
            view = build_bracket_view(matches, eight_participants)
        assert 'out_of_range_round' in _warning_kinds(view)
        assert any('Match 99' in r.message for r in caplog.records)
        assert all(s.get('match_id') != 99 for r in view['rounds'] for s in r['slots'])

    def test_odd_round(self, eight_participants, first_round_of_eight):
        view = build_bracket_view(first_round_of_eight[:3], eight_participants)
        irregular = [w for w in view['warnings'] if w['kind'] == 'irregular_bracket']
        assert len(irregular) == 1
        assert irregular[0]['match_id'] == 3
        assert list(view['potential_matches'].keys()) == ["2-0"]

    def test_overfull_round(self, eight_participants):
        matches = [Match(id=i, round_number=3, participant_a=1, participant_b=2) for i in (1, 2)]
        view = build_bracket_view(matches, eight_participants)
        irregular = [w for w in view['warnings'] if w['kind'] == 'irregular_bracket']
        assert [w['match_id'] for w in irregular] == [2]
        assert len(view['rounds'][2]['slots']) == 1

    def test_overfull_round_projects_existing_slots_only(self):
        participants = [Participant(i, f"P{i}") for i in range(1, 5)]
        matches = [Match(id=i, round_number=1, participant_a=1, participant_b=2) for i in range(1, 5)]
        view = build_bracket_view(matches, participants)
        assert list(view['potential_matches'].keys()) == ["2-0"]
        assert len(view['rounds'][1]['slots']) == 1

    def test_slot_divergence_reported(self, eight_participants):
        matches = [
            Match(id=1, round_number=1, participant_a=1, participant_b=2, slot_index=1),
            Match(id=2, round_number=1, participant_a=3, participant_b=4, slot_index=0),
        ]
        view = build_bracket_view(matches, eight_participants)
        assert _warning_kinds(view).count('slot_order_divergence') == 2
        assert view['rounds'][0]['slots'][0]['match_id'] == 1

    def test_non_power_of_two(self):
        participants = [Participant(i, f"P{i}") for i in range(1, 6)]
        view = build_bracket_view([], participants)
        assert view['summary']['total_rounds'] == 3
        assert view['summary']['byes'] == 3
        assert len(view['rounds'][0]['slots']) == 4


class TestDeterminism:
    """Same snapshot, same output."""

    def test_identical_views(self, eight_participants, first_round_of_eight):
        first = build_bracket_view(first_round_of_eight, eight_participants, 3)
        second = build_bracket_view(list(reversed(first_round_of_eight)), eight_participants, 3)
        assert first == second


class TestTextRender:
    """Tests for the plain-text bracket."""

    def test_render(self, eight_participants, first_round_of_eight):
        text = render_bracket_text(build_bracket_view(first_round_of_eight, eight_participants, 1))
        lines = text.splitlines()
        assert lines[0] == "Participants: 8, Rounds: 3"
        assert "# Quarterfinal" in lines
        assert "* M1: Alice (W) 3 vs Bob 1" in lines
        assert "  M2: Carol - vs Dave -" in lines
        assert "* [Alice vs Carol/Dave]" in lines
        assert "  [Awaiting results]" in lines

    def test_render_champion(self):
        participants = [Participant(1, "Alice"), Participant(2, "Bob")]
        matches = [Match(id=1, round_number=1, participant_a=1, participant_b=2, winner_id=1)]
        text = render_bracket_text(build_bracket_view(matches, participants))
        assert "Champion: Alice" in text

    def test_render_empty(self):
        text = render_bracket_text(build_bracket_view([], []))
        assert "No bracket to display." in text
