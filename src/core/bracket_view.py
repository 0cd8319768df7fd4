"""
Assemble a render-ready single elimination bracket from a match snapshot.

Output is plain dicts/lists so it can be returned as JSON or printed.
"""
import logging
from typing import Dict, Iterable, List, Optional

from core.connectors import build_all_connectors
from core.diagnostics import (
    BracketWarning, DEGENERATE_BRACKET, IRREGULAR_BRACKET, MISSING_DATA,
    OUT_OF_RANGE_ROUND, SLOT_ORDER_DIVERGENCE,
)
from core.layout import calculate_layout
from core.models import Match, Participant, participant_names
from core.projection import calculate_potential_matches, describe_potential_opponents, potential_match_key
from core.rounds import (
    build_round_slots, calculate_byes, calculate_total_rounds, expected_match_count,
    find_out_of_range_matches, find_slot_index_divergence, get_round_name, group_matches_by_round,
)
from core.selection import match_is_highlighted, placeholder_is_highlighted

logger = logging.getLogger(__name__)

DEFAULT_LABELS = {
    'unknown_participant': 'Unknown player',
    'awaiting_results': 'Awaiting results',
    'bye': 'BYE',
}


def _collect_warnings(matches: List[Match], grouped: Dict[int, List[Match]],
                      total_rounds: int) -> List[BracketWarning]:
    warnings = []

    for match in find_out_of_range_matches(matches, total_rounds):
        warnings.append(BracketWarning(
            OUT_OF_RANGE_ROUND,
            f"Match {match.id} is in round {match.round_number}, bracket has {total_rounds} rounds",
            round_number=match.round_number, match_id=match.id))

    for match in find_slot_index_divergence(grouped):
        position = grouped[match.round_number].index(match)
        warnings.append(BracketWarning(
            SLOT_ORDER_DIVERGENCE,
            f"Match {match.id} declares slot {match.slot_index} but id order places it at {position}",
            round_number=match.round_number, match_id=match.id))

    for round_number in range(1, total_rounds + 1):
        round_matches = grouped[round_number]
        expected = expected_match_count(round_number, total_rounds)
        if not round_matches:
            warnings.append(BracketWarning(
                MISSING_DATA, f"No matches recorded for round {round_number} yet",
                round_number=round_number))
        elif len(round_matches) > expected:
            for extra in round_matches[expected:]:
                warnings.append(BracketWarning(
                    IRREGULAR_BRACKET,
                    f"Round {round_number} has {len(round_matches)} matches, expected at most {expected}",
                    round_number=round_number, match_id=extra.id))
        elif len(round_matches) % 2 == 1 and round_number < total_rounds:
            trailing = round_matches[-1]
            warnings.append(BracketWarning(
                IRREGULAR_BRACKET,
                f"Round {round_number} has an odd number of matches; match {trailing.id} is not projected",
                round_number=round_number, match_id=trailing.id))

    return warnings


def _log_warnings(warnings: Iterable[BracketWarning]):
    for warning in warnings:
        if warning.is_informational:
            logger.info(warning.message)
        else:
            logger.warning(warning.message)


def _side(participant_id, score, match: Match, selected_participant_id, names: Dict, labels: Dict) -> Dict:
    if participant_id is None:
        name = labels['bye']
    else:
        name = names.get(participant_id, labels['unknown_participant'])
    return {
        'id': participant_id,
        'name': name,
        'score': score,
        'is_winner': participant_id is not None and match.winner_id == participant_id,
        'is_selected': participant_id is not None and participant_id == selected_participant_id,
    }


def build_bracket_view(matches: Iterable[Match], participants: Iterable[Participant],
                       selected_participant_id=None, labels: Optional[Dict] = None) -> Dict:
    """
    Build everything a renderer needs for one snapshot.

    Never raises for irregular data: problems are reported in 'warnings'.
    Identical inputs always give identical output.
    """
    matches = list(matches)
    participants = list(participants)
    labels = {**DEFAULT_LABELS, **(labels or {})}
    names = participant_names(participants)

    def get_name(participant_id):
        return names.get(participant_id, labels['unknown_participant'])

    participant_count = len(participants)
    total_rounds = calculate_total_rounds(participant_count)
    layout = calculate_layout(total_rounds, participant_count)

    summary = {
        'participant_count': participant_count,
        'total_rounds': total_rounds,
        'byes': calculate_byes(participant_count),
        'match_count': len(matches),
        'champion': None,
        'selected_participant_id': selected_participant_id,
    }

    if total_rounds == 0:
        warnings = [BracketWarning(
            DEGENERATE_BRACKET, f"A bracket needs at least 2 participants, got {participant_count}")]
        warnings.extend(
            BracketWarning(OUT_OF_RANGE_ROUND,
                           f"Match {m.id} is in round {m.round_number}, bracket has 0 rounds",
                           round_number=m.round_number, match_id=m.id)
            for m in find_out_of_range_matches(matches, 0)
        )
        _log_warnings(warnings)
        return {
            'summary': summary,
            'layout': layout.to_dict(),
            'rounds': [],
            'potential_matches': {},
            'warnings': [w.to_dict() for w in warnings],
        }

    grouped = group_matches_by_round(matches, total_rounds)
    warnings = _collect_warnings(matches, grouped, total_rounds)
    _log_warnings(warnings)

    potential_matches = calculate_potential_matches(matches, total_rounds)
    slots = build_round_slots(grouped, total_rounds)
    connectors = build_all_connectors(layout, slots, potential_matches, selected_participant_id)

    rounds = []
    for round_number in range(1, total_rounds + 1):
        round_slots = []
        for index, match in enumerate(slots[round_number]):
            entry = {
                'index': index,
                'top': layout.top_position(round_number, index),
            }
            if match is not None:
                entry.update({
                    'kind': 'match',
                    'match_id': match.id,
                    'highlighted': match_is_highlighted(match, selected_participant_id),
                    'sides': [
                        _side(match.participant_a, match.score_a, match, selected_participant_id, names, labels),
                        _side(match.participant_b, match.score_b, match, selected_participant_id, names, labels),
                    ],
                    'winner_id': match.winner_id,
                })
            else:
                label = describe_potential_opponents(potential_matches, round_number, index, matches, get_name)
                potential = potential_matches.get(potential_match_key(round_number, index))
                entry.update({
                    'kind': 'placeholder',
                    'label': label or labels['awaiting_results'],
                    'highlighted': placeholder_is_highlighted(
                        potential_matches, round_number, index, selected_participant_id),
                    'possible_participants': potential.sorted_participants() if potential else None,
                })
            round_slots.append(entry)

        rounds.append({
            'round_number': round_number,
            'name': get_round_name(round_number, total_rounds),
            'expected_match_count': expected_match_count(round_number, total_rounds),
            'recorded_match_count': len(grouped[round_number]),
            'left': layout.round_left(round_number),
            'slots': round_slots,
            'connectors': [c.to_dict() for c in connectors.get(round_number, [])],
        })

    final_match = slots[total_rounds][0]
    if final_match is not None and final_match.winner_id is not None:
        summary['champion'] = {'id': final_match.winner_id, 'name': get_name(final_match.winner_id)}

    return {
        'summary': summary,
        'layout': layout.to_dict(),
        'rounds': rounds,
        'potential_matches': {
            potential.key: potential.to_dict()
            for potential in sorted(potential_matches.values(), key=lambda p: (p.round_number, p.index))
        },
        'warnings': [w.to_dict() for w in warnings],
    }
