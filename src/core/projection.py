"""
Projection of who could meet whom in the next, not yet created, round.

Only one round of look-ahead is produced per call. The projection is
recomputed from the full match list whenever results change, so the
frontier advances as the match service creates the next round.
"""
from typing import Callable, Dict, Iterable, List, Optional

from core.models import Match, PotentialMatch
from core.rounds import expected_match_count


def potential_match_key(round_number: int, index: int) -> str:
    return f"{round_number}-{index}"


def _advancing_participants(match: Match) -> List:
    """The winner once decided, otherwise everyone who is still in the match."""
    if match.winner_id is not None:
        return [match.winner_id]
    return match.participants


def _group_recorded_rounds(matches: Iterable[Match]) -> Dict[int, List[Match]]:
    grouped = {}
    for match in matches:
        if match.round_number < 1:
            continue
        grouped.setdefault(match.round_number, []).append(match)
    for round_matches in grouped.values():
        round_matches.sort(key=lambda m: m.id)
    return grouped


def calculate_potential_matches(matches: Iterable[Match],
                                total_rounds: Optional[int] = None) -> Dict[str, PotentialMatch]:
    """
    Project the possible occupants of each next-round slot.

    Matches of a round are paired in id order (0-1, 2-3, ...); each pair
    feeds slot k = pair number of the following round. A trailing unpaired
    match contributes nothing. When total_rounds is given, nothing is
    projected past the final or into slots the next round does not have.
    """
    potential_matches = {}
    grouped = _group_recorded_rounds(matches)

    for round_number in sorted(grouped):
        next_round = round_number + 1
        if total_rounds is not None and next_round > total_rounds:
            continue

        round_matches = grouped[round_number]
        slot_count = None
        if total_rounds is not None:
            slot_count = expected_match_count(next_round, total_rounds)

        for i in range(0, len(round_matches) - 1, 2):
            index = i // 2
            if slot_count is not None and index >= slot_count:
                break
            match1 = round_matches[i]
            match2 = round_matches[i + 1]

            possible = set(_advancing_participants(match1))
            possible.update(_advancing_participants(match2))

            potential = PotentialMatch(next_round, index, possible)
            potential_matches[potential.key] = potential

    return potential_matches


def is_potential_match_for(potential_matches: Dict[str, PotentialMatch], round_number: int,
                           index: int, participant_id) -> bool:
    if participant_id is None:
        return False
    potential = potential_matches.get(potential_match_key(round_number, index))
    if potential is None:
        return False
    return participant_id in potential.possible_participants


def _group_by_feeding_match(potential: PotentialMatch, matches: Iterable[Match]) -> List[List]:
    """Split projected participants by the previous-round match they are playing in."""
    previous_round = sorted(
        (m for m in matches if m.round_number == potential.round_number - 1),
        key=lambda m: m.id
    )
    groups = []
    seen = set()
    for match in previous_round:
        members = [p for p in match.participants
                   if p in potential.possible_participants and p not in seen]
        if members:
            groups.append(members)
            seen.update(members)
    return groups


def describe_potential_opponents(potential_matches: Dict[str, PotentialMatch], round_number: int,
                                 index: int, matches: Iterable[Match],
                                 get_name: Callable[[object], str]) -> str:
    """
    Human readable label for a placeholder slot.

    Returns "" when nothing is projected, "A vs B" when both sides are known,
    and "A/B vs C" style labels while feeding matches are still undecided.
    """
    potential = potential_matches.get(potential_match_key(round_number, index))
    if potential is None:
        return ''

    groups = _group_by_feeding_match(potential, matches)

    if len(potential.possible_participants) == 2:
        ordered = [p for group in groups for p in group]
        if len(ordered) != 2:
            ordered = potential.sorted_participants()
        return f"{get_name(ordered[0])} vs {get_name(ordered[1])}"

    labels = ['/'.join(get_name(p) for p in group) for group in groups]
    return ' vs '.join(labels)
