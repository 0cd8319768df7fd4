"""
Round arithmetic and grouping of recorded matches into bracket rounds.
"""
from typing import Dict, Iterable, List, Optional

from core.models import Match

# Names counted backwards from the final: offset 0 is the final itself
ROUND_NAMES_FROM_FINAL = {
    0: "Final",
    1: "Semifinal",
    2: "Quarterfinal",
    3: "Round of 16",
    4: "Round of 32",
    5: "Round of 64",
}


def calculate_total_rounds(participant_count: int) -> int:
    """Number of rounds needed for a single elimination bracket of this size."""
    if participant_count < 0:
        raise ValueError(f"Participant count must be non-negative, got {participant_count}")
    if participant_count < 2:
        return 0
    # ceil(log2(n)) without floating point rounding
    return (participant_count - 1).bit_length()


def calculate_bracket_size(participant_count: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    total_rounds = calculate_total_rounds(participant_count)
    if total_rounds == 0:
        return 0
    return 2 ** total_rounds


def calculate_byes(participant_count: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(participant_count)
    if bracket_size == 0:
        return 0
    return bracket_size - participant_count


def _check_round(round_number: int, total_rounds: int):
    if round_number < 1 or round_number > total_rounds:
        raise ValueError(f"Round {round_number} is outside bracket of {total_rounds} rounds")


def get_round_name(round_number: int, total_rounds: int) -> str:
    """Get the display name of a round, e.g. "Final" for the last one."""
    _check_round(round_number, total_rounds)
    return ROUND_NAMES_FROM_FINAL.get(total_rounds - round_number, f"Round {round_number}")


def get_round_names(total_rounds: int) -> List[str]:
    return [get_round_name(r, total_rounds) for r in range(1, total_rounds + 1)]


def expected_match_count(round_number: int, total_rounds: int) -> int:
    """Slots in a round of a full bracket: 2^(total_rounds - round_number)."""
    _check_round(round_number, total_rounds)
    return 2 ** (total_rounds - round_number)


def group_matches_by_round(matches: Iterable[Match], total_rounds: int) -> Dict[int, List[Match]]:
    """
    Bucket matches by round number, each bucket ordered by match id.

    Every round 1..total_rounds is present even if nothing has been recorded
    for it yet. Matches whose round falls outside the bracket are dropped;
    use find_out_of_range_matches() to report them.
    """
    grouped = {round_number: [] for round_number in range(1, total_rounds + 1)}
    for match in matches:
        if match.round_number in grouped:
            grouped[match.round_number].append(match)

    for round_matches in grouped.values():
        round_matches.sort(key=lambda m: m.id)

    return grouped


def find_out_of_range_matches(matches: Iterable[Match], total_rounds: int) -> List[Match]:
    return sorted(
        (m for m in matches if m.round_number < 1 or m.round_number > total_rounds),
        key=lambda m: m.id
    )


def find_slot_index_divergence(grouped: Dict[int, List[Match]]) -> List[Match]:
    """
    Matches whose explicit slot_index disagrees with their position by id.

    The id ordering still decides placement; this only reports the conflict.
    """
    divergent = []
    for round_number in sorted(grouped):
        for position, match in enumerate(grouped[round_number]):
            if match.slot_index is not None and match.slot_index != position:
                divergent.append(match)
    return divergent


def build_round_slots(grouped: Dict[int, List[Match]], total_rounds: int) -> Dict[int, List[Optional[Match]]]:
    """
    Bind recorded matches to slots; unbound slots are None (placeholders).

    Matches beyond a round's expected count have no slot and are left out.
    """
    slots = {}
    for round_number in range(1, total_rounds + 1):
        expected = expected_match_count(round_number, total_rounds)
        round_matches = grouped.get(round_number, [])[:expected]
        slots[round_number] = list(round_matches) + [None] * (expected - len(round_matches))
    return slots
