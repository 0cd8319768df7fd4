"""
Single focused participant used to emphasize matches, placeholders and connectors.
"""
from typing import Dict, Optional

from core.models import Match, PotentialMatch
from core.projection import is_potential_match_for


class SelectionState:
    """Either nothing selected or exactly one participant; picking the same id again clears it."""

    def __init__(self, selected_participant_id=None):
        self._selected = selected_participant_id

    @property
    def selected_participant_id(self):
        return self._selected

    @property
    def is_active(self) -> bool:
        return self._selected is not None

    def select(self, participant_id) -> 'SelectionState':
        if participant_id is None or participant_id == self._selected:
            return SelectionState()
        return SelectionState(participant_id)

    def is_selected(self, participant_id) -> bool:
        return self.is_active and participant_id == self._selected

    def __eq__(self, other):
        if not isinstance(other, SelectionState):
            return NotImplemented
        return self._selected == other._selected

    def __hash__(self):
        return hash(self._selected)

    def __repr__(self):
        if not self.is_active:
            return "SelectionState(unselected)"
        return f"SelectionState(selected={self._selected})"


def match_is_highlighted(match: Optional[Match], selected_participant_id) -> bool:
    if match is None or selected_participant_id is None:
        return False
    return match.has_participant(selected_participant_id)


def placeholder_is_highlighted(potential_matches: Dict[str, PotentialMatch], round_number: int,
                               index: int, selected_participant_id) -> bool:
    return is_potential_match_for(potential_matches, round_number, index, selected_participant_id)
