"""
Line geometry joining each pair of slots to the slot they feed.
"""
from typing import Dict, List, Optional, Sequence

from core.layout import BracketLayout
from core.models import Match, PotentialMatch, Segment
from core.selection import match_is_highlighted, placeholder_is_highlighted

CONNECTOR_STUB_WIDTH = 12


class Connector:
    def __init__(self, round_number: int, index: int, child_stubs: List[Segment], vertical: Segment,
                 parent_stub: Segment, highlighted: bool = False):
        self.round_number = round_number  # Round of the two children
        self.index = index  # Slot index of the parent in round_number + 1
        self.child_stubs = child_stubs
        self.vertical = vertical
        self.parent_stub = parent_stub
        self.highlighted = highlighted

    @property
    def segments(self) -> List[Segment]:
        return self.child_stubs + [self.vertical, self.parent_stub]

    def to_dict(self) -> Dict:
        return {
            'round_number': self.round_number,
            'index': self.index,
            'highlighted': self.highlighted,
            'segments': [s.to_dict() for s in self.segments],
        }

    def __repr__(self):
        return f"Connector(round={self.round_number}, index={self.index}, highlighted={self.highlighted})"


def build_connectors(round_number: int, total_rounds: int, layout: BracketLayout,
                     round_matches: Sequence[Optional[Match]] = (),
                     potential_matches: Optional[Dict[str, PotentialMatch]] = None,
                     selected_participant_id=None) -> List[Connector]:
    """
    Connectors from round_number into round_number + 1.

    round_matches holds the round's matches in slot order (None for empty
    slots); it only affects highlighting. The final round has no connectors.
    """
    if round_number < 1:
        raise ValueError(f"Round number must be positive, got {round_number}")
    if round_number >= total_rounds:
        return []
    potential_matches = potential_matches or {}

    right_edge = layout.round_right(round_number)
    stub_start = right_edge - CONNECTOR_STUB_WIDTH
    parent_left = layout.round_left(round_number + 1)

    connectors = []
    for index in range(layout.matches_in_round(round_number + 1)):
        child1 = index * 2
        child2 = index * 2 + 1
        y1 = layout.center_y(round_number, child1)
        y2 = layout.center_y(round_number, child2)
        parent_y = layout.center_y(round_number + 1, index)

        match1 = round_matches[child1] if child1 < len(round_matches) else None
        match2 = round_matches[child2] if child2 < len(round_matches) else None
        highlighted = (
            match_is_highlighted(match1, selected_participant_id)
            or match_is_highlighted(match2, selected_participant_id)
            or placeholder_is_highlighted(potential_matches, round_number + 1, index, selected_participant_id)
        )

        connectors.append(Connector(
            round_number,
            index,
            child_stubs=[
                Segment(stub_start, y1, right_edge, y1),
                Segment(stub_start, y2, right_edge, y2),
            ],
            vertical=Segment(right_edge, min(y1, y2), right_edge, max(y1, y2)),
            parent_stub=Segment(parent_left, parent_y, parent_left + CONNECTOR_STUB_WIDTH, parent_y),
            highlighted=highlighted,
        ))

    return connectors


def build_all_connectors(layout: BracketLayout, slots: Dict[int, Sequence[Optional[Match]]],
                         potential_matches: Optional[Dict[str, PotentialMatch]] = None,
                         selected_participant_id=None) -> Dict[int, List[Connector]]:
    return {
        round_number: build_connectors(round_number, layout.total_rounds, layout,
                                       slots.get(round_number, ()), potential_matches,
                                       selected_participant_id)
        for round_number in range(1, layout.total_rounds)
    }
