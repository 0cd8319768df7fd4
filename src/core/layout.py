"""
Vertical placement of bracket slots.

All sizes are abstract units; the renderer decides what a unit is. Every
round is laid out against the height of round 1, so a slot's pitch doubles
each round. Parents sit centered between their expected children, not
between whichever child matches actually exist.
"""
from typing import Dict, List


class DensityTier:
    def __init__(self, max_participants, cell_height: int, round_width: int, row_gap: int):
        self.max_participants = max_participants  # None means unbounded
        self.cell_height = cell_height
        self.round_width = round_width
        self.row_gap = row_gap

    def as_tuple(self):
        return (self.cell_height, self.round_width, self.row_gap)

    def __repr__(self):
        return (f"DensityTier(max_participants={self.max_participants}, cell_height={self.cell_height}, "
                f"round_width={self.round_width}, row_gap={self.row_gap})")


# Boundary inclusive: a tier applies while participant_count <= max_participants
DENSITY_TIERS: List[DensityTier] = [
    DensityTier(32, cell_height=80, round_width=240, row_gap=20),
    DensityTier(128, cell_height=64, round_width=200, row_gap=12),
    DensityTier(512, cell_height=48, round_width=160, row_gap=8),
    DensityTier(None, cell_height=32, round_width=120, row_gap=4),
]


def select_density_tier(participant_count: int) -> DensityTier:
    """Pick the cell size and spacing for a bracket of this many participants."""
    if participant_count < 0:
        raise ValueError(f"Participant count must be non-negative, got {participant_count}")
    for tier in DENSITY_TIERS:
        if tier.max_participants is None or participant_count <= tier.max_participants:
            return tier
    return DENSITY_TIERS[-1]


class BracketLayout:
    def __init__(self, total_rounds: int, participant_count: int):
        if total_rounds < 0:
            raise ValueError(f"Total rounds must be non-negative, got {total_rounds}")
        tier = select_density_tier(participant_count)
        self.total_rounds = total_rounds
        self.participant_count = participant_count
        self.cell_height = tier.cell_height
        self.round_width = tier.round_width
        self.row_gap = tier.row_gap

    def _check_round(self, round_number: int):
        if round_number < 1 or round_number > self.total_rounds:
            raise ValueError(f"Round {round_number} is outside bracket of {self.total_rounds} rounds")

    def matches_in_round(self, round_number: int) -> int:
        self._check_round(round_number)
        return 2 ** (self.total_rounds - round_number)

    def round_height(self, round_number: int) -> int:
        """Stacked height of a round; round 1 uses a double gap to separate its pairs."""
        matches = self.matches_in_round(round_number)
        gap = self.row_gap * 2 if round_number == 1 else self.row_gap
        return matches * self.cell_height + (matches - 1) * gap

    def height_per_match(self, round_number: int) -> float:
        return self.round_height(1) / self.matches_in_round(round_number)

    def top_position(self, round_number: int, index: int) -> float:
        """Offset of a slot's top edge, centered inside its share of round 1's height."""
        matches = self.matches_in_round(round_number)
        if index < 0 or index >= matches:
            raise ValueError(f"Slot {index} is outside round {round_number} ({matches} slots)")
        height_per_match = self.height_per_match(round_number)
        return index * height_per_match + (height_per_match - self.cell_height) / 2

    def center_y(self, round_number: int, index: int) -> float:
        return self.top_position(round_number, index) + self.cell_height / 2

    def round_left(self, round_number: int) -> int:
        self._check_round(round_number)
        return (round_number - 1) * self.round_width

    def round_right(self, round_number: int) -> int:
        return self.round_left(round_number) + self.round_width

    def canvas_height(self) -> int:
        if self.total_rounds == 0:
            return 0
        return self.round_height(1)

    def canvas_width(self) -> int:
        return self.total_rounds * self.round_width

    def to_dict(self) -> Dict:
        return {
            'total_rounds': self.total_rounds,
            'participant_count': self.participant_count,
            'cell_height': self.cell_height,
            'round_width': self.round_width,
            'row_gap': self.row_gap,
            'canvas_height': self.canvas_height(),
            'canvas_width': self.canvas_width(),
            'rounds': [
                {
                    'round_number': r,
                    'left': self.round_left(r),
                    'height': self.round_height(r),
                    'height_per_match': self.height_per_match(r),
                    'tops': [self.top_position(r, i) for i in range(self.matches_in_round(r))],
                }
                for r in range(1, self.total_rounds + 1)
            ],
        }

    def __repr__(self):
        return (f"BracketLayout(total_rounds={self.total_rounds}, cell_height={self.cell_height}, "
                f"round_width={self.round_width}, row_gap={self.row_gap})")


def calculate_layout(total_rounds: int, participant_count: int) -> BracketLayout:
    return BracketLayout(total_rounds, participant_count)
