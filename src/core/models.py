from typing import Dict, FrozenSet, Iterable, List, Optional


def _first_present(data: Dict, *keys):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Match:
    """A single bracket match as supplied by the match service. Never mutated by the engine."""

    def __init__(self, id, round_number, participant_a=None, participant_b=None,
                 winner_id=None, loser_id=None, score_a=None, score_b=None, slot_index=None):
        if round_number is None or round_number < 0:
            raise ValueError(f"Match {id}: round number must be non-negative, got {round_number}")
        if slot_index is not None and slot_index < 0:
            raise ValueError(f"Match {id}: slot index must be non-negative, got {slot_index}")
        self.id = id
        self.round_number = round_number
        self.participant_a = participant_a
        self.participant_b = participant_b
        self.winner_id = winner_id
        self.loser_id = loser_id
        self.score_a = score_a
        self.score_b = score_b
        self.slot_index = slot_index  # Optional explicit position; id order stays authoritative

    @classmethod
    def from_dict(cls, data: Dict) -> 'Match':
        """Build a match from either snake_case or the match service's camelCase keys."""
        match_id = data['id']
        if not _is_integer(match_id):
            raise ValueError(f"Match id must be an integer, got {match_id!r}")
        round_number = _first_present(data, 'round_number', 'roundNumber')
        if not _is_integer(round_number):
            raise ValueError(f"Match {match_id}: round number must be an integer, got {round_number!r}")
        return cls(
            id=match_id,
            round_number=round_number,
            participant_a=_first_present(data, 'participant_a', 'participantA', 'userId1'),
            participant_b=_first_present(data, 'participant_b', 'participantB', 'userId2'),
            winner_id=_first_present(data, 'winner_id', 'winnerId'),
            loser_id=_first_present(data, 'loser_id', 'loserId'),
            score_a=_first_present(data, 'score_a', 'scoreA', 'goalsUser1'),
            score_b=_first_present(data, 'score_b', 'scoreB', 'goalsUser2'),
            slot_index=_first_present(data, 'slot_index', 'slotIndex'),
        )

    @property
    def participants(self) -> List:
        """Participant ids that are actually present (byes skipped)."""
        return [p for p in (self.participant_a, self.participant_b) if p is not None]

    @property
    def is_decided(self) -> bool:
        return self.winner_id is not None

    def has_participant(self, participant_id) -> bool:
        if participant_id is None:
            return False
        return participant_id in self.participants

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'round_number': self.round_number,
            'participant_a': self.participant_a,
            'participant_b': self.participant_b,
            'winner_id': self.winner_id,
            'loser_id': self.loser_id,
            'score_a': self.score_a,
            'score_b': self.score_b,
            'slot_index': self.slot_index,
        }

    def __repr__(self):
        return (f"Match(id={self.id}, round={self.round_number}, "
                f"participants=({self.participant_a}, {self.participant_b}), winner={self.winner_id})")


class Participant:
    def __init__(self, id, name):
        self.id = id
        self.name = name

    @classmethod
    def from_dict(cls, data: Dict) -> 'Participant':
        return cls(id=data['id'], name=_first_present(data, 'name', 'username', 'displayName'))

    def to_dict(self) -> Dict:
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f"Participant(id={self.id}, name={self.name})"


class PotentialMatch:
    """Participants who could still occupy a future slot given current results."""

    def __init__(self, round_number: int, index: int, possible_participants: Iterable):
        self.round_number = round_number
        self.index = index
        self.possible_participants: FrozenSet = frozenset(possible_participants)

    @property
    def key(self) -> str:
        return f"{self.round_number}-{self.index}"

    def sorted_participants(self) -> List:
        return sorted(self.possible_participants, key=lambda p: (str(type(p)), p))

    def to_dict(self) -> Dict:
        return {
            'round_number': self.round_number,
            'index': self.index,
            'possible_participants': self.sorted_participants(),
        }

    def __eq__(self, other):
        if not isinstance(other, PotentialMatch):
            return NotImplemented
        return (self.round_number, self.index, self.possible_participants) == \
            (other.round_number, other.index, other.possible_participants)

    def __hash__(self):
        return hash((self.round_number, self.index, self.possible_participants))

    def __repr__(self):
        return f"PotentialMatch(key={self.key}, possible_participants={self.sorted_participants()})"


class Segment:
    def __init__(self, x1: float, y1: float, x2: float, y2: float):
        self.x1 = x1
        self.y1 = y1
        self.x2 = x2
        self.y2 = y2

    @property
    def orientation(self) -> str:
        return 'vertical' if self.x1 == self.x2 and self.y1 != self.y2 else 'horizontal'

    @property
    def length(self) -> float:
        return abs(self.x2 - self.x1) + abs(self.y2 - self.y1)

    def to_dict(self) -> Dict:
        return {'x1': self.x1, 'y1': self.y1, 'x2': self.x2, 'y2': self.y2, 'orientation': self.orientation}

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return (self.x1, self.y1, self.x2, self.y2) == (other.x1, other.y1, other.x2, other.y2)

    def __repr__(self):
        return f"Segment(({self.x1}, {self.y1}) -> ({self.x2}, {self.y2}))"


def participant_names(participants: Iterable[Participant]) -> Dict:
    """Lookup id -> display name."""
    return {p.id: p.name for p in participants}
