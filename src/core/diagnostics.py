"""
Non-fatal data irregularities found while building a bracket.

The engine renders a best-effort bracket for any snapshot, so problems in
the match data are collected as warnings instead of being raised.
"""
from typing import Dict, Optional

MISSING_DATA = 'missing_data'
IRREGULAR_BRACKET = 'irregular_bracket'
OUT_OF_RANGE_ROUND = 'out_of_range_round'
DEGENERATE_BRACKET = 'degenerate_bracket'
SLOT_ORDER_DIVERGENCE = 'slot_order_divergence'

WARNING_KINDS = (
    MISSING_DATA,
    IRREGULAR_BRACKET,
    OUT_OF_RANGE_ROUND,
    DEGENERATE_BRACKET,
    SLOT_ORDER_DIVERGENCE,
)

# Expected states of a bracket in progress; logged quieter than real inconsistencies
INFORMATIONAL_KINDS = {MISSING_DATA, DEGENERATE_BRACKET}


class BracketWarning:
    def __init__(self, kind: str, message: str, round_number: Optional[int] = None, match_id=None):
        if kind not in WARNING_KINDS:
            raise ValueError(f"Unknown warning kind: {kind}")
        self.kind = kind
        self.message = message
        self.round_number = round_number
        self.match_id = match_id

    @property
    def is_informational(self) -> bool:
        return self.kind in INFORMATIONAL_KINDS

    def to_dict(self) -> Dict:
        return {
            'kind': self.kind,
            'message': self.message,
            'round_number': self.round_number,
            'match_id': self.match_id,
        }

    def __repr__(self):
        return f"BracketWarning(kind={self.kind}, message={self.message})"
