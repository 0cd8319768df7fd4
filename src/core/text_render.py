"""
Plain-text rendering of a bracket view, used by the command-line viewer.
"""
from typing import Dict, List


def _format_score(score) -> str:
    return '-' if score is None else str(score)


def _format_slot(slot: Dict) -> str:
    marker = '*' if slot.get('highlighted') else ' '
    if slot['kind'] == 'match':
        side1, side2 = slot['sides']
        parts = []
        for side in (side1, side2):
            name = side['name'] + (' (W)' if side['is_winner'] else '')
            parts.append(f"{name} {_format_score(side['score'])}")
        return f"{marker} M{slot['match_id']}: {parts[0]} vs {parts[1]}"
    return f"{marker} [{slot['label']}]"


def render_bracket_text(view: Dict) -> str:
    """Render the output of build_bracket_view() as indented text."""
    summary = view['summary']
    lines: List[str] = [
        f"Participants: {summary['participant_count']}, Rounds: {summary['total_rounds']}"
    ]

    if not view['rounds']:
        lines.append('No bracket to display.')
        return '\n'.join(lines)

    for round_data in view['rounds']:
        lines.append('')
        lines.append(f"# {round_data['name']}")
        for slot in round_data['slots']:
            lines.append(_format_slot(slot))

    if summary.get('champion'):
        lines.append('')
        lines.append(f"Champion: {summary['champion']['name']}")

    for warning in view.get('warnings', []):
        lines.append(f"Warning: {warning['message']}")

    return '\n'.join(lines)
