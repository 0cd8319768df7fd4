# Command-line viewer for a single elimination bracket snapshot

import argparse
import json
import logging
import sys
import yaml
from core.bracket_view import build_bracket_view
from core.models import Match, Participant
from core.text_render import render_bracket_text


def load_matches(file_path):
    with open(file_path, mode='r', encoding='utf-8') as file:
        rows = yaml.safe_load(file) or []
    return [Match.from_dict(row) for row in rows]


def load_participants(file_path):
    with open(file_path, mode='r', encoding='utf-8') as file:
        rows = yaml.safe_load(file) or []
    return [Participant.from_dict(row) for row in rows]


def participant_id(value):
    """Numeric ids as int, anything else kept as the raw string."""
    try:
        return int(value)
    except ValueError:
        return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Display a single elimination bracket.')
    parser.add_argument('matches', help='YAML file with the list of matches')
    parser.add_argument('participants', help='YAML file with the list of participants')
    parser.add_argument('--selected', type=participant_id, default=None, help='Participant id to highlight')
    parser.add_argument('--json', action='store_true', help='Print the full bracket view as JSON')
    return parser.parse_args(argv)


def main(argv=None):
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')
    args = parse_args(argv)

    matches = load_matches(args.matches)
    participants = load_participants(args.participants)

    if not participants:
        print("No participants loaded. Check the participants file.", file=sys.stderr)
        return 1

    view = build_bracket_view(matches, participants, args.selected)
    if args.json:
        print(json.dumps(view, indent=2))
    else:
        print(render_bracket_text(view))
    return 0


if __name__ == '__main__':
    sys.exit(main())
