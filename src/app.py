"""
Flask web application serving single elimination bracket views.

Match and participant snapshots are pushed by the match service and stored
as YAML per tournament; every request recomputes the bracket from them.
"""
import os
import re
import yaml
from filelock import FileLock
from flask import Flask, jsonify, request
from core.bracket_view import build_bracket_view
from core.layout import calculate_layout
from core.models import Match, Participant
from core.projection import calculate_potential_matches
from core.rounds import calculate_total_rounds
from core.selection import SelectionState

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
LOCK_TIMEOUT_SECONDS = 10

MATCHES_FILENAME = 'matches.yaml'
PARTICIPANTS_FILENAME = 'participants.yaml'
DISPLAY_SETTINGS_FILENAME = 'display_settings.yaml'

_TOURNAMENT_ID_RE = re.compile(r'^[A-Za-z0-9_-]+$')


def _data_lock() -> FileLock:
    """Lock guarding snapshot reads and writes across worker processes."""
    os.makedirs(DATA_DIR, exist_ok=True)
    return FileLock(os.path.join(DATA_DIR, '.lock'), timeout=LOCK_TIMEOUT_SECONDS)


def _tournament_dir(tournament_id: str) -> str:
    return os.path.join(DATA_DIR, 'tournaments', tournament_id)


def _file_path(tournament_id: str, filename: str) -> str:
    return os.path.join(_tournament_dir(tournament_id), filename)


def tournament_exists(tournament_id: str) -> bool:
    return bool(_TOURNAMENT_ID_RE.match(tournament_id)) and os.path.isdir(_tournament_dir(tournament_id))


def _load_yaml_list(path: str) -> list:
    if not os.path.exists(path):
        return []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {path}: {e}')
        return []
    if not data:
        return []
    if not isinstance(data, list):
        app.logger.warning(f'Expected a list in {path}, got {type(data).__name__}')
        return []
    return data


def _parse_rows(rows: list, factory, path: str) -> list:
    """Build objects from YAML rows, skipping rows that are not usable records."""
    items = []
    for row in rows:
        if not isinstance(row, dict):
            app.logger.warning(f'Skipping non-mapping row in {path}: {row!r}')
            continue
        try:
            items.append(factory(row))
        except (KeyError, TypeError, ValueError) as e:
            app.logger.warning(f'Skipping malformed row in {path}: {e!r}')
    return items


def load_matches(tournament_id: str) -> list:
    """Load the match snapshot for a tournament."""
    path = _file_path(tournament_id, MATCHES_FILENAME)
    with _data_lock():
        rows = _load_yaml_list(path)
    return _parse_rows(rows, Match.from_dict, path)


def load_participants(tournament_id: str) -> list:
    """Load the participant roster for a tournament."""
    path = _file_path(tournament_id, PARTICIPANTS_FILENAME)
    with _data_lock():
        rows = _load_yaml_list(path)
    return _parse_rows(rows, Participant.from_dict, path)


def load_display_settings(tournament_id: str) -> dict:
    """Load display settings from YAML file, merged over defaults."""
    defaults = {
        'title': 'Playoffs',
        'subtitle': '',
        'labels': {},
    }
    path = _file_path(tournament_id, DISPLAY_SETTINGS_FILENAME)
    if not os.path.exists(path):
        return defaults
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            app.logger.warning(f'Failed to parse {path}: {e}')
            return defaults
    if not data:
        return defaults
    if not isinstance(data, dict):
        app.logger.warning(f'Expected a mapping in {path}, got {type(data).__name__}')
        return defaults
    settings = {**defaults, **data}
    settings['labels'] = settings['labels'] or {}
    if not isinstance(settings['labels'], dict):
        app.logger.warning(f'Ignoring labels in {path}: expected a mapping')
        settings['labels'] = {}
    return settings


def save_snapshot(tournament_id: str, matches: list, participants: list):
    """Replace the stored snapshot with a complete new one."""
    tournament_dir = _tournament_dir(tournament_id)
    with _data_lock():
        os.makedirs(tournament_dir, exist_ok=True)
        with open(_file_path(tournament_id, MATCHES_FILENAME), 'w', encoding='utf-8') as f:
            yaml.dump([m.to_dict() for m in matches], f, default_flow_style=False)
        with open(_file_path(tournament_id, PARTICIPANTS_FILENAME), 'w', encoding='utf-8') as f:
            yaml.dump([p.to_dict() for p in participants], f, default_flow_style=False)
    app.logger.info(f'Stored snapshot for {tournament_id}: {len(matches)} matches, {len(participants)} participants')


def _parse_participant_id(value):
    """Query string ids are numeric for the match service; fall back to the raw string."""
    if value is None or value == '':
        return None
    try:
        return int(value)
    except ValueError:
        return value


def _not_found(tournament_id: str):
    return jsonify({'success': False, 'error': f'Tournament {tournament_id} not found'}), 404


@app.errorhandler(ValueError)
def handle_value_error(e):
    app.logger.warning(f'Rejected request {request.path}: {e}')
    return jsonify({'success': False, 'error': str(e)}), 400


@app.route('/api/tournaments/<tournament_id>/bracket')
def api_bracket(tournament_id):
    """Full bracket view, optionally emphasizing one participant."""
    if not tournament_exists(tournament_id):
        return _not_found(tournament_id)

    matches = load_matches(tournament_id)
    participants = load_participants(tournament_id)
    settings = load_display_settings(tournament_id)
    selected = _parse_participant_id(request.args.get('selected'))

    view = build_bracket_view(matches, participants, selected, labels=settings.get('labels'))
    view['title'] = settings['title']
    view['subtitle'] = settings['subtitle']
    return jsonify({'success': True, 'bracket': view})


@app.route('/api/tournaments/<tournament_id>/potential-matches')
def api_potential_matches(tournament_id):
    if not tournament_exists(tournament_id):
        return _not_found(tournament_id)

    matches = load_matches(tournament_id)
    total_rounds = calculate_total_rounds(len(load_participants(tournament_id)))
    potential_matches = calculate_potential_matches(matches, total_rounds)
    return jsonify({
        'success': True,
        'potential_matches': {
            key: potential_matches[key].to_dict()
            for key in sorted(potential_matches, key=lambda k: tuple(int(p) for p in k.split('-')))
        },
    })


@app.route('/api/tournaments/<tournament_id>/layout')
def api_layout(tournament_id):
    if not tournament_exists(tournament_id):
        return _not_found(tournament_id)

    participant_count = len(load_participants(tournament_id))
    layout = calculate_layout(calculate_total_rounds(participant_count), participant_count)
    return jsonify({'success': True, 'layout': layout.to_dict()})


@app.route('/api/tournaments/<tournament_id>/selection')
def api_selection(tournament_id):
    """Toggle the focused participant; the client keeps the state between calls."""
    if not tournament_exists(tournament_id):
        return _not_found(tournament_id)

    current = SelectionState(_parse_participant_id(request.args.get('current')))
    updated = current.select(_parse_participant_id(request.args.get('pick')))
    return jsonify({'success': True, 'selected_participant_id': updated.selected_participant_id})


@app.route('/api/tournaments/<tournament_id>/snapshot', methods=['PUT'])
def api_store_snapshot(tournament_id):
    """Store a complete match/participant snapshot from the match service."""
    if not _TOURNAMENT_ID_RE.match(tournament_id):
        return jsonify({'success': False, 'error': 'Invalid tournament id'}), 400

    data = request.get_json(silent=True)
    if not data:
        return jsonify({'success': False, 'error': 'No data provided'}), 400
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Snapshot must be a JSON object'}), 400

    raw_matches = data.get('matches', [])
    raw_participants = data.get('participants', [])
    if not isinstance(raw_matches, list) or not isinstance(raw_participants, list):
        return jsonify({'success': False, 'error': 'matches and participants must be lists'}), 400

    try:
        matches = [Match.from_dict(row) for row in raw_matches]
        participants = [Participant.from_dict(row) for row in raw_participants]
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({'success': False, 'error': f'Malformed snapshot: {e}'}), 400

    save_snapshot(tournament_id, matches, participants)
    return jsonify({'success': True, 'matches': len(matches), 'participants': len(participants)})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
