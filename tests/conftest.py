"""
Shared pytest fixtures for bracket viewer tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from core.models import Match, Participant


@pytest.fixture
def eight_participants():
    """Eight named participants with ids 1..8."""
    names = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank", "Grace", "Heidi"]
    return [Participant(id=i + 1, name=name) for i, name in enumerate(names)]


@pytest.fixture
def sixteen_participants():
    return [Participant(id=i, name=f"Player {i}") for i in range(1, 17)]


@pytest.fixture
def first_round_of_eight():
    """Round 1 of an 8 player bracket: two decided, two still open."""
    return [
        Match(id=1, round_number=1, participant_a=1, participant_b=2, winner_id=1, loser_id=2, score_a=3, score_b=1),
        Match(id=2, round_number=1, participant_a=3, participant_b=4),
        Match(id=3, round_number=1, participant_a=5, participant_b=6, winner_id=6, loser_id=5, score_a=0, score_b=2),
        Match(id=4, round_number=1, participant_a=7, participant_b=8),
    ]


@pytest.fixture
def sixteen_first_round_played():
    """16 player bracket with round 1 fully played; lower ids always win."""
    matches = []
    for i in range(8):
        a, b = i * 2 + 1, i * 2 + 2
        matches.append(Match(id=100 + i, round_number=1, participant_a=a, participant_b=b,
                             winner_id=a, loser_id=b, score_a=2, score_b=0))
    return matches


@pytest.fixture
def client():
    """Create a Flask test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at a temporary data directory holding one tournament called 'cup'."""
    import app as app_module

    tournament_dir = tmp_path / "tournaments" / "cup"
    tournament_dir.mkdir(parents=True)

    participants = [{'id': i, 'username': name} for i, name in
                    enumerate(["Alice", "Bob", "Carol", "Dave"], start=1)]
    matches = [
        {'id': 10, 'roundNumber': 1, 'userId1': 1, 'userId2': 2, 'goalsUser1': 2, 'goalsUser2': 1,
         'winnerId': 1, 'loserId': 2},
        {'id': 11, 'roundNumber': 1, 'userId1': 3, 'userId2': 4, 'goalsUser1': None, 'goalsUser2': None,
         'winnerId': None, 'loserId': None},
    ]
    (tournament_dir / "participants.yaml").write_text(yaml.dump(participants, default_flow_style=False))
    (tournament_dir / "matches.yaml").write_text(yaml.dump(matches, default_flow_style=False))

    monkeypatch.setattr(app_module, 'DATA_DIR', str(tmp_path))
    return tmp_path
