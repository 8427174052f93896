"""
Pytest fixtures and configuration for all tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from spread_pickem import create_app, db as _db
from spread_pickem.models import Game, Participant
from spread_pickem.utils.scoring import calculate_modified_spread

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


def utc_now_naive():
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture
def app():
    """Application with a fresh in-memory database for each test."""
    app = create_app("testing")

    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return dict(ADMIN_HEADERS)


@pytest.fixture
def make_participant(db):
    """Create and commit a participant."""

    def _make_participant(username):
        participant = Participant(username=username, display_name=username)
        db.session.add(participant)
        db.session.commit()
        return participant

    return _make_participant


@pytest.fixture
def make_game(db):
    """
    Create and commit a game.

    Kickoff is minutes_from_now relative to the current time, so a
    negative value gives a game that has already started.
    """
    counter = {"n": 0}

    def _make_game(
        game_id=None,
        home_team="Home",
        away_team="Away",
        original_spread=0.0,
        modified_spread=None,
        minutes_from_now=60,
        season=2025,
        week_type="preseason",
        week=1,
    ):
        counter["n"] += 1
        game = Game(
            id=game_id or f"game-{counter['n']}",
            season=season,
            week_type=week_type,
            week=week,
            home_team=home_team,
            away_team=away_team,
            original_spread=original_spread,
            modified_spread=(
                modified_spread
                if modified_spread is not None
                else calculate_modified_spread(original_spread)
            ),
            game_time=utc_now_naive() + timedelta(minutes=minutes_from_now),
            is_complete=False,
        )
        db.session.add(game)
        db.session.commit()
        return game

    return _make_game


@pytest.fixture
def sample_schedule_item():
    """One game in the bundled schedule format."""
    return {
        "id": "game-99",
        "season": 2025,
        "week_type": "preseason",
        "week": 1,
        "home_team": "Pittsburgh Steelers",
        "away_team": "Jacksonville Jaguars",
        "original_spread": -3.5,
        "over_under": 35.5,
        "game_time": "2025-08-09T19:00:00-04:00",
    }
