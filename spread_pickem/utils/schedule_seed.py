"""
Schedule seeding for Spread Pick'em

Loads a schedule file (a JSON list of games) and upserts each game. The
modified spread is computed here, once, and stored on the game.
"""

import json
import logging
import os

from spread_pickem import db
from spread_pickem.models import Game
from spread_pickem.utils.errors import ValidationError

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
DEFAULT_SCHEDULE_FILE = os.path.join(DATA_DIR, "preseason_2025_week1.json")

REQUIRED_FIELDS = (
    "id",
    "season",
    "week_type",
    "week",
    "home_team",
    "away_team",
    "original_spread",
    "game_time",
)


def load_schedule(path=None):
    """Read and sanity-check a schedule file"""
    path = path or DEFAULT_SCHEDULE_FILE

    with open(path, encoding="utf-8") as f:
        games = json.load(f)

    if not isinstance(games, list):
        raise ValidationError(f"Schedule file {path} must contain a list of games")

    for index, game in enumerate(games):
        if not isinstance(game, dict):
            raise ValidationError(f"Game at position {index} in {path} must be an object")
        missing = [field for field in REQUIRED_FIELDS if game.get(field) is None]
        if missing:
            raise ValidationError(
                f"Game at position {index} in {path} is missing: {', '.join(missing)}"
            )

    return games


def seed_games(path=None):
    """
    Upsert every game in a schedule file.

    Games that already exist are left as they are.

    Returns:
        dict with created and existing counts
    """
    schedule = load_schedule(path)
    created = 0
    existing = 0

    try:
        for data in schedule:
            _, was_created = Game.upsert(data)
            if was_created:
                created += 1
            else:
                existing += 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        f"Seeded schedule from {path or DEFAULT_SCHEDULE_FILE}: "
        f"{created} created, {existing} already present"
    )
    return {"created": created, "existing": existing, "total": len(schedule)}
