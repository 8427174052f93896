"""
Tests for loading the bundled schedule
"""

import json
from datetime import datetime

import pytest

from spread_pickem.models import Game
from spread_pickem.utils.errors import ValidationError
from spread_pickem.utils.schedule_seed import load_schedule, seed_games


class TestSeedGames:
    def test_bundled_schedule(self, db):
        result = seed_games()

        assert result == {"created": 16, "existing": 0, "total": 16}
        assert Game.query.count() == 16

        game = db.session.get(Game, "game-1")
        assert game.matchup == "Indianapolis Colts @ Baltimore Ravens"
        assert game.original_spread == 4.0
        assert game.modified_spread == -2.0
        assert game.is_complete is False
        # 20:00 EDT stored as naive UTC
        assert game.game_time == datetime(2025, 8, 8, 0, 0)

    def test_modified_spread_for_every_game(self, db):
        seed_games()

        for game in Game.get_all_games():
            assert game.modified_spread == game.original_spread - 6

    def test_reseed_leaves_existing_games_alone(self, db):
        seed_games()
        game = db.session.get(Game, "game-2")
        game.update_score(17, 20)
        db.session.commit()

        result = seed_games()

        assert result["created"] == 0
        assert result["existing"] == 16
        game = db.session.get(Game, "game-2")
        assert game.is_complete
        assert (game.home_score, game.away_score) == (17, 20)

    def test_custom_file(self, db, tmp_path, sample_schedule_item):
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps([sample_schedule_item]))

        result = seed_games(str(path))

        assert result["created"] == 1
        game = db.session.get(Game, "game-99")
        assert game.modified_spread == -9.5
        assert game.game_time == datetime(2025, 8, 9, 23, 0)


class TestLoadSchedule:
    def test_missing_fields(self, tmp_path, sample_schedule_item):
        del sample_schedule_item["original_spread"]
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps([sample_schedule_item]))

        with pytest.raises(ValidationError, match="original_spread"):
            load_schedule(str(path))

    def test_not_a_list(self, tmp_path, sample_schedule_item):
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps(sample_schedule_item))

        with pytest.raises(ValidationError):
            load_schedule(str(path))

    def test_entries_must_be_objects(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text(json.dumps(["game-1", "game-2"]))

        with pytest.raises(ValidationError, match="position 0"):
            load_schedule(str(path))
