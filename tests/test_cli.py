"""
Tests for the management CLI
"""

import importlib

import pytest
from click.testing import CliRunner

from spread_pickem.models import Game, LeaderboardEntry, Participant, Pick


@pytest.fixture
def cli(app, monkeypatch):
    """manage.cli, run inside the test application's context"""
    monkeypatch.setenv("FLASK_CONFIG", "testing")
    manage = importlib.import_module("manage")
    return manage.cli


@pytest.fixture
def runner():
    return CliRunner()


class TestGamesCommands:
    def test_seed(self, cli, runner):
        result = runner.invoke(cli, ["games", "seed"])

        assert result.exit_code == 0
        assert "16 created, 0 already present" in result.output
        assert Game.query.count() == 16

        result = runner.invoke(cli, ["games", "seed"])
        assert "0 created, 16 already present" in result.output

    def test_list(self, cli, runner):
        runner.invoke(cli, ["games", "seed"])

        result = runner.invoke(cli, ["games", "list"])

        assert result.exit_code == 0
        assert "game-1: Indianapolis Colts @ Baltimore Ravens" in result.output
        assert "[spread +4 -> -2]" in result.output

    def test_score(self, cli, runner, db, make_game, make_participant):
        game = make_game(game_id="game-1", modified_spread=-2.0)
        participant = make_participant("zoe")
        db.session.add(Pick(participant_id=participant.id, game_id=game.id, picked_team="home"))
        db.session.commit()

        result = runner.invoke(cli, ["games", "score", "game-1", "20", "17"])

        assert result.exit_code == 0
        assert "1 picks graded" in result.output
        (entry,) = LeaderboardEntry.get_scope_leaderboard(2025, "preseason", 1)
        assert entry.total_points == 1.0

    def test_score_unknown_game(self, cli, runner):
        result = runner.invoke(cli, ["games", "score", "game-404", "1", "0"])

        assert "Game game-404 not found" in result.output

    def test_regrade(self, cli, runner, db, make_game, make_participant):
        game = make_game(game_id="game-1", modified_spread=-2.0)
        game.home_score, game.away_score, game.is_complete = 20, 17, True
        participant = make_participant("abe")
        pick = Pick(participant_id=participant.id, game_id=game.id, picked_team="away")
        db.session.add(pick)
        db.session.commit()
        assert pick.points is None

        result = runner.invoke(cli, ["games", "regrade"])

        assert result.exit_code == 0
        assert "Regraded 1 picks across 1 games" in result.output
        assert pick.points == 0.0


class TestOtherCommands:
    def test_participant_create_and_list(self, cli, runner):
        result = runner.invoke(cli, ["participant", "create", "bea"])
        assert "Created participant bea" in result.output

        result = runner.invoke(cli, ["participant", "create", "bea"])
        assert "already exists" in result.output
        assert Participant.query.count() == 1

        result = runner.invoke(cli, ["participant", "list"])
        assert "bea (0 picks)" in result.output

    def test_leaderboard_show(self, cli, runner, make_game):
        game = make_game(game_id="game-1")
        Pick.submit_picks(
            Participant.resolve_or_create("cal"),
            [{"game_id": game.id, "picked_team": "home"}],
        )

        runner.invoke(cli, ["leaderboard", "recompute"])
        result = runner.invoke(cli, ["leaderboard", "show"])

        assert result.exit_code == 0
        assert "1. cal" in result.output

    def test_status(self, cli, runner):
        runner.invoke(cli, ["games", "seed"])

        result = runner.invoke(cli, ["status"])

        assert "Database: Connected" in result.output
        assert "Games: 0/16 completed" in result.output

    def test_reset_can_be_cancelled(self, cli, runner, make_game):
        make_game()

        result = runner.invoke(cli, ["db-cmd", "reset"], input="n\n")

        assert "Cancelled." in result.output
        assert Game.query.count() == 1


class TestSeedErrors:
    def test_malformed_schedule_reports_error(self, cli, runner, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text('[1, 2, 3]')

        result = runner.invoke(cli, ["games", "seed", "--file", str(path)])

        assert result.exit_code == 0
        assert "Error seeding games" in result.output
        assert Game.query.count() == 0
