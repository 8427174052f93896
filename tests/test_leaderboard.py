"""
Tests for persisting and recomputing scope leaderboards
"""

from spread_pickem.models import LeaderboardEntry, Pick

SCOPE = (2025, "preseason", 1)


def add_pick(db, participant, game, picked_team):
    db.session.add(
        Pick(participant_id=participant.id, game_id=game.id, picked_team=picked_team)
    )
    db.session.commit()


def snapshot(entries):
    return [
        (
            e.participant_id,
            e.rank,
            e.total_picks,
            e.correct_picks,
            e.ties,
            e.total_points,
            e.win_percentage,
        )
        for e in entries
    ]


class TestRecomputeScope:
    def test_recompute_twice_converges(self, db, make_game, make_participant):
        games = [make_game(modified_spread=-2.0) for _ in range(3)]
        alice = make_participant("alice")
        bob = make_participant("bob")
        for game in games:
            add_pick(db, alice, game, "home")
            add_pick(db, bob, game, "away")
        games[0].update_score(20, 17)
        games[1].update_score(10, 20)
        db.session.commit()

        first = snapshot(LeaderboardEntry.recompute_scope(*SCOPE))
        db.session.commit()
        second = snapshot(LeaderboardEntry.recompute_scope(*SCOPE))
        db.session.commit()

        assert first == second
        assert LeaderboardEntry.query.count() == 2

    def test_entry_totals(self, db, make_game, make_participant):
        win = make_game(modified_spread=-2.0)
        push = make_game(original_spread=3.0)
        pending = make_game()
        carol = make_participant("carol")
        add_pick(db, carol, win, "home")
        add_pick(db, carol, push, "away")
        add_pick(db, carol, pending, "home")

        win.update_score(20, 17)
        push.update_score(24, 21)
        db.session.commit()

        (entry,) = LeaderboardEntry.get_scope_leaderboard(*SCOPE)
        assert entry.total_picks == 3
        assert entry.correct_picks == 1
        assert entry.ties == 1
        assert entry.total_points == 1.5
        assert entry.total_points == entry.correct_picks + 0.5 * entry.ties
        assert entry.win_percentage == 33.33
        assert entry.rank == 1

    def test_participant_without_picks_is_removed(self, db, make_game, make_participant):
        game = make_game()
        dave = make_participant("dave")
        add_pick(db, dave, game, "home")
        LeaderboardEntry.recompute_scope(*SCOPE)
        db.session.commit()
        assert LeaderboardEntry.query.count() == 1

        Pick.query.filter_by(participant_id=dave.id).delete()
        LeaderboardEntry.recompute_scope(*SCOPE)
        db.session.commit()

        assert LeaderboardEntry.query.count() == 0

    def test_scopes_are_independent(self, db, make_game, make_participant):
        week_one = make_game(modified_spread=-2.0)
        week_two = make_game(modified_spread=-2.0, week=2)
        erin = make_participant("erin")
        add_pick(db, erin, week_one, "home")
        add_pick(db, erin, week_two, "home")

        week_one.update_score(20, 17)
        db.session.commit()

        assert len(LeaderboardEntry.get_scope_leaderboard(2025, "preseason", 1)) == 1
        assert LeaderboardEntry.get_scope_leaderboard(2025, "preseason", 2) == []

    def test_equal_points_rank_consistently(self, db, make_game, make_participant):
        """Two participants on 1.5 points rank by outright wins, every time."""
        win_game = make_game(modified_spread=-2.0)
        push_games = [make_game(original_spread=3.0) for _ in range(3)]
        pusher = make_participant("pusher")
        winner = make_participant("winner")

        for game in push_games:
            add_pick(db, pusher, game, "home")
        add_pick(db, winner, win_game, "home")
        add_pick(db, winner, push_games[0], "away")

        win_game.update_score(20, 17)
        for game in push_games:
            game.update_score(24, 21)
        db.session.commit()

        for _ in range(3):
            entries = LeaderboardEntry.recompute_scope(*SCOPE)
            db.session.commit()
            assert [e.participant.username for e in entries] == ["winner", "pusher"]
            assert [e.total_points for e in entries] == [1.5, 1.5]
            assert [e.rank for e in entries] == [1, 2]
