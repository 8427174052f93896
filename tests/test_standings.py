"""
Unit tests for the pure leaderboard projection
"""

from spread_pickem.utils.standings import (
    PickRow,
    build_standings,
    calculate_win_percentage,
    summarize_points,
)


def rows_for(participant_id, username, points_list):
    return [PickRow(participant_id, username, points) for points in points_list]


class TestWinPercentage:
    def test_zero_picks_is_zero(self):
        assert calculate_win_percentage(0, 0) == 0.0

    def test_rounded_to_two_decimals(self):
        assert calculate_win_percentage(2, 3) == 66.67
        assert calculate_win_percentage(4, 4) == 100.0


class TestSummarizePoints:
    def test_pending_picks_count_toward_total(self):
        summary = summarize_points([1.0, 0.5, 0.0, None])

        assert summary == {
            "total_picks": 4,
            "correct_picks": 1,
            "ties": 1,
            "total_points": 1.5,
            "win_percentage": 25.0,
        }

    def test_points_match_wins_and_pushes(self):
        summary = summarize_points([1.0, 1.0, 0.5, 0.5, 0.5, 0.0])

        assert summary["total_points"] == summary["correct_picks"] + 0.5 * summary["ties"]

    def test_empty(self):
        summary = summarize_points([])

        assert summary["total_picks"] == 0
        assert summary["win_percentage"] == 0.0


class TestBuildStandings:
    def test_ranks_by_total_points(self):
        rows = (
            rows_for(1, "alice", [1.0, 0.0])
            + rows_for(2, "bob", [1.0, 1.0])
            + rows_for(3, "carol", [0.0, 0.0])
        )

        standings = build_standings(rows)

        assert [entry["username"] for entry in standings] == ["bob", "alice", "carol"]
        assert [entry["rank"] for entry in standings] == [1, 2, 3]

    def test_equal_totals_break_on_correct_picks(self):
        """8.5 points each: more outright wins ranks first."""
        rows = rows_for(1, "pusher", [1.0] * 7 + [0.5] * 3) + rows_for(
            2, "winner", [1.0] * 8 + [0.5] + [0.0]
        )

        standings = build_standings(rows)

        assert [entry["total_points"] for entry in standings] == [8.5, 8.5]
        assert [entry["username"] for entry in standings] == ["winner", "pusher"]

    def test_equal_totals_and_wins_break_on_fewer_picks(self):
        rows = rows_for(1, "busy", [1.0, 0.0, 0.0]) + rows_for(2, "lean", [1.0, 0.0])

        standings = build_standings(rows)

        assert [entry["username"] for entry in standings] == ["lean", "busy"]

    def test_full_tie_breaks_on_username_then_id(self):
        rows = (
            rows_for(7, "Zed", [1.0])
            + rows_for(3, "amy", [1.0])
            + rows_for(5, "amy", [1.0])
        )

        standings = build_standings(rows)

        assert [(e["username"], e["participant_id"]) for e in standings] == [
            ("amy", 3),
            ("amy", 5),
            ("Zed", 7),
        ]

    def test_ranking_stable_across_input_orders(self):
        rows = rows_for(1, "a", [1.0] * 8 + [0.5]) + rows_for(2, "b", [1.0] * 8 + [0.5])

        first = build_standings(rows)
        second = build_standings(list(reversed(rows)))

        assert first == second

    def test_no_rows(self):
        assert build_standings([]) == []
