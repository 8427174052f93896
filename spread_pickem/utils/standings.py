"""
Leaderboard projection for a single scope (season, week type, week)

build_standings() is a pure function over the scope's picks. Persisting the
result is LeaderboardEntry.recompute_scope()'s job.
"""

from collections import namedtuple

from spread_pickem.utils.scoring import PUSH_POINTS, WIN_POINTS

# One pick in scope; points is None while the pick's game is incomplete
PickRow = namedtuple("PickRow", ["participant_id", "username", "points"])


def calculate_win_percentage(correct_picks, total_picks):
    """Correct picks over all picks in scope, as a percentage"""
    if not total_picks:
        return 0.0
    return round(correct_picks / total_picks * 100, 2)


def summarize_points(points_list):
    """
    Aggregate a participant's pick points.

    Every pick counts toward total_picks, graded or not; pending picks
    (None) contribute nothing else.
    """
    total_picks = 0
    correct_picks = 0
    ties = 0
    total_points = 0.0

    for points in points_list:
        total_picks += 1
        if points is None:
            continue
        if points == WIN_POINTS:
            correct_picks += 1
        elif points == PUSH_POINTS:
            ties += 1
        total_points += points

    return {
        "total_picks": total_picks,
        "correct_picks": correct_picks,
        "ties": ties,
        "total_points": total_points,
        "win_percentage": calculate_win_percentage(correct_picks, total_picks),
    }


def standings_sort_key(entry):
    """
    Ranking order: total points, then outright wins, then fewer picks,
    then username, then participant id
    """
    return (
        -entry["total_points"],
        -entry["correct_picks"],
        entry["total_picks"],
        (entry["username"] or "").lower(),
        entry["participant_id"],
    )


def rank_entries(entries):
    """Sort entries in place and assign sequential 1-based ranks"""
    entries.sort(key=standings_sort_key)
    for rank, entry in enumerate(entries, start=1):
        entry["rank"] = rank
    return entries


def build_standings(rows):
    """
    Project a scope's picks into ranked leaderboard entries.

    Args:
        rows: iterable of PickRow (or any object with participant_id,
            username and points attributes)

    Returns:
        list of dicts with participant_id, username, total_picks,
        correct_picks, ties, total_points, win_percentage and rank
    """
    points_by_participant = {}
    usernames = {}

    for row in rows:
        points_by_participant.setdefault(row.participant_id, []).append(row.points)
        usernames[row.participant_id] = row.username

    entries = []
    for participant_id, points_list in points_by_participant.items():
        entry = summarize_points(points_list)
        entry["participant_id"] = participant_id
        entry["username"] = usernames[participant_id]
        entries.append(entry)

    return rank_entries(entries)
