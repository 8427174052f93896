"""
Scoring Engine for Spread Pick'em

This module handles the spread adjustment and the grading of individual
picks. For aggregated standings, see spread_pickem/utils/standings.py and
LeaderboardEntry.recompute_scope() in spread_pickem/models/leaderboard.py
"""

HOME_ADVANTAGE = 6

HOME = "home"
AWAY = "away"
PICKED_TEAMS = (HOME, AWAY)

WIN_POINTS = 1.0
PUSH_POINTS = 0.5
LOSS_POINTS = 0.0


def calculate_modified_spread(original_spread):
    """
    Convert a published spread into the spread used for grading.

    The published spread is home-relative (negative = home favored).
    Subtracting the home advantage always shifts the line toward the home
    team: a home favorite becomes more favored, a home underdog gets fewer
    points.
    """
    return original_spread - HOME_ADVANTAGE


def calculate_spread_result(home_score, away_score, modified_spread):
    """Home score differential adjusted by the modified spread"""
    return (home_score - away_score) + modified_spread


def grade_pick(picked_team, spread_result):
    """
    Grade a single pick against a game's spread result.

    Returns:
        (is_correct, points) where a push is (False, 0.5) for either side,
        a cover is (True, 1.0) and a miss is (False, 0.0)
    """
    if picked_team not in PICKED_TEAMS:
        raise ValueError(f"picked_team must be one of {PICKED_TEAMS}, got {picked_team!r}")

    # Push: half credit for everyone, but never "correct"
    if spread_result == 0:
        return False, PUSH_POINTS

    if picked_team == HOME:
        is_correct = spread_result > 0
    else:
        is_correct = spread_result < 0

    return is_correct, WIN_POINTS if is_correct else LOSS_POINTS


def pick_outcome(is_correct, points):
    """Label for a pick's graded state: win, loss, push or pending"""
    if points is None:
        return "pending"
    if points == PUSH_POINTS:
        return "push"
    return "win" if is_correct else "loss"
