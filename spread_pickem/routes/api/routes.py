import logging
from functools import wraps

from flask import current_app, request
from flask_login import current_user, login_required

from spread_pickem import db, limiter
from spread_pickem.models import Game, LeaderboardEntry, Participant, Pick
from spread_pickem.models.game import WEEK_TYPES
from spread_pickem.routes.api import bp
from spread_pickem.utils.auth import admin_key_required, resolve_participant
from spread_pickem.utils.cache_utils import cached_route, invalidate_cache
from spread_pickem.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def add_security_headers(f):
    """Add no-store headers to per-participant API responses"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = current_app.make_response(f(*args, **kwargs))
        response.headers["Cache-Control"] = (
            "no-store, no-cache, must-revalidate, max-age=0"
        )
        return response

    return decorated_function


def submit_rate_limit():
    return current_app.config.get("SUBMIT_RATE_LIMIT", "30 per minute")


def _parse_int(name, value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def parse_scope(source, use_defaults=False):
    """
    Read (season, week_type, week) from a mapping.

    Returns None when no scope field is given and defaults are off. A
    partial scope is an error unless defaults fill the gaps.
    """
    season = source.get("season")
    week_type = source.get("week_type")
    week = source.get("week")

    if use_defaults:
        season = season if season not in (None, "") else current_app.config["DEFAULT_SEASON"]
        week_type = week_type or current_app.config["DEFAULT_WEEK_TYPE"]
        week = week if week not in (None, "") else current_app.config["DEFAULT_WEEK"]
    else:
        given = [value not in (None, "") for value in (season, week_type, week)]
        if not any(given):
            return None
        if not all(given):
            raise ValidationError("season, week_type and week must be given together")

    if week_type not in WEEK_TYPES:
        raise ValidationError(f"week_type must be one of {', '.join(WEEK_TYPES)}")

    return _parse_int("season", season), week_type, _parse_int("week", week)


def get_json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def picks_payload(participant, scope):
    """Participant picks with per-pick results and summary stats"""
    picks = participant.get_picks_for_scope(*scope)
    return {
        "participant": participant.to_dict(),
        "season": scope[0],
        "week_type": scope[1],
        "week": scope[2],
        "picks": [pick.to_dict() for pick in picks],
        "stats": participant.get_scope_stats(picks=picks),
    }


@bp.route("/games")
def games():
    """Get games for a scope, or every game when no scope is given"""
    scope = parse_scope(request.args)
    if scope:
        game_list = Game.get_games_for_scope(*scope)
    else:
        game_list = Game.get_all_games()
    return {"games": [game.to_dict(include_picks_count=True) for game in game_list]}


@bp.route("/games/<game_id>")
def game_detail(game_id):
    game = db.session.get(Game, game_id)
    if not game:
        raise NotFoundError(f"Game {game_id} not found")
    return game.to_dict(include_picks_count=True)


@bp.route("/games/<game_id>/score", methods=["POST"])
@limiter.limit(submit_rate_limit)
@admin_key_required
def report_score(game_id):
    """Record a final score, grade the game's picks and recompute its scope"""
    data = get_json_body()
    home_score = data.get("home_score")
    away_score = data.get("away_score")

    if home_score is None or away_score is None:
        raise ValidationError("Missing required fields: home_score and away_score")

    game = db.session.get(Game, game_id)
    if not game:
        raise NotFoundError(f"Game {game_id} not found")

    try:
        result = game.update_score(home_score, away_score)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    invalidate_cache(f"score reported for {game_id}")

    return {
        "message": "Game score updated successfully",
        "game": game.to_dict(),
        **result,
    }


@bp.route("/picks", methods=["POST"])
@limiter.limit(submit_rate_limit)
@add_security_headers
def submit_picks():
    """Submit picks for the session participant or a self-declared username"""
    data = get_json_body()

    participant = resolve_participant(data.get("username"))
    count = Pick.submit_picks(participant, data.get("picks"))

    invalidate_cache(f"picks submitted by {participant.username}")

    return {
        "message": "Picks submitted successfully",
        "count": count,
        "username": participant.username,
    }


@bp.route("/picks")
@login_required
@add_security_headers
def my_picks():
    """Get the session participant's picks and stats"""
    scope = parse_scope(request.args)
    if scope is None:
        scope = (None, None, None)
    return picks_payload(current_user, scope)


@bp.route("/participants/<username>/picks")
@add_security_headers
def participant_picks(username):
    """Get a participant's picks with results and summary stats"""
    participant = Participant.get_by_username(username)
    scope = parse_scope(request.args, use_defaults=True)
    return picks_payload(participant, scope)


@bp.route("/leaderboard")
@cached_route(timeout=300, key_prefix="leaderboard")
def leaderboard():
    """Ranked standings for a scope"""
    season, week_type, week = parse_scope(request.args, use_defaults=True)
    entries = LeaderboardEntry.get_scope_leaderboard(season, week_type, week)
    return {
        "season": season,
        "week_type": week_type,
        "week": week,
        "leaderboard": [entry.to_dict() for entry in entries],
    }


@bp.route("/leaderboard/recompute", methods=["POST"])
@admin_key_required
def recompute_leaderboard():
    """Operator-triggered full recompute of a scope"""
    data = request.get_json(silent=True)
    scope = parse_scope(data if isinstance(data, dict) and data else request.args)
    if scope is None:
        raise ValidationError("season, week_type and week are required")

    try:
        entries = LeaderboardEntry.recompute_scope(*scope)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    invalidate_cache(f"leaderboard recomputed for {scope}")

    return {
        "message": "Leaderboard recomputed",
        "season": scope[0],
        "week_type": scope[1],
        "week": scope[2],
        "leaderboard": [entry.to_dict() for entry in entries],
    }
