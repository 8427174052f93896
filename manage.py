#!/usr/bin/env python3
"""
Spread Pick'em Management CLI

This script provides command-line management functionality for the Spread Pick'em application.
"""

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from spread_pickem import create_app, db
from spread_pickem.models import Game, LeaderboardEntry, Participant, Pick
from spread_pickem.models.game import WEEK_TYPES
from spread_pickem.utils.cache_utils import invalidate_cache
from spread_pickem.utils.errors import PickemError
from spread_pickem.utils.schedule_seed import DEFAULT_SCHEDULE_FILE, seed_games

app = create_app()


def scope_options(f):
    """Shared --season / --week-type / --week options"""
    f = click.option("--week", type=int, help="Week number (default: configured week)")(f)
    f = click.option(
        "--week-type",
        type=click.Choice(WEEK_TYPES),
        help="Week type (default: configured week type)",
    )(f)
    f = click.option("--season", type=int, help="Season year (default: configured season)")(f)
    return f


def resolve_scope(season, week_type, week):
    return (
        season if season is not None else current_app.config["DEFAULT_SEASON"],
        week_type or current_app.config["DEFAULT_WEEK_TYPE"],
        week if week is not None else current_app.config["DEFAULT_WEEK"],
    )


@click.group()
def cli():
    """Spread Pick'em Management CLI"""
    pass


# Game Commands
@cli.group()
def games():
    """Game schedule and score commands"""
    pass


@games.command()
@click.option(
    "--file",
    "path",
    type=click.Path(exists=True, dir_okay=False),
    help=f"Schedule JSON file (default: {DEFAULT_SCHEDULE_FILE})",
)
@with_appcontext
def seed(path):
    """Load a schedule, leaving existing games untouched"""
    try:
        result = seed_games(path)
        invalidate_cache("schedule seeded")
        click.echo(
            f"✅ Seeded {result['total']} games: "
            f"{result['created']} created, {result['existing']} already present"
        )
    except (PickemError, SQLAlchemyError, OSError, ValueError) as e:
        click.echo(f"❌ Error seeding games: {str(e)}")


@games.command(name="list")
@scope_options
@with_appcontext
def list_games(season, week_type, week):
    """List games in a scope"""
    season, week_type, week = resolve_scope(season, week_type, week)
    game_list = Game.get_games_for_scope(season, week_type, week)

    if not game_list:
        click.echo(f"No games found for {season} {week_type} week {week}.")
        return

    click.echo(f"Games for {season} {week_type} week {week}:")
    for game in game_list:
        if game.is_complete:
            score = f"{game.away_score}-{game.home_score} (spread result {game.spread_result:+g})"
        else:
            score = game.format_game_time_local()
        click.echo(
            f"  {game.id}: {game.matchup} "
            f"[spread {game.original_spread:+g} -> {game.modified_spread:+g}] {score}"
        )


@games.command()
@click.argument("game_id")
@click.argument("home_score", type=int)
@click.argument("away_score", type=int)
@with_appcontext
def score(game_id, home_score, away_score):
    """Record a final score and grade the game's picks"""
    game = db.session.get(Game, game_id)
    if not game:
        click.echo(f"❌ Game {game_id} not found")
        return

    try:
        result = game.update_score(home_score, away_score)
        db.session.commit()
        invalidate_cache(f"score reported for {game_id}")
        click.echo(
            f"✅ {game.matchup}: {away_score}-{home_score}, "
            f"{result['picks_graded']} picks graded, "
            f"{result['leaderboard_entries']} leaderboard entries"
        )
    except (PickemError, SQLAlchemyError) as e:
        db.session.rollback()
        click.echo(f"❌ Error recording score: {str(e)}")


@games.command()
@with_appcontext
def regrade():
    """Regrade every pick on every completed game and rebuild the standings"""
    completed = Game.query.filter_by(is_complete=True).all()
    if not completed:
        click.echo("No completed games found - nothing to regrade")
        return

    try:
        graded = sum(game.grade_picks() for game in completed)
        db.session.flush()
        scopes = sorted({game.scope for game in completed})
        for scope in scopes:
            LeaderboardEntry.recompute_scope(*scope)
        db.session.commit()
        invalidate_cache("picks regraded")
        click.echo(
            f"✅ Regraded {graded} picks across {len(completed)} games "
            f"in {len(scopes)} scopes"
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Error regrading picks: {str(e)}")


# Leaderboard Commands
@cli.group()
def leaderboard():
    """Leaderboard commands"""
    pass


@leaderboard.command()
@scope_options
@with_appcontext
def recompute(season, week_type, week):
    """Rebuild the leaderboard for a scope"""
    season, week_type, week = resolve_scope(season, week_type, week)
    try:
        entries = LeaderboardEntry.recompute_scope(season, week_type, week)
        db.session.commit()
        invalidate_cache(f"leaderboard recomputed for {season}/{week_type}/{week}")
        click.echo(f"✅ Recomputed {season} {week_type} week {week}: {len(entries)} entries")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Error recomputing leaderboard: {str(e)}")


@leaderboard.command()
@scope_options
@with_appcontext
def show(season, week_type, week):
    """Print the standings for a scope"""
    season, week_type, week = resolve_scope(season, week_type, week)
    entries = LeaderboardEntry.get_scope_leaderboard(season, week_type, week)

    if not entries:
        click.echo(f"No leaderboard entries for {season} {week_type} week {week}.")
        return

    click.echo(f"Leaderboard for {season} {week_type} week {week}:")
    for entry in entries:
        click.echo(
            f"  {entry.rank:>3}. {entry.participant.username:<20} "
            f"{entry.total_points:>5g} pts  "
            f"{entry.correct_picks}-{entry.ties}/{entry.total_picks}  "
            f"{entry.win_percentage:.2f}%"
        )


# Participant Commands
@cli.group()
def participant():
    """Participant commands"""
    pass


@participant.command()
@click.argument("username")
@with_appcontext
def create(username):
    """Create a participant"""
    try:
        existing = Participant.query.filter_by(username=username.strip()).first()
        if existing:
            click.echo(f"Participant {existing.username} already exists!")
            return

        new_participant = Participant.resolve_or_create(username)
        db.session.commit()
        click.echo(f"✅ Created participant {new_participant.username}")
    except (PickemError, SQLAlchemyError) as e:
        db.session.rollback()
        click.echo(f"❌ Error creating participant: {str(e)}")


@participant.command(name="list")
@with_appcontext
def list_participants():
    """List all participants"""
    participants = Participant.query.order_by(Participant.created_at.desc()).all()

    if not participants:
        click.echo("No participants found.")
        return

    click.echo("Participants:")
    for p in participants:
        status = "🟢" if p.is_active else "🔴"
        click.echo(f"  {status} {p.username} ({p.picks.count()} picks)")


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
        click.echo("✅ Database tables created successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error initializing database: {str(e)}")


@db_cmd.command()
@with_appcontext
def reset():
    """⚠️  DANGER: Drop and recreate all tables"""
    if not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        db.create_all()
        click.echo("✅ Database reset successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error resetting database: {str(e)}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("🏈 Spread Pick'em Application Status")
    click.echo("=" * 40)

    # Database connection
    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database: Error - {str(e)}")
        return

    if current_app.config.get("ADMIN_KEY"):
        click.echo("✅ Operator key: Configured")
    else:
        click.echo("⚠️  Operator key: Not set, score reports will be rejected")

    click.echo(f"👥 Participants: {Participant.query.count()}")
    click.echo(f"📝 Picks: {Pick.query.count()}")

    game_count = Game.query.count()
    complete_count = Game.query.filter_by(is_complete=True).count()
    click.echo(f"🏈 Games: {complete_count}/{game_count} completed")


if __name__ == "__main__":
    with app.app_context():
        cli()
