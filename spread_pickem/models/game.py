import logging
from datetime import datetime, timezone

from spread_pickem import db
from spread_pickem.utils.errors import ValidationError
from spread_pickem.utils.scoring import (
    calculate_modified_spread,
    calculate_spread_result,
)

logger = logging.getLogger(__name__)

WEEK_TYPES = ("preseason", "regular", "playoffs")


class Game(db.Model):
    __tablename__ = "games"

    id = db.Column(db.String(64), primary_key=True)  # e.g. "game-1"

    # Scope
    season = db.Column(db.Integer, nullable=False)
    week_type = db.Column(db.String(20), nullable=False)
    week = db.Column(db.Integer, nullable=False)

    # Teams
    home_team = db.Column(db.String(100), nullable=False)
    away_team = db.Column(db.String(100), nullable=False)

    # Lines (home-relative, negative = home favored)
    original_spread = db.Column(db.Float, nullable=False)
    modified_spread = db.Column(db.Float, nullable=False)  # Persisted at seeding time
    over_under = db.Column(db.Float)

    # Kickoff in UTC; also the pick deadline
    game_time = db.Column(db.DateTime, nullable=False)

    # Scores
    home_score = db.Column(db.Integer)
    away_score = db.Column(db.Integer)

    # Game status
    is_complete = db.Column(db.Boolean, default=False, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    picks = db.relationship(
        "Pick", backref="game", lazy="dynamic", cascade="all, delete-orphan"
    )

    # Indexes
    __table_args__ = (
        db.Index("idx_game_scope", "season", "week_type", "week"),
        db.Index("idx_game_time", "game_time"),
        db.CheckConstraint("home_team != away_team", name="different_teams"),
        db.CheckConstraint(
            "week_type IN ('preseason', 'regular', 'playoffs')", name="valid_week_type"
        ),
    )

    def __repr__(self):
        return f"<Game {self.matchup} {self.week_type} Week {self.week}>"

    @property
    def matchup(self):
        """Matchup label, away team first"""
        return f"{self.away_team} @ {self.home_team}"

    @property
    def scope(self):
        return (self.season, self.week_type, self.week)

    @property
    def spread_result(self):
        """Adjusted home differential (None until the game is complete)"""
        if not self.is_complete or self.home_score is None or self.away_score is None:
            return None
        return calculate_spread_result(
            self.home_score, self.away_score, self.modified_spread
        )

    @property
    def status(self):
        """Get game status as string"""
        if self.is_complete:
            return "completed"

        if self.has_started():
            # Game has started but no final score yet
            return "in_progress"
        return "scheduled"

    def format_game_time_local(self, format_str="%a %m/%d at %I:%M %p"):
        """Format game time in the application's timezone"""
        from spread_pickem.utils.timezone_utils import format_game_time

        return format_game_time(self.game_time, format_str)

    def has_started(self, now=None):
        """Check if game has started (kickoff at or before now)"""
        if not self.game_time:
            return False
        from spread_pickem.utils.timezone_utils import ensure_utc, get_utc_time

        now_utc = ensure_utc(now) if now else get_utc_time()
        return ensure_utc(self.game_time) <= now_utc

    def is_pickable(self):
        """Check if game is available for picks (hasn't started yet)"""
        return not self.has_started() and not self.is_complete

    def update_score(self, home_score, away_score):
        """
        Record a final score, grade every pick on this game and recompute
        the game's scope leaderboard.

        Completion is one-way: reporting again corrects the score and
        regrades, it never reopens the game. The caller commits.

        Returns:
            dict with the number of graded picks and leaderboard entries
        """
        from .leaderboard import LeaderboardEntry

        for label, value in (("home_score", home_score), ("away_score", away_score)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(f"{label} must be an integer")
            if value < 0:
                raise ValidationError(f"{label} cannot be negative")

        self.home_score = home_score
        self.away_score = away_score
        self.is_complete = True

        graded = self.grade_picks()

        # Recompute must read the grading writes
        db.session.flush()
        entries = LeaderboardEntry.recompute_scope(*self.scope)

        logger.info(
            f"Score reported for {self.id} ({self.matchup}): "
            f"{self.away_score}-{self.home_score}, spread result {self.spread_result}, "
            f"{graded} picks graded, {len(entries)} leaderboard entries"
        )

        return {"picks_graded": graded, "leaderboard_entries": len(entries)}

    def grade_picks(self):
        """
        Grade every pick on this game.

        A game without a final score is left alone.

        Returns:
            Number of picks graded
        """
        if not self.is_complete or self.home_score is None or self.away_score is None:
            logger.debug(f"Skipping grading for {self.id}: game is not complete")
            return 0

        spread_result = self.spread_result
        graded = 0
        # NOTE: picks is lazy="dynamic", so we need .all() to get actual list
        for pick in self.picks.all():
            pick.update_result(spread_result)
            graded += 1

        return graded

    def get_picks_count(self):
        """Get count of picks for each side"""
        home_picks = self.picks.filter_by(picked_team="home").count()
        away_picks = self.picks.filter_by(picked_team="away").count()

        return {
            "home": home_picks,
            "away": away_picks,
            "total": home_picks + away_picks,
        }

    @staticmethod
    def get_games_for_scope(season, week_type, week):
        """Get all games for a scope ordered by kickoff"""
        return (
            Game.query.filter_by(season=season, week_type=week_type, week=week)
            .order_by(Game.game_time, Game.id)
            .all()
        )

    @staticmethod
    def get_all_games():
        return Game.query.order_by(Game.game_time, Game.id).all()

    @staticmethod
    def upsert(data):
        """
        Create a game from schedule data unless it already exists.

        Existing games are left untouched so a re-seed never rewrites a
        persisted modified spread or a reported score.

        Returns:
            (game, created)
        """
        from spread_pickem.utils.timezone_utils import to_naive_utc

        game = db.session.get(Game, data["id"])
        if game:
            return game, False

        week_type = data["week_type"]
        if week_type not in WEEK_TYPES:
            raise ValidationError(f"week_type must be one of {', '.join(WEEK_TYPES)}")

        original_spread = float(data["original_spread"])
        game = Game(
            id=data["id"],
            season=int(data["season"]),
            week_type=week_type,
            week=int(data["week"]),
            home_team=data["home_team"],
            away_team=data["away_team"],
            original_spread=original_spread,
            modified_spread=calculate_modified_spread(original_spread),
            over_under=data.get("over_under"),
            game_time=to_naive_utc(data["game_time"]),
            is_complete=False,
        )
        db.session.add(game)
        return game, True

    def to_dict(self, include_picks_count=False):
        """Convert game to dictionary for API responses"""
        from spread_pickem.utils.timezone_utils import isoformat_utc

        data = {
            "id": self.id,
            "season": self.season,
            "week_type": self.week_type,
            "week": self.week,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "matchup": self.matchup,
            "original_spread": self.original_spread,
            "modified_spread": self.modified_spread,
            "over_under": self.over_under,
            "game_time": isoformat_utc(self.game_time),
            "game_time_local": self.format_game_time_local(),
            "home_score": self.home_score,
            "away_score": self.away_score,
            "is_complete": self.is_complete,
            "spread_result": self.spread_result,
            "is_pickable": self.is_pickable(),
            "status": self.status,
        }

        if include_picks_count:
            data["picks_count"] = self.get_picks_count()

        return data
