import logging
from datetime import datetime, timezone

from flask_login import UserMixin

from spread_pickem import db
from spread_pickem.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 80


class Participant(UserMixin, db.Model):
    __tablename__ = "participants"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(
        db.String(MAX_USERNAME_LENGTH), unique=True, nullable=False, index=True
    )
    display_name = db.Column(db.String(100))

    # Account status
    is_active = db.Column(db.Boolean, default=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    last_seen = db.Column(db.DateTime)

    # Relationships
    picks = db.relationship(
        "Pick", backref="participant", lazy="dynamic", cascade="all, delete-orphan"
    )
    leaderboard_entries = db.relationship(
        "LeaderboardEntry",
        backref="participant",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Participant {self.username}>"

    @property
    def full_name(self):
        return self.display_name or self.username

    @staticmethod
    def normalize_handle(handle):
        """Strip a self-declared handle and reject blank or oversized ones"""
        if not isinstance(handle, str) or not handle.strip():
            raise ValidationError("Username is required")

        handle = handle.strip()
        if len(handle) > MAX_USERNAME_LENGTH:
            raise ValidationError(
                f"Username cannot be longer than {MAX_USERNAME_LENGTH} characters"
            )
        return handle

    @staticmethod
    def get_by_username(handle):
        """Find a participant by handle or raise NotFoundError"""
        handle = Participant.normalize_handle(handle)
        participant = Participant.query.filter_by(username=handle).first()
        if not participant:
            raise NotFoundError(f"Participant '{handle}' not found")
        return participant

    @staticmethod
    def resolve_or_create(handle):
        """
        Resolve a participant by external handle, creating it on first use.

        The new row is added to the session but not committed.
        """
        handle = Participant.normalize_handle(handle)

        participant = Participant.query.filter_by(username=handle).first()
        if participant:
            return participant

        participant = Participant(username=handle, display_name=handle)
        db.session.add(participant)
        db.session.flush()
        logger.info(f"Created participant '{handle}' (id={participant.id})")
        return participant

    def update_last_seen(self):
        self.last_seen = datetime.now(timezone.utc)

    def get_picks_for_scope(self, season=None, week_type=None, week=None):
        """Picks joined with their games, ordered by kickoff"""
        from .game import Game
        from .pick import Pick

        query = Pick.query.join(Game).filter(Pick.participant_id == self.id)

        # Scope filter applies only when it is complete
        if season is not None and week_type and week is not None:
            query = query.filter(
                Game.season == season, Game.week_type == week_type, Game.week == week
            )

        return query.order_by(Game.game_time, Game.id).all()

    def get_scope_stats(self, season=None, week_type=None, week=None, picks=None):
        """
        Summary stats for the participant's picks in a scope.

        Uses the same totals and win percentage definition as the
        leaderboard: every pick counts toward total_picks.
        """
        from spread_pickem.utils.standings import summarize_points

        if picks is None:
            picks = self.get_picks_for_scope(season, week_type, week)

        stats = summarize_points(pick.points for pick in picks)

        pending_games = sum(1 for pick in picks if pick.points is None)
        completed_games = len(picks) - pending_games
        stats.update(
            {
                "incorrect_picks": completed_games
                - stats["correct_picks"]
                - stats["ties"],
                "pending_games": pending_games,
                "completed_games": completed_games,
            }
        )
        return stats

    def to_dict(self):
        """Convert participant to dictionary for API responses"""
        return {
            "id": self.id,
            "username": self.username,
            "display_name": self.full_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
