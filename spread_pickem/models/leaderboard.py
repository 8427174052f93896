import logging
from datetime import datetime, timezone

from spread_pickem import db
from spread_pickem.utils.standings import PickRow, build_standings

logger = logging.getLogger(__name__)


class LeaderboardEntry(db.Model):
    """Cached standings row, always rebuilt from picks by recompute_scope()"""

    __tablename__ = "leaderboard_entries"

    id = db.Column(db.Integer, primary_key=True)

    participant_id = db.Column(
        db.Integer, db.ForeignKey("participants.id"), nullable=False
    )

    # Scope
    season = db.Column(db.Integer, nullable=False)
    week_type = db.Column(db.String(20), nullable=False)
    week = db.Column(db.Integer, nullable=False)

    # Aggregates
    total_picks = db.Column(db.Integer, default=0, nullable=False)
    correct_picks = db.Column(db.Integer, default=0, nullable=False)
    ties = db.Column(db.Integer, default=0, nullable=False)
    total_points = db.Column(db.Float, default=0.0, nullable=False)
    win_percentage = db.Column(db.Float, default=0.0, nullable=False)
    rank = db.Column(db.Integer)

    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint(
            "participant_id",
            "season",
            "week_type",
            "week",
            name="unique_participant_scope_entry",
        ),
        db.Index("idx_leaderboard_scope", "season", "week_type", "week"),
    )

    def __repr__(self):
        return (
            f"<LeaderboardEntry participant_id={self.participant_id} "
            f"{self.season}/{self.week_type}/{self.week} rank={self.rank}>"
        )

    @staticmethod
    def get_scope_rows(season, week_type, week):
        """Every pick in scope with its participant's username and points"""
        from .game import Game
        from .participant import Participant
        from .pick import Pick

        results = (
            db.session.query(Pick.participant_id, Participant.username, Pick.points)
            .join(Game, Pick.game_id == Game.id)
            .join(Participant, Pick.participant_id == Participant.id)
            .filter(
                Game.season == season, Game.week_type == week_type, Game.week == week
            )
            .all()
        )
        return [PickRow(*result) for result in results]

    @staticmethod
    def recompute_scope(season, week_type, week):
        """
        Rebuild every leaderboard entry for a scope from current pick state.

        Upserts one entry per participant with picks in scope, removes
        entries for participants who no longer have any, and rewrites all
        ranks. Running it twice without pick changes yields the same rows.
        The caller commits.

        Returns:
            list of LeaderboardEntry ordered by rank
        """
        standings = build_standings(
            LeaderboardEntry.get_scope_rows(season, week_type, week)
        )

        existing = {
            entry.participant_id: entry
            for entry in LeaderboardEntry.query.filter_by(
                season=season, week_type=week_type, week=week
            ).all()
        }

        entries = []
        for standing in standings:
            entry = existing.pop(standing["participant_id"], None)
            if entry is None:
                entry = LeaderboardEntry(
                    participant_id=standing["participant_id"],
                    season=season,
                    week_type=week_type,
                    week=week,
                )
                db.session.add(entry)

            entry.total_picks = standing["total_picks"]
            entry.correct_picks = standing["correct_picks"]
            entry.ties = standing["ties"]
            entry.total_points = standing["total_points"]
            entry.win_percentage = standing["win_percentage"]
            entry.rank = standing["rank"]
            entries.append(entry)

        # Participants without picks in scope anymore
        for stale in existing.values():
            db.session.delete(stale)

        db.session.flush()

        logger.info(
            f"Recomputed leaderboard {season}/{week_type}/{week}: {len(entries)} entries"
        )
        return entries

    @staticmethod
    def get_scope_leaderboard(season, week_type, week):
        """Stored entries for a scope ordered by rank"""
        return (
            LeaderboardEntry.query.filter_by(
                season=season, week_type=week_type, week=week
            )
            .order_by(LeaderboardEntry.rank, LeaderboardEntry.id)
            .all()
        )

    def to_dict(self):
        """Convert entry to dictionary for API responses"""
        return {
            "rank": self.rank,
            "participant": self.participant.to_dict() if self.participant else None,
            "season": self.season,
            "week_type": self.week_type,
            "week": self.week,
            "total_picks": self.total_picks,
            "correct_picks": self.correct_picks,
            "ties": self.ties,
            "total_points": self.total_points,
            "win_percentage": self.win_percentage,
        }
