import logging
from datetime import datetime, timezone

from spread_pickem import db
from spread_pickem.utils.errors import NotFoundError, ValidationError
from spread_pickem.utils.scoring import PICKED_TEAMS, grade_pick, pick_outcome

logger = logging.getLogger(__name__)


class Pick(db.Model):
    __tablename__ = "picks"

    id = db.Column(db.Integer, primary_key=True)

    # Pick identification
    participant_id = db.Column(
        db.Integer, db.ForeignKey("participants.id"), nullable=False
    )
    game_id = db.Column(db.String(64), db.ForeignKey("games.id"), nullable=False)

    # Pick details
    picked_team = db.Column(db.String(4), nullable=False)  # home | away

    # Results (set together by grading once the game is complete)
    is_correct = db.Column(db.Boolean)
    points = db.Column(db.Float)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Constraints and indexes
    __table_args__ = (
        db.UniqueConstraint(
            "participant_id", "game_id", name="unique_participant_game_pick"
        ),
        db.CheckConstraint("picked_team IN ('home', 'away')", name="valid_picked_team"),
        db.Index("idx_pick_game", "game_id"),
        db.Index("idx_pick_participant", "participant_id"),
    )

    def __repr__(self):
        return f"<Pick participant_id={self.participant_id} game_id={self.game_id} team={self.picked_team}>"

    @property
    def result(self):
        """win, loss, push or pending"""
        return pick_outcome(self.is_correct, self.points)

    @property
    def picked_team_name(self):
        if not self.game:
            return None
        return self.game.home_team if self.picked_team == "home" else self.game.away_team

    def update_result(self, spread_result):
        """Grade this pick against its game's spread result"""
        self.is_correct, self.points = grade_pick(self.picked_team, spread_result)

    @staticmethod
    def parse_selections(raw_picks):
        """
        Validate a raw submission payload.

        Args:
            raw_picks: list of {"game_id": str, "picked_team": "home" | "away"}

        Returns:
            list of (game_id, picked_team) tuples in submission order
        """
        if not isinstance(raw_picks, list) or not raw_picks:
            raise ValidationError("Invalid picks data: expected a non-empty list of picks")

        selections = []
        seen = set()
        for index, raw in enumerate(raw_picks):
            if not isinstance(raw, dict):
                raise ValidationError(f"Invalid pick at position {index}: expected an object")

            game_id = raw.get("game_id")
            picked_team = raw.get("picked_team")

            if not isinstance(game_id, str) or not game_id.strip():
                raise ValidationError(f"Invalid pick at position {index}: game_id is required")
            game_id = game_id.strip()

            if picked_team not in PICKED_TEAMS:
                raise ValidationError(
                    f"Invalid pick at position {index}: picked_team must be 'home' or 'away'"
                )

            if game_id in seen:
                raise ValidationError(f"Game {game_id} appears more than once in the submission")
            seen.add(game_id)

            selections.append((game_id, picked_team))

        return selections

    @staticmethod
    def check_deadlines(games, now=None):
        """Reject the batch if any game has kicked off or is final, naming every matchup"""
        locked = [game for game in games if game.is_complete or game.has_started(now)]
        if locked:
            raise ValidationError(
                "Cannot submit picks for games that have already started or finished: "
                + ", ".join(game.matchup for game in locked),
                details={
                    "locked_games": [
                        {"id": game.id, "matchup": game.matchup} for game in locked
                    ]
                },
            )

    @staticmethod
    def submit_picks(participant, raw_picks, now=None):
        """
        Replace a participant's picks on the submitted games.

        Either every pick in the batch is stored or nothing changes: the
        participant's existing picks on exactly these games are deleted and
        the new ones inserted in one transaction. Games not mentioned keep
        their picks. Commits on success, rolls back on any error.

        Returns:
            Number of picks created
        """
        from .game import Game
        from .leaderboard import LeaderboardEntry

        try:
            selections = Pick.parse_selections(raw_picks)
            game_ids = [game_id for game_id, _ in selections]

            # Lock the games so the deadline cannot move under us
            games = (
                Game.query.filter(Game.id.in_(game_ids)).with_for_update().all()
            )
            games_by_id = {game.id: game for game in games}

            missing = [game_id for game_id in game_ids if game_id not in games_by_id]
            if missing:
                raise NotFoundError(
                    f"Game not found: {', '.join(missing)}",
                    details={"missing_games": missing},
                )

            ordered_games = [games_by_id[game_id] for game_id in game_ids]
            Pick.check_deadlines(ordered_games, now)

            Pick.query.filter(
                Pick.participant_id == participant.id, Pick.game_id.in_(game_ids)
            ).delete(synchronize_session="fetch")

            new_picks = [
                Pick(
                    participant_id=participant.id,
                    game_id=game_id,
                    picked_team=picked_team,
                )
                for game_id, picked_team in selections
            ]
            db.session.add_all(new_picks)
            db.session.flush()

            # Re-check right before commit to keep the late-pick window small
            Pick.check_deadlines(ordered_games, now)

            # Pending picks count toward total_picks, so refresh the standings
            for scope in sorted({game.scope for game in ordered_games}):
                LeaderboardEntry.recompute_scope(*scope)

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(
            f"Participant {participant.username} submitted {len(new_picks)} picks: "
            f"{', '.join(game_ids)}"
        )
        return len(new_picks)

    def to_dict(self, include_game=True):
        """Convert pick to dictionary for API responses"""
        data = {
            "id": self.id,
            "participant_id": self.participant_id,
            "game_id": self.game_id,
            "picked_team": self.picked_team,
            "picked_team_name": self.picked_team_name,
            "is_correct": self.is_correct,
            "points": self.points,
            "result": self.result,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_game:
            data["game"] = self.game.to_dict() if self.game else None
        return data
