import logging

from flask import request
from flask_login import current_user, login_required, login_user, logout_user

from spread_pickem import db, limiter, login_manager
from spread_pickem.models import Participant
from spread_pickem.routes.auth import bp
from spread_pickem.utils.errors import AuthorizationError

logger = logging.getLogger(__name__)


@login_manager.user_loader
def load_user(participant_id):
    return db.session.get(Participant, int(participant_id))


@login_manager.unauthorized_handler
def unauthorized():
    raise AuthorizationError("Login required")


@bp.route("/session", methods=["GET"])
@login_required
def current_session():
    return {"participant": current_user.to_dict()}


@bp.route("/session", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    """Claim a handle and carry it in the session"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    participant = Participant.resolve_or_create(data.get("username"))
    if not participant.is_active:
        raise AuthorizationError("This participant has been deactivated")

    participant.update_last_seen()
    db.session.commit()

    login_user(participant, remember=bool(data.get("remember", False)))
    logger.info(f"Participant {participant.username} started a session")

    return {"participant": participant.to_dict()}


@bp.route("/session", methods=["DELETE"])
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"Participant {username} ended their session")
    return {"message": "Logged out"}
