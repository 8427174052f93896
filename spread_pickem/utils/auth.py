"""
Participant identity and operator credential helpers
"""

import hmac
import logging
from functools import wraps

from flask import current_app, request
from flask_login import current_user

from spread_pickem.utils.errors import AuthorizationError

logger = logging.getLogger(__name__)


def resolve_participant(handle=None):
    """
    Resolve the acting participant.

    A logged-in session wins; otherwise the self-declared handle is
    resolved, creating the participant on first use.
    """
    from spread_pickem.models import Participant

    if current_user.is_authenticated:
        participant = current_user._get_current_object()
    else:
        participant = Participant.resolve_or_create(handle)

    if not participant.is_active:
        logger.warning(f"Rejected deactivated participant {participant.username}")
        raise AuthorizationError("This participant has been deactivated")

    return participant


def get_admin_key_from_request():
    """Operator key from the X-Admin-Key header or the key query parameter"""
    return request.headers.get("X-Admin-Key") or request.args.get("key")


def check_admin_key(provided):
    """Constant-time comparison against the configured ADMIN_KEY"""
    expected = current_app.config.get("ADMIN_KEY")
    if not expected or not provided:
        return False
    return hmac.compare_digest(str(provided), str(expected))


def admin_key_required(f):
    """Reject the request before the view touches any state"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not check_admin_key(get_admin_key_from_request()):
            logger.warning(
                f"Rejected operator call to {request.path} from {request.remote_addr}"
            )
            raise AuthorizationError("Unauthorized")
        return f(*args, **kwargs)

    return decorated_function
