"""
Error types raised by the pick'em engine and mapped to JSON responses
by the handlers registered in create_app()
"""


class PickemError(Exception):
    """Base exception for pick'em errors."""

    status_code = 500

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        data = {"error": self.message}
        if self.details is not None:
            data["details"] = self.details
        return data


class ValidationError(PickemError):
    """Raised when submitted data is malformed or breaks a pick rule."""

    status_code = 400


class AuthorizationError(PickemError):
    """Raised when an operator call is made without the right credential."""

    status_code = 401


class NotFoundError(PickemError):
    """Raised when a participant or game does not exist."""

    status_code = 404
