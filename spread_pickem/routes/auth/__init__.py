from flask import Blueprint

bp = Blueprint("auth", __name__)

from spread_pickem.routes.auth import routes  # noqa: F401, E402
