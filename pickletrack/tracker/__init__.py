"""Payment tracker blueprint: records payments and reports collection progress."""

from flask import Blueprint

bp = Blueprint("tracker", __name__, url_prefix="/payments")

from . import routes  # noqa: E402, F401
