"""Routes for the league blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import jsonify

from pickletrack.auth.decorators import login_required
from pickletrack.errors import ValidationError
from pickletrack.utils import form_error_message

from . import bp
from .forms import LeagueStatusForm
from .services import LeagueService


@bp.route("/<string:league_id>/payments", methods=["GET"])
@login_required
def payment_overview(league_id: str) -> Any:
    """Payment summary and suggested status for a league."""
    db = firestore.client()
    league = LeagueService.get_league(db, league_id)
    return jsonify(LeagueService.get_payment_overview(league))


@bp.route("/<string:league_id>/status/apply", methods=["POST"])
@login_required(admin_required=True)
def apply_suggested_status(league_id: str) -> Any:
    """Persist the suggested league status."""
    db = firestore.client()
    return jsonify(LeagueService.apply_suggested_status(db, league_id))


@bp.route("/<string:league_id>/status", methods=["POST"])
@login_required(admin_required=True)
def set_status(league_id: str) -> Any:
    """Manually change a league's status."""
    form = LeagueStatusForm()
    if not form.validate_on_submit():
        raise ValidationError(form_error_message(form))

    db = firestore.client()
    LeagueService.set_status(db, league_id, form.status.data)
    return jsonify({"status": form.status.data})
