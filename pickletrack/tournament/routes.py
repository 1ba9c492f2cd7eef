"""Routes for the tournament blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import jsonify

from pickletrack.auth.decorators import login_required
from pickletrack.errors import ValidationError
from pickletrack.utils import form_error_message

from . import bp
from .forms import TournamentStatusForm
from .services import TournamentService


@bp.route("/<string:tournament_id>/payments", methods=["GET"])
@login_required
def payment_overview(tournament_id: str) -> Any:
    """Payment summary, per-division summaries and suggested status."""
    db = firestore.client()
    tournament = TournamentService.get_tournament(db, tournament_id)
    return jsonify(TournamentService.get_payment_overview(tournament))


@bp.route("/<string:tournament_id>/status/apply", methods=["POST"])
@login_required(admin_required=True)
def apply_suggested_status(tournament_id: str) -> Any:
    """Persist the suggested status shown in the status banner."""
    db = firestore.client()
    return jsonify(TournamentService.apply_suggested_status(db, tournament_id))


@bp.route("/<string:tournament_id>/status", methods=["POST"])
@login_required(admin_required=True)
def set_status(tournament_id: str) -> Any:
    """Manually change a tournament's status."""
    form = TournamentStatusForm()
    if not form.validate_on_submit():
        raise ValidationError(form_error_message(form))

    db = firestore.client()
    TournamentService.set_status(db, tournament_id, form.status.data)
    return jsonify({"status": form.status.data})
