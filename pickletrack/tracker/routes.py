"""Routes for the payment tracker blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify, session

from pickletrack.auth.decorators import login_required
from pickletrack.errors import ValidationError
from pickletrack.league.services import LeagueService
from pickletrack.payments.forms import PaymentForm
from pickletrack.payments.services import PaymentService
from pickletrack.payments.utils import (
    calculate_overall_payment_summary,
    filter_trackable_events,
)
from pickletrack.tournament.services import TournamentService
from pickletrack.utils import form_error_message

from . import bp


def _validated_payment_form() -> PaymentForm:
    form = PaymentForm()
    if not form.validate_on_submit():
        raise ValidationError(form_error_message(form))
    return form


@bp.route("/summary", methods=["GET"])
@login_required
def portfolio_summary() -> Any:
    """Payment rollup across every active tournament and league."""
    db = firestore.client()
    tournaments = filter_trackable_events(TournamentService.list_tournaments(db))
    leagues = filter_trackable_events(LeagueService.list_leagues(db))
    return jsonify(calculate_overall_payment_summary(tournaments, leagues))


@bp.route(
    "/tournaments/<string:tournament_id>/divisions/<string:division_id>/<string:participant_id>",
    methods=["POST"],
)
@login_required(admin_required=True)
def record_division_payment(
    tournament_id: str, division_id: str, participant_id: str
) -> Any:
    """Record a participant's payment for a tournament division."""
    form = _validated_payment_form()
    db = firestore.client()
    result = PaymentService.record_division_payment(
        db,
        tournament_id,
        division_id,
        participant_id,
        form.amount.data,
        recorded_by=session.get("user_id"),
        method=form.method.data,
        notes=form.notes.data,
        auto_status=current_app.config["STATUS_AUTOMATION_ENABLED"],
    )
    return jsonify(result)


@bp.route(
    "/tournaments/<string:tournament_id>/divisions/<string:division_id>/<string:participant_id>/delete",
    methods=["POST"],
)
@login_required(admin_required=True)
def remove_division_payment(
    tournament_id: str, division_id: str, participant_id: str
) -> Any:
    """Remove a participant's payment from a tournament division."""
    db = firestore.client()
    PaymentService.remove_division_payment(db, tournament_id, division_id, participant_id)
    return jsonify({"removed": participant_id})


@bp.route("/leagues/<string:league_id>/<string:participant_id>", methods=["POST"])
@login_required(admin_required=True)
def record_league_payment(league_id: str, participant_id: str) -> Any:
    """Record a participant's league registration payment."""
    form = _validated_payment_form()
    db = firestore.client()
    record = PaymentService.record_league_payment(
        db,
        league_id,
        participant_id,
        form.amount.data,
        recorded_by=session.get("user_id"),
        method=form.method.data,
        notes=form.notes.data,
    )
    return jsonify({"record": record})


@bp.route("/leagues/<string:league_id>/<string:participant_id>/delete", methods=["POST"])
@login_required(admin_required=True)
def remove_league_payment(league_id: str, participant_id: str) -> Any:
    """Remove a participant's league payment."""
    db = firestore.client()
    PaymentService.remove_league_payment(db, league_id, participant_id)
    return jsonify({"removed": participant_id})
