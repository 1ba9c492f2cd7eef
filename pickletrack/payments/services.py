"""Service layer for recording and removing payments."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any

from pickletrack.constants import (
    DEFAULT_PAYMENT_METHOD,
    LEAGUES_COLLECTION,
    TOURNAMENTS_COLLECTION,
)
from pickletrack.errors import NotFoundError, ValidationError
from pickletrack.league.services import LeagueService
from pickletrack.status.utils import log_status_decision, suggest_tournament_status
from pickletrack.tournament.services import TournamentService

from .utils import create_payment_record, get_participants, prune_orphaned_payments

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from pickletrack.tournament.models import Division, Tournament

    from .models import PaymentRecord

logger = logging.getLogger(__name__)


class PaymentService:
    """Writes payment records into division and league payment maps.

    Divisions live in an array on the tournament document, so a change to
    one division's payment map rewrites the ``divisions`` array with only
    the matching division (by id) replaced.
    """

    @staticmethod
    def _find_division(tournament: Tournament, division_id: str) -> Division:
        for division in tournament.get("divisions") or []:
            if isinstance(division, dict) and division.get("id") == division_id:
                return division
        raise NotFoundError(
            f"Division {division_id} not found in tournament {tournament.get('id')}."
        )

    @staticmethod
    def _patch_division(
        tournament: Tournament, division_id: str, payment_data: dict[str, Any]
    ) -> list[Division]:
        """Return the divisions array with one division's payment map replaced."""
        return [
            {**division, "paymentData": payment_data}
            if isinstance(division, dict) and division.get("id") == division_id
            else division
            for division in tournament.get("divisions") or []
        ]

    @staticmethod
    def record_division_payment(
        db: Client,
        tournament_id: str,
        division_id: str,
        participant_id: str,
        amount: Any,
        recorded_by: str | None = None,
        method: str = DEFAULT_PAYMENT_METHOD,
        notes: str | None = None,
        auto_status: bool = True,
        now: datetime.datetime | None = None,
    ) -> dict[str, Any]:
        """Record (or replace) a participant's payment in a tournament division.

        When ``auto_status`` is set, the tournament's suggested status is
        written in the same update if it changed.
        """
        tournament = TournamentService.get_tournament(db, tournament_id)
        division = PaymentService._find_division(tournament, division_id)
        participants = get_participants(division)
        if participant_id not in participants:
            raise ValidationError(
                f"Participant {participant_id} is not registered in division {division_id}."
            )

        record = create_payment_record(
            amount, participant_id, method=method, notes=notes, recorded_by=recorded_by
        )
        payment_data = prune_orphaned_payments(participants, division.get("paymentData"))
        payment_data[participant_id] = record

        divisions = PaymentService._patch_division(tournament, division_id, payment_data)
        update: dict[str, Any] = {"divisions": divisions}

        status = tournament.get("status")
        if auto_status:
            suggested = suggest_tournament_status(
                {**tournament, "divisions": divisions}, now, trace=log_status_decision
            )
            if suggested is not None and suggested != status:
                logger.info(
                    f"Auto-updating tournament {tournament_id} status from "
                    f"{status} to {suggested} after payment"
                )
                update["status"] = suggested
                status = suggested

        db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).update(update)
        logger.info(
            f"Recorded payment of {record['amount']} for {participant_id} "
            f"in division {division_id} of tournament {tournament_id}"
        )
        return {"record": record, "status": status}

    @staticmethod
    def remove_division_payment(
        db: Client, tournament_id: str, division_id: str, participant_id: str
    ) -> None:
        """Delete a participant's payment record from a tournament division."""
        tournament = TournamentService.get_tournament(db, tournament_id)
        division = PaymentService._find_division(tournament, division_id)
        payment_data = dict(division.get("paymentData") or {})
        if participant_id not in payment_data:
            raise NotFoundError(f"No payment recorded for participant {participant_id}.")

        del payment_data[participant_id]
        divisions = PaymentService._patch_division(tournament, division_id, payment_data)
        db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).update(
            {"divisions": divisions}
        )
        logger.info(
            f"Removed payment for {participant_id} in division {division_id} "
            f"of tournament {tournament_id}"
        )

    @staticmethod
    def record_league_payment(
        db: Client,
        league_id: str,
        participant_id: str,
        amount: Any,
        recorded_by: str | None = None,
        method: str = DEFAULT_PAYMENT_METHOD,
        notes: str | None = None,
    ) -> PaymentRecord:
        """Record (or replace) a participant's league registration payment."""
        league = LeagueService.get_league(db, league_id)
        participants = get_participants(league)
        if participant_id not in participants:
            raise ValidationError(
                f"Participant {participant_id} is not registered in league {league_id}."
            )

        record = create_payment_record(
            amount, participant_id, method=method, notes=notes, recorded_by=recorded_by
        )
        payment_data = prune_orphaned_payments(participants, league.get("paymentData"))
        payment_data[participant_id] = record

        db.collection(LEAGUES_COLLECTION).document(league_id).update(
            {"paymentData": payment_data}
        )
        logger.info(
            f"Recorded payment of {record['amount']} for {participant_id} "
            f"in league {league_id}"
        )
        return record

    @staticmethod
    def remove_league_payment(db: Client, league_id: str, participant_id: str) -> None:
        """Delete a participant's league payment record."""
        league = LeagueService.get_league(db, league_id)
        payment_data = dict(league.get("paymentData") or {})
        if participant_id not in payment_data:
            raise NotFoundError(f"No payment recorded for participant {participant_id}.")

        del payment_data[participant_id]
        db.collection(LEAGUES_COLLECTION).document(league_id).update(
            {"paymentData": payment_data}
        )
        logger.info(f"Removed payment for {participant_id} in league {league_id}")
