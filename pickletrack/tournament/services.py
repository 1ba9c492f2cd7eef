"""Service layer for tournament documents."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, cast

from pickletrack.constants import TOURNAMENT_STATUSES, TOURNAMENTS_COLLECTION
from pickletrack.errors import NotFoundError, StatusTransitionError, ValidationError
from pickletrack.payments.utils import (
    calculate_division_payment_summary,
    calculate_tournament_payment_summary,
    count_tournament_participants,
    get_divisions,
    is_division_tournament,
)
from pickletrack.status.utils import (
    can_tournament_transition_to,
    log_status_decision,
    suggest_tournament_status,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from .models import Tournament

logger = logging.getLogger(__name__)


class TournamentService:
    """Handles data access and status updates for tournaments."""

    @staticmethod
    def get_tournament(db: Client, tournament_id: str) -> Tournament:
        """Fetch a tournament snapshot, raising NotFoundError if it is missing."""
        doc = cast(
            "DocumentSnapshot",
            db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).get(),
        )
        data = doc.to_dict() if doc.exists else None
        if not data:
            raise NotFoundError(f"Tournament {tournament_id} not found.")
        data["id"] = doc.id
        return cast("Tournament", data)

    @staticmethod
    def list_tournaments(db: Client) -> list[Tournament]:
        """Fetch every tournament snapshot."""
        tournaments = []
        for doc in db.collection(TOURNAMENTS_COLLECTION).stream():
            data = doc.to_dict()
            if data:
                data["id"] = doc.id
                tournaments.append(cast("Tournament", data))
        return tournaments

    @staticmethod
    def get_payment_overview(
        tournament: Tournament, now: datetime.datetime | None = None
    ) -> dict[str, Any]:
        """Summarise payments and the suggested status for one tournament."""
        divisions = []
        if is_division_tournament(tournament):
            divisions = [
                {
                    "id": division.get("id"),
                    "name": division.get("name"),
                    "entry_fee": division.get("entryFee", 0),
                    "summary": calculate_division_payment_summary(division),
                }
                for division in get_divisions(tournament)
            ]

        suggested = suggest_tournament_status(tournament, now)
        return {
            "id": tournament.get("id"),
            "name": tournament.get("name"),
            "status": tournament.get("status"),
            "summary": calculate_tournament_payment_summary(tournament),
            "divisions": divisions,
            "total_participants": count_tournament_participants(tournament),
            "suggested_status": suggested,
            "is_stale": suggested != tournament.get("status"),
        }

    @staticmethod
    def apply_suggested_status(
        db: Client, tournament_id: str, now: datetime.datetime | None = None
    ) -> dict[str, Any]:
        """Persist the suggested status if it differs from the stored one."""
        tournament = TournamentService.get_tournament(db, tournament_id)
        previous = tournament.get("status")
        suggested = suggest_tournament_status(tournament, now, trace=log_status_decision)

        changed = suggested is not None and suggested != previous
        if changed:
            db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).update(
                {"status": suggested}
            )
            logger.info(
                f"Tournament {tournament_id} status updated from {previous} to {suggested}"
            )
        return {
            "previous": previous,
            "status": suggested if changed else previous,
            "changed": changed,
        }

    @staticmethod
    def set_status(db: Client, tournament_id: str, new_status: str) -> None:
        """Manually change a tournament's status."""
        if new_status not in TOURNAMENT_STATUSES:
            raise ValidationError(f"Unknown tournament status: {new_status}")

        tournament = TournamentService.get_tournament(db, tournament_id)
        allowed, reason = can_tournament_transition_to(tournament, new_status)
        if not allowed:
            raise StatusTransitionError(reason)

        db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).update(
            {"status": new_status}
        )
        logger.info(
            f"Tournament {tournament_id} status set from "
            f"{tournament.get('status')} to {new_status}"
        )
