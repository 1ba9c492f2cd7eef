"""Service layer for league documents."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any, cast

from pickletrack.constants import LEAGUE_STATUSES, LEAGUES_COLLECTION
from pickletrack.errors import NotFoundError, StatusTransitionError, ValidationError
from pickletrack.payments.utils import calculate_league_payment_summary
from pickletrack.status.utils import (
    can_league_transition_to,
    log_status_decision,
    suggest_league_status,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from .models import League

logger = logging.getLogger(__name__)


class LeagueService:
    """Handles data access and status updates for leagues."""

    @staticmethod
    def get_league(db: Client, league_id: str) -> League:
        """Fetch a league snapshot, raising NotFoundError if it is missing."""
        doc = cast(
            "DocumentSnapshot", db.collection(LEAGUES_COLLECTION).document(league_id).get()
        )
        data = doc.to_dict() if doc.exists else None
        if not data:
            raise NotFoundError(f"League {league_id} not found.")
        data["id"] = doc.id
        return cast("League", data)

    @staticmethod
    def list_leagues(db: Client) -> list[League]:
        """Fetch every league snapshot."""
        leagues = []
        for doc in db.collection(LEAGUES_COLLECTION).stream():
            data = doc.to_dict()
            if data:
                data["id"] = doc.id
                leagues.append(cast("League", data))
        return leagues

    @staticmethod
    def get_payment_overview(
        league: League, now: datetime.datetime | None = None
    ) -> dict[str, Any]:
        """Summarise payments and the suggested status for one league."""
        suggested = suggest_league_status(league, now)
        return {
            "id": league.get("id"),
            "name": league.get("name"),
            "status": league.get("status"),
            "registration_fee": league.get("registrationFee", 0),
            "summary": calculate_league_payment_summary(league),
            "suggested_status": suggested,
            "is_stale": suggested != league.get("status"),
        }

    @staticmethod
    def apply_suggested_status(
        db: Client, league_id: str, now: datetime.datetime | None = None
    ) -> dict[str, Any]:
        """Persist the suggested status if it differs from the stored one."""
        league = LeagueService.get_league(db, league_id)
        previous = league.get("status")
        suggested = suggest_league_status(league, now, trace=log_status_decision)

        changed = suggested is not None and suggested != previous
        if changed:
            db.collection(LEAGUES_COLLECTION).document(league_id).update(
                {"status": suggested}
            )
            logger.info(f"League {league_id} status updated from {previous} to {suggested}")
        return {
            "previous": previous,
            "status": suggested if changed else previous,
            "changed": changed,
        }

    @staticmethod
    def set_status(db: Client, league_id: str, new_status: str) -> None:
        """Manually change a league's status."""
        if new_status not in LEAGUE_STATUSES:
            raise ValidationError(f"Unknown league status: {new_status}")

        league = LeagueService.get_league(db, league_id)
        allowed, reason = can_league_transition_to(league, new_status)
        if not allowed:
            raise StatusTransitionError(reason)

        db.collection(LEAGUES_COLLECTION).document(league_id).update({"status": new_status})
        logger.info(
            f"League {league_id} status set from {league.get('status')} to {new_status}"
        )
