"""Background job correcting stale tournament and league statuses."""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any

from pickletrack.constants import LEAGUES_COLLECTION, TOURNAMENTS_COLLECTION

from .utils import log_status_decision, suggest_league_status, suggest_tournament_status

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

logger = logging.getLogger(__name__)

SUGGESTERS = {
    TOURNAMENTS_COLLECTION: suggest_tournament_status,
    LEAGUES_COLLECTION: suggest_league_status,
}


def reconcile_event_statuses(
    db: Client, now: datetime.datetime | None = None, dry_run: bool = False
) -> list[dict[str, Any]]:
    """Write the suggested status of every tournament and league that is stale.

    Returns one ``{collection, id, from, to}`` entry per stale document,
    whether or not it was written.
    """
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)

    changes: list[dict[str, Any]] = []
    for collection, suggest in SUGGESTERS.items():
        for doc in db.collection(collection).stream():
            data = doc.to_dict()
            if not data:
                continue
            data["id"] = doc.id
            suggested = suggest(data, now, trace=log_status_decision)
            if suggested is None or suggested == data.get("status"):
                continue

            changes.append(
                {
                    "collection": collection,
                    "id": doc.id,
                    "from": data.get("status"),
                    "to": suggested,
                }
            )
            if not dry_run:
                db.collection(collection).document(doc.id).update({"status": suggested})

    logger.info(
        f"Status reconciliation found {len(changes)} stale documents"
        f"{' (dry run)' if dry_run else ''}"
    )
    return changes
