"""Lifecycle status automation for tournaments and leagues.

The suggestion functions are pure: given a document snapshot and the current
time they return the status the document *should* have. Nothing here writes
to Firestore; callers decide whether to persist a suggestion.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pickletrack.constants import (
    LEAGUE_STATUS_ACTIVE,
    LEAGUE_STATUS_ARCHIVED,
    LEAGUE_STATUS_COMPLETED,
    STICKY_STATUSES,
    TOURNAMENT_STATUS_ARCHIVED,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_DRAFT,
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_STATUS_REGISTERED,
    TOURNAMENT_STATUS_REGISTRATION_OPEN,
)
from pickletrack.payments.utils import (
    calculate_tournament_payment_summary,
    get_divisions,
    get_participants,
    is_division_tournament,
)

logger = logging.getLogger(__name__)

StatusTrace = Callable[[dict[str, Any]], None]

# Manual transitions allowed from each tournament status. Draft may go anywhere.
TOURNAMENT_TRANSITIONS: dict[str, tuple[str, ...]] = {
    TOURNAMENT_STATUS_REGISTRATION_OPEN: (
        TOURNAMENT_STATUS_DRAFT,
        TOURNAMENT_STATUS_REGISTERED,
        TOURNAMENT_STATUS_IN_PROGRESS,
        TOURNAMENT_STATUS_COMPLETED,
    ),
    TOURNAMENT_STATUS_REGISTERED: (
        TOURNAMENT_STATUS_REGISTRATION_OPEN,
        TOURNAMENT_STATUS_IN_PROGRESS,
        TOURNAMENT_STATUS_COMPLETED,
    ),
    TOURNAMENT_STATUS_IN_PROGRESS: (
        TOURNAMENT_STATUS_REGISTERED,
        TOURNAMENT_STATUS_COMPLETED,
    ),
    TOURNAMENT_STATUS_COMPLETED: (TOURNAMENT_STATUS_ARCHIVED,),
    TOURNAMENT_STATUS_ARCHIVED: (),
}


def parse_event_datetime(value: Any) -> datetime.datetime | None:
    """Parse a stored date into an aware datetime.

    Accepts datetimes (including Firestore timestamps), dates and ISO-8601
    strings. Naive values are read as UTC. Anything else yields None.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        parsed = datetime.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def _resolve_now(now: datetime.datetime | None) -> datetime.datetime:
    if now is None:
        return datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=datetime.timezone.utc)
    return now


def _is_sticky(status: Any) -> bool:
    # Stored statuses are not guaranteed to be hashable strings.
    return isinstance(status, str) and status in STICKY_STATUSES


def has_valid_divisions(tournament: Mapping[str, Any]) -> bool:
    """Return True if at least one division has a participant.

    A legacy tournament without divisions is treated as one implicit
    division holding its flat participant list.
    """
    if is_division_tournament(tournament):
        return any(get_participants(division) for division in get_divisions(tournament))
    return len(get_participants(tournament)) > 0


def _decide_tournament_status(
    tournament: Mapping[str, Any], now: datetime.datetime
) -> tuple[Any, str]:
    """Return (suggested status, name of the rule that decided it)."""
    current = tournament.get("status")
    if _is_sticky(current):
        return current, "sticky"

    valid_divisions = has_valid_divisions(tournament)
    all_paid = calculate_tournament_payment_summary(tournament)["is_fully_paid"]

    event_date = parse_event_datetime(tournament.get("eventDate"))
    if event_date is None:
        if (
            current == TOURNAMENT_STATUS_REGISTRATION_OPEN
            and all_paid
            and valid_divisions
        ):
            return TOURNAMENT_STATUS_REGISTERED, "paid_without_event_date"
        return current, "no_event_date"

    if now >= event_date:
        if valid_divisions:
            return TOURNAMENT_STATUS_COMPLETED, "event_date_passed"
        return current, "event_date_passed_without_participants"

    # Checked before the registration deadline, so a fully paid tournament
    # reports registered even once the deadline has passed.
    if valid_divisions and all_paid:
        return TOURNAMENT_STATUS_REGISTERED, "fully_paid"

    deadline = parse_event_datetime(tournament.get("registrationDeadline"))
    if deadline is not None and now >= deadline and valid_divisions:
        return TOURNAMENT_STATUS_IN_PROGRESS, "registration_deadline_passed"

    if not valid_divisions and current in (
        TOURNAMENT_STATUS_IN_PROGRESS,
        TOURNAMENT_STATUS_REGISTERED,
    ):
        return TOURNAMENT_STATUS_REGISTRATION_OPEN, "no_participants"

    return current, "unchanged"


def _decide_league_status(
    league: Mapping[str, Any], now: datetime.datetime
) -> tuple[Any, str]:
    current = league.get("status")
    if _is_sticky(current):
        return current, "sticky"

    start = parse_event_datetime(league.get("startDate"))
    end = parse_event_datetime(league.get("endDate"))
    if start is None or end is None:
        return current, "missing_dates"

    if now >= end:
        return LEAGUE_STATUS_COMPLETED, "end_date_passed"
    if start <= now < end:
        return LEAGUE_STATUS_ACTIVE, "in_season"
    if now < start:
        return current, "before_start"
    return current, "unchanged"


def _emit(
    trace: StatusTrace | None,
    entity: str,
    snapshot: Mapping[str, Any],
    suggested: Any,
    rule: str,
) -> None:
    if trace is None:
        return
    trace(
        {
            "entity": entity,
            "id": snapshot.get("id"),
            "current_status": snapshot.get("status"),
            "suggested_status": suggested,
            "rule": rule,
        }
    )


def suggest_tournament_status(
    tournament: Mapping[str, Any] | None,
    now: datetime.datetime | None = None,
    trace: StatusTrace | None = None,
) -> Any:
    """Return the status a tournament should have at ``now``.

    Rules are checked in order and the first match wins: completed and
    archived never change; tournaments without an event date may only move
    from registration_open to registered once fully paid; a passed event
    date completes a tournament with participants; a fully paid tournament
    is registered; a passed registration deadline starts play; a tournament
    that lost all its participants reopens registration.
    """
    tournament = tournament or {}
    suggested, rule = _decide_tournament_status(tournament, _resolve_now(now))
    _emit(trace, "tournament", tournament, suggested, rule)
    return suggested


def suggest_league_status(
    league: Mapping[str, Any] | None,
    now: datetime.datetime | None = None,
    trace: StatusTrace | None = None,
) -> Any:
    """Return the status a league should have at ``now``."""
    league = league or {}
    suggested, rule = _decide_league_status(league, _resolve_now(now))
    _emit(trace, "league", league, suggested, rule)
    return suggested


def is_tournament_status_stale(
    tournament: Mapping[str, Any], now: datetime.datetime | None = None
) -> bool:
    """Return True if the stored tournament status differs from the suggestion."""
    return suggest_tournament_status(tournament, now) != tournament.get("status")


def is_league_status_stale(
    league: Mapping[str, Any], now: datetime.datetime | None = None
) -> bool:
    """Return True if the stored league status differs from the suggestion."""
    return suggest_league_status(league, now) != league.get("status")


def log_status_decision(decision: dict[str, Any]) -> None:
    """Trace hook that logs each status decision."""
    current = decision.get("current_status")
    suggested = decision.get("suggested_status")
    message = (
        f"{decision.get('entity')} {decision.get('id')}: "
        f"{current} -> {suggested} ({decision.get('rule')})"
    )
    if current != suggested:
        logger.info(f"Status change suggested for {message}")
    else:
        logger.debug(f"Status unchanged for {message}")


def can_tournament_transition_to(
    tournament: Mapping[str, Any], new_status: str
) -> tuple[bool, str]:
    """Check whether an organizer may manually move a tournament to ``new_status``."""
    current = tournament.get("status")
    if current == TOURNAMENT_STATUS_DRAFT:
        return True, ""
    if current == TOURNAMENT_STATUS_COMPLETED and new_status != TOURNAMENT_STATUS_ARCHIVED:
        return False, "Completed tournaments can only be archived"
    if current == TOURNAMENT_STATUS_ARCHIVED:
        return False, "Archived tournaments cannot be modified"
    if isinstance(current, str) and new_status in TOURNAMENT_TRANSITIONS.get(current, ()):
        return True, ""
    return False, f"Cannot transition from {current} to {new_status}"


def can_league_transition_to(
    league: Mapping[str, Any], new_status: str
) -> tuple[bool, str]:
    """Check whether an organizer may manually move a league to ``new_status``."""
    current = league.get("status")
    if current == LEAGUE_STATUS_ARCHIVED:
        return False, "Archived leagues cannot be modified"
    if current == LEAGUE_STATUS_COMPLETED and new_status != LEAGUE_STATUS_ARCHIVED:
        return False, "Completed leagues can only be archived"
    return True, ""
