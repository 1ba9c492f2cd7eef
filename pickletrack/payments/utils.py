"""Payment calculations for tournaments, divisions and leagues.

Every function here is pure: it takes document snapshots (plain dicts as
stored in Firestore) and returns fresh summary dicts. Amounts are
accumulated as ``Decimal`` and returned as floats rounded to cents, so the
same snapshot always produces the same summary.
"""

from __future__ import annotations

import datetime
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from pickletrack.constants import (
    DEFAULT_PAYMENT_METHOD,
    DIVISION_FEE_FIELD,
    LEAGUE_FEE_FIELD,
    PAYMENT_STATUS_OVERPAID,
    PAYMENT_STATUS_PAID,
    PAYMENT_STATUS_PARTIAL,
    PAYMENT_STATUS_UNPAID,
    TOURNAMENT_FEE_FIELD,
    UNTRACKED_EVENT_STATUSES,
)
from pickletrack.errors import ValidationError

from .models import (
    PaymentRecord,
    PaymentStatusResult,
    PaymentSummary,
    PortfolioSummary,
    ValidationReport,
)

ZERO = Decimal("0")
CENT = Decimal("0.01")
TENTH = Decimal("0.1")


def _to_decimal(value: Any) -> Decimal | None:
    """Parse a stored amount, returning None when it is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite():
        return None
    return number


def _money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def _rate(count: int, total: int) -> float:
    """Percentage of ``count`` in ``total`` with one decimal place."""
    if total <= 0:
        return 100.0
    rate = Decimal(count) * 100 / Decimal(total)
    return float(rate.quantize(TENTH, rounding=ROUND_HALF_UP))


def _fee(event: Mapping[str, Any], fee_field: str) -> Decimal:
    """Read a fee field; missing or malformed fees count as a free event."""
    fee = _to_decimal(event.get(fee_field))
    if fee is None:
        return ZERO
    return fee


def get_participants(event: Mapping[str, Any]) -> list[str]:
    """Return the participant ids of an event; a malformed field counts as empty."""
    participants = event.get("participants")
    if isinstance(participants, (list, tuple)):
        return list(participants)
    return []


def _payment_data(event: Mapping[str, Any]) -> Mapping[str, Any]:
    payment_data = event.get("paymentData")
    if isinstance(payment_data, Mapping):
        return payment_data
    return {}


def validate_payment_amount(amount: Any) -> bool:
    """Return True if ``amount`` is a finite, non-negative number."""
    number = _to_decimal(amount)
    return number is not None and number >= 0


def _evaluate(
    participant_id: str, payment_data: Mapping[str, Any], fee: Decimal
) -> tuple[str, Decimal, Decimal, Decimal]:
    """Classify one participant as (status, paid, owed, overpaid)."""
    payment = payment_data.get(participant_id) if payment_data else None
    amount = None
    if isinstance(payment, Mapping):
        amount = _to_decimal(payment.get("amount"))
    if amount is None or amount < 0:
        amount = ZERO

    if amount == 0:
        return PAYMENT_STATUS_UNPAID, ZERO, fee, ZERO
    if amount < fee:
        return PAYMENT_STATUS_PARTIAL, amount, fee - amount, ZERO
    if amount == fee:
        return PAYMENT_STATUS_PAID, amount, ZERO, ZERO
    return PAYMENT_STATUS_OVERPAID, amount, ZERO, amount - fee


def get_participant_payment_status(
    participant_id: str, payment_data: Mapping[str, Any] | None, fee: Any
) -> PaymentStatusResult:
    """Calculate the payment status of a single participant.

    A missing record, or one whose amount is not a valid non-negative number,
    counts as nothing paid. Callers should special-case free events instead
    of evaluating participants against a zero fee.
    """
    fee_value = _to_decimal(fee)
    if fee_value is None or fee_value < 0:
        fee_value = ZERO
    if not isinstance(payment_data, Mapping):
        payment_data = {}

    status, paid, owed, overpaid = _evaluate(participant_id, payment_data, fee_value)
    return {
        "status": status,
        "amount_paid": _money(paid),
        "amount_owed": _money(owed),
        "overpaid_amount": _money(overpaid),
    }


@dataclass
class _PaymentTally:
    """Running totals while aggregating participants or events."""

    participants: int = 0
    expected: Decimal = ZERO
    paid: Decimal = ZERO
    owed: Decimal = ZERO
    overpaid: Decimal = ZERO
    paid_count: int = 0
    partial_count: int = 0
    unpaid_count: int = 0
    overpaid_count: int = 0

    def add_participant(
        self, status: str, paid: Decimal, owed: Decimal, overpaid: Decimal
    ) -> None:
        self.participants += 1
        self.paid += paid
        self.owed += owed
        self.overpaid += overpaid
        if status == PAYMENT_STATUS_PAID:
            self.paid_count += 1
        elif status == PAYMENT_STATUS_PARTIAL:
            self.partial_count += 1
        elif status == PAYMENT_STATUS_OVERPAID:
            self.overpaid_count += 1
        else:
            self.unpaid_count += 1

    def merge(self, other: _PaymentTally | None) -> None:
        if other is None:
            return
        self.participants += other.participants
        self.expected += other.expected
        self.paid += other.paid
        self.owed += other.owed
        self.overpaid += other.overpaid
        self.paid_count += other.paid_count
        self.partial_count += other.partial_count
        self.unpaid_count += other.unpaid_count
        self.overpaid_count += other.overpaid_count

    def to_summary(self) -> PaymentSummary:
        if self.participants == 0:
            return _free_summary(0)
        return {
            "total_participants": self.participants,
            "total_expected": _money(self.expected),
            "total_paid": _money(self.paid),
            "total_owed": _money(self.owed),
            "total_overpaid": _money(self.overpaid),
            "paid_count": self.paid_count,
            "partial_count": self.partial_count,
            "unpaid_count": self.unpaid_count,
            "overpaid_count": self.overpaid_count,
            "is_fully_paid": self.owed == 0,
            "payment_rate": _rate(self.paid_count, self.participants),
            "has_payment_issues": self.overpaid > 0 or self.paid > self.expected,
        }


def _free_summary(participant_count: int) -> PaymentSummary:
    """Summary for an event with no fee or no participants."""
    return {
        "total_participants": participant_count,
        "total_expected": 0.0,
        "total_paid": 0.0,
        "total_owed": 0.0,
        "total_overpaid": 0.0,
        "paid_count": 0,
        "partial_count": 0,
        "unpaid_count": participant_count,
        "overpaid_count": 0,
        # Nothing is owed, so a free event never blocks a status change.
        "is_fully_paid": True,
        "payment_rate": 100.0,
        "has_payment_issues": False,
    }


def _event_tally(event: Mapping[str, Any], fee_field: str) -> _PaymentTally | None:
    """Tally every participant of a fee-bearing event, or None if it is free."""
    fee = _fee(event, fee_field)
    participants = get_participants(event)
    if fee <= 0 or not participants:
        return None

    payment_data = _payment_data(event)
    tally = _PaymentTally(expected=fee * len(participants))
    for participant_id in participants:
        tally.add_participant(*_evaluate(participant_id, payment_data, fee))
    return tally


def calculate_event_payment_summary(
    event: Mapping[str, Any] | None, fee_field: str = TOURNAMENT_FEE_FIELD
) -> PaymentSummary:
    """Calculate the payment summary of any flat event (division or league)."""
    event = event or {}
    tally = _event_tally(event, fee_field)
    if tally is None:
        return _free_summary(len(get_participants(event)))
    return tally.to_summary()


def calculate_division_payment_summary(
    division: Mapping[str, Any] | None,
) -> PaymentSummary:
    """Calculate the payment summary of one tournament division."""
    return calculate_event_payment_summary(division, DIVISION_FEE_FIELD)


def calculate_league_payment_summary(league: Mapping[str, Any] | None) -> PaymentSummary:
    """Calculate the payment summary of a league."""
    return calculate_event_payment_summary(league, LEAGUE_FEE_FIELD)


def is_division_tournament(tournament: Mapping[str, Any]) -> bool:
    """Return True for tournaments organised into divisions.

    Older tournaments predate divisions and carry ``entryFee``,
    ``participants`` and ``paymentData`` directly on the document.
    """
    divisions = tournament.get("divisions")
    return isinstance(divisions, (list, tuple)) and len(divisions) > 0


def get_divisions(tournament: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the well-formed divisions of a tournament."""
    if not is_division_tournament(tournament):
        return []
    return [d for d in tournament["divisions"] if isinstance(d, Mapping)]


def get_fee_divisions(tournament: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the divisions that charge an entry fee."""
    return [d for d in get_divisions(tournament) if _fee(d, DIVISION_FEE_FIELD) > 0]


def _legacy_tournament_tally(tournament: Mapping[str, Any]) -> _PaymentTally | None:
    return _event_tally(tournament, TOURNAMENT_FEE_FIELD)


def _division_tournament_tally(tournament: Mapping[str, Any]) -> _PaymentTally:
    tally = _PaymentTally()
    for division in get_fee_divisions(tournament):
        tally.merge(_event_tally(division, DIVISION_FEE_FIELD))
    return tally


def _legacy_tournament_summary(tournament: Mapping[str, Any]) -> PaymentSummary:
    return calculate_event_payment_summary(tournament, TOURNAMENT_FEE_FIELD)


def _division_tournament_summary(tournament: Mapping[str, Any]) -> PaymentSummary:
    return _division_tournament_tally(tournament).to_summary()


def calculate_tournament_payment_summary(
    tournament: Mapping[str, Any] | None,
) -> PaymentSummary:
    """Calculate the payment summary of a tournament.

    Division-based tournaments sum the divisions that charge a fee; free
    divisions are left out of the financial summary entirely. Legacy
    tournaments are summarised from their flat fields.
    """
    tournament = tournament or {}
    if is_division_tournament(tournament):
        return _division_tournament_summary(tournament)
    return _legacy_tournament_summary(tournament)


def count_tournament_participants(tournament: Mapping[str, Any] | None) -> int:
    """Count participants across every division, free ones included."""
    tournament = tournament or {}
    if is_division_tournament(tournament):
        return sum(len(get_participants(d)) for d in get_divisions(tournament))
    return len(get_participants(tournament))


def calculate_overall_payment_summary(
    tournaments: Iterable[Mapping[str, Any]],
    leagues: Iterable[Mapping[str, Any]] = (),
) -> PortfolioSummary:
    """Roll up payments across all tournaments and leagues.

    Free events count toward the event totals but not the financial rollup.
    """
    tournaments = [t for t in tournaments if isinstance(t, Mapping)]
    leagues = [lg for lg in leagues if isinstance(lg, Mapping)]

    tally = _PaymentTally()
    total_divisions = paid_divisions = paid_tournaments = paid_leagues = 0

    for tournament in tournaments:
        if is_division_tournament(tournament):
            total_divisions += len(get_divisions(tournament))
            fee_divisions = get_fee_divisions(tournament)
            if not fee_divisions:
                continue
            paid_tournaments += 1
            paid_divisions += len(fee_divisions)
            tally.merge(_division_tournament_tally(tournament))
        elif _fee(tournament, TOURNAMENT_FEE_FIELD) > 0:
            paid_tournaments += 1
            tally.merge(_legacy_tournament_tally(tournament))

    for league in leagues:
        if _fee(league, LEAGUE_FEE_FIELD) > 0:
            paid_leagues += 1
            tally.merge(_event_tally(league, LEAGUE_FEE_FIELD))

    return {
        "total_events": len(tournaments) + len(leagues),
        "total_tournaments": len(tournaments),
        "total_leagues": len(leagues),
        "total_divisions": total_divisions,
        "paid_events": paid_tournaments + paid_leagues,
        "paid_tournaments": paid_tournaments,
        "paid_divisions": paid_divisions,
        "paid_leagues": paid_leagues,
        "total_expected": _money(tally.expected),
        "total_collected": _money(tally.paid),
        "total_owed": _money(tally.owed),
        "total_overpaid": _money(tally.overpaid),
        "participants_with_payments": tally.participants,
        "participants_paid": tally.paid_count,
        "payment_rate": _rate(tally.paid_count, tally.participants),
        "has_issues": tally.overpaid > 0,
    }


def filter_trackable_events(
    events: Iterable[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Drop archived and deleted events from the payment tracker."""
    return [
        e
        for e in events
        if not (isinstance(e.get("status"), str) and e["status"] in UNTRACKED_EVENT_STATUSES)
    ]


def create_payment_record(
    amount: Any,
    participant_id: str,
    date: str | None = None,
    method: str = DEFAULT_PAYMENT_METHOD,
    notes: str | None = None,
    recorded_by: str | None = None,
) -> PaymentRecord:
    """Build a payment record ready to be stored in a ``paymentData`` map.

    Raises:
        ValidationError: if ``amount`` is not a non-negative number.
    """
    number = _to_decimal(amount)
    if number is None or number < 0:
        raise ValidationError(f"Invalid payment amount: {amount!r}")

    value = _money(number)
    return {
        "amount": value,
        "date": date or datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "method": method or DEFAULT_PAYMENT_METHOD,
        "notes": notes or f"Payment of ${value:.2f}",
        "recordedBy": recorded_by,
        "participantId": participant_id,
    }


def prune_orphaned_payments(
    participants: Iterable[str] | None, payment_data: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Return a copy of ``payment_data`` without records for removed participants."""
    if not isinstance(payment_data, Mapping):
        return {}
    current = set(participants or [])
    return {pid: record for pid, record in payment_data.items() if pid in current}


def validate_event_payment_data(
    event: Mapping[str, Any], fee_field: str = TOURNAMENT_FEE_FIELD
) -> ValidationReport:
    """Check a flat event's fee, participant list and payment map."""
    errors: list[str] = []

    fee = _to_decimal(event.get(fee_field))
    if fee is None or fee < 0:
        errors.append(f"Invalid {fee_field}")

    participants = event.get("participants")
    if not isinstance(participants, (list, tuple)):
        errors.append("Invalid participants list")
        participants = []

    payment_data = event.get("paymentData")
    if payment_data is not None and not isinstance(payment_data, Mapping):
        errors.append("Invalid payment data structure")
    elif payment_data:
        for participant_id, payment in payment_data.items():
            if participant_id not in participants:
                errors.append(f"Payment record for non-participant: {participant_id}")
            amount = payment.get("amount") if isinstance(payment, Mapping) else None
            if not validate_payment_amount(amount):
                errors.append(f"Invalid payment amount for participant: {participant_id}")

    return {"is_valid": not errors, "errors": errors}


def validate_tournament_payment_data(tournament: Mapping[str, Any]) -> ValidationReport:
    """Validate a tournament, checking each division when it has them."""
    if not is_division_tournament(tournament):
        return validate_event_payment_data(tournament, TOURNAMENT_FEE_FIELD)

    errors: list[str] = []
    for division in get_divisions(tournament):
        report = validate_event_payment_data(division, DIVISION_FEE_FIELD)
        label = division.get("name") or division.get("id") or "division"
        errors.extend(f"{label}: {error}" for error in report["errors"])
    return {"is_valid": not errors, "errors": errors}


def validate_league_payment_data(league: Mapping[str, Any]) -> ValidationReport:
    """Validate a league's registration fee and payment map."""
    return validate_event_payment_data(league, LEAGUE_FEE_FIELD)
