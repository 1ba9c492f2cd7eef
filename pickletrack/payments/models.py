"""Data models for payment tracking."""

from __future__ import annotations

from typing import TypedDict


class PaymentRecord(TypedDict, total=False):
    """A single payment stored in a division or league ``paymentData`` map."""

    amount: float
    date: str
    method: str
    notes: str
    recordedBy: str | None
    participantId: str


class PaymentStatusResult(TypedDict):
    """Payment state of one participant against a fixed fee."""

    status: str
    amount_paid: float
    amount_owed: float
    overpaid_amount: float


class PaymentSummary(TypedDict):
    """Aggregate payment state of a division, tournament or league."""

    total_participants: int
    total_expected: float
    total_paid: float
    total_owed: float
    total_overpaid: float
    paid_count: int
    partial_count: int
    unpaid_count: int
    overpaid_count: int
    is_fully_paid: bool
    payment_rate: float
    has_payment_issues: bool


class PortfolioSummary(TypedDict):
    """Payment rollup across every tournament and league."""

    total_events: int
    total_tournaments: int
    total_leagues: int
    total_divisions: int
    paid_events: int
    paid_tournaments: int
    paid_divisions: int
    paid_leagues: int
    total_expected: float
    total_collected: float
    total_owed: float
    total_overpaid: float
    participants_with_payments: int
    participants_paid: int
    payment_rate: float
    has_issues: bool


class ValidationReport(TypedDict):
    """Result of checking an event's payment data for consistency."""

    is_valid: bool
    errors: list[str]
