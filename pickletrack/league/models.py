"""Data models for the league blueprint."""

from __future__ import annotations

from typing import Any

from pickletrack.core.types import FirestoreDocument
from pickletrack.payments.models import PaymentRecord


class League(FirestoreDocument, total=False):
    """A league document in Firestore. Leagues have no divisions."""

    name: str
    description: str
    status: str
    skillLevel: str
    startDate: Any
    endDate: Any
    registrationFee: float
    paymentMode: str
    maxParticipants: int
    participants: list[str]
    paymentData: dict[str, PaymentRecord]
