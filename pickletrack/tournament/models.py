"""Data models for the tournament blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from pickletrack.core.types import FirestoreDocument
from pickletrack.payments.models import PaymentRecord


class Division(TypedDict, total=False):
    """A sub-category of a tournament, stored inside the tournament document."""

    id: str
    name: str
    eventType: str
    skillLevel: str
    entryFee: float
    maxParticipants: int | None
    paymentMode: str  # individual/group
    participants: list[str]
    paymentData: dict[str, PaymentRecord]
    status: str


class Tournament(FirestoreDocument, total=False):
    """A tournament document in Firestore."""

    name: str
    description: str
    status: str
    eventDate: Any
    registrationDeadline: Any
    location: str
    divisions: list[Division]

    # Legacy flat fields, only on tournaments created before divisions
    entryFee: float
    participants: list[str]
    paymentData: dict[str, PaymentRecord]
