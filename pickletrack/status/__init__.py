"""Lifecycle status automation for tournaments and leagues."""

from .utils import (
    can_league_transition_to,
    can_tournament_transition_to,
    is_league_status_stale,
    is_tournament_status_stale,
    log_status_decision,
    suggest_league_status,
    suggest_tournament_status,
)

__all__ = [
    "can_league_transition_to",
    "can_tournament_transition_to",
    "is_league_status_stale",
    "is_tournament_status_stale",
    "log_status_decision",
    "suggest_league_status",
    "suggest_tournament_status",
]
