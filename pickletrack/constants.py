"""Global constants for the pickletrack application."""

# Collection names
TOURNAMENTS_COLLECTION = "tournaments"
LEAGUES_COLLECTION = "leagues"

# Tournament lifecycle
TOURNAMENT_STATUS_DRAFT = "draft"
TOURNAMENT_STATUS_REGISTRATION_OPEN = "registration_open"
TOURNAMENT_STATUS_REGISTERED = "registered"
TOURNAMENT_STATUS_IN_PROGRESS = "in_progress"
TOURNAMENT_STATUS_COMPLETED = "completed"
TOURNAMENT_STATUS_ARCHIVED = "archived"

TOURNAMENT_STATUSES = (
    TOURNAMENT_STATUS_DRAFT,
    TOURNAMENT_STATUS_REGISTRATION_OPEN,
    TOURNAMENT_STATUS_REGISTERED,
    TOURNAMENT_STATUS_IN_PROGRESS,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_ARCHIVED,
)

# League lifecycle
LEAGUE_STATUS_REGISTERED = "registered"
LEAGUE_STATUS_ACTIVE = "active"
LEAGUE_STATUS_COMPLETED = "completed"
LEAGUE_STATUS_ARCHIVED = "archived"

LEAGUE_STATUSES = (
    LEAGUE_STATUS_REGISTERED,
    LEAGUE_STATUS_ACTIVE,
    LEAGUE_STATUS_COMPLETED,
    LEAGUE_STATUS_ARCHIVED,
)

# Statuses the automation never overwrites
STICKY_STATUSES = frozenset({"completed", "archived"})

# Events hidden from the payment tracker
UNTRACKED_EVENT_STATUSES = frozenset({"archived", "deleted"})

# Participant payment states
PAYMENT_STATUS_UNPAID = "unpaid"
PAYMENT_STATUS_PARTIAL = "partial"
PAYMENT_STATUS_PAID = "paid"
PAYMENT_STATUS_OVERPAID = "overpaid"

PAYMENT_METHODS = ("manual", "individual", "group", "venmo", "cash", "check", "other")
DEFAULT_PAYMENT_METHOD = "manual"

# Document field names holding the per-participant fee
TOURNAMENT_FEE_FIELD = "entryFee"
DIVISION_FEE_FIELD = "entryFee"
LEAGUE_FEE_FIELD = "registrationFee"
