"""
Canonical constants for the Avito stats proxy.
Centralizing these values keeps the token gate, the adapters and the
aggregator in agreement about field names and time margins.
"""

# Token lifecycle
TOKEN_REFRESH_MARGIN_SECONDS = 60   # Treat a token as stale 60s before it really expires
DEFAULT_TOKEN_TTL_SECONDS = 3600    # Used when the token response has no expires_in

# Grouping
DEFAULT_PERIOD = "day"

# Upstream field candidates, checked in order (first defined value wins)
DATE_KEYS = ("date", "day", "dt")

ITEM_RECORD_LIST_KEYS = ("result", "data")          # Concatenated
ITEM_SERIES_KEYS = ("stats", "dates", "statistics")  # First non-empty wins
VIEWS_KEYS = ("views", "uniqViews", "totalViews")
CONTACTS_KEYS = ("contacts", "uniqContacts", "totalContacts")

CALL_RECORD_LIST_KEYS = ("result", "data")          # First non-empty wins
CALLS_KEYS = ("calls", "success_calls", "total")
