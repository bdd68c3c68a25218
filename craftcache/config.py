"""Shared cache and generator constants."""

import os

# Element names longer than this are rejected before touching the store
ELEMENT_NAME_MAX_LENGTH = 256

# Seconds a SQLite connection waits on a locked database before failing
SQLITE_BUSY_TIMEOUT = float(os.environ.get("SQLITE_BUSY_TIMEOUT", "15"))

# Upstream pair generator
GENERATOR_BASE_URL = os.environ.get("GENERATOR_BASE_URL", "https://neal.fun")
GENERATOR_TIMEOUT = float(os.environ.get("GENERATOR_TIMEOUT", "10"))
GENERATOR_USER_AGENT = os.environ.get(
    "GENERATOR_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.15; rv:122.0) Gecko/20100101 Firefox/122.0",
)
# Result text the generator uses for "these two do not combine"
NOTHING_RESULT = "Nothing"

# Explorer pacing
EXPLORE_DELAY_SECONDS = float(os.environ.get("EXPLORE_DELAY_SECONDS", "0.5"))
EXPLORE_MAX_IDLE_DRAWS = 1000
EXPLORE_MAX_FAILURES = 5

STARTER_ELEMENTS = (
    ("Water", "💧"),
    ("Fire", "🔥"),
    ("Wind", "🌬️"),
    ("Earth", "🌍"),
)
