"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_PASSWORD_LENGTH = 6
RESET_TOKEN_TTL_HOURS = 24
ONBOARDING_DETAILS = "Setting up workstation"
