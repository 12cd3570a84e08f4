"""Validation and policy constants."""

from __future__ import annotations

# Usernames are stored lower-cased
USERNAME_PATTERN = r"^[a-z0-9._]+$"
USERNAME_MAX_LENGTH = 30

NAME_MAX_LENGTH = 100

# Phone: optional leading +, then digits, spaces, dashes, parentheses
PHONE_PATTERN = r"^\+?[0-9 ()\-]+$"
PHONE_MIN_DIGITS = 7
PHONE_MAX_DIGITS = 15

ADDRESS_MIN_LENGTH = 5
ADDRESS_MAX_LENGTH = 500

FEEDBACK_MAX_LENGTH = 2000

LOCATION_LABEL_MAX_LENGTH = 255

# Upper bound of the prefix range used by directory search
PREFIX_RANGE_END = "\uf8ff"

# Minimum accepted friends required to send an SOS alert
MIN_FRIENDS_FOR_ALERT = 1
