"""
Domain errors for the hold lifecycle.

The route layer maps each kind to its own status code; anything that is
not a HoldError is an internal failure.
"""


class HoldError(Exception):
    """Base class for expected hold outcomes that are not successes."""


class ValidationError(HoldError):
    """A request field is missing or malformed. No store access happened."""


class HoldExpiredError(HoldError):
    """The hold expired, was already consumed, or never existed."""


class InvalidHoldStateError(HoldError):
    """The hold exists but is not in a state that allows the operation."""
