"""
Domain errors raised by the services.

Every error is raised before any write, so a rejected action leaves the
store untouched. Not-found conditions are not errors: they return None or
False.
"""


class SuggestionBoxError(Exception):
    """Base class for rejected user actions."""


class ValidationError(SuggestionBoxError, ValueError):
    """Input failed validation (missing fields, blank comment, bad password)."""


class DuplicateRegistrationError(SuggestionBoxError):
    """A stored user already has this email."""


class NoCurrentUserError(SuggestionBoxError, RuntimeError):
    """The operation needs a logged-in user and nobody is logged in."""
