"""
Element resolution exceptions.
"""

from typing import List, Optional

from healing_locator.exceptions.base import HealingLocatorError


class ResolutionError(HealingLocatorError):
    """Base exception for element resolution errors."""
    pass


class ResolutionFailure(ResolutionError):
    """
    Element definitively not found.

    Raised when every candidate query of a target (and, for adaptive
    resolution, every similarity recovery technique) has been exhausted.
    The message lists the attempted queries so the candidate list for the
    identifier can be updated.

    Attributes:
        identifier: Target identifier
        reason: Short reason string
        attempted: Descriptions of the queries that were tried, in order
    """

    def __init__(self, identifier: str, reason: str, attempted: Optional[List[str]] = None):
        self.identifier = identifier
        self.reason = reason
        self.attempted = list(attempted or [])
        message = f"Could not resolve '{identifier}': {reason}"
        if self.attempted:
            message += f" (tried: {', '.join(self.attempted)})"
        super().__init__(message)


class InvalidTargetError(ResolutionError, ValueError):
    """
    Target description cannot be built from the supplied fields.

    Raised before any page interaction, so callers can tell misuse
    apart from an element that is not on the page.
    """

    def __init__(self, message: str, identifier: Optional[str] = None):
        super().__init__(message, {"identifier": identifier} if identifier else None)
        self.identifier = identifier


class InvalidQueryError(ResolutionError, ValueError):
    """A candidate query was constructed with missing or invalid fields."""
    pass
