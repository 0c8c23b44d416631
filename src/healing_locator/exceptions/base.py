"""
Root of the exception tree.
"""


class HealingLocatorError(Exception):
    """
    Catch-all base for errors raised by this package.

    Attributes:
        message: Human-readable error message
        details: Extra context, appended to str() when present
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        return f"{self.message} - Details: {self.details}"


class ConfigurationError(HealingLocatorError):
    """Bad config file, unreadable YAML or invalid setting values."""


class LearningDataError(HealingLocatorError):
    """Malformed export blob or unreadable learning file."""
