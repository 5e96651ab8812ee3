"""
Custom exception types for cuddlefish.

Runtime conditions (a failing ``git describe``, output that doesn't match the
describe pattern) are not exceptions: they are logged and reported as an
unknown status. The classes below cover configuration and programming errors.
"""


class CuddlefishError(Exception):
    """Base exception for cuddlefish errors."""

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize cuddlefish error.

        Args:
            message: Human-readable error message
            context: Additional context dict with details
        """
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error string for logging."""
        context_str = f" | Context: {self.context}" if self.context else ""
        return f"{self.message}{context_str}"


class InvalidPatternError(CuddlefishError, TypeError):
    """Describe pattern is neither a string nor a compiled regular expression."""

    def __init__(
        self,
        message: str = "describe pattern must be a string or a compiled re.Pattern",
        context: dict | None = None,
    ):
        super().__init__(message, context)


class ConfigFileError(CuddlefishError):
    """An explicitly requested config file is missing or malformed."""

    def __init__(self, message: str = "Invalid config file", context: dict | None = None):
        super().__init__(message, context)


class StrategyError(CuddlefishError):
    """A status-to-version strategy could not be resolved."""

    def __init__(self, message: str = "Invalid status-to-version strategy", context: dict | None = None):
        super().__init__(message, context)
