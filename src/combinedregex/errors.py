"""Exception types raised by CombinedRegex."""

__all__ = [
    "CombinedRegexError",
    "InvalidInputError",
    "NoMatchError",
    "PatternCompileError",
]


class CombinedRegexError(Exception):
    """Base class for all CombinedRegex errors."""


class InvalidInputError(CombinedRegexError, ValueError):
    """Raised at construction time for an empty pattern list, an empty pattern or unknown flags."""


class NoMatchError(CombinedRegexError, LookupError):
    """
    Raised when a string does not match any of the combined patterns.

    Attributes:
        compiled_pattern: The composite pattern the string was tested against.
        string: The string that failed to match.

    """

    def __init__(self, compiled_pattern: str, string: str) -> None:
        """Build the error message from the compiled pattern and the string."""
        self.compiled_pattern = compiled_pattern
        self.string = string
        super().__init__(f'Failed to match pattern "{compiled_pattern}" with string "{string}".')


class PatternCompileError(CombinedRegexError):
    """
    Raised when a pattern is not a valid regular expression for the engine.

    Attributes:
        pattern: The offending pattern (or composite body).
        index: Position of the offending pattern in the pattern list, if known.

    """

    def __init__(self, message: str, pattern: str, index: int | None = None) -> None:
        """Store the offending pattern alongside the message."""
        self.pattern = pattern
        self.index = index
        super().__init__(message)
