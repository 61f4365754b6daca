"""Base combined regex abstract class."""

from abc import ABC, abstractmethod

from .errors import NoMatchError

__all__ = ["AbstractCombinedRegex"]


class AbstractCombinedRegex(ABC):
    """
    Query contract shared by every combined regex.

    A combined regex answers, with a single evaluation, whether a string matches
    any of several patterns and which one of them matched first.
    """

    @property
    @abstractmethod
    def patterns(self) -> tuple[str, ...]:
        """Regular expressions that were combined, in priority order."""
        raise NotImplementedError

    @property
    @abstractmethod
    def flags(self) -> str:
        """Flags applied to all regular expressions."""
        raise NotImplementedError

    @property
    @abstractmethod
    def compiled_pattern(self) -> str:
        """The compiled composite pattern."""
        raise NotImplementedError

    @abstractmethod
    def matches(self, string: str) -> bool:
        """Return whether the string matches any of the patterns."""
        raise NotImplementedError

    @abstractmethod
    def matching_pattern(self, string: str) -> str:
        """
        Return the first pattern that matches the string.

        Raises:
            NoMatchError: If the string does not match any of the patterns.

        """
        raise NotImplementedError

    @abstractmethod
    def matching_pattern_index(self, string: str) -> int:
        """
        Return the position of the first pattern that matches the string.

        Raises:
            NoMatchError: If the string does not match any of the patterns.

        """
        raise NotImplementedError

    def _no_match(self, string: str) -> NoMatchError:
        return NoMatchError(self.compiled_pattern, string)
