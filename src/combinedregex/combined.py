"""Matching a string against several regular expressions at once."""

from collections.abc import Sequence

from .base import AbstractCombinedRegex
from .compiler import CompiledPattern, compile_patterns

__all__ = ["CombinedRegex"]


class CombinedRegex(AbstractCombinedRegex):
    """
    Optimizes matching of multiple regular expressions.

    All patterns are compiled into one composite pattern, so every query runs
    the regex engine once regardless of the number of patterns. Matching is an
    unanchored search; patterns bring their own ``^`` and ``$`` when needed.

    Instances are immutable. ``with_patterns`` and ``with_flags`` return new
    instances and leave the original untouched.

    Example:
        >>> regexp = CombinedRegex(["first", "middle", "last"])
        >>> regexp.matching_pattern_index("middle")
        1

    """

    def __init__(self, patterns: Sequence[str], flags: str = "", *, branch_reset: bool = True) -> None:
        """
        Compile the patterns.

        Args:
            patterns: Regular expressions to combine, in priority order.
            flags: Flags to apply to all regular expressions.
            branch_reset: Whether to use the branch-reset layout when possible.

        Raises:
            InvalidInputError: If no pattern is given or a flag is unknown.
            PatternCompileError: If a pattern is not a valid regular expression.

        """
        self._patterns = tuple(patterns)
        self._flags = flags
        self._branch_reset = branch_reset
        self._compiled = compile_patterns(self._patterns, flags, branch_reset=branch_reset)

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        return f"{type(self).__name__}({list(self._patterns)!r}, {self._flags!r})"

    @property
    def patterns(self) -> tuple[str, ...]:
        """Regular expressions that were combined, in priority order."""
        return self._patterns

    @property
    def flags(self) -> str:
        """Flags applied to all regular expressions."""
        return self._flags

    @property
    def compiled_pattern(self) -> str:
        """The compiled composite pattern."""
        return self._compiled.pattern

    @property
    def compiled(self) -> CompiledPattern:
        """The composite with its bookkeeping, for diagnostics."""
        return self._compiled

    def matches(self, string: str) -> bool:
        """Return whether the string matches any of the patterns."""
        return self._compiled.search(string) is not None

    def matching_pattern(self, string: str) -> str:
        """Return the first pattern that matches the string."""
        return self._patterns[self.matching_pattern_index(string)]

    def matching_pattern_index(self, string: str) -> int:
        """Return the position of the first pattern that matches the string."""
        match = self._compiled.search(string)
        if match is None:
            raise self._no_match(string)
        return self._compiled.position(match)

    def with_patterns(self, patterns: Sequence[str]) -> "CombinedRegex":
        """Return a new instance combining other patterns with the same flags."""
        return type(self)(patterns, self._flags, branch_reset=self._branch_reset)

    def with_flags(self, flags: str) -> "CombinedRegex":
        """Return a new instance combining the same patterns with other flags."""
        return type(self)(self._patterns, flags, branch_reset=self._branch_reset)
