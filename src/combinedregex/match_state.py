"""
Result values of a combined regex evaluation.

A `MatchResult` is the outcome of running a composite pattern against one
string: either no match, or the position of the first pattern that matched.
Results are immutable value objects, which lets the memoizing decorator keep
them in its cache and hand the same instance out on every repeated query.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of matching one string against a pattern set.

    Attributes:
        position: Position of the first matching pattern, or None when no
            pattern matched.

    """

    position: int | None = None

    @property
    def matched(self) -> bool:
        """Whether any pattern matched."""
        return self.position is not None

    def __str__(self) -> str:
        """Return a human-readable representation of the result."""
        if self.position is None:
            return "no match"
        return f"pattern #{self.position}"


NO_MATCH = MatchResult()
"""Shared result for strings that match none of the patterns."""
