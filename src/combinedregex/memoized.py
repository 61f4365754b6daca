"""Memoizing decorator for combined regexes."""

import logging
import threading

from .base import AbstractCombinedRegex
from .errors import NoMatchError
from .match_state import NO_MATCH, MatchResult

__all__ = ["MemoizedCombinedRegex"]

logger = logging.getLogger(__name__)


class MemoizedCombinedRegex(AbstractCombinedRegex):
    """
    Caches the outcome of a combined regex per input string.

    Each distinct string is evaluated by the decorated regex at most once, through
    its `matching_pattern_index`. The other queries are answered from the cached
    result. The cache is keyed by the exact string and never evicts entries on its
    own; call `clear_cache` to release memory in long-lived processes.

    Instances may be shared between threads: a lock guards the cache, and it is
    held while a new string is evaluated.
    """

    def __init__(self, decorated: AbstractCombinedRegex) -> None:
        """
        Wrap a combined regex.

        Args:
            decorated: Any implementation of the combined regex contract.

        """
        self._decorated = decorated
        self._results: dict[str, MatchResult] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        """Return a developer-friendly representation."""
        return f"{type(self).__name__}({self._decorated!r})"

    @property
    def decorated(self) -> AbstractCombinedRegex:
        """The wrapped combined regex."""
        return self._decorated

    @property
    def patterns(self) -> tuple[str, ...]:
        """Regular expressions that were combined, in priority order."""
        return tuple(self._decorated.patterns)

    @property
    def flags(self) -> str:
        """Flags applied to all regular expressions."""
        return self._decorated.flags

    @property
    def compiled_pattern(self) -> str:
        """The compiled composite pattern."""
        return self._decorated.compiled_pattern

    @property
    def cache_size(self) -> int:
        """Number of strings with a cached result."""
        return len(self._results)

    def clear_cache(self) -> None:
        """Forget all cached results."""
        with self._lock:
            self._results.clear()

    def matches(self, string: str) -> bool:
        """Return whether the string matches any of the patterns."""
        return self._evaluate(string).matched

    def matching_pattern(self, string: str) -> str:
        """Return the first pattern that matches the string."""
        return self._decorated.patterns[self.matching_pattern_index(string)]

    def matching_pattern_index(self, string: str) -> int:
        """Return the position of the first pattern that matches the string."""
        result = self._evaluate(string)
        if result.position is None:
            raise self._no_match(string)
        return result.position

    def _evaluate(self, string: str) -> MatchResult:
        with self._lock:
            result = self._results.get(string)
            if result is None:
                try:
                    result = MatchResult(self._decorated.matching_pattern_index(string))
                except NoMatchError:
                    result = NO_MATCH
                logger.debug("Cached %s for string '%s'.", result, string)
                self._results[string] = result
            return result
