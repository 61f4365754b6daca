"""CombinedRegex: match a string against many regular expressions with a single evaluation."""

import importlib.metadata

from .base import AbstractCombinedRegex
from .combined import CombinedRegex
from .compiler import CompiledPattern, compile_patterns
from .errors import CombinedRegexError, InvalidInputError, NoMatchError, PatternCompileError
from .match_state import MatchResult
from .memoized import MemoizedCombinedRegex
from .wildcard import WildcardPattern


def _get_version() -> str:
    """
    Retrieve the package version from metadata.

    Returns:
        The version string, or a development version if not installed.

    """
    try:
        return importlib.metadata.version("CombinedRegex")
    except importlib.metadata.PackageNotFoundError:
        # Fallback for when the package is not installed, e.g., in a development environment
        return "0.0.0-dev"


__version__ = _get_version()

__all__ = [
    "AbstractCombinedRegex",
    "CombinedRegex",
    "CombinedRegexError",
    "CompiledPattern",
    "InvalidInputError",
    "MatchResult",
    "MemoizedCombinedRegex",
    "NoMatchError",
    "PatternCompileError",
    "WildcardPattern",
    "__version__",
    "compile_patterns",
]
