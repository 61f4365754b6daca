"""
Shell wildcard patterns translated to regular expressions.

Supported syntax:

- `*` matches any string, including the empty string.
- `?` matches any single character.
- `[seq]` matches any character in seq, `[a-z]` any character from a to z.
- `[!seq]` matches any character not in seq.
- `[[:alnum:]]` matches POSIX style character classes.
- `\\` escapes `\\`, `*` and `?` unless escaping is turned off.

See https://www.man7.org/linux/man-pages/man7/glob.7.html. The translation does
not depend on the platform `fnmatch` and always produces the same expression,
so it can serve as a pattern source for `CombinedRegex`.
"""

import dataclasses
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

import regex

from .errors import PatternCompileError

__all__ = ["WildcardPattern"]

_ESCAPABLE: Final[tuple[str, ...]] = ("\\", "*", "?")


@lru_cache(maxsize=256)
def _compile(expression: str) -> regex.Pattern:
    return regex.compile(expression)


@dataclass(frozen=True)
class WildcardPattern:
    """
    A shell wildcard pattern to match strings against.

    Options are changed through the `with_*`-style methods, which return a new
    pattern and leave the current one untouched.

    Example:
        >>> WildcardPattern("*.txt").with_exact_slashes().match("docs/readme.txt")
        False

    """

    pattern: str
    escape: bool = True
    exact_slashes: bool = False
    exact_leading_period: bool = False
    case_insensitive: bool = False

    def without_escape(self, flag: bool = True) -> "WildcardPattern":  # noqa: FBT001, FBT002
        """Treat `\\` as a regular character."""
        return dataclasses.replace(self, escape=not flag)

    def with_exact_slashes(self, flag: bool = True) -> "WildcardPattern":  # noqa: FBT001, FBT002
        """Do not match `/` and `\\` with wildcards, which is useful for file paths."""
        return dataclasses.replace(self, exact_slashes=flag)

    def with_exact_leading_period(self, flag: bool = True) -> "WildcardPattern":  # noqa: FBT001, FBT002
        """Do not match a `.` at the beginning of the string with a leading wildcard."""
        return dataclasses.replace(self, exact_leading_period=flag)

    def ignore_case(self, flag: bool = True) -> "WildcardPattern":  # noqa: FBT001, FBT002
        """Make the pattern case insensitive."""
        return dataclasses.replace(self, case_insensitive=flag)

    def to_regex(self) -> str:
        """
        Return an anchored regular expression equivalent to the pattern.

        Flags are scoped to the expression itself, so the result keeps its meaning
        when it is combined with other patterns under different flags.
        """
        flags = "si" if self.case_insensitive else "s"
        return f"(?{flags}:\\A{self._translate()}\\Z)"

    def match(self, string: str) -> bool:
        """
        Return whether the whole string matches the pattern.

        Raises:
            PatternCompileError: If the pattern does not translate to a valid
                regular expression, e.g. an unclosed `[`.

        """
        if self.pattern == "*" and not self.exact_slashes and not self.exact_leading_period:
            return True
        try:
            compiled = _compile(self.to_regex())
        except regex.error as e:
            msg = f"Invalid wildcard pattern '{self.pattern}': {e}"
            raise PatternCompileError(msg, self.pattern) from e
        return compiled.search(string) is not None

    def _translate(self) -> str:
        any_string = r"[^/\\]*" if self.exact_slashes else ".*"
        any_char = r"[^/\\]" if self.exact_slashes else "."
        pattern = self.pattern

        parts: list[str] = []
        if self.exact_leading_period and pattern[:1] in ("*", "?"):
            parts.append(r"(?!\.)")

        i = 0
        while i < len(pattern):
            char = pattern[i]
            following = pattern[i + 1 : i + 2]
            if char == "\\" and self.escape and following in _ESCAPABLE:
                parts.append(regex.escape(following))
                i += 2
                continue
            if char == "[" and following == "!":
                parts.append("[^")
                i += 2
                continue

            if char == "*":
                parts.append(any_string)
            elif char == "?":
                parts.append(any_char)
            elif char in "[]-":
                parts.append(char)
            else:
                parts.append(regex.escape(char))
            i += 1
        return "".join(parts)
