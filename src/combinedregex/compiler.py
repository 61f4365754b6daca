"""
Compilation of several independent patterns into a single composite pattern.

The composite is built with the branch-reset alternation trick described in
https://nikic.github.io/2014/02/18/Fast-request-routing-using-regular-expressions.html:

    (?|first|middle()|last()())

Pattern ``i`` is followed by ``i`` empty capture groups and all alternatives
share the same group numbers, so the number of populated trailing groups after
a match is the position of the alternative that matched. The engine tries the
alternatives from left to right, which makes the lowest matching position win.
A pattern with its own top-level alternation is enclosed in ``(?:...)`` first, so
the padding groups follow the whole pattern and not just its last alternative.

Patterns that declare named groups cannot share group numbers (the engine gives
groups with different names different numbers even inside a branch reset).
For those, and on request, the compiler falls back to a group scan: every
pattern gets a wrapper group and the matching position is found by checking the
wrappers in order. The wrappers shift group numbers, so patterns that refer to
a group by number are rejected in that layout.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Final, Literal

import regex

from .errors import InvalidInputError, PatternCompileError

__all__ = [
    "FLAG_MAP",
    "QUOTE_REPLACER",
    "REGEXP_DELIMITER",
    "CompiledPattern",
    "compile_patterns",
    "parse_flags",
    "quote_delimiter",
]

logger = logging.getLogger(__name__)

REGEXP_DELIMITER: Final[str] = "/"
QUOTE_REPLACER: Final[str] = "\\/"
GROUP_NAME_PREFIX: Final[str] = "_cr"

FLAG_MAP: Final[dict[str, int]] = {
    "i": regex.IGNORECASE,
    "m": regex.MULTILINE,
    "s": regex.DOTALL,
    "x": regex.VERBOSE,
    "u": regex.UNICODE,
}

# A delimiter preceded by an even number of backslashes (none included) is not quoted yet.
_UNQUOTED_DELIMITER = regex.compile(r"(?<!\\)((?:\\\\)*)/")
# The same even-backslash prefix marks the constructs below as real syntax, not escaped text.
_UNESCAPED_ALTERNATION = regex.compile(r"(?<!\\)(?:\\\\)*\|")
_GLOBAL_FLAGS = regex.compile(r"(?<!\\)(?:\\\\)*(\(\?(?=[-abefiLmprsuwxV])(?:[abefiLmprsuwx]|V[01])*(?:-(?:[abefiLmprsuwx]|V[01])+)?\))")
_WHOLE_PATTERN_RECURSION = regex.compile(r"(?<!\\)(?:\\\\)*(\(\?(?:R|0)\))")
_NUMBERED_REFERENCE = regex.compile(r"(?<!\\)(?:\\\\)*(\\[1-9]|\\g<[+-]?\d+>|\(\?\([+-]?\d+\)|\(\?[+-]?[1-9]\d*\))")

Strategy = Literal["branch_reset", "group_scan"]


@dataclass(frozen=True)
class CompiledPattern:
    """
    The result of combining a pattern set into one regular expression.

    Attributes:
        pattern: Delimited notation of the composite, e.g. ``/(?|abc|def())/i``.
        body: The expression handed to the regex engine.
        flags: The flag letters applied to the whole composite.
        strategy: How the matching position is recovered after a match.
        pattern_count: Number of patterns combined.
        compiled: The compiled engine object.
        group_offset: Number of capture groups preceding the bookkeeping groups
            (branch reset only).
        group_numbers: Wrapper group number of every pattern (group scan only).

    """

    pattern: str
    body: str
    flags: str
    strategy: Strategy
    pattern_count: int
    compiled: regex.Pattern = field(compare=False, repr=False)
    group_offset: int = 0
    group_numbers: tuple[int, ...] = ()

    def search(self, string: str) -> regex.Match | None:
        """Run the composite against the string once."""
        return self.compiled.search(string)

    def position(self, match: regex.Match) -> int:
        """Return the position of the pattern that produced the given match."""
        if self.strategy == "branch_reset":
            return sum(1 for group in match.groups()[self.group_offset :] if group is not None)

        for position, number in enumerate(self.group_numbers):
            if match.group(number) is not None:
                return position
        msg = f"Match of '{self.pattern}' did not populate any wrapper group."
        raise RuntimeError(msg)


def parse_flags(flags: str) -> int:
    """
    Translate flag letters into engine flags.

    Raises:
        InvalidInputError: If a letter is not a supported flag.

    """
    regex_flags = 0
    for letter in flags:
        if letter not in FLAG_MAP:
            msg = f"Unsupported regex flag '{letter}' in '{flags}'. Supported flags: {''.join(FLAG_MAP)}."
            raise InvalidInputError(msg)
        regex_flags |= FLAG_MAP[letter]
    return regex_flags


def quote_delimiter(pattern: str) -> str:
    """Escape every delimiter in the pattern that is not escaped already."""
    return _UNQUOTED_DELIMITER.sub(lambda m: m.group(1) + QUOTE_REPLACER, pattern)


def _inspect_patterns(patterns: Sequence[str], regex_flags: int) -> tuple[list[int], bool, int | None]:
    """
    Validate each pattern on its own and count its capture groups.

    Returns:
        The capture group count of every pattern, whether any pattern declares
        named groups, and the position of the first pattern that refers to a
        capture group by number (None when no pattern does).

    """
    group_counts: list[int] = []
    has_named_groups = False
    numbered_reference_at: int | None = None
    for index, pattern in enumerate(patterns):
        if not pattern:
            msg = f"Pattern at position {index} is empty."
            raise InvalidInputError(msg)
        try:
            compiled = regex.compile(pattern, regex_flags)
        except regex.error as e:
            msg = f"Invalid pattern at position {index} '{pattern}': {e}"
            raise PatternCompileError(msg, pattern, index) from e

        # Inline flags without a scope apply to the whole composite, not to this pattern alone.
        flag_group = _GLOBAL_FLAGS.search(pattern)
        if flag_group is not None:
            msg = f"Pattern at position {index} '{pattern}' sets the global inline flag '{flag_group.group(1)}'. Use a scoped group such as '(?i:...)' or the flags argument instead."
            raise InvalidInputError(msg)
        recursion = _WHOLE_PATTERN_RECURSION.search(pattern)
        if recursion is not None:
            msg = f"Pattern at position {index} '{pattern}' recurses into the whole expression with '{recursion.group(1)}', which cannot be combined with other patterns."
            raise InvalidInputError(msg)

        if numbered_reference_at is None and _NUMBERED_REFERENCE.search(pattern) is not None:
            numbered_reference_at = index
        group_counts.append(compiled.groups)
        has_named_groups = has_named_groups or bool(compiled.groupindex)
    return group_counts, has_named_groups, numbered_reference_at


def _enclose(pattern: str) -> str:
    """Keep a top-level alternation of the pattern inside its own branch."""
    if _UNESCAPED_ALTERNATION.search(pattern) is None:
        return pattern
    return "(?:" + pattern + ")"


def _compile_body(body: str, regex_flags: int) -> regex.Pattern:
    try:
        return regex.compile(body, regex_flags)
    except regex.error as e:
        msg = f"Failed to compile combined pattern '{body}': {e}"
        raise PatternCompileError(msg, body) from e


def compile_patterns(patterns: Sequence[str], flags: str = "", *, branch_reset: bool = True) -> CompiledPattern:
    """
    Combine an ordered list of patterns into a single composite pattern.

    The result is a pure function of the arguments: compiling the same patterns
    with the same flags always yields the same ``pattern`` string.

    Args:
        patterns: Regular expression bodies without delimiters.
        flags: Flag letters applied to the whole composite.
        branch_reset: Use the branch-reset layout when possible. ``False``
            forces the group-scan layout.

    Raises:
        InvalidInputError: If the list is empty, a pattern is empty, a flag is unknown, a
            pattern sets a global inline flag or recurses into the whole expression, or
            a pattern refers to a group by number in the group-scan layout.
        PatternCompileError: If a pattern is not a valid regular expression.

    """
    if not patterns:
        msg = "At least one pattern should be specified."
        raise InvalidInputError(msg)

    regex_flags = parse_flags(flags)
    group_counts, has_named_groups, numbered_reference_at = _inspect_patterns(patterns, regex_flags)
    # A verbose comment would swallow the padding that follows it on the same line.
    separator = "\n" if regex_flags & regex.VERBOSE else ""
    quoted = [_enclose(quote_delimiter(pattern) + separator) for pattern in patterns]

    if branch_reset and has_named_groups:
        logger.debug("Named groups found in %d pattern(s); using group scan instead of branch reset.", len(patterns))

    if (not branch_reset or has_named_groups) and numbered_reference_at is not None:
        pattern = patterns[numbered_reference_at]
        msg = (
            f"Pattern at position {numbered_reference_at} '{pattern}' refers to a capture group by number, "
            "which the group-scan layout renumbers. Use named groups and named references instead."
        )
        raise InvalidInputError(msg)

    if branch_reset and not has_named_groups:
        own_groups = max(group_counts)
        branches = [pattern + "()" * (own_groups - count) + "()" * index for index, (pattern, count) in enumerate(zip(quoted, group_counts, strict=True))]
        body = "(?|" + "|".join(branches) + ")"
        compiled = CompiledPattern(
            pattern=REGEXP_DELIMITER + body + REGEXP_DELIMITER + flags,
            body=body,
            flags=flags,
            strategy="branch_reset",
            pattern_count=len(patterns),
            compiled=_compile_body(body, regex_flags),
            group_offset=own_groups,
        )
    else:
        branches = [f"(?P<{GROUP_NAME_PREFIX}{index}>{pattern})" for index, pattern in enumerate(quoted)]
        body = "(?:" + "|".join(branches) + ")"
        engine_pattern = _compile_body(body, regex_flags)
        compiled = CompiledPattern(
            pattern=REGEXP_DELIMITER + body + REGEXP_DELIMITER + flags,
            body=body,
            flags=flags,
            strategy="group_scan",
            pattern_count=len(patterns),
            compiled=engine_pattern,
            group_numbers=tuple(engine_pattern.groupindex[f"{GROUP_NAME_PREFIX}{index}"] for index in range(len(patterns))),
        )

    logger.debug("Compiled %d pattern(s) using %s: %s", compiled.pattern_count, compiled.strategy, compiled.pattern)
    return compiled
