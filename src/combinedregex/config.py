"""Handles the parsing and validation of pattern set configuration files."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .base import AbstractCombinedRegex
from .combined import CombinedRegex
from .compiler import FLAG_MAP
from .memoized import MemoizedCombinedRegex
from .wildcard import WildcardPattern

logger = logging.getLogger(__name__)


class WildcardOptions(BaseModel):
    """Options applied to every pattern of a set written as shell wildcards."""

    model_config = ConfigDict(extra="forbid")

    escape: bool = True
    exact_slashes: bool = False
    exact_leading_period: bool = False
    ignore_case: bool = False

    def apply(self, pattern: str) -> WildcardPattern:
        """Build a WildcardPattern carrying these options."""
        return (
            WildcardPattern(pattern)
            .without_escape(not self.escape)
            .with_exact_slashes(self.exact_slashes)
            .with_exact_leading_period(self.exact_leading_period)
            .ignore_case(self.ignore_case)
        )


class PatternSetConfig(BaseModel):
    """A named, ordered list of patterns combined into one matcher."""

    model_config = ConfigDict(extra="forbid")

    name: str
    patterns: list[str] = Field(min_length=1)
    flags: str = ""
    memoize: bool = True
    branch_reset: bool = True
    wildcard: WildcardOptions | None = None

    @field_validator("flags")
    @classmethod
    def _check_flags(cls, value: str) -> str:
        unknown = sorted(set(value) - set(FLAG_MAP))
        if unknown:
            msg = f"Unsupported regex flag(s) {', '.join(unknown)}. Supported flags: {''.join(FLAG_MAP)}."
            raise ValueError(msg)
        return value

    def regex_patterns(self) -> list[str]:
        """Return the patterns as regular expressions, translating wildcards if needed."""
        if self.wildcard is None:
            return list(self.patterns)
        return [self.wildcard.apply(pattern).to_regex() for pattern in self.patterns]


class MatcherConfig(BaseModel):
    """The root configuration: all pattern sets of a file."""

    model_config = ConfigDict(extra="forbid")

    pattern_sets: list[PatternSetConfig] = Field(default_factory=list)

    @field_validator("pattern_sets")
    @classmethod
    def _check_unique_names(cls, value: list[PatternSetConfig]) -> list[PatternSetConfig]:
        names = [pattern_set.name for pattern_set in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate pattern set name(s): {', '.join(duplicates)}."
            raise ValueError(msg)
        return value

    def get(self, name: str) -> PatternSetConfig:
        """
        Return the pattern set with the given name.

        Raises:
            KeyError: If no pattern set has that name.

        """
        for pattern_set in self.pattern_sets:
            if pattern_set.name == name:
                return pattern_set
        msg = f"Pattern set '{name}' not found. Available: {', '.join(p.name for p in self.pattern_sets) or 'none'}."
        raise KeyError(msg)


def build_matcher(pattern_set: PatternSetConfig) -> AbstractCombinedRegex:
    """Create the combined regex described by a pattern set."""
    matcher: AbstractCombinedRegex = CombinedRegex(
        pattern_set.regex_patterns(),
        pattern_set.flags,
        branch_reset=pattern_set.branch_reset,
    )
    if pattern_set.memoize:
        matcher = MemoizedCombinedRegex(matcher)
    logger.debug("Built matcher for pattern set '%s': %r", pattern_set.name, matcher)
    return matcher


class StrictSingleQuoteLoader(yaml.SafeLoader):
    """
    A YAML loader that only accepts single-quoted strings.

    Backslashes are escape characters inside double-quoted YAML strings, so a
    pattern like "\\d+" would silently reach the regex engine as something else.
    """


def _construct_scalar(loader: StrictSingleQuoteLoader, node: yaml.ScalarNode) -> Any:  # noqa: ANN401
    """Construct a scalar node, but first check its style."""
    if node.style == '"':
        line = node.start_mark.line + 1
        col = node.start_mark.column + 1
        msg = f"Double-quoted string found at line {line}, column {col}. Please use single quotes (') instead."
        raise yaml.YAMLError(msg)
    return loader.construct_scalar(node)


StrictSingleQuoteLoader.add_constructor("tag:yaml.org,2002:str", _construct_scalar)


def load_config(config_path: str | Path) -> MatcherConfig:
    """
    Load, parse, and validate a pattern set configuration file.

    Args:
        config_path: The path to the YAML file.

    Returns:
        The validated configuration.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If there is a syntax error in the YAML file.
        ValueError: If the configuration is invalid.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.load(f, Loader=StrictSingleQuoteLoader)  # noqa: S506
    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise yaml.YAMLError(msg) from e

    if not isinstance(data, dict):
        msg = "Invalid or missing configuration: config file must be a YAML mapping (dictionary)."
        raise ValueError(msg)

    try:
        config = MatcherConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid or missing configuration: {e}"
        raise ValueError(msg) from e

    logger.debug("Loaded %d pattern set(s) from %s", len(config.pattern_sets), path)
    return config
