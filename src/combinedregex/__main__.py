"""Main entry point for the CombinedRegex command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from . import __version__
from .base import AbstractCombinedRegex
from .config import PatternSetConfig, WildcardOptions, build_matcher, load_config
from .errors import CombinedRegexError, NoMatchError
from .logging_utils import setup_logging

logger = logging.getLogger(__name__)


def _add_pattern_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--pattern",
        dest="patterns",
        action="append",
        default=[],
        help="A regular expression to combine. Repeat to add more; order defines priority.",
    )
    parser.add_argument(
        "--flags",
        default="",
        help="Flag letters applied to all patterns: i, m, s, x, u.",
    )
    parser.add_argument(
        "--glob",
        action="store_true",
        help="Treat the patterns as shell wildcards instead of regular expressions.",
    )
    parser.add_argument(
        "--group-scan",
        action="store_true",
        help="Recover the matching pattern by scanning groups instead of using a branch reset.",
    )


def _parse_args() -> argparse.Namespace:
    """
    Parse command-line arguments for the CombinedRegex CLI.

    Returns:
        argparse.Namespace: An object containing the parsed command-line arguments.

    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug level logging.",
    )
    common.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write a detailed debug log to this file (requires --debug).",
    )

    parser = argparse.ArgumentParser(description="Match strings against many regular expressions at once.")
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"CombinedRegex {__version__}",
        help="Show the version number and exit.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    compile_parser = subparsers.add_parser("compile", parents=[common], help="Show the combined pattern.")
    _add_pattern_arguments(compile_parser)

    match_parser = subparsers.add_parser("match", parents=[common], help="Match strings against the patterns.")
    _add_pattern_arguments(match_parser)
    match_parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="A YAML file with pattern sets, used instead of --pattern.",
    )
    match_parser.add_argument(
        "--set",
        dest="pattern_set",
        default=None,
        help="Name of the pattern set to use from the config file.",
    )
    match_parser.add_argument(
        "--no-memoize",
        action="store_true",
        help="Evaluate every string, even repeated ones.",
    )
    match_parser.add_argument(
        "strings",
        nargs="*",
        help="Strings to match. Lines are read from standard input when omitted.",
    )

    if len(sys.argv) == 1:
        parser.print_help(sys.stderr)
        sys.exit(1)

    args = parser.parse_args()
    config_given = getattr(args, "config", None) is not None
    if not args.patterns and not config_given:
        parser.error("at least one --pattern (or a --config file) is required")
    if args.patterns and config_given:
        parser.error("--pattern and --config cannot be used together")
    if config_given and (args.flags or args.glob or args.group_scan):
        parser.error("--flags, --glob and --group-scan cannot be used with --config; set them in the pattern set instead")
    return args


def _pattern_set_from_args(args: argparse.Namespace) -> PatternSetConfig:
    """Describe the patterns given on the command line as a pattern set."""
    try:
        return PatternSetConfig(
            name="command-line",
            patterns=args.patterns,
            flags=args.flags,
            memoize=not getattr(args, "no_memoize", False),
            branch_reset=not args.group_scan,
            wildcard=WildcardOptions() if args.glob else None,
        )
    except ValidationError as e:
        msg = f"Invalid patterns or flags: {e}"
        raise ValueError(msg) from e


def _load_pattern_set(config_path: Path, name: str | None) -> PatternSetConfig:
    """Pick a pattern set from a config file; the only one when no name is given."""
    logger.info("Loading configuration from: %s", config_path)
    config = load_config(config_path)
    if name is None:
        if len(config.pattern_sets) != 1:
            msg = f"The config file defines {len(config.pattern_sets)} pattern sets; choose one with --set."
            raise ValueError(msg)
        return config.pattern_sets[0]
    try:
        return config.get(name)
    except KeyError as e:
        raise ValueError(e.args[0]) from e


def _read_strings(strings: list[str]) -> list[str]:
    if strings:
        return strings
    return [line.rstrip("\r\n") for line in sys.stdin]


def _compile_command(args: argparse.Namespace) -> None:
    pattern_set = _pattern_set_from_args(args)
    matcher = build_matcher(pattern_set)
    logger.info("Combined %d pattern(s): %s", len(pattern_set.patterns), matcher.compiled_pattern)


def _match_strings(matcher: AbstractCombinedRegex, display_patterns: list[str], strings: list[str]) -> int:
    """
    Log which pattern every string matched.

    Returns:
        The number of strings that matched a pattern.

    """
    matched = 0
    for string in strings:
        try:
            index = matcher.matching_pattern_index(string)
        except NoMatchError:
            logger.info("'%s' did not match any pattern.", string)
            continue
        matched += 1
        logger.info("'%s' matched pattern #%d: %s", string, index, display_patterns[index])
    return matched


def _match_command(args: argparse.Namespace) -> None:
    if args.config is not None:
        pattern_set = _load_pattern_set(args.config, args.pattern_set)
        if args.no_memoize:
            pattern_set = pattern_set.model_copy(update={"memoize": False})
    else:
        pattern_set = _pattern_set_from_args(args)

    matcher = build_matcher(pattern_set)
    logger.debug("Using compiled pattern: %s", matcher.compiled_pattern)

    strings = _read_strings(args.strings)
    matched = _match_strings(matcher, pattern_set.patterns, strings)
    logger.info("Matched %d of %d string(s).", matched, len(strings))


def main() -> None:
    """
    Run the main entry point for the CombinedRegex command-line interface.

    Parses the arguments, configures logging and runs the selected command.
    Invalid input, configuration and pattern errors are logged and end the
    process with exit status 1.
    """
    args = _parse_args()
    setup_logging(version=__version__, debug=args.debug, log_file=args.log_file)

    try:
        if args.command == "compile":
            _compile_command(args)
        else:
            _match_command(args)
    except (CombinedRegexError, FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error("%s", e)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        logger.exception("An unexpected error occurred")
        logger.critical("An unrecoverable error occurred. Please check the logs for details.")
        sys.exit(1)


if __name__ == "__main__":
    main()
