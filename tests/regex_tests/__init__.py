"""
Regex Library Test Suite for CombinedRegex.

These tests pin down the behaviour of the `regex` library that the combined
pattern layout depends on:

- Branch reset groups share their numbers across alternatives
- Unmatched trailing groups are reported as None
- The leftmost match wins, then the earliest alternative
- Escaped delimiters and scoped inline flags inside alternatives

Run tests with: pytest tests/regex_tests/ -v
"""
