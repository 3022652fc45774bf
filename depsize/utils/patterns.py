"""Lexical recognizers for module references in JavaScript-like sources.

These are permissive regular expressions, not a parser.
Each recognizer captures the referenced module in a group named ``ref`` and
can be applied on its own.
"""

import re
from re import Pattern
from typing import Iterator, Tuple

# Quoted word allowing backticks; the closing quote must match the opening one.
_JS_QUOTED_WORD = r"""
    (?P<quote>['"`])        # opening quote
    (?P<ref>[^'"`\s]+)      # referenced module
    (?P=quote)              # matching closing quote
"""

_QUOTED_WORD = r"""
    (?P<quote>['"])
    (?P<ref>[^'"\s]+)
    (?P=quote)
"""

_IMPORT_MEMBERS = r"[\r\n\s\w{},*$]*"
_FROM = r"\sfrom\s"

CALL_PATTERN: Pattern[str] = re.compile(
    r"""
    (?:require(?:\.resolve)?|proxyquire|import|require_relative)
    \s*(?:\s|\()\s*
    """
    + _JS_QUOTED_WORD,
    re.VERBOSE | re.MULTILINE,
)

IMPORT_PATTERN: Pattern[str] = re.compile(
    r"import\s"
    + _IMPORT_MEMBERS
    + "(?:" + _FROM + ")?"
    + _QUOTED_WORD,
    re.VERBOSE | re.MULTILINE,
)

EXPORT_PATTERN: Pattern[str] = re.compile(
    r"export\s"
    + _IMPORT_MEMBERS
    + _FROM
    + _QUOTED_WORD,
    re.VERBOSE | re.MULTILINE,
)

REFERENCE_PATTERNS: Tuple[Pattern[str], ...] = (CALL_PATTERN, IMPORT_PATTERN, EXPORT_PATTERN)


def find_references(text: str, pattern: Pattern[str]) -> Iterator[str]:
    """Yield every module reference ``pattern`` captures in ``text``."""
    for match in pattern.finditer(text):
        yield match.group("ref")
