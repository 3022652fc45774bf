"""Name and path matching helpers.

Dependency attribution and ignore filtering both go through ``match_rule``,
an ordered first-match evaluator. Attribution only uses the exact and
subpath rules; ignore entries may also be globs.

Globs follow ``wcmatch`` semantics: ``**`` spans directories, ``{a,b}``
braces and ``[a-z]`` classes expand, and dot-prefixed segments are only
matched when the pattern names them explicitly.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Sequence, Tuple

from wcmatch import glob as wcglob

logger = logging.getLogger(__name__)

MatchRule = Tuple[str, Callable[[str, str], bool]]

PATH_FLAGS = wcglob.GLOBSTAR | wcglob.BRACE | wcglob.EXTGLOB | wcglob.NEGATE
NAME_FLAGS = wcglob.BRACE | wcglob.EXTGLOB


def normalize_pattern(pattern: str) -> str:
    """Strip a leading ``./`` while keeping any ``!`` exclusion marker."""
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    while body.startswith("./"):
        body = body[2:]
    return ("!" + body) if negated else body


def names_dot_segment(pattern: str) -> bool:
    """True when a pattern explicitly targets a dot-prefixed path segment."""
    body = normalize_pattern(pattern).lstrip("!")
    return any(segment.startswith(".") for segment in body.split("/"))


def glob_match(pattern: str, value: str) -> bool:
    try:
        return wcglob.globmatch(value, pattern, flags=NAME_FLAGS)
    except ValueError as exc:
        logger.warning('Ignoring invalid glob "%s": %s', pattern, exc)
        return False


def match_paths(paths: Iterable[str], patterns: Sequence[str]) -> list[str]:
    """Filter posix paths by include globs and ``!``-prefixed exclude globs."""
    normalized = [normalize_pattern(p) for p in patterns]
    if not any(not p.startswith("!") for p in normalized):
        return []
    return [path for path in paths if wcglob.globmatch(path, normalized, flags=PATH_FLAGS)]


def _exact(name: str, specifier: str) -> bool:
    return name == specifier


def _subpath(name: str, specifier: str) -> bool:
    return specifier.startswith(name + "/")


def _glob(name: str, specifier: str) -> bool:
    return glob_match(name, specifier)


EXACT_RULE: MatchRule = ("exact", _exact)
SUBPATH_RULE: MatchRule = ("subpath", _subpath)
GLOB_RULE: MatchRule = ("glob", _glob)

DEPENDENCY_RULES: Tuple[MatchRule, ...] = (EXACT_RULE, SUBPATH_RULE)
IGNORE_RULES: Tuple[MatchRule, ...] = (EXACT_RULE, SUBPATH_RULE, GLOB_RULE)


def match_rule(name: str, specifier: str, rules: Sequence[MatchRule]) -> Optional[str]:
    """Return the first rule under which ``specifier`` belongs to ``name``."""
    for rule_name, predicate in rules:
        if predicate(name, specifier):
            return rule_name
    return None


def is_dep_match(name: str, specifier: str, glob: bool = False) -> bool:
    rules = IGNORE_RULES if glob else DEPENDENCY_RULES
    return match_rule(name, specifier, rules) is not None


def find_match(names: Iterable[str], specifier: str, glob: bool = False) -> Optional[str]:
    """Return the first name in ``names`` that ``specifier`` belongs to."""
    for name in names:
        if is_dep_match(name, specifier, glob=glob):
            return name
    return None
