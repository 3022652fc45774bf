"""Extract module references from source text."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from re import Pattern
from typing import Iterable, List, Sequence, Union

from depsize.utils.concurrency import ConcurrencyLimiter
from depsize.utils.file_io import read_text
from depsize.utils.patterns import REFERENCE_PATTERNS, find_references
from depsize.services.workspace import find_source_files

logger = logging.getLogger(__name__)


def extract_references(
    text: str, patterns: Sequence[Pattern[str]] = REFERENCE_PATTERNS
) -> List[str]:
    """Return the unique references found in ``text``, first-seen order."""
    seen: dict[str, None] = {}
    for pattern in patterns:
        for ref in find_references(text, pattern):
            seen.setdefault(ref, None)
    return list(seen)


def collect_references(texts: Iterable[str]) -> List[str]:
    """Union of references across ``texts``, preserving first-seen order."""
    seen: dict[str, None] = {}
    for text in texts:
        for ref in extract_references(text):
            seen.setdefault(ref, None)
    return list(seen)


async def scan_sources(
    root_dir: Union[str, Path],
    source_globs: Sequence[str],
    limiter: ConcurrencyLimiter,
) -> List[str]:
    """Read every matching source file and collect the references it makes."""
    root = Path(root_dir)
    paths = await find_source_files(root, source_globs)
    logger.debug("Scanning %s source files", len(paths))
    texts = await asyncio.gather(*(read_text(limiter, root / rel_path) for rel_path in paths))
    references = collect_references(texts)
    logger.debug("Found %s unique module references", len(references))
    return references
