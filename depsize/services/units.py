"""Build the synthesized entry files that get bundled."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Iterable, Sequence, Set, Union

from depsize.schemas.units import (
    ALL_UNIT_NAME,
    EMPTY_UNIT_NAME,
    Attribution,
    Unit,
    UnitKind,
    UnitPlan,
)
from depsize.utils.concurrency import ConcurrencyLimiter
from depsize.utils.file_io import write_text

logger = logging.getLogger(__name__)

INDEX_FILENAME = "_main.html"


def synthesize_source(specifiers: Iterable[str]) -> str:
    """Return entry source that pulls in every specifier.

    Each require is passed to an opaque call so minifiers cannot drop it.
    """
    return "\n".join(f"f(require({json.dumps(spec)}));" for spec in specifiers)


def unit_id(name: str) -> str:
    """Filesystem-safe identifier for a unit name (``@scope/pkg`` -> ``@scope--pkg``)."""
    return name.replace("/", "--").replace("\\", "--")


def _unique_id(name: str, taken: Set[str]) -> str:
    base = unit_id(name)
    candidate = base
    suffix = 1
    while candidate in taken:
        suffix += 1
        candidate = f"{base}-{suffix}"
    taken.add(candidate)
    return candidate


def create_unit(
    cache_dir: Union[str, Path],
    kind: UnitKind,
    name: str,
    source_text: str,
    taken: Set[str],
) -> Unit:
    ident = _unique_id(name, taken)
    cache = Path(cache_dir)
    return Unit(
        kind=kind,
        name=name,
        id=ident,
        source_text=source_text,
        input_path=str(cache / f"{ident}.js"),
        output_path=str(cache / f"{ident}.bundle.js"),
    )


def build_units(attribution: Attribution, cache_dir: Union[str, Path]) -> UnitPlan:
    """Create one unit per non-empty bucket plus the aggregate and baseline units."""
    # Reserve the aggregate and baseline ids first so they keep their names
    taken: Set[str] = set()
    all_unit = create_unit(
        cache_dir, "all", ALL_UNIT_NAME, synthesize_source(attribution.safe_references), taken
    )
    empty_unit = create_unit(cache_dir, "empty", EMPTY_UNIT_NAME, "", taken)
    modules = [
        create_unit(cache_dir, "module", dep_name, synthesize_source(specifiers), taken)
        for dep_name, specifiers in attribution.buckets.items()
        if specifiers
    ]
    return UnitPlan(modules=modules, all=all_unit, empty=empty_unit)


def render_index(units: Sequence[Unit], cache_dir: Union[str, Path]) -> str:
    return "\n".join(
        f'<script src="./{Path(os.path.relpath(unit.input_path, cache_dir)).as_posix()}"></script>'
        for unit in units
    )


async def write_units(
    plan: UnitPlan, cache_dir: Union[str, Path], limiter: ConcurrencyLimiter
) -> Path:
    """Write every unit's entry file and the HTML index; return the index path."""
    await asyncio.gather(
        *(write_text(limiter, unit.input_path, unit.source_text) for unit in plan.units)
    )
    index_path = Path(cache_dir) / INDEX_FILENAME
    await write_text(limiter, index_path, render_index([plan.all, *plan.modules], cache_dir))
    logger.debug("Wrote %s units to %s", len(plan.units), cache_dir)
    return index_path
