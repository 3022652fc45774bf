"""Attribute external references to declared dependencies."""

import logging
from typing import Iterable, Sequence

from depsize.schemas.units import Attribution
from depsize.utils.matching import find_match

logger = logging.getLogger(__name__)


def attribute_references(
    candidates: Iterable[str],
    dependency_names: Sequence[str],
    verbose: bool = False,
) -> Attribution:
    """Group candidates under the first dependency they belong to.

    Dependencies are tried in manifest order with the exact and subpath
    rules only. Unmatched candidates stay out of every bucket but are kept
    in ``safe_references`` so the aggregate unit still includes them.
    """
    attribution = Attribution()
    for specifier in candidates:
        attribution.safe_references.append(specifier)
        match = find_match(dependency_names, specifier)
        if match is None:
            attribution.unmatched.append(specifier)
            if verbose:
                logger.warning(
                    'Imported external dependency "%s" but not declared in package.json#dependencies',
                    specifier,
                )
            continue
        attribution.buckets.setdefault(match, []).append(specifier)
    return attribution
