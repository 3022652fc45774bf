"""Decide which references point at external packages."""

from typing import Iterable, List, Sequence

from depsize.utils.builtins import is_builtin_module
from depsize.utils.matching import find_match


def is_external_candidate(
    reference: str,
    workspace_names: Sequence[str],
    ignore: Sequence[str] = (),
) -> bool:
    if reference.startswith("."):
        return False
    # Loader syntax such as "!!raw-loader!./file"
    if reference.startswith("!"):
        return False
    if is_builtin_module(reference):
        return False
    if find_match(workspace_names, reference) is not None:
        return False
    if ignore and find_match(ignore, reference, glob=True) is not None:
        return False
    return True


def classify_references(
    references: Iterable[str],
    workspace_names: Sequence[str],
    ignore: Sequence[str] = (),
) -> List[str]:
    """Keep the references that may belong to a declared dependency.

    Relative paths, loader artifacts, Node.js built-ins, local workspace
    packages and ignored names are dropped. Input order is preserved.
    """
    return [
        ref
        for ref in references
        if is_external_candidate(ref, workspace_names, ignore)
    ]
