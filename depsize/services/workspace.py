"""Project discovery: manifests, workspace packages and source files."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from depsize.config import DEPENDENCY_DIR_NAME, MANIFEST_NAME
from depsize.exceptions import ManifestError
from depsize.schemas.manifest import PackageManifest
from depsize.utils.concurrency import ConcurrencyLimiter
from depsize.utils.file_io import read_text
from depsize.utils.matching import match_paths, names_dot_segment

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_GLOBS = [
    "**/src/**/*.{js,jsx,ts,tsx,babel}",
    "!**/*.{spec,test}.*",
    "!**/*.test.*",
    "!**/{__tests__,test,tests}/**",
]


def find_manifest(start: Union[str, Path]) -> Optional[Path]:
    """Walk up from ``start`` and return the nearest package.json, if any."""
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    return None


def parse_manifest(raw: str, path: Union[str, Path]) -> PackageManifest:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"Expected an object in {path}")
    try:
        return PackageManifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"Malformed manifest {path}: {exc}") from exc


async def read_manifest(path: Union[str, Path], limiter: ConcurrencyLimiter) -> PackageManifest:
    """Read and validate a package.json.

    Raises:
        ManifestError: If the file is missing or not a well-formed manifest
    """
    try:
        raw = await read_text(limiter, path)
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    return parse_manifest(raw, path)


def _walk_files(root_dir: Path, include_dot: bool = False) -> List[str]:
    files: List[str] = []
    for current, dirnames, filenames in os.walk(root_dir):
        # Never descend into installed dependencies; skip hidden directories
        # unless a pattern asks for them
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d != DEPENDENCY_DIR_NAME and (include_dot or not d.startswith("."))
        )
        rel_dir = Path(current).relative_to(root_dir)
        for filename in filenames:
            files.append((rel_dir / filename).as_posix())
    return sorted(files)


def list_source_files(root_dir: Union[str, Path], globs: Sequence[str]) -> List[str]:
    """Return sorted posix paths under ``root_dir`` matching ``globs``."""
    patterns = list(globs) + [f"!**/{DEPENDENCY_DIR_NAME}/**"]
    include_dot = any(names_dot_segment(p) for p in globs if not p.startswith("!"))
    return match_paths(_walk_files(Path(root_dir), include_dot), patterns)


async def find_source_files(root_dir: Union[str, Path], globs: Sequence[str]) -> List[str]:
    """Run ``list_source_files`` in a worker thread."""
    return await asyncio.to_thread(list_source_files, root_dir, globs)


async def collect_workspace_names(
    root_dir: Union[str, Path], limiter: ConcurrencyLimiter
) -> List[str]:
    """Return the package names declared by every manifest in the tree."""
    root = Path(root_dir)
    manifest_paths = await find_source_files(root, [f"**/{MANIFEST_NAME}"])
    manifests = await asyncio.gather(
        *(read_manifest(root / rel_path, limiter) for rel_path in manifest_paths)
    )
    names = [manifest.name for manifest in manifests if manifest.name]
    logger.debug("Found %s workspace packages: %s", len(names), names)
    return names


async def read_installed_dependencies(
    cache_dir: Union[str, Path], names: Sequence[str], limiter: ConcurrencyLimiter
) -> Dict[str, List[str]]:
    """Map each installed package to its own dependencies and peer dependencies.

    A package whose manifest cannot be read maps to an empty list.
    """
    modules_dir = Path(cache_dir) / DEPENDENCY_DIR_NAME

    async def read_one(name: str) -> List[str]:
        try:
            manifest = await read_manifest(modules_dir / name / MANIFEST_NAME, limiter)
        except ManifestError as exc:
            logger.debug("No installed manifest for %s: %s", name, exc)
            return []
        return manifest.runtime_dependency_names

    found = await asyncio.gather(*(read_one(name) for name in names))
    return dict(zip(names, found))
