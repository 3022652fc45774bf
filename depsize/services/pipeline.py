"""End-to-end measurement run for one project."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from depsize.config import (
    DEPENDENCY_DIR_NAME,
    LOCKFILE_YARN,
    MANIFEST_NAME,
    settings,
)
from depsize.exceptions import SetupError
from depsize.schemas.units import MeasurementReport, RunOptions
from depsize.services.attribution import attribute_references
from depsize.services.bundler import Bundler, SubprocessBundler
from depsize.services.classifier import classify_references
from depsize.services.extractor import scan_sources
from depsize.services.installer import install_dependencies
from depsize.services.measurer import measure_units
from depsize.services.units import build_units, write_units
from depsize.services.workspace import (
    DEFAULT_SOURCE_GLOBS,
    collect_workspace_names,
    read_installed_dependencies,
    read_manifest,
)
from depsize.utils.concurrency import ConcurrencyLimiter
from depsize.utils.file_io import ensure_dir, write_text

logger = logging.getLogger(__name__)


def cache_dir_for(root_dir: Union[str, Path]) -> Path:
    return Path(root_dir) / DEPENDENCY_DIR_NAME / ".cache" / settings.cache_name


async def find_external_references(
    root_dir: Union[str, Path],
    source_globs: Sequence[str],
    ignore: Sequence[str],
    limiter: ConcurrencyLimiter,
) -> List[str]:
    """Scan sources and keep the references that point outside the workspace."""
    workspace_names, references = await asyncio.gather(
        collect_workspace_names(root_dir, limiter),
        scan_sources(root_dir, source_globs, limiter),
    )
    return classify_references(references, workspace_names, ignore)


async def measure_dependencies(
    manifest_path: Union[str, Path],
    options: Optional[RunOptions] = None,
    *,
    bundler: Optional[Bundler] = None,
    fs_limiter: Optional[ConcurrencyLimiter] = None,
    process_limiter: Optional[ConcurrencyLimiter] = None,
) -> MeasurementReport:
    """Measure how much each declared dependency adds to a bundle.

    Raises:
        SetupError: If dependencies have not been installed next to the manifest
        ManifestError: If the manifest is missing or malformed
        InstallError: If installing into the cache directory fails
        BaselineError: If the empty baseline fails to bundle
    """
    options = options or RunOptions()
    fs_limiter = fs_limiter or ConcurrencyLimiter(settings.fs_concurrency, name="fs")
    process_limiter = process_limiter or ConcurrencyLimiter(
        settings.process_concurrency, name="process"
    )
    bundler = bundler or SubprocessBundler(process_limiter, fs_limiter)

    root_dir = Path(manifest_path).resolve().parent
    source_globs = options.source_globs or DEFAULT_SOURCE_GLOBS

    if not (root_dir / DEPENDENCY_DIR_NAME).is_dir():
        raise SetupError("Please install your package.json first using Yarn or npm.")

    manifest = await read_manifest(manifest_path, fs_limiter)
    dependency_names = manifest.dependency_names
    logger.debug("Declared dependencies: %s", dependency_names)

    cache_dir = ensure_dir(cache_dir_for(root_dir))
    await write_text(
        fs_limiter,
        cache_dir / MANIFEST_NAME,
        json.dumps({"name": settings.cache_name, "dependencies": manifest.dependencies}, indent=2),
    )

    use_yarn = (root_dir / LOCKFILE_YARN).exists()
    external_refs, _ = await asyncio.gather(
        find_external_references(root_dir, source_globs, options.ignore, fs_limiter),
        install_dependencies(cache_dir, use_yarn, options.verbose, process_limiter),
    )

    attribution = attribute_references(external_refs, dependency_names, verbose=options.verbose)
    plan = build_units(attribution, cache_dir)
    await write_units(plan, cache_dir, fs_limiter)
    target_dependencies = await read_installed_dependencies(
        cache_dir, [unit.name for unit in plan.modules], fs_limiter
    )

    return await measure_units(
        plan,
        bundler,
        cwd=str(cache_dir),
        dependency_names=dependency_names,
        target_dependencies=target_dependencies,
        only=options.only,
        config_path=options.config_path,
        verbose=options.verbose,
    )
