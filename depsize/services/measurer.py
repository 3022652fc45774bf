"""Differential measurement: every unit's size minus the empty baseline."""

from __future__ import annotations

import asyncio
from typing import List, Mapping, Optional, Sequence

from depsize.exceptions import BaselineError
from depsize.logging_config import get_logger
from depsize.schemas.units import (
    BundleOptions,
    Measurement,
    MeasurementReport,
    Result,
    Unit,
    UnitFailure,
    UnitPlan,
)
from depsize.services.bundler import Bundler
from depsize.utils.formatting import pretty_bytes

logger = get_logger(__name__)


def bundle_options(
    unit: Unit,
    cwd: str,
    dependency_names: Sequence[str],
    *,
    own_dependencies: Sequence[str] = (),
    config_path: Optional[str] = None,
    verbose: bool = False,
) -> BundleOptions:
    """Options for one invocation.

    Module units keep every other declared dependency external, along with
    the target's own dependencies and peer dependencies, so only the
    target's code is measured. The aggregate and baseline bundle everything.
    """
    target_only = unit.kind == "module"
    externals: List[str] = []
    if target_only:
        for name in (*dependency_names, *own_dependencies):
            if name != unit.name and name not in externals:
                externals.append(name)
    return BundleOptions(
        cwd=cwd,
        target_name=unit.name,
        target_only=target_only,
        config_path=config_path,
        externals=externals,
        verbose=verbose,
    )


def select_units(plan: UnitPlan, only: Sequence[str] = ()) -> List[Unit]:
    """The aggregate and module units, restricted to ``only`` when given."""
    candidates = [plan.all, *plan.modules]
    if not only:
        return candidates
    return [unit for unit in candidates if unit.name in only]


def subtract_baseline(measurement: Measurement, baseline: Measurement) -> Result:
    if not (measurement.succeeded and baseline.succeeded):
        raise ValueError(
            f"Cannot subtract sizes for {measurement.unit.name}: both bundles must succeed"
        )
    return Result(
        name=measurement.unit.name,
        raw_bytes=measurement.raw_bytes - baseline.raw_bytes,
        gzip_bytes=measurement.gzip_bytes - baseline.gzip_bytes,
    )


async def measure_units(
    plan: UnitPlan,
    bundler: Bundler,
    *,
    cwd: str,
    dependency_names: Sequence[str] = (),
    target_dependencies: Optional[Mapping[str, Sequence[str]]] = None,
    only: Sequence[str] = (),
    config_path: Optional[str] = None,
    verbose: bool = False,
) -> MeasurementReport:
    """Bundle the baseline, then every selected unit, and rank the deltas.

    Raises:
        BaselineError: If the empty unit fails to bundle
    """

    def options_for(unit: Unit) -> BundleOptions:
        return bundle_options(
            unit,
            cwd,
            dependency_names,
            own_dependencies=(target_dependencies or {}).get(unit.name, ()),
            config_path=config_path,
            verbose=verbose,
        )

    baseline = await bundler.invoke(plan.empty, options_for(plan.empty))
    if not baseline.succeeded:
        raise BaselineError(
            f"Failed to bundle the empty baseline, exited with {baseline.exit_code}. "
            "Try re-running with --verbose"
        )
    logger.debug(
        "Baseline: %s min, %s min+gz",
        pretty_bytes(baseline.raw_bytes),
        pretty_bytes(baseline.gzip_bytes),
    )

    selected = select_units(plan, only)
    measurements = await asyncio.gather(
        *(bundler.invoke(unit, options_for(unit)) for unit in selected)
    )

    report = MeasurementReport(baseline=baseline)
    for measurement in measurements:
        name = measurement.unit.name
        if not measurement.succeeded:
            logger.error("Failed to build %s, exited with %s", name, measurement.exit_code)
            report.failures.append(UnitFailure(name=name, exit_code=measurement.exit_code))
            continue
        result = subtract_baseline(measurement, baseline)
        if result.raw_bytes < 0 or result.gzip_bytes < 0:
            logger.error(
                "%s measured smaller than the empty baseline (%s min, %s min+gz)",
                name,
                result.raw_bytes,
                result.gzip_bytes,
            )
            report.failures.append(
                UnitFailure(name=name, exit_code=measurement.exit_code, reason="negative-size")
            )
            continue
        logger.info(
            "%s: %s min, %s min+gz",
            name,
            pretty_bytes(result.raw_bytes),
            pretty_bytes(result.gzip_bytes),
        )
        report.results.append(result)

    if report.has_failures and not verbose:
        logger.warning("Some bundles failed to build. Try re-running with --verbose")

    report.results.sort(key=lambda r: r.gzip_bytes, reverse=True)
    return report
