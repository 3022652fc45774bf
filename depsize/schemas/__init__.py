"""Pydantic schemas shared across services."""

from depsize.schemas.manifest import PackageManifest
from depsize.schemas.units import (
    Attribution,
    BundleOptions,
    Measurement,
    MeasurementReport,
    Result,
    RunOptions,
    Unit,
    UnitFailure,
    UnitKind,
    UnitPlan,
)

__all__ = [
    "Attribution",
    "BundleOptions",
    "Measurement",
    "MeasurementReport",
    "PackageManifest",
    "Result",
    "RunOptions",
    "Unit",
    "UnitFailure",
    "UnitKind",
    "UnitPlan",
]
