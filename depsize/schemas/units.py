"""Pydantic schemas for measurement units and their results."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

UnitKind = Literal["module", "all", "empty"]

ALL_UNIT_NAME = "_all"
EMPTY_UNIT_NAME = "_empty"


class Attribution(BaseModel):
    """External references grouped by the dependency they belong to."""

    buckets: Dict[str, List[str]] = Field(default_factory=dict)
    unmatched: List[str] = Field(default_factory=list)
    safe_references: List[str] = Field(default_factory=list)


class Unit(BaseModel):
    """A synthesized entry file that gets bundled and measured once."""

    kind: UnitKind
    name: str
    id: str
    source_text: str = ""
    input_path: str
    output_path: str

    @property
    def gzip_path(self) -> str:
        return self.output_path + ".gz"


class UnitPlan(BaseModel):
    """Every unit of a run: one per dependency, the aggregate, and the baseline."""

    modules: List[Unit] = Field(default_factory=list)
    all: Unit
    empty: Unit

    @property
    def units(self) -> List[Unit]:
        return [self.all, *self.modules, self.empty]


class BundleOptions(BaseModel):
    """Explicit configuration for a single bundler invocation."""

    cwd: str
    target_name: str
    target_only: bool = True
    config_path: Optional[str] = None
    externals: List[str] = Field(default_factory=list)
    verbose: bool = False


class Measurement(BaseModel):
    """Outcome of bundling one unit.

    Sizes are present only when the bundler exited successfully.
    """

    unit: Unit
    exit_code: int
    raw_bytes: Optional[int] = None
    gzip_bytes: Optional[int] = None

    @model_validator(mode="after")
    def check_sizes(self) -> "Measurement":
        if self.exit_code == 0:
            if self.raw_bytes is None or self.gzip_bytes is None:
                raise ValueError("Successful measurement requires raw and gzip sizes")
            if self.raw_bytes < 0 or self.gzip_bytes < 0:
                raise ValueError("Artifact sizes cannot be negative")
        elif self.raw_bytes is not None or self.gzip_bytes is not None:
            raise ValueError("Failed measurement cannot carry sizes")
        return self

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class Result(BaseModel):
    """Size a unit adds on top of the empty baseline."""

    name: str
    raw_bytes: int
    gzip_bytes: int


class UnitFailure(BaseModel):
    """A unit that produced no result."""

    name: str
    exit_code: int
    reason: str = "bundle-failed"


class MeasurementReport(BaseModel):
    """Ranked results plus any per-unit failures."""

    results: List[Result] = Field(default_factory=list)
    failures: List[UnitFailure] = Field(default_factory=list)
    baseline: Optional[Measurement] = None

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)


class RunOptions(BaseModel):
    """Caller-supplied options for a full measurement run."""

    source_globs: List[str] = Field(default_factory=list)
    config_path: Optional[str] = None
    ignore: List[str] = Field(default_factory=list)
    only: List[str] = Field(default_factory=list)
    verbose: bool = False
