"""Pydantic schema for package.json manifests."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PackageManifest(BaseModel):
    """The subset of package.json this tool reads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Optional[str] = None
    version: Optional[str] = None
    dependencies: Dict[str, str] = Field(default_factory=dict)
    peer_dependencies: Dict[str, str] = Field(default_factory=dict, alias="peerDependencies")

    @property
    def dependency_names(self) -> list[str]:
        """Declared dependency names in manifest order."""
        return list(self.dependencies.keys())

    @property
    def runtime_dependency_names(self) -> list[str]:
        """Dependencies followed by peer dependencies, without repeats."""
        return list(dict.fromkeys([*self.dependencies, *self.peer_dependencies]))
