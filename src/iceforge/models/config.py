"""Typed project manifest: build settings, dependencies, subprojects, overrides, rules."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field

from iceforge.models.errors import SourceSpan
from iceforge.models.positioned import Positioned

_MODEL_CONFIG = {"extra": "forbid", "coerce_numbers_to_str": True}


class BuildSettings(BaseModel):
    """Global toolchain settings for the whole project."""

    version: str
    c_standard: Positioned[str]
    compiler: Positioned[str]
    global_cflags: str | None = None
    debug_flags: str | None = None
    release_flags: str | None = None
    parallel_jobs: int | None = Field(None, ge=1)

    model_config = _MODEL_CONFIG


class RemoteBuildMethod(StrEnum):
    HEADER_ONLY = "header-only"
    CMAKE = "cmake"
    MESON = "meson"
    ICEFORGE = "iceforge"
    CUSTOM = "custom"


class RemoteDependency(BaseModel):
    """A package fetched from a URL or path and built with one of the build methods."""

    name: Positioned[str]
    version: Positioned[str] | None = None
    source: Positioned[str]
    include_name: Positioned[str] | None = None
    include_dirs: list[str] = []
    build_method: RemoteBuildMethod | None = None
    build_command: Positioned[str] | None = None
    build_output: Positioned[str] | None = None
    imports: list[str] | None = None

    model_config = _MODEL_CONFIG


class PkgConfigDependency(BaseModel):
    """A system package discovered through pkg-config."""

    name: Positioned[str]
    pkg_config_query: Positioned[str]

    model_config = _MODEL_CONFIG


class ManualDependency(BaseModel):
    """A dependency described only by raw compiler and linker flags."""

    name: Positioned[str]
    cflags: str | None = None
    ldflags: str | None = None

    model_config = _MODEL_CONFIG


class DependencyKind(StrEnum):
    REMOTE = "remote"
    PKG_CONFIG = "pkg-config"
    MANUAL = "manual"


@dataclass(frozen=True)
class Dependency:
    """Read-only tagged view over one entry of any dependency kind."""

    kind: DependencyKind
    entry: (
        Positioned[RemoteDependency]
        | Positioned[PkgConfigDependency]
        | Positioned[ManualDependency]
    )

    @property
    def name(self) -> Positioned[str]:
        return self.entry.value.name

    @property
    def span(self) -> SourceSpan:
        return self.entry.span


class Dependencies(BaseModel):
    """The three dependency collections of a project."""

    remote: list[Positioned[RemoteDependency]] = []
    pkg_config: list[Positioned[PkgConfigDependency]] = []
    manual: list[Positioned[ManualDependency]] = []

    model_config = _MODEL_CONFIG

    def iter_dependencies(self) -> Iterator[Dependency]:
        """Yield every dependency once: remote, then pkg-config, then manual."""
        for remote in self.remote:
            yield Dependency(DependencyKind.REMOTE, remote)
        for pkg in self.pkg_config:
            yield Dependency(DependencyKind.PKG_CONFIG, pkg)
        for manual in self.manual:
            yield Dependency(DependencyKind.MANUAL, manual)

    def has_dependency(self, name: str) -> bool:
        return self.get(name) is not None

    def get(self, name: str) -> Dependency | None:
        for dep in self.iter_dependencies():
            if dep.name.value == name:
                return dep
        return None

    def names(self) -> list[str]:
        return [dep.name.value for dep in self.iter_dependencies()]

    def __len__(self) -> int:
        return len(self.remote) + len(self.pkg_config) + len(self.manual)


class SubprojectType(StrEnum):
    BINARY = "binary"
    LIBRARY = "library"
    HEADER_ONLY = "header-only"

    @property
    def is_linkable(self) -> bool:
        """Libraries and header-only subprojects can be depended upon."""
        return self is not SubprojectType.BINARY


class DetailedDependency(BaseModel):
    """A dependency reference that names the imports it wants."""

    name: Positioned[str]
    imports: list[str] | None = None

    model_config = _MODEL_CONFIG


SubprojectDependency = Positioned[str] | DetailedDependency


def reference_name(ref: SubprojectDependency) -> Positioned[str]:
    """Return the referenced name of a bare or detailed dependency reference."""
    if isinstance(ref, DetailedDependency):
        return ref.name
    return ref


class Subproject(BaseModel):
    """A binary, library or header-only unit of the project."""

    name: Positioned[str]
    type: SubprojectType
    src_dir: str | None = None
    include_dirs: list[str] | None = None
    dependencies: list[SubprojectDependency] | None = None

    model_config = _MODEL_CONFIG

    def references(self) -> list[Positioned[str]]:
        return [reference_name(ref) for ref in self.dependencies or []]

    def dependency_names(self) -> list[str]:
        return [ref.value for ref in self.references()]


class Override(BaseModel):
    """Per-subproject replacements for the global build settings."""

    name: Positioned[str]
    c_standard: str | None = None
    compiler: str | None = None
    cflags: str | None = None
    debug_flags: str | None = None
    release_flags: str | None = None
    parallel_jobs: int | None = Field(None, ge=1)

    model_config = _MODEL_CONFIG


class RebuildRule(StrEnum):
    IF_CHANGED = "if-changed"
    ALWAYS = "always"
    ON_TRIGGER = "on-trigger"


class CustomBuildRule(BaseModel):
    """Asset build step, e.g. compiling shaders before the C sources."""

    name: Positioned[str]
    description: str | None = None
    src_dir: str
    output_dir: str
    trigger_extensions: list[str]
    output_extension: str
    command: str
    rebuild_rule: RebuildRule

    model_config = _MODEL_CONFIG


class BuildConfig(BaseModel):
    """Complete project manifest."""

    build: BuildSettings
    dependencies: Dependencies = Field(default_factory=Dependencies)
    subprojects: list[Subproject] = []
    custom_build_rules: list[CustomBuildRule] | None = None
    overrides: list[Override] | None = None

    model_config = _MODEL_CONFIG

    def subproject_names(self) -> list[str]:
        return [sp.name.value for sp in self.subprojects]

    def with_build_order(self, order: list[Subproject]) -> BuildConfig:
        """Return a copy whose subprojects are replaced by ``order``."""
        return self.model_copy(update={"subprojects": list(order)})
