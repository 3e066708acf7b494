"""Shared test fixtures for iceforge."""

from __future__ import annotations

import pytest

from iceforge.models.config import BuildConfig, BuildSettings, Subproject
from iceforge.parser.builder import load_config_string
from iceforge.parser.loader import TrackedLoader
from iceforge.validation.probes import PkgConfigProbe, ToolchainProbe


class FakeToolchainProbe(ToolchainProbe):
    """Toolchain probe answering from in-memory tables instead of spawning processes."""

    def __init__(
        self,
        compilers: dict[str, str] | None = None,
        standards: set[str] | None = None,
    ) -> None:
        super().__init__()
        self.compilers = {"gcc": "/usr/bin/gcc", "clang": "/usr/bin/clang"}
        if compilers is not None:
            self.compilers = compilers
        self.standards = {"c89", "c99", "c11", "c17", "gnu11"} if standards is None else standards
        self.calls: list[tuple[str, str]] = []

    def resolve(self, compiler: str) -> str | None:
        self.calls.append(("resolve", compiler))
        return self.compilers.get(compiler)

    def supports_standard(self, compiler_path: str, standard: str) -> bool:
        self.calls.append(("standard", standard))
        return standard in self.standards


class FakePkgConfigProbe(PkgConfigProbe):
    """pkg-config probe that knows a fixed set of packages."""

    def __init__(self, known: set[str] | None = None) -> None:
        super().__init__()
        self.known = {"sdl2", "zlib", "vulkan"} if known is None else known
        self.queries: list[str] = []

    def exists(self, query: str) -> bool:
        self.queries.append(query)
        return query in self.known


def make_config(subprojects: list[Subproject], **kwargs: object) -> BuildConfig:
    """Programmatic config with a valid toolchain and the given subprojects."""
    return BuildConfig(
        build=BuildSettings(version="0.1.0", c_standard="c11", compiler="gcc"),
        subprojects=subprojects,
        **kwargs,
    )


def subproject(name: str, kind: str = "library", deps: list[object] | None = None) -> Subproject:
    return Subproject(name=name, type=kind, dependencies=deps)


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def toolchain_probe() -> FakeToolchainProbe:
    return FakeToolchainProbe()


@pytest.fixture
def pkg_config_probe() -> FakePkgConfigProbe:
    return FakePkgConfigProbe()


@pytest.fixture
def sample_config() -> BuildConfig:
    return load_config_string(SAMPLE_CONFIG_YAML)


SAMPLE_CONFIG_YAML = """\
build:
  version: "0.1.0"
  c_standard: c11
  compiler: gcc
  global_cflags: -Wall -Wextra
  parallel_jobs: 4

dependencies:
  remote:
    - name: zlib
      version: "1.3"
      source: https://github.com/madler/zlib
      include_name: zlib
      include_dirs: [include]
      build_method: cmake
      imports: [inflate, deflate]
    - name: stb
      source: https://github.com/nothings/stb
      include_name: stb
      include_dirs: ["."]
      build_method: header-only
  pkg_config:
    - name: sdl2
      pkg_config_query: sdl2
  manual:
    - name: m
      ldflags: -lm

subprojects:
  - name: game
    type: binary
    src_dir: src/game
    dependencies: [engine, sdl2]
  - name: engine
    type: library
    src_dir: src/engine
    include_dirs: [include/engine]
    dependencies:
      - core
      - name: zlib
        imports: [inflate]
  - name: core
    type: library
    src_dir: src/core
    dependencies: [stb, m]

overrides:
  - name: engine
    cflags: -O3
    parallel_jobs: 2

custom_build_rules:
  - name: shaders
    description: Compile GLSL shaders to SPIR-V
    src_dir: assets/shaders
    output_dir: build/shaders
    trigger_extensions: [".vert", ".frag"]
    output_extension: ".spv"
    command: "glslc {input} -o {output}"
    rebuild_rule: if-changed
"""
