"""Dependency checks: unique names, sources and include names; build fields; pkg-config."""

from __future__ import annotations

import logging

from iceforge.models.config import (
    Dependencies,
    PkgConfigDependency,
    RemoteBuildMethod,
    RemoteDependency,
)
from iceforge.models.errors import ConfigError, ConfigValidationError, ErrorType, SourceSpan
from iceforge.models.positioned import Positioned
from iceforge.validation.probes import PkgConfigProbe

logger = logging.getLogger("iceforge.validation")

SourceKey = tuple[Positioned[str], Positioned[str] | None]


class DependencyValidator:
    """Validates the remote, pkg-config and manual dependency collections.

    Every dependency is visited once, remote entries first. The first
    violation raises ``ConfigValidationError``; duplicate errors carry a
    secondary span at the earlier definition.
    """

    def __init__(self, probe: PkgConfigProbe | None = None) -> None:
        self._probe = probe or PkgConfigProbe()

    def validate(self, dependencies: Dependencies) -> None:
        sources: dict[SourceKey, SourceSpan] = {}
        names: dict[Positioned[str], SourceSpan] = {}
        include_names: dict[Positioned[str], SourceSpan] = {}

        for dep in dependencies.iter_dependencies():
            entry = dep.entry.value
            if isinstance(entry, RemoteDependency):
                self._check_source(entry, sources)
                self._check_name(entry.name, names)
                self._check_include_name(entry, include_names)
                self._check_build_fields(entry, dep.span)
            elif isinstance(entry, PkgConfigDependency):
                self._check_name(entry.name, names)
                self._check_pkg_config(entry)
            else:
                self._check_name(entry.name, names)

        logger.debug("Validated %d dependencies", len(names))

    def _check_source(self, remote: RemoteDependency, seen: dict[SourceKey, SourceSpan]) -> None:
        key = (remote.source, remote.version)
        if key in seen:
            raise ConfigValidationError(
                ConfigError.duplicate(
                    ErrorType.DUPLICATE_DEPENDENCY_SOURCE,
                    "Duplicate dependency url with same versions",
                    remote.source.span,
                    seen[key],
                )
            )
        seen[key] = remote.source.span

    def _check_name(self, name: Positioned[str], seen: dict[Positioned[str], SourceSpan]) -> None:
        if name in seen:
            raise ConfigValidationError(
                ConfigError.duplicate(
                    ErrorType.DUPLICATE_DEPENDENCY_NAME,
                    f"Duplicate dependency name '{name.value}'",
                    name.span,
                    seen[name],
                )
            )
        seen[name] = name.span

    def _check_include_name(
        self, remote: RemoteDependency, seen: dict[Positioned[str], SourceSpan]
    ) -> None:
        include_name = remote.include_name
        if include_name is None:
            return
        if include_name in seen:
            raise ConfigValidationError(
                ConfigError.duplicate(
                    ErrorType.DUPLICATE_DEPENDENCY_INCLUDE_NAME,
                    f"Duplicate dependency include name '{include_name.value}'",
                    include_name.span,
                    seen[include_name],
                )
            )
        seen[include_name] = include_name.span

    def _check_build_fields(self, remote: RemoteDependency, span: SourceSpan) -> None:
        if remote.build_method is None:
            return
        if remote.build_method is RemoteBuildMethod.CUSTOM:
            if remote.build_command is None:
                raise ConfigValidationError(
                    ConfigError(
                        error_type=ErrorType.CUSTOM_BUILD_MISSING,
                        message="Custom build method missing build_command",
                        span=span,
                    )
                )
            return
        for field_name in ("build_output", "build_command"):
            extra: Positioned[str] | None = getattr(remote, field_name)
            if extra is not None:
                raise ConfigValidationError(
                    ConfigError(
                        error_type=ErrorType.EXTRA_FIELD_NON_CUSTOM_BUILD,
                        message=(
                            f"Non-custom build method '{remote.build_method}' has {field_name}"
                        ),
                        span=extra.span,
                    )
                )

    def _check_pkg_config(self, pkg: PkgConfigDependency) -> None:
        query = pkg.pkg_config_query
        if not self._probe.exists(query.value):
            raise ConfigValidationError(
                ConfigError(
                    error_type=ErrorType.INVALID_PKG_CONFIG_QUERY,
                    message=f"Pkg-config dependency '{query.value}' not found",
                    span=query.span,
                )
            )
        logger.debug("pkg-config resolved %s", query.value)
