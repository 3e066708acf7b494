"""Builds the typed ``BuildConfig`` from a loaded manifest, attaching source spans."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from iceforge.models.config import (
    BuildConfig,
    BuildSettings,
    CustomBuildRule,
    Dependencies,
    DetailedDependency,
    ManualDependency,
    Override,
    PkgConfigDependency,
    RemoteDependency,
    Subproject,
    SubprojectDependency,
)
from iceforge.models.errors import ConfigError, ConfigValidationError, ErrorType, SourceSpan
from iceforge.models.positioned import Positioned
from iceforge.parser.loader import ByteOffsets, SourceMap, TrackedLoader, YAMLSafetyError

logger = logging.getLogger("iceforge.parser")

M = TypeVar("M", bound=BaseModel)

# Fields that keep their source span on the typed model.
_BUILD_POSITIONED = ("c_standard", "compiler")
_REMOTE_POSITIONED = ("name", "version", "source", "include_name", "build_command", "build_output")
_PKG_CONFIG_POSITIONED = ("name", "pkg_config_query")


class ConfigBuilder:
    """Turns the raw manifest dict into a fully-typed ``BuildConfig``.

    Every value that later shows up in a diagnostic is wrapped in a
    ``Positioned`` carrying the span recorded by the loader. Structural
    problems (missing tables, unknown keys, wrong types) are reported as
    ``TomlParseError`` at the offending node.
    """

    def __init__(self, source_map: SourceMap | None = None) -> None:
        self._source_map = source_map or SourceMap()

    def build(self, raw: dict[str, Any]) -> BuildConfig:
        for key in raw:
            if key not in BuildConfig.model_fields:
                raise self._error(f"Unknown top-level table '{key}'", key)
        if raw.get("build") is None:
            raise self._error("Missing 'build' table", "")

        build = self._entity(BuildSettings, raw["build"], "build", _BUILD_POSITIONED)
        dependencies = self._dependencies(raw.get("dependencies"))
        subprojects = [
            self._subproject(item, path) for path, item in self._items(raw, "subprojects")
        ]
        custom_build_rules = None
        if raw.get("custom_build_rules") is not None:
            custom_build_rules = [
                self._entity(CustomBuildRule, item, path)
                for path, item in self._items(raw, "custom_build_rules")
            ]
        overrides = None
        if raw.get("overrides") is not None:
            overrides = [
                self._entity(Override, item, path)
                for path, item in self._items(raw, "overrides")
            ]

        config = BuildConfig(
            build=build,
            dependencies=dependencies,
            subprojects=subprojects,
            custom_build_rules=custom_build_rules,
            overrides=overrides,
        )
        logger.debug(
            "Built manifest: %d dependencies, %d subprojects",
            len(config.dependencies),
            len(config.subprojects),
        )
        return config

    # -- sections ------------------------------------------------------------

    def _dependencies(self, raw: Any) -> Dependencies:
        if raw is None:
            return Dependencies()
        if not isinstance(raw, dict):
            raise self._error("'dependencies' must be a table", "dependencies")
        for key in raw:
            if key not in Dependencies.model_fields:
                raise self._error(f"Unknown dependency kind '{key}'", f"dependencies.{key}")

        remote = [
            Positioned[RemoteDependency](
                value=self._entity(RemoteDependency, item, path, _REMOTE_POSITIONED),
                span=self._span(path),
            )
            for path, item in self._items(raw, "remote", prefix="dependencies")
        ]
        pkg_config = [
            Positioned[PkgConfigDependency](
                value=self._entity(PkgConfigDependency, item, path, _PKG_CONFIG_POSITIONED),
                span=self._span(path),
            )
            for path, item in self._items(raw, "pkg_config", prefix="dependencies")
        ]
        manual = [
            Positioned[ManualDependency](
                value=self._entity(ManualDependency, item, path),
                span=self._span(path),
            )
            for path, item in self._items(raw, "manual", prefix="dependencies")
        ]
        return Dependencies(remote=remote, pkg_config=pkg_config, manual=manual)

    def _subproject(self, raw: Any, path: str) -> Subproject:
        replacements: dict[str, Any] = {}
        if isinstance(raw, dict) and isinstance(raw.get("dependencies"), list):
            refs: list[SubprojectDependency] = []
            for i, item in enumerate(raw["dependencies"]):
                item_path = f"{path}.dependencies[{i}]"
                if isinstance(item, dict):
                    refs.append(self._entity(DetailedDependency, item, item_path))
                else:
                    refs.append(Positioned(value=item, span=self._span(item_path)))
            replacements["dependencies"] = refs
        return self._entity(Subproject, raw, path, replacements=replacements)

    # -- helpers -------------------------------------------------------------

    def _entity(
        self,
        model: type[M],
        raw: Any,
        path: str,
        positioned: tuple[str, ...] = ("name",),
        replacements: dict[str, Any] | None = None,
    ) -> M:
        if not isinstance(raw, dict):
            raise self._error(f"'{path}' must be a table", path)
        values = dict(raw)
        for key in positioned:
            if values.get(key) is not None:
                values[key] = Positioned(value=values[key], span=self._span(f"{path}.{key}"))
        values.update(replacements or {})
        try:
            return model.model_validate(values)
        except ValidationError as exc:
            raise self._from_validation_error(exc, path) from exc

    def _items(self, raw: dict[str, Any], key: str, prefix: str = "") -> list[tuple[str, Any]]:
        """Return ``(path, item)`` pairs of the array stored under ``key``."""
        path = f"{prefix}.{key}" if prefix else key
        value = raw.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise self._error(f"'{path}' must be an array of tables", path)
        return [(f"{path}[{i}]", item) for i, item in enumerate(value)]

    def _span(self, path: str) -> SourceSpan:
        return self._source_map.nearest(path) or SourceSpan()

    def _error(self, message: str, path: str) -> ConfigValidationError:
        return ConfigValidationError(
            ConfigError(
                error_type=ErrorType.TOML_PARSE_ERROR,
                message=message,
                span=self._source_map.nearest(path),
            )
        )

    def _from_validation_error(self, exc: ValidationError, path: str) -> ConfigValidationError:
        first = exc.errors()[0]
        field_path = display = path
        for part in first["loc"]:
            if isinstance(part, int):
                field_path += f"[{part}]"
                display += f"[{part}]"
            else:
                field_path += f".{part}"
                # Skip pydantic's union-member tags in the message.
                if part.isidentifier():
                    display += f".{part}"
        return self._error(f"{display}: {first['msg']}", field_path)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def load_config_string(content: str) -> BuildConfig:
    """Parse manifest text into a ``BuildConfig``.

    Raises ``ConfigValidationError`` (``TomlParseError``) for YAML syntax
    errors, safety violations and schema mismatches.
    """
    loader = TrackedLoader()
    try:
        raw, source_map = loader.load_string(content)
    except YAMLSafetyError as exc:
        raise ConfigValidationError(
            ConfigError(error_type=ErrorType.TOML_PARSE_ERROR, message=str(exc))
        ) from exc
    except MarkedYAMLError as exc:
        span = None
        mark = exc.problem_mark or exc.context_mark
        if mark is not None:
            start = ByteOffsets(content).offset(mark.index)
            span = SourceSpan(start=start, end=start)
        message = exc.problem or exc.context or "Invalid YAML"
        raise ConfigValidationError(
            ConfigError(error_type=ErrorType.TOML_PARSE_ERROR, message=message, span=span)
        ) from exc
    except YAMLError as exc:
        raise ConfigValidationError(
            ConfigError(error_type=ErrorType.TOML_PARSE_ERROR, message=str(exc))
        ) from exc
    return ConfigBuilder(source_map).build(raw)


def load_config(path: Path) -> BuildConfig:
    """Read and parse the manifest at ``path``."""
    logger.debug("Loading manifest %s", path)
    return load_config_string(path.read_text(encoding="utf-8"))
