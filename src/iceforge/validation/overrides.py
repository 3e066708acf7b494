"""Override checks: unique names that each match a subproject."""

from __future__ import annotations

from iceforge.models.config import Override
from iceforge.models.errors import ConfigError, ConfigValidationError, ErrorType, SourceSpan
from iceforge.models.positioned import Positioned
from iceforge.validation.suggestions import suggest_similar


class OverrideValidator:
    def validate(self, overrides: list[Override], subproject_names: list[str]) -> None:
        seen: dict[Positioned[str], SourceSpan] = {}
        for override in overrides:
            name = override.name
            if name in seen:
                raise ConfigValidationError(
                    ConfigError.duplicate(
                        ErrorType.OVERRIDE_NAME_CONFLICT,
                        f"Duplicate override name '{name.value}'",
                        name.span,
                        seen[name],
                    )
                )
            seen[name] = name.span

        known = set(subproject_names)
        for name in seen:
            if name.value not in known:
                raise ConfigValidationError(
                    ConfigError(
                        error_type=ErrorType.OVERRIDE_NAME_CONFLICT,
                        message=f"Override '{name.value}' does not match any subproject",
                        span=name.span,
                        suggestions=suggest_similar(name.value, subproject_names),
                    )
                )
