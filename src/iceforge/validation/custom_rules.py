"""Custom build rule checks."""

from __future__ import annotations

from iceforge.models.config import CustomBuildRule
from iceforge.models.errors import ConfigError, ConfigValidationError, ErrorType, SourceSpan
from iceforge.models.positioned import Positioned


class CustomBuildRuleValidator:
    """Rejects custom build rules that reuse a name.

    ``src_dir`` and ``output_dir`` are not checked against the filesystem.
    """

    def validate(self, rules: list[CustomBuildRule]) -> None:
        seen: dict[Positioned[str], SourceSpan] = {}
        for rule in rules:
            name = rule.name
            if name in seen:
                raise ConfigValidationError(
                    ConfigError.duplicate(
                        ErrorType.DUPLICATE_CUSTOM_BUILD_RULE_NAME,
                        f"Duplicate custom build rule name '{name.value}'",
                        name.span,
                        seen[name],
                    )
                )
            seen[name] = name.span
