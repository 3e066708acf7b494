"""Build settings check: the declared compiler exists and accepts the C standard."""

from __future__ import annotations

import logging

from iceforge.models.config import BuildSettings
from iceforge.models.errors import ConfigError, ConfigValidationError, ErrorType
from iceforge.validation.probes import ToolchainProbe

logger = logging.getLogger("iceforge.validation")


class SettingsValidator:
    """Confirms the toolchain in ``[build]`` is usable on this machine."""

    def __init__(self, probe: ToolchainProbe | None = None) -> None:
        self._probe = probe or ToolchainProbe()

    def validate(self, settings: BuildSettings) -> str:
        """Return the resolved compiler path or raise ``ConfigValidationError``."""
        compiler = settings.compiler
        compiler_path = self._probe.resolve(compiler.value)
        if compiler_path is None:
            raise ConfigValidationError(
                ConfigError(
                    error_type=ErrorType.INCORRECT_COMPILER,
                    message="Compiler not in path",
                    span=compiler.span,
                )
            )
        logger.debug("Compiler %s resolved to %s", compiler.value, compiler_path)

        standard = settings.c_standard
        if not self._probe.supports_standard(compiler_path, standard.value):
            raise ConfigValidationError(
                ConfigError(
                    error_type=ErrorType.UNSUPPORTED_C_STANDARD,
                    message="Unsupported C standard",
                    span=standard.span,
                )
            )
        return compiler_path
