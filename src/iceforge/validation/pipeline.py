"""Orchestrates manifest verification.

Phases run in order: settings, dependencies, subprojects, overrides, custom rules.
"""

from __future__ import annotations

import logging

from iceforge.models.config import BuildConfig
from iceforge.models.errors import ConfigValidationError, ValidationResult
from iceforge.validation.custom_rules import CustomBuildRuleValidator
from iceforge.validation.dependencies import DependencyValidator
from iceforge.validation.overrides import OverrideValidator
from iceforge.validation.probes import PkgConfigProbe, ToolchainProbe
from iceforge.validation.subprojects import SubprojectResolver
from iceforge.validation.toolchain import SettingsValidator

logger = logging.getLogger("iceforge.validation")


class ConfigVerifier:
    """Runs every validator in order and stops at the first failure."""

    def __init__(
        self,
        toolchain_probe: ToolchainProbe | None = None,
        pkg_config_probe: PkgConfigProbe | None = None,
    ) -> None:
        self._settings = SettingsValidator(toolchain_probe)
        self._dependencies = DependencyValidator(pkg_config_probe)
        self._subprojects = SubprojectResolver()
        self._overrides = OverrideValidator()
        self._custom_rules = CustomBuildRuleValidator()

    def verify(self, config: BuildConfig) -> BuildConfig:
        """Validate ``config`` and return a copy with subprojects in build order.

        Raises ``ConfigValidationError`` with the first problem found.
        """
        # Phase 1: toolchain, so later phases can assume a working compiler
        self._settings.validate(config.build)
        logger.debug("Build settings OK")

        # Phase 2: dependency collections
        self._dependencies.validate(config.dependencies)

        # Phase 3: subproject references, cycles and build order
        ordered = self._subprojects.resolve(config.subprojects, config.dependencies)

        # Phase 4: overrides must target existing subprojects
        if config.overrides is not None:
            self._overrides.validate(config.overrides, config.subproject_names())

        # Phase 5: custom build rules
        if config.custom_build_rules is not None:
            self._custom_rules.validate(config.custom_build_rules)

        logger.info("Manifest verified: %d subprojects", len(ordered))
        return config.with_build_order(ordered)


def verify_config(
    config: BuildConfig,
    *,
    toolchain_probe: ToolchainProbe | None = None,
    pkg_config_probe: PkgConfigProbe | None = None,
) -> BuildConfig:
    """Validate ``config``; see ``ConfigVerifier.verify``."""
    verifier = ConfigVerifier(toolchain_probe=toolchain_probe, pkg_config_probe=pkg_config_probe)
    return verifier.verify(config)


def check_config(
    config: BuildConfig,
    *,
    toolchain_probe: ToolchainProbe | None = None,
    pkg_config_probe: PkgConfigProbe | None = None,
) -> ValidationResult:
    """Non-raising variant of ``verify_config``."""
    try:
        verified = verify_config(
            config, toolchain_probe=toolchain_probe, pkg_config_probe=pkg_config_probe
        )
    except ConfigValidationError as exc:
        return ValidationResult(valid=False, error=exc.error)
    return ValidationResult(valid=True, build_order=verified.subproject_names())
