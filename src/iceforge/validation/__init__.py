"""Manifest validation and subproject build-order resolution."""

from iceforge.validation.custom_rules import CustomBuildRuleValidator
from iceforge.validation.dependencies import DependencyValidator
from iceforge.validation.graph import Cycle, SubprojectGraph
from iceforge.validation.overrides import OverrideValidator
from iceforge.validation.pipeline import ConfigVerifier, check_config, verify_config
from iceforge.validation.probes import PkgConfigProbe, ToolchainProbe
from iceforge.validation.subprojects import SubprojectResolver
from iceforge.validation.toolchain import SettingsValidator

__all__ = [
    "ConfigVerifier",
    "CustomBuildRuleValidator",
    "Cycle",
    "DependencyValidator",
    "OverrideValidator",
    "PkgConfigProbe",
    "SettingsValidator",
    "SubprojectGraph",
    "SubprojectResolver",
    "ToolchainProbe",
    "check_config",
    "verify_config",
]
