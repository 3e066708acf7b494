"""Pydantic domain models for the iceforge project manifest."""

from iceforge.models.config import (
    BuildConfig,
    BuildSettings,
    CustomBuildRule,
    Dependencies,
    Dependency,
    DependencyKind,
    DetailedDependency,
    ManualDependency,
    Override,
    PkgConfigDependency,
    RebuildRule,
    RemoteBuildMethod,
    RemoteDependency,
    Subproject,
    SubprojectDependency,
    SubprojectType,
)
from iceforge.models.errors import (
    AdditionalInfo,
    ConfigError,
    ConfigValidationError,
    ErrorType,
    SourceSpan,
    ValidationResult,
)
from iceforge.models.positioned import Positioned

__all__ = [
    "AdditionalInfo",
    "BuildConfig",
    "BuildSettings",
    "ConfigError",
    "ConfigValidationError",
    "CustomBuildRule",
    "Dependencies",
    "Dependency",
    "DependencyKind",
    "DetailedDependency",
    "ErrorType",
    "ManualDependency",
    "Override",
    "PkgConfigDependency",
    "Positioned",
    "RebuildRule",
    "RemoteBuildMethod",
    "RemoteDependency",
    "SourceSpan",
    "Subproject",
    "SubprojectDependency",
    "SubprojectType",
    "ValidationResult",
]
