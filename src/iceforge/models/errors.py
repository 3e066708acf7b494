"""Structured error models with byte-span source tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, model_validator


class SourceSpan(BaseModel):
    """Half-open byte range ``[start, end)`` in the manifest source text."""

    start: int = 0
    end: int = 0

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> SourceSpan:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")
        return self

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


class ErrorType(StrEnum):
    TOML_PARSE_ERROR = "TomlParseError"
    INCORRECT_COMPILER = "IncorrectCompiler"
    UNSUPPORTED_C_STANDARD = "UnsupportedCStandard"
    DUPLICATE_DEPENDENCY_SOURCE = "DuplicateDependencySource"
    DUPLICATE_DEPENDENCY_NAME = "DuplicateDependencyName"
    DUPLICATE_DEPENDENCY_INCLUDE_NAME = "DuplicateDependencyIncludeName"
    CUSTOM_BUILD_MISSING = "CustomBuildMissing"
    EXTRA_FIELD_NON_CUSTOM_BUILD = "ExtraFieldNonCustomBuild"
    INVALID_PKG_CONFIG_QUERY = "InvalidPkgConfigQuery"
    DUPLICATE_SUBPROJECT_NAME = "DuplicateSubprojectName"
    INVALID_SUBPROJECT_DEPENDENCY = "InvalidSubprojectDependency"
    CIRCULAR_DEPENDENCY = "CircularDependency"
    OVERRIDE_NAME_CONFLICT = "OverrideNameConflict"
    DUPLICATE_CUSTOM_BUILD_RULE_NAME = "DuplicateCustomBuildRuleName"


PREVIOUSLY_DEFINED = "Previously defined here"


class AdditionalInfo(BaseModel):
    """Secondary label attached to an error, e.g. an earlier definition."""

    span: SourceSpan
    message: str


class ConfigError(BaseModel):
    """A single validation failure with optional source positions and suggestions."""

    error_type: ErrorType
    message: str
    span: SourceSpan | None = None
    additional_info: AdditionalInfo | None = None
    suggestions: list[str] = []

    @classmethod
    def duplicate(
        cls,
        error_type: ErrorType,
        message: str,
        span: SourceSpan,
        previous: SourceSpan,
    ) -> ConfigError:
        """Build a duplicate-definition error pointing back at the first definition."""
        return cls(
            error_type=error_type,
            message=message,
            span=span,
            additional_info=AdditionalInfo(span=previous, message=PREVIOUSLY_DEFINED),
        )


class ConfigValidationError(Exception):
    """Raised by the loader and validators; carries exactly one ``ConfigError``."""

    def __init__(self, error: ConfigError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def error_type(self) -> ErrorType:
        return self.error.error_type

    def __str__(self) -> str:
        return f"{self.error.error_type}: {self.error.message}"


class ValidationResult(BaseModel):
    """Result of a non-raising configuration check."""

    valid: bool
    error: ConfigError | None = None
    build_order: list[str] = []
