"""Subproject resolution: unique names, resolvable references, cycles, build order."""

from __future__ import annotations

import logging

from iceforge.models.config import Dependencies, DetailedDependency, Subproject, reference_name
from iceforge.models.errors import (
    AdditionalInfo,
    ConfigError,
    ConfigValidationError,
    ErrorType,
    SourceSpan,
)
from iceforge.models.positioned import Positioned
from iceforge.validation.graph import SubprojectGraph
from iceforge.validation.suggestions import suggest_similar

logger = logging.getLogger("iceforge.validation")


class SubprojectResolver:
    """Resolves subproject references and computes the build order.

    Runs three phases, each requiring the previous one to pass:

    1. subproject names are unique; library and header-only names form the
       set of linkable targets
    2. every dependency reference names a declared dependency or a linkable
       subproject
    3. the subproject graph is acyclic; the subprojects are returned so that
       each one comes after everything it depends on
    """

    def resolve(
        self, subprojects: list[Subproject], dependencies: Dependencies
    ) -> list[Subproject]:
        linkable = self._check_unique_names(subprojects)
        self._check_references(subprojects, dependencies, linkable)
        return self._order(subprojects)

    def _check_unique_names(self, subprojects: list[Subproject]) -> set[str]:
        seen: dict[Positioned[str], SourceSpan] = {}
        linkable: set[str] = set()
        for subproject in subprojects:
            name = subproject.name
            if name in seen:
                raise ConfigValidationError(
                    ConfigError.duplicate(
                        ErrorType.DUPLICATE_SUBPROJECT_NAME,
                        f"Duplicate subproject name '{name.value}'",
                        name.span,
                        seen[name],
                    )
                )
            seen[name] = name.span
            if subproject.type.is_linkable:
                linkable.add(name.value)
        return linkable

    def _check_references(
        self,
        subprojects: list[Subproject],
        dependencies: Dependencies,
        linkable: set[str],
    ) -> None:
        for subproject in subprojects:
            for ref in subproject.dependencies or []:
                name = reference_name(ref)
                if dependencies.has_dependency(name.value):
                    if isinstance(ref, DetailedDependency) and ref.imports:
                        # TODO: check ref.imports against the dependency's declared imports
                        logger.debug(
                            "Subproject %s imports %s from %s (imports not checked)",
                            subproject.name.value,
                            ref.imports,
                            name.value,
                        )
                    continue
                if name.value in linkable:
                    continue
                raise ConfigValidationError(
                    ConfigError(
                        error_type=ErrorType.INVALID_SUBPROJECT_DEPENDENCY,
                        message=(
                            f"Subproject '{subproject.name.value}' depends on '{name.value}', "
                            f"which is neither a dependency nor a library subproject"
                        ),
                        span=name.span,
                        suggestions=suggest_similar(
                            name.value, dependencies.names() + sorted(linkable)
                        ),
                    )
                )

    def _order(self, subprojects: list[Subproject]) -> list[Subproject]:
        graph = SubprojectGraph(subprojects)
        by_name = {subproject.name.value: subproject for subproject in subprojects}

        cycle = graph.find_cycle()
        if cycle is not None:
            origin = by_name[cycle.origin]
            raise ConfigValidationError(
                ConfigError(
                    error_type=ErrorType.CIRCULAR_DEPENDENCY,
                    message="Circular dependency detected",
                    span=origin.name.span,
                    additional_info=AdditionalInfo(
                        span=by_name[cycle.path[0]].name.span,
                        message=cycle.describe(),
                    ),
                )
            )

        order = graph.build_order()
        logger.debug("Build order: %s", ", ".join(order))
        return [by_name[name] for name in order]
