"""Tests for end-to-end manifest verification."""

from __future__ import annotations

import pytest

from iceforge.models.errors import ConfigValidationError, ErrorType
from iceforge.parser.builder import load_config_string
from iceforge.validation.pipeline import ConfigVerifier, check_config, verify_config
from tests.conftest import (
    SAMPLE_CONFIG_YAML,
    FakePkgConfigProbe,
    FakeToolchainProbe,
    make_config,
    subproject,
)


def _verify(config, toolchain_probe=None, pkg_config_probe=None):
    return verify_config(
        config,
        toolchain_probe=toolchain_probe or FakeToolchainProbe(),
        pkg_config_probe=pkg_config_probe or FakePkgConfigProbe(),
    )


class TestVerifyConfig:
    def test_sample_build_order(self, sample_config) -> None:
        verified = _verify(sample_config)
        assert verified.subproject_names() == ["core", "engine", "game"]

    def test_input_left_untouched(self, sample_config) -> None:
        _verify(sample_config)
        assert sample_config.subproject_names() == ["game", "engine", "core"]

    def test_other_sections_preserved(self, sample_config) -> None:
        verified = _verify(sample_config)
        assert verified.build == sample_config.build
        assert verified.dependencies == sample_config.dependencies
        assert verified.overrides == sample_config.overrides
        assert verified.custom_build_rules == sample_config.custom_build_rules

    def test_deterministic(self) -> None:
        first = _verify(load_config_string(SAMPLE_CONFIG_YAML))
        second = _verify(load_config_string(SAMPLE_CONFIG_YAML))
        assert first.subproject_names() == second.subproject_names()

    def test_idempotent(self, sample_config) -> None:
        once = _verify(sample_config)
        twice = _verify(once)
        assert twice.subproject_names() == once.subproject_names()

    def test_no_subprojects(self) -> None:
        assert _verify(make_config([])).subprojects == []

    def test_verifier_reusable(self, sample_config) -> None:
        verifier = ConfigVerifier(FakeToolchainProbe(), FakePkgConfigProbe())
        assert verifier.verify(sample_config) == verifier.verify(sample_config)


class TestPhaseOrder:
    def test_settings_checked_first(self) -> None:
        config = make_config(
            [subproject("a", deps=["missing"])],
            dependencies={"manual": [{"name": "m"}, {"name": "m"}]},
        )
        pkg_config_probe = FakePkgConfigProbe()
        with pytest.raises(ConfigValidationError) as exc_info:
            _verify(config, FakeToolchainProbe(compilers={}), pkg_config_probe)
        assert exc_info.value.error_type is ErrorType.INCORRECT_COMPILER
        assert pkg_config_probe.queries == []

    def test_dependencies_before_subprojects(self) -> None:
        config = make_config(
            [subproject("a", deps=["missing"])],
            dependencies={"manual": [{"name": "m"}, {"name": "m"}]},
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            _verify(config)
        assert exc_info.value.error_type is ErrorType.DUPLICATE_DEPENDENCY_NAME

    def test_subprojects_before_overrides(self) -> None:
        config = make_config(
            [subproject("a", deps=["a"])],
            overrides=[{"name": "ghost"}],
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            _verify(config)
        assert exc_info.value.error_type is ErrorType.CIRCULAR_DEPENDENCY

    def test_overrides_before_custom_rules(self) -> None:
        rule = {
            "name": "shaders",
            "src_dir": "assets",
            "output_dir": "out",
            "trigger_extensions": [".vert"],
            "output_extension": ".spv",
            "command": "glslc",
            "rebuild_rule": "always",
        }
        config = make_config(
            [subproject("a")],
            overrides=[{"name": "ghost"}],
            custom_build_rules=[rule, rule],
        )
        with pytest.raises(ConfigValidationError) as exc_info:
            _verify(config)
        assert exc_info.value.error_type is ErrorType.OVERRIDE_NAME_CONFLICT

    def test_custom_rules_checked_last(self) -> None:
        rule = {
            "name": "shaders",
            "src_dir": "assets",
            "output_dir": "out",
            "trigger_extensions": [".vert"],
            "output_extension": ".spv",
            "command": "glslc",
            "rebuild_rule": "always",
        }
        config = make_config([subproject("a")], custom_build_rules=[rule, rule])
        with pytest.raises(ConfigValidationError) as exc_info:
            _verify(config)
        assert exc_info.value.error_type is ErrorType.DUPLICATE_CUSTOM_BUILD_RULE_NAME


class TestCheckConfig:
    def test_valid(self, sample_config) -> None:
        result = check_config(
            sample_config,
            toolchain_probe=FakeToolchainProbe(),
            pkg_config_probe=FakePkgConfigProbe(),
        )
        assert result.valid
        assert result.error is None
        assert result.build_order == ["core", "engine", "game"]

    def test_invalid(self, sample_config) -> None:
        result = check_config(
            sample_config,
            toolchain_probe=FakeToolchainProbe(standards={"c99"}),
            pkg_config_probe=FakePkgConfigProbe(),
        )
        assert not result.valid
        assert result.error is not None
        assert result.error.error_type is ErrorType.UNSUPPORTED_C_STANDARD
        assert result.build_order == []
