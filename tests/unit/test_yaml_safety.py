"""Tests for YAML parsing safeguards in TrackedLoader."""

from __future__ import annotations

import pytest

from iceforge.models.errors import ConfigValidationError, ErrorType
from iceforge.parser.builder import load_config_string
from iceforge.parser.loader import _MAX_DOCUMENT_SIZE, TrackedLoader, YAMLSafetyError
from tests.conftest import SAMPLE_CONFIG_YAML


class TestAnchorRejection:
    """Manifests never use YAML anchors/aliases, so reject them entirely."""

    def test_billion_laughs_rejected(self, loader: TrackedLoader) -> None:
        yaml = (
            "a: &a ['lol','lol','lol','lol','lol']\n"
            "b: &b [*a,*a,*a,*a,*a]\n"
            "c: &c [*b,*b,*b,*b,*b]\n"
        )
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_anchor_in_sequence(self, loader: TrackedLoader) -> None:
        yaml = "subprojects:\n  - &core {name: core, type: library}\n  - *core\n"
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_ampersand_in_comment_not_rejected(self, loader: TrackedLoader) -> None:
        yaml = "# see R&D notes\n# &anchor_looking_thing\nkey: value  # see &notes\n"
        raw, _ = loader.load_string(yaml)
        assert raw["key"] == "value"

    def test_anchor_after_comment_still_rejected(self, loader: TrackedLoader) -> None:
        yaml = "# header\nbase: &base {a: 1}\n"
        with pytest.raises(YAMLSafetyError, match="anchors/aliases"):
            loader.load_string(yaml)

    def test_shell_and_operator_not_rejected(self, loader: TrackedLoader) -> None:
        yaml = 'command: "make && make install"\n'
        raw, _ = loader.load_string(yaml)
        assert raw["command"] == "make && make install"


class TestDepthLimit:
    def test_deep_nesting_rejected(self, loader: TrackedLoader) -> None:
        yaml = ""
        for i in range(25):
            yaml += "  " * i + f"level{i}:\n"
        yaml += "  " * 25 + "value: deep\n"
        with pytest.raises(YAMLSafetyError, match="nesting depth"):
            loader.load_string(yaml)


class TestDocumentSize:
    def test_oversized_document_rejected(self, loader: TrackedLoader) -> None:
        yaml = "key: " + "x" * (_MAX_DOCUMENT_SIZE + 1) + "\n"
        with pytest.raises(YAMLSafetyError, match="maximum size"):
            loader.load_string(yaml)


class TestNodeCount:
    def test_excessive_node_count_rejected(self, loader: TrackedLoader) -> None:
        yaml = "\n".join(f"k{i}: v{i}" for i in range(50_001))
        with pytest.raises(YAMLSafetyError, match="node count"):
            loader.load_string(yaml)


class TestValidManifest:
    def test_sample_manifest_passes(self, loader: TrackedLoader) -> None:
        raw, _ = loader.load_string(SAMPLE_CONFIG_YAML)
        assert {"build", "dependencies", "subprojects"} <= raw.keys()

    def test_safety_error_surfaces_as_parse_error(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            load_config_string("key: " + "x" * (_MAX_DOCUMENT_SIZE + 1) + "\n")
        assert exc_info.value.error_type is ErrorType.TOML_PARSE_ERROR
        assert "maximum size" in exc_info.value.error.message
