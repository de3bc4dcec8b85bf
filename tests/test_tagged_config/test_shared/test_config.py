"""Tests for the loader settings objects."""

import json
from dataclasses import FrozenInstanceError

import pytest

from tagged_config.shared.config import (
    CharacterConfig,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)


class TestComponentConfigs:
    """Test suite for the per-layer configs."""

    def test_defaults(self) -> None:
        """Test default values of every component."""
        assert CharacterConfig().fallback_encoding == "utf-8"
        assert CharacterConfig().decode_errors == "strict"
        assert TokenizationConfig().decode_entities is True
        assert TreeConfig().comment_prefix == "#"
        assert TreeConfig().key_value_separator == "="
        assert TreeConfig().max_depth is None
        assert GlobalConfig().max_input_size_bytes is None
        assert GlobalConfig().enable_correlation_tracking is True

    def test_unknown_fallback_encoding(self) -> None:
        """Test an unknown codec is rejected."""
        with pytest.raises(ConfigValidationError) as exc_info:
            CharacterConfig(fallback_encoding="no-such-codec")

        assert exc_info.value.field_name == "fallback_encoding"

    def test_invalid_decode_errors(self) -> None:
        """Test only strict and replace are accepted."""
        with pytest.raises(ConfigValidationError, match="decode_errors"):
            CharacterConfig(decode_errors="ignore")

    @pytest.mark.parametrize(
        "kwargs,field_name",
        [
            ({"comment_prefix": ""}, "comment_prefix"),
            ({"key_value_separator": ""}, "key_value_separator"),
            ({"max_depth": 0}, "max_depth"),
        ],
    )
    def test_tree_config_validation(self, kwargs: dict, field_name: str) -> None:
        """Test invalid tree settings name the offending field."""
        with pytest.raises(ConfigValidationError) as exc_info:
            TreeConfig(**kwargs)

        assert exc_info.value.field_name == field_name

    def test_invalid_input_size_limit(self) -> None:
        """Test a non-positive size limit is rejected."""
        with pytest.raises(ConfigValidationError):
            GlobalConfig(max_input_size_bytes=0)

    def test_configs_are_frozen(self) -> None:
        """Test settings cannot be mutated after creation."""
        config = TreeConfig()

        with pytest.raises(FrozenInstanceError):
            config.comment_prefix = ";"  # type: ignore


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_comment_prefix_cannot_start_with_separator(self) -> None:
        """Test cross-component validation offers a suggestion."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig(tree=TreeConfig(comment_prefix="=="))

        assert exc_info.value.field_name == "tree.comment_prefix"
        assert exc_info.value.suggestions

    def test_override_nested_and_top_level(self) -> None:
        """Test override creates a new config and leaves the original alone."""
        base = ParserConfig()
        changed = base.override(tree__max_depth=8, name="bounded")

        assert changed.tree.max_depth == 8
        assert changed.name == "bounded"
        assert base.tree.max_depth is None
        assert base.name is None

    def test_override_unknown_component(self) -> None:
        """Test overriding a component that does not exist fails."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            ParserConfig().override(network__timeout=3)

    def test_override_is_validated(self) -> None:
        """Test overrides run component validation again."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(tree__max_depth=-1)

    def test_dict_round_trip(self) -> None:
        """Test to_dict and from_dict agree."""
        config = ParserConfig().override(
            tree__comment_prefix=";", character__decode_errors="replace", name="x"
        )
        data = config.to_dict()

        assert data["tree"]["comment_prefix"] == ";"
        assert data["name"] == "x"
        assert ParserConfig.from_dict(data) == config

    def test_json_round_trip(self) -> None:
        """Test JSON serialization."""
        config = ParserConfig.strict()

        restored = ParserConfig.from_json(config.to_json())

        assert json.loads(config.to_json())["tree"]["max_depth"] == 64
        assert restored == config

    def test_from_dict_missing_components_use_defaults(self) -> None:
        """Test a partial dictionary is filled with defaults."""
        config = ParserConfig.from_dict({"tree": {"key_value_separator": ":"}})

        assert config.tree.key_value_separator == ":"
        assert config.character == CharacterConfig()

    def test_from_dict_rejects_unknown_keys(self) -> None:
        """Test unknown top level keys and fields are errors."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration key"):
            ParserConfig.from_dict({"api": {}})
        with pytest.raises(ConfigValidationError, match="Invalid settings for tree"):
            ParserConfig.from_dict({"tree": {"bogus": 1}})

    def test_presets(self) -> None:
        """Test the strict and lenient presets."""
        assert ParserConfig.strict().tree.max_depth == 64
        assert ParserConfig.strict().name == "strict"
        assert ParserConfig.lenient().character.decode_errors == "replace"
        assert ParserConfig.lenient().name == "lenient"
