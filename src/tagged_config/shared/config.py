"""Configuration classes for tagged configuration loading.

This module provides the settings objects that control how raw bytes are
decoded, how markup is tokenized and how ``key=value`` text is turned into
tree leaves.
"""

import codecs
import json
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

_COMPONENTS = ("character", "tokenization", "tree", "global_")
_DECODE_ERROR_MODES = ("strict", "replace")


class ConfigValidationError(ValueError):
    """Exception raised when settings validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CharacterConfig:
    """Configuration for turning raw bytes into text."""

    fallback_encoding: str = "utf-8"
    detect_bom: bool = True
    honor_xml_declaration: bool = True
    decode_errors: str = "strict"  # strict, replace

    def __post_init__(self) -> None:
        """Validate character configuration."""
        try:
            codecs.lookup(self.fallback_encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown fallback_encoding: {self.fallback_encoding}",
                field_name="fallback_encoding",
            ) from e
        if self.decode_errors not in _DECODE_ERROR_MODES:
            raise ConfigValidationError(
                f"decode_errors must be one of {list(_DECODE_ERROR_MODES)}",
                field_name="decode_errors",
            )


@dataclass(frozen=True)
class TokenizationConfig:
    """Configuration for the tag tokenizer."""

    decode_entities: bool = True


@dataclass(frozen=True)
class TreeConfig:
    """Configuration for tree building."""

    comment_prefix: str = "#"
    key_value_separator: str = "="
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if not self.comment_prefix:
            raise ConfigValidationError(
                "comment_prefix cannot be empty", field_name="comment_prefix"
            )
        if not self.key_value_separator:
            raise ConfigValidationError(
                "key_value_separator cannot be empty",
                field_name="key_value_separator",
            )
        if self.max_depth is not None and self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0 or None", field_name="max_depth"
            )


@dataclass(frozen=True)
class GlobalConfig:
    """Settings that apply across all loading layers."""

    max_input_size_bytes: Optional[int] = None
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ConfigValidationError(
                "max_input_size_bytes must be > 0 or None",
                field_name="max_input_size_bytes",
            )


@dataclass(frozen=True)
class ParserConfig:
    """Complete, immutable configuration for all loading layers.

    Thread-safe due to frozen dataclass implementation, so one instance can be
    shared by every ``Conf`` in a process.
    """

    character: CharacterConfig = field(default_factory=CharacterConfig)
    tokenization: TokenizationConfig = field(default_factory=TokenizationConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate cross-component settings."""
        if self.tree.comment_prefix.startswith(self.tree.key_value_separator):
            raise ConfigValidationError(
                "comment_prefix cannot start with key_value_separator",
                field_name="tree.comment_prefix",
                suggestions=["Use '#' or ';' as comment prefix"],
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Fields to override; component fields use ``component__field``

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig()
            >>> strict = config.override(tree__max_depth=32, name="bounded")
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.rsplit("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=[f"Use one of {list(_COMPONENTS)}"],
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        for component, overrides in nested_overrides.items():
            new_fields[component] = replace(getattr(self, component), **overrides)
        new_fields.update(top_level)

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {"name": self.name}
        for component in _COMPONENTS:
            section = getattr(self, component)
            result[component] = {
                name: getattr(section, name) for name in section.__dataclass_fields__
            }
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Unknown components are rejected; missing ones fall back to defaults.
        """
        component_types = {
            "character": CharacterConfig,
            "tokenization": TokenizationConfig,
            "tree": TreeConfig,
            "global_": GlobalConfig,
        }
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "name":
                kwargs["name"] = value
            elif key in component_types:
                try:
                    kwargs[key] = component_types[key](**value)
                except TypeError as e:
                    raise ConfigValidationError(
                        f"Invalid settings for {key}: {e}", field_name=key
                    ) from e
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}", field_name=key
                )
        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset that rejects undecodable input and very deep nesting."""
        return cls(
            character=CharacterConfig(decode_errors="strict"),
            tree=TreeConfig(max_depth=64),
            name="strict",
        )

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Preset that replaces undecodable bytes instead of failing."""
        return cls(
            character=CharacterConfig(decode_errors="replace"),
            name="lenient",
        )
