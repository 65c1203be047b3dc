"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Configuration for one generation run."""

    # Inputs
    source_dir: Optional[str] = None
    stylesheet: Optional[str] = None
    source_extension: str = ".rs"
    require_source_dir: bool = False

    # Output settings
    output_file: Optional[str] = None
    namespace: str = "Takumi.Models"

    # Code style settings
    indent_size: int = 4
    line_ending: str = "\n"
    add_comments: bool = True

    # Declaration selection
    node_suffix: str = "Node"
    union_suffix: str = "Kind"
    use_suffix_convention: bool = True
    node_types: List[str] = field(default_factory=list)
    union_types: List[str] = field(default_factory=list)
    exclude_types: List[str] = field(default_factory=list)
    marker_attribute: str = "typebridge"

    # Stylesheet extraction
    style_macro: str = "define_style!"
    style_class_name: str = "Style"
    conditional_keyword: str = "where"

    # Type handling
    known_types: List[str] = field(
        default_factory=lambda: ["Style", "TailwindValues"]
    )
    child_markers: List[str] = field(default_factory=lambda: ["Vec<", "Node"])
    wrapper_type_name: str = "TailwindValues"

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into a JSON-serializable dictionary."""
        data = asdict(self)
        custom = data.pop("custom")
        data.update(custom)
        return data


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported target languages."""
        self._configs["csharp"] = {
            "namespace": "Takumi.Models",
            "indent_size": 4,
            "add_comments": True,
            "custom": {
                "discriminator_property": "type",
                "opaque_type": "JsonElement",
                "file_scoped_namespace": True,
            },
        }

    def get_config(self, language: str = "csharp",
                   custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = json.loads(json.dumps(self._configs.get(language, {})))

        if config_file:
            file_config = self._load_config_file(config_file)
            self._merge_into(base_config, file_config)

        if custom_config:
            self._merge_into(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _merge_into(base: Dict[str, Any], overrides: Dict[str, Any]):
        """Shallow merge that also merges the nested ``custom`` table."""
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base.setdefault("custom", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}")
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}")

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}")

    def list_languages(self) -> list[str]:
        """Get list of languages with default configurations."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        for part in config.namespace.split("."):
            if not part.isidentifier():
                warnings.append(f"Invalid namespace: {config.namespace}")
                break

        if config.use_suffix_convention:
            if not config.node_suffix:
                warnings.append("node_suffix is empty; every struct would qualify")
            if not config.union_suffix:
                warnings.append("union_suffix is empty; every enum would qualify")
        elif not (config.node_types or config.union_types or config.marker_attribute):
            warnings.append(
                "Suffix convention disabled and no manifest or marker attribute "
                "configured; nothing will be selected"
            )

        for name in (config.style_class_name, config.wrapper_type_name):
            if not name.isidentifier():
                warnings.append(f"Invalid type name: {name}")

        if len(config.child_markers) != 2:
            warnings.append(
                f"child_markers should hold two markers, got {len(config.child_markers)}"
            )

        if not config.source_extension.startswith("."):
            warnings.append(
                f"source_extension should start with '.': {config.source_extension}"
            )

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(language: str = "csharp",
                custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


def load_manifest(manifest_path: Union[str, Path]) -> Dict[str, List[str]]:
    """
    Load a selection manifest.

    The manifest is a JSON object with optional ``node_types``,
    ``union_types`` and ``exclude_types`` lists. Only the keys present in the
    file are returned.
    """
    path = Path(manifest_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"Manifest file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in manifest {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Manifest must contain a JSON object: {path}")

    manifest = {}
    for key in ("node_types", "union_types", "exclude_types"):
        if key not in data:
            continue
        values = data[key]
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ConfigError(f"Manifest key '{key}' must be a list of names: {path}")
        manifest[key] = values
    return manifest
