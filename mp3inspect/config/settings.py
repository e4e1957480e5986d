"""
Configuration management for mp3inspect

This module handles loading, validation, and management of application settings
from YAML files and environment variables. The parsing engines themselves never
read settings; the inspector factory and the CLI translate these values into
explicit configuration objects.

The configuration is organized into logical sections using dataclasses:
- ID3 tag parsing options (version strictness, frame size mode, encodings)
- MPEG audio scan options
- Report output preferences
- Logging configuration
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, asdict
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


FRAME_SIZE_MODES = ['synchsafe', 'big_endian']
ENCODING_POLICIES = ['regional_legacy', 'strict']
OUTPUT_FORMATS = ['text', 'yaml']


@dataclass
class ID3Config:
    """
    ID3 tag parsing configuration

    Controls how tolerant the tag reader is and how text frames are decoded.
    The defaults reproduce the behaviour observed on real-world files where
    "ISO-8859-1" frames are really stored in a regional code page.
    """
    strict_version: bool = False
    frame_size_mode: str = "synchsafe"  # synchsafe, big_endian
    encoding_policy: str = "regional_legacy"  # regional_legacy, strict
    legacy_encoding: str = "gb18030"
    check_footer: bool = True
    emit_unlabeled: bool = False
    fallback_to_id3v1: bool = True


@dataclass
class ScanConfig:
    """MPEG audio frame scan settings"""
    enabled: bool = True


@dataclass
class OutputConfig:
    """
    Report output preferences

    Controls the report format written by the CLI and whether audio
    statistics are included.
    """
    format: str = "text"  # text, yaml
    show_statistics: bool = True


@dataclass
class LoggingConfig:
    """
    Logging configuration and output settings

    Controls application logging behavior including log levels, file output,
    rotation, and console formatting.
    """
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


class Settings:
    """
    Main settings class that manages all configuration

    Loads settings from YAML files and environment variables and provides a
    unified interface for accessing configuration throughout the application.

    The class handles:
    - Loading configuration from YAML files
    - Overriding with environment variables
    - Validating configuration values
    - Saving configuration back to files
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file or environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".mp3inspect"

        # Initialize all configuration objects with default values
        self.id3 = ID3Config()
        self.scan = ScanConfig()
        self.output = OutputConfig()
        self.logging = LoggingConfig()

        # Load configuration from various sources in order of precedence
        self._load_config()
        self._load_environment_variables()

    def _sections(self) -> Dict[str, Any]:
        return {
            'id3': self.id3,
            'scan': self.scan,
            'output': self.output,
            'logging': self.logging,
        }

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches for configuration files in multiple locations in order of
        precedence. The first file found will be used.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only attributes that exist in both the config file and the dataclass
        definition are updated; unknown sections and keys are ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        if not isinstance(config_data, dict):
            return

        config_mapping = self._sections()

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """
        Load configuration overrides from environment variables

        Environment variables take precedence over file-based configuration.
        """
        env_mappings = {
            'MP3INSPECT_LEGACY_ENCODING': lambda v: setattr(self.id3, 'legacy_encoding', v),
            'MP3INSPECT_STRICT_VERSION': lambda v: setattr(self.id3, 'strict_version', _parse_bool(v)),
            'MP3INSPECT_FRAME_SIZE_MODE': lambda v: setattr(self.id3, 'frame_size_mode', v),
            'MP3INSPECT_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def get_config_directory(self) -> Path:
        """
        Get the expanded config directory path

        Returns:
            Path object for the configuration directory
        """
        return Path(self.config_dir).expanduser()

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file

        Args:
            path: Custom path to save config, defaults to user config directory

        Returns:
            Path the configuration was written to

        Raises:
            OSError: If the configuration cannot be written
        """
        if not path:
            target = self.get_config_directory() / "config.yaml"
        else:
            target = Path(path)

        config_data = {name: asdict(section) for name, section in self._sections().items()}

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)
        return target

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Return all configuration sections as plain dictionaries"""
        return {name: asdict(section) for name, section in self._sections().items()}

    def get_errors(self) -> List[str]:
        """
        Collect configuration validation errors

        Returns:
            List of human-readable error descriptions (empty when valid)
        """
        from ..utils.validation import validate_choice, validate_encoding_name

        errors = []

        checks = [
            validate_choice(self.id3.frame_size_mode, FRAME_SIZE_MODES, "frame size mode"),
            validate_choice(self.id3.encoding_policy, ENCODING_POLICIES, "encoding policy"),
            validate_choice(self.output.format, OUTPUT_FORMATS, "output format"),
            validate_encoding_name(self.id3.legacy_encoding),
        ]
        for is_valid, error_msg in checks:
            if not is_valid:
                errors.append(error_msg)

        if self.logging.level.upper() not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            errors.append(f"Invalid logging level: {self.logging.level}")

        return errors

    def __str__(self) -> str:
        sections = [
            f"ID3: {self.id3.frame_size_mode}/{self.id3.encoding_policy}",
            f"Legacy encoding: {self.id3.legacy_encoding}",
            f"Scan: {'enabled' if self.scan.enabled else 'disabled'}",
            f"Output: {self.output.format}",
        ]
        return f"Settings({', '.join(sections)})"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


# Global settings instance for singleton pattern
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The global Settings instance
    """
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Creates a new settings instance with updated configuration from files
    and environment variables.

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global settings
    settings = Settings(config_path)
    return settings
