"""Installer settings file loading and management"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class ConnectorConfig:
    """Connector binary settings"""
    binary: str


@dataclass
class UnitsConfig:
    """Unit file location settings"""
    system_dir: str
    templates_dir: Optional[str]


@dataclass
class LoggingConfig:
    """Logging configuration settings"""
    level: str
    file: Optional[str]
    format: str


@dataclass
class Config:
    """Complete installer settings"""
    connector: ConnectorConfig
    units: UnitsConfig
    logging: LoggingConfig


class ConfigLoader:
    """Loads and parses installer settings from YAML files"""

    DEFAULT_CONFIG_PATHS = [
        "leapconnect.yml",
        "~/.config/leapconnect/config.yml",
        "/etc/leapconnect/config.yml",
    ]

    @staticmethod
    def configFile_find() -> Optional[Path]:
        """
        Find settings file in standard locations

        Returns:
            Path to settings file, or None if not found
        """
        for config_path in ConfigLoader.DEFAULT_CONFIG_PATHS:
            path = Path(config_path).expanduser().resolve()
            if path.exists() and path.is_file():
                return path
        return None

    @staticmethod
    def yaml_load(file_path: Path) -> Dict[str, Any]:
        """
        Load YAML settings file

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed settings dictionary

        Raises:
            FileNotFoundError: If file does not exist
            yaml.YAMLError: If file is not valid YAML
        """
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a YAML dictionary")

        return data

    @staticmethod
    def _section_get(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ValueError(f"Config section '{name}' must be a dictionary")
        return section

    @staticmethod
    def _string_get(section: Dict[str, Any], key: str, default: Optional[str]) -> Optional[str]:
        value = section.get(key, default)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Config key '{key}' must be a string")
        return value

    @staticmethod
    def config_parse(data: Dict[str, Any]) -> Config:
        """
        Parse settings dictionary into Config object

        Every key is optional; missing keys fall back to built-in defaults.

        Args:
            data: Raw settings dictionary

        Returns:
            Parsed Config object

        Raises:
            ValueError: If a section or value has the wrong type
        """
        connector_data = ConfigLoader._section_get(data, "connector")
        connector = ConnectorConfig(
            binary=ConfigLoader._string_get(connector_data, "binary", "input-leapc") or "input-leapc",
        )

        units_data = ConfigLoader._section_get(data, "units")
        units = UnitsConfig(
            system_dir=ConfigLoader._string_get(units_data, "system_dir", "/etc/systemd/system")
            or "/etc/systemd/system",
            templates_dir=ConfigLoader._string_get(units_data, "templates_dir", None),
        )

        logging_data = ConfigLoader._section_get(data, "logging")
        logging = LoggingConfig(
            level=ConfigLoader._string_get(logging_data, "level", "INFO") or "INFO",
            file=ConfigLoader._string_get(logging_data, "file", None),
            format=ConfigLoader._string_get(logging_data, "format", DEFAULT_LOG_FORMAT)
            or DEFAULT_LOG_FORMAT,
        )

        return Config(connector=connector, units=units, logging=logging)

    @staticmethod
    def config_load(file_path: Optional[Path] = None) -> Config:
        """
        Load settings from file, or built-in defaults when none exists

        Args:
            file_path: Optional explicit path. If None, searches standard locations.

        Returns:
            Parsed Config object

        Raises:
            FileNotFoundError: If an explicit file_path does not exist
            ValueError: If the settings file is invalid
        """
        if file_path is None:
            file_path = ConfigLoader.configFile_find()
            if file_path is None:
                return ConfigLoader.config_parse({})

        data = ConfigLoader.yaml_load(file_path)
        return ConfigLoader.config_parse(data)
