"""Application settings singleton - single source of truth for configuration

This module provides a singleton Settings class that consolidates:
1. Fixed installer constants (unit names, permission bits, well-known paths)
2. Runtime settings loaded from the optional YAML settings file

Usage:
    from leapconnect.common.settings import settings

    # Initialize once at startup with loaded config
    config = ConfigLoader.config_load()
    settings.initialize(config)

    # Use anywhere in the application
    os.chmod(path, settings.UNIT_FILE_MODE)
"""

from typing import Optional

from leapconnect.common.config import Config


class Settings:
    """Singleton settings manager combining the settings file and constants

    This class provides:
    - Unit file names and modes that every orchestrator must agree on
    - Well-known supervisor paths
    - Access to runtime settings loaded from the YAML settings file

    The singleton pattern ensures installer, uninstaller and dry-run all use
    the same unit names and locations.
    """

    _instance: Optional["Settings"] = None

    def __new__(cls) -> "Settings":
        """Ensure only one Settings instance exists"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        """Initialize settings singleton (only runs once)"""
        if hasattr(self, "_initialized") and self._initialized:
            return
        self._initialized = True
        self._config: Optional[Config] = None

    def initialize(self, config: Config) -> None:
        """Initialize with loaded configuration"""
        self._config = config

    # =========================================================================
    # Unit Constants
    # =========================================================================

    CONNECTOR_SERVICE: str = "inputleap.service"
    """Connector unit, runs the InputLeap client in the foreground"""

    RECONNECT_SERVICE: str = "inputleap-reconnect.service"
    """Oneshot health check that restarts the connector when it is not running"""

    RECONNECT_TIMER: str = "inputleap-reconnect.timer"
    """Periodic trigger for the reconnect service"""

    UNIT_FILE_MODE: int = 0o644
    """Permission bits for written unit files (owner rw, group/other r)"""

    # =========================================================================
    # Supervisor Paths
    # =========================================================================

    USER_UNIT_SUBDIR: str = ".config/systemd/user"
    """User-scope unit directory, relative to the target user's home"""

    RUNTIME_DIR_ROOT: str = "/run/user"
    """Parent of per-user runtime directories, keyed by numeric uid"""

    SUPERVISOR_COMMAND: str = "systemctl"
    """Supervisor control binary"""

    # =========================================================================
    # Runtime Configuration Access
    # These properties delegate to the loaded settings file
    # =========================================================================

    @property
    def config(self) -> Config:
        """Get loaded configuration object"""
        if self._config is None:
            raise RuntimeError("Settings not initialized. Call settings.initialize(config) first.")
        return self._config


# Global singleton instance
settings = Settings()
"""Global settings singleton instance

Import this anywhere in the application:
    from leapconnect.common.settings import settings
"""
