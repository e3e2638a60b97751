"""
Configuration Service Module

Manages session configuration read/write.
"""

from typing import Any, Dict, Optional
from pathlib import Path
import copy
import os
import sys
import yaml
import threading
import logging

logger = logging.getLogger(__name__)


class ConfigService:
    """
    Configuration Service

    Manages configuration, reading built-in defaults, the repository template
    and the user's YAML file. Each session creates its own instance.

    Usage Example:
        config = ConfigService("config/default_config.yaml")

        volume = config.get("playback.default_volume", 70)

        config.set("playback.default_volume", 50)
        config.save()
    """

    DEFAULT_CONFIG_PATH = "config/default_config.yaml"

    def __init__(self, config_path: Optional[str] = None, load_files: bool = True):
        default_path = Path(self.DEFAULT_CONFIG_PATH)
        provided_path = Path(config_path) if config_path else None

        # A custom path is used for both loading and saving (test isolation);
        # the default template path loads the template and saves to the user directory.
        self._use_custom_path = provided_path is not None and provided_path != default_path

        if self._use_custom_path:
            self._user_config_path = provided_path
        else:
            self._user_config_path = self._get_user_config_path()

        self._load_files = load_files
        self._config: Dict[str, Any] = {}
        self._lock = threading.Lock()

        self._load()

    @staticmethod
    def _get_user_config_path() -> Path:
        """Get user configuration file path (platform-specific)"""
        if sys.platform == "win32":
            base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        elif sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
        return base / "stream-player" / "config.yaml"

    @property
    def path(self) -> Path:
        """File that save() writes to"""
        return self._user_config_path

    def _load(self) -> None:
        """Load and merge from default and user configuration"""
        self._config = self._get_default_config()

        if not self._load_files:
            return
        if self._use_custom_path:
            self._merge_file(self._user_config_path, "custom")
        else:
            self._merge_file(Path(self.DEFAULT_CONFIG_PATH), "default")
            self._merge_file(self._user_config_path, "user")

    def _merge_file(self, path: Path, label: str) -> None:
        if not path.exists():
            return
        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                self._deep_merge(self._config, loaded)
            else:
                logger.warning("Ignoring %s configuration %s: top level is not a mapping", label, path)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load %s configuration: %s", label, e)

    def _deep_merge(self, base: Dict, override: Dict) -> None:
        """Deep merge dictionaries, override overwrites base"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration"""
        return {
            'app': {
                'name': 'Stream Player',
                'version': '1.0.0',
            },
            'audio': {
                'backend': 'vlc',
            },
            'playback': {
                'default_volume': 70,                 # percent, 0-100
                'restart_threshold_seconds': 3.0,     # "previous" restarts the track past this point
                'poll_interval_ms': 250,
            },
            'session': {
                'user_id': 'local',
            },
            'storage': {
                'db_path': '',                        # empty: user data directory
            },
            'history': {
                'enabled': True,
                'recent_limit': 50,
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Supports dot-separated nested keys, e.g., "playback.default_volume".
        """
        with self._lock:
            value = self._config
            try:
                for k in key.split('.'):
                    value = value[k]
                return value
            except (KeyError, TypeError):
                return default

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            key: Configuration key (dot-separated)
            value: Configuration value
        """
        with self._lock:
            keys = key.split('.')
            config = self._config

            for k in keys[:-1]:
                if k not in config or not isinstance(config[k], dict):
                    config[k] = {}
                config = config[k]

            config[keys[-1]] = value

    def get_all(self) -> Dict[str, Any]:
        """Get a copy of all configuration."""
        with self._lock:
            return copy.deepcopy(self._config)

    def save(self) -> bool:
        """
        Save configuration to the user configuration file.

        Returns:
            bool: True if saving was successful.
        """
        try:
            self._user_config_path.parent.mkdir(parents=True, exist_ok=True)

            with self._lock:
                with open(self._user_config_path, 'w', encoding='utf-8') as f:
                    yaml.safe_dump(self._config, f, allow_unicode=True, default_flow_style=False)
            logger.debug("Configuration saved to: %s", self._user_config_path)
            return True
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to save configuration: %s", e)
            return False

    def reload(self) -> None:
        """Reload configuration from disk"""
        with self._lock:
            self._load()

    def reset(self) -> None:
        """Reset to default configuration."""
        with self._lock:
            self._config = self._get_default_config()
