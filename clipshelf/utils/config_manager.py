"""Configuration management module"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger

from clipshelf.core.clipboard.registry import ClipboardRegistry

STORAGE_BACKENDS = ('database', 'memory')
LOG_LEVELS = ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL')


def app_data_dir() -> Path:
    """Per-user application data directory"""
    return Path(os.environ.get('APPDATA', '.')) / 'ClipShelf'


class ConfigManager:
    """Manages application configuration"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Path to configuration file
        """
        if config_path is None:
            # Use default app data directory
            config_path = str(app_data_dir() / 'settings.yaml')

        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self._load_defaults()
        self._load_config()

    def _load_defaults(self):
        """Load default configuration"""
        default_path = Path(__file__).parent.parent.parent / 'config' / 'default_settings.yaml'

        try:
            if default_path.exists():
                with open(default_path, 'r', encoding='utf-8') as f:
                    self.config = yaml.safe_load(f) or {}
                logger.debug("Loaded default configuration")
            else:
                logger.debug(f"Default config not found: {default_path}")
                self._create_default_config()

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load defaults: {e}")
            self._create_default_config()

    def _create_default_config(self):
        """Create default configuration in memory"""
        self.config = {
            'clipboard': {
                'default_category': 'Default',
                'key_prefix': 'clipshelf:clipboard',
                'auto_save': False,
                'resource_root': None
            },
            'storage': {
                'backend': 'database',
                'database_path': None
            },
            'logging': {
                'level': 'INFO',
                'file_logging': True
            }
        }

    def _load_config(self):
        """Load user configuration"""
        try:
            if os.path.exists(self.config_path):
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    user_config = yaml.safe_load(f) or {}

                # Merge with defaults
                self._merge_config(self.config, user_config)
                logger.info(f"Loaded user configuration from {self.config_path}")

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load user config: {e}")

    def _merge_config(self, base: Dict, updates: Dict):
        """
        Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            updates: Updates to apply
        """
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def save(self) -> bool:
        """Save current configuration to file"""
        try:
            # Create directory if needed
            os.makedirs(os.path.dirname(os.path.abspath(self.config_path)), exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.config, f, default_flow_style=False)

            logger.info(f"Configuration saved to {self.config_path}")
            return True

        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to save configuration: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value

        Args:
            key: Configuration key (dot notation supported)
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        # Navigate to the parent
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        # Set the value
        config[keys[-1]] = value
        logger.debug(f"Set config: {key} = {value}")

    def reset(self):
        """Reset to default configuration"""
        self._load_defaults()
        logger.info("Configuration reset to defaults")

    def validate(self) -> bool:
        """
        Validate configuration

        Returns:
            True if valid
        """
        # Check required fields
        default_category = self.get('clipboard.default_category')
        if not isinstance(default_category, str) or not default_category.strip():
            logger.error("Missing required config: clipboard.default_category")
            return False

        # Must be storable in the category list
        if not ClipboardRegistry.is_valid_category_name(default_category):
            logger.error(f"Invalid default category name: {default_category!r}")
            return False

        key_prefix = self.get('clipboard.key_prefix')
        if not isinstance(key_prefix, str) or not key_prefix:
            logger.error("Missing required config: clipboard.key_prefix")
            return False

        # Validate choices
        if self.get('storage.backend') not in STORAGE_BACKENDS:
            logger.error(f"Unknown storage backend: {self.get('storage.backend')}")
            return False

        if str(self.get('logging.level', 'INFO')).upper() not in LOG_LEVELS:
            logger.error(f"Unknown log level: {self.get('logging.level')}")
            return False

        return True
