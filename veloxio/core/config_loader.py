"""
veloxio Configuration Loader

Configuration management for the VFS:
- JSON configuration file loading
- Default value handling
- Type-safe access to configuration values

Author: YSNRFD
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, List

from veloxio.exceptions import ConfigError
from veloxio.logger import Logger, LogLevel


BACKING_STRATEGIES = ("lazy", "buffered")


@dataclass
class ProviderConfig:
    """Disk overlay and archive mount settings."""
    disk_enabled: bool = False
    disk_root: str = "."
    archives: List[str] = field(default_factory=list)
    backing: str = "lazy"
    verify_checksums: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class Config:
    """
    Main configuration container.
    
    Holds all configuration settings for a Provider and its loggers.
    """
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.
    
    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('veloxio.json')
        >>> config.provider.disk_enabled
        True
    """
    
    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()
    
    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance
    
    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.
        
        Args:
            config_path: Path to the configuration file
        
        Returns:
            Config object with loaded settings
        
        Raises:
            ConfigError: If the file cannot be loaded or parsed
        """
        path = Path(config_path)
        
        if not path.exists():
            raise ConfigError("Configuration file not found", path=config_path)
        
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file: {e}", path=config_path) from e
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file: {e}", path=config_path) from e
        
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be an object", path=config_path)
        
        self._config = self.parse(data)
        self._loaded = True
        return self._config
    
    @staticmethod
    def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
        section = data[name]
        if not isinstance(section, dict):
            raise ConfigError(
                f"Configuration section '{name}' must be an object",
                context={'type': type(section).__name__}
            )
        return section
    
    @staticmethod
    def _typed(section: dict[str, Any], key: str, default: Any, types: tuple, label: str) -> Any:
        """Fetch a key, rejecting values of the wrong JSON type."""
        value = section.get(key, default)
        if not isinstance(value, types):
            raise ConfigError(
                f"Configuration key '{key}' must be {label}",
                context={'type': type(value).__name__}
            )
        return value
    
    @staticmethod
    def parse(data: dict[str, Any]) -> Config:
        """
        Parse configuration data into a Config object.
        
        Raises:
            ConfigError: If a section is not an object or a value has the
                wrong type
        """
        config = Config()
        typed = ConfigLoader._typed
        
        if 'provider' in data:
            prov_data = ConfigLoader._section(data, 'provider')
            defaults = config.provider
            archives = typed(prov_data, 'archives', defaults.archives, (list,), "a list of paths")
            if not all(isinstance(a, str) for a in archives):
                raise ConfigError("Configuration key 'archives' must contain only strings")
            config.provider = ProviderConfig(
                disk_enabled=typed(prov_data, 'disk_enabled', defaults.disk_enabled, (bool,), "a boolean"),
                disk_root=typed(prov_data, 'disk_root', defaults.disk_root, (str,), "a string"),
                archives=list(archives),
                backing=typed(prov_data, 'backing', defaults.backing, (str,), "a string"),
                verify_checksums=typed(prov_data, 'verify_checksums', defaults.verify_checksums, (bool,), "a boolean"),
            )
            if config.provider.backing not in BACKING_STRATEGIES:
                raise ConfigError(
                    f"Invalid backing strategy: {config.provider.backing}",
                    context={'allowed': ", ".join(BACKING_STRATEGIES)}
                )
        
        if 'logging' in data:
            log_data = ConfigLoader._section(data, 'logging')
            defaults = config.logging
            config.logging = LoggingConfig(
                level=typed(log_data, 'level', defaults.level, (str,), "a string"),
                log_file=typed(log_data, 'log_file', defaults.log_file, (str, type(None)), "a string or null"),
                console_output=typed(log_data, 'console_output', defaults.console_output, (bool,), "a boolean"),
            )
        
        return config
    
    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.
        
        Args:
            key: Dot-notation key (e.g., 'provider.disk_root')
            default: Default value if key not found
        
        Returns:
            Configuration value or default
        """
        obj: Any = self.config
        
        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default
        
        return obj
    
    def reset(self) -> None:
        """Drop any loaded configuration and fall back to defaults."""
        self._config = Config()
        self._loaded = False


def get_config() -> Config:
    """
    Get the global configuration instance.
    
    Returns:
        Config object with current settings
    """
    return ConfigLoader().config


def configure_logging(config: Optional[Config] = None) -> None:
    """
    Apply logging settings (the global configuration by default).
    
    Raises:
        ConfigError: If the configured level name is unknown
    """
    settings = (config or get_config()).logging
    try:
        level = LogLevel.from_name(settings.level)
    except ValueError as e:
        raise ConfigError(str(e), context={'level': settings.level}) from e
    
    Logger.initialize(
        level=level,
        log_file=settings.log_file,
        console_output=settings.console_output,
    )
