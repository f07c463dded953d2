"""
veloxio Core Module

Core components shared by the VFS subsystems:
- Configuration Loader
- Subsystem lifecycle base
"""

from .config_loader import (
    ConfigLoader,
    Config,
    ProviderConfig,
    LoggingConfig,
    BACKING_STRATEGIES,
    get_config,
    configure_logging,
)
from .subsystem import Subsystem, SubsystemState

__all__ = [
    # Config
    'ConfigLoader',
    'Config',
    'ProviderConfig',
    'LoggingConfig',
    'BACKING_STRATEGIES',
    'get_config',
    'configure_logging',
    # Subsystem
    'Subsystem',
    'SubsystemState',
]
