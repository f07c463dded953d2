"""
veloxio Subsystem Lifecycle

Base class for long-lived VFS components with a managed lifecycle.

Author: YSNRFD
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from enum import Enum, auto

from veloxio.logger import Logger, get_logger


class SubsystemState(Enum):
    """Lifecycle state of a subsystem."""
    CREATED = auto()
    INITIALIZING = auto()
    INITIALIZED = auto()
    STOPPED = auto()


class Subsystem(ABC):
    """
    Abstract base class for VFS subsystems.
    
    Lifecycle:
        1. __init__() - Subsystem is created
        2. initialize() - Subsystem is initialized
        3. cleanup() - Subsystem releases its resources
    """
    
    def __init__(self, name: str):
        self._name = name
        self._logger = get_logger(name)
        self._state = SubsystemState.CREATED
    
    @property
    def name(self) -> str:
        """Get the subsystem name."""
        return self._name
    
    @property
    def state(self) -> SubsystemState:
        """Get the current state."""
        return self._state
    
    @property
    def logger(self) -> Logger:
        """Get the subsystem logger."""
        return self._logger
    
    def set_state(self, state: SubsystemState) -> None:
        """Set the subsystem state."""
        self._state = state
        self._logger.debug(f"State changed to {state.name}")
    
    @abstractmethod
    def initialize(self) -> None:
        """
        Initialize the subsystem.
        
        Should allocate resources and perform initial setup.
        """
    
    def cleanup(self) -> None:
        """
        Clean up subsystem resources.
        
        Default implementation does nothing.
        """
    
    def health_check(self) -> bool:
        """
        Check if the subsystem is healthy.
        
        Returns:
            True if the subsystem is healthy, False otherwise
        """
        return self._state == SubsystemState.INITIALIZED
