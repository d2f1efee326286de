"""
turbosim: turbine engine performance and control simulation.
"""

from .core import (
    TurbineEngine,
    EngineConstants,
    EngineCurves,
    EnginePhase,
    EngineFault,
    AugMethod,
    ConfigurationError
)
from .environment import FlightCondition, StandardAtmosphere

__version__ = '0.1.0'

__all__ = [
    'TurbineEngine',
    'EngineConstants',
    'EngineCurves',
    'EnginePhase',
    'EngineFault',
    'AugMethod',
    'ConfigurationError',
    'FlightCondition',
    'StandardAtmosphere'
]
