"""
Core turbine engine components.

This module provides the engine constants, operating state, lookup
curves, fuel supply and the turbine engine model itself.
"""

from .constants import EngineConstants, AugMethod, ConfigurationError
from .state import EngineState, EnginePhase, EngineFault
from .seek import seek, clamp
from .curves import ThrustCurve, ConstantCurve, TableCurve, EngineCurves
from .fuel import FuelSupply, UnlimitedFuelSupply, FuelTank
from .observers import EngineObserver, LoggingObserver, EventRecorder
from .turbine import TurbineEngine

__all__ = [
    'EngineConstants',
    'AugMethod',
    'ConfigurationError',
    'EngineState',
    'EnginePhase',
    'EngineFault',
    'seek',
    'clamp',
    'ThrustCurve',
    'ConstantCurve',
    'TableCurve',
    'EngineCurves',
    'FuelSupply',
    'UnlimitedFuelSupply',
    'FuelTank',
    'EngineObserver',
    'LoggingObserver',
    'EventRecorder',
    'TurbineEngine'
]
