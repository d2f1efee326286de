"""
Environment models for engine simulation.

This module provides the atmosphere and inlet flight conditions.
"""

from .atmosphere import StandardAtmosphere, FlightCondition

__all__ = ['StandardAtmosphere', 'FlightCondition']
