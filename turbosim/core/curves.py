"""
Thrust and fuel lookup curves.

Curves are pure functions of the flight condition. The engine only sees
the ThrustCurve interface, so synthetic curves can stand in for table data.

Provides:
- ThrustCurve: curve interface
- ConstantCurve: fixed value (testing, simple engines)
- TableCurve: 2D interpolation over (Mach, altitude)
- EngineCurves: idle / military / augmented / injection curve set
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import pandas as pd
from scipy.interpolate import RegularGridInterpolator

from ..environment.atmosphere import FlightCondition


class ThrustCurve(ABC):
    """
    Base class for lookup curves.

    Returns a dimensionless factor for a given flight condition.
    """

    @abstractmethod
    def evaluate(self, conditions: FlightCondition) -> float:
        """
        Evaluate the curve.

        Parameters:
        -----------
        conditions : FlightCondition
            Current inlet flight condition

        Returns:
        --------
        value : float
            Curve value at the condition
        """
        pass

    def __call__(self, conditions: FlightCondition) -> float:
        return self.evaluate(conditions)


class ConstantCurve(ThrustCurve):
    """Curve returning the same value everywhere."""

    def __init__(self, value: float):
        self.value = float(value)

    def evaluate(self, conditions: FlightCondition) -> float:
        return self.value

    def __repr__(self):
        return f"ConstantCurve({self.value})"


class TableCurve(ThrustCurve):
    """
    Curve interpolated from a Mach x altitude table.

    Inputs outside the table are held at the nearest breakpoint rather
    than extrapolated.
    """

    def __init__(self, machs: Sequence[float], altitudes: Sequence[float],
                 values, name: str = 'table'):
        """
        Initialize table curve.

        Parameters:
        -----------
        machs : sequence of float
            Mach breakpoints (increasing)
        altitudes : sequence of float
            Altitude breakpoints in ft (increasing)
        values : array-like, shape (len(machs), len(altitudes))
            Table data, rows = Mach, columns = altitude
        name : str
            Curve name used in messages
        """
        self.name = name
        self.machs = np.asarray(machs, dtype=float)
        self.altitudes = np.asarray(altitudes, dtype=float)
        self.values = np.asarray(values, dtype=float)

        if self.values.shape != (len(self.machs), len(self.altitudes)):
            raise ValueError(
                f"Table '{name}' has shape {self.values.shape}, expected "
                f"({len(self.machs)}, {len(self.altitudes)})")
        if np.any(np.diff(self.machs) <= 0) or np.any(np.diff(self.altitudes) <= 0):
            raise ValueError(f"Table '{name}' breakpoints must be strictly increasing")

        self._interp = RegularGridInterpolator(
            (self.machs, self.altitudes), self.values,
            bounds_error=False, fill_value=None
        )
        self._last_point = None
        self._last_value = 0.0

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, value_col: str = 'value',
                       name: str = None) -> 'TableCurve':
        """
        Build a curve from long-format data (columns: mach, altitude, value).

        Parameters:
        -----------
        df : pd.DataFrame
            One row per (mach, altitude) breakpoint
        value_col : str
            Column holding the curve values
        name : str, optional
            Curve name (defaults to value_col)
        """
        for col in ('mach', 'altitude', value_col):
            if col not in df.columns:
                raise ValueError(f"Table data must contain '{col}' column")

        # Pivot table to get 2D array (rows=mach, cols=altitude)
        pivot = df.pivot(index='mach', columns='altitude', values=value_col)
        pivot = pivot.sort_index().sort_index(axis=1)
        if pivot.isnull().values.any():
            raise ValueError(f"Table '{name or value_col}' is missing breakpoints")

        return cls(pivot.index.values, pivot.columns.values, pivot.values,
                   name=name or value_col)

    @classmethod
    def from_csv(cls, csv_file: str, value_col: str = 'value', name: str = None) -> 'TableCurve':
        """Load a curve from a CSV file with columns mach, altitude, value."""
        return cls.from_dataframe(pd.read_csv(csv_file), value_col=value_col, name=name)

    def evaluate(self, conditions: FlightCondition) -> float:
        point = (
            float(np.clip(conditions.mach, self.machs[0], self.machs[-1])),
            float(np.clip(conditions.altitude_ft, self.altitudes[0], self.altitudes[-1])),
        )
        # Conditions rarely change within a tick; reuse the last lookup
        if point != self._last_point:
            self._last_value = float(self._interp(np.array(point)).item())
            self._last_point = point
        return self._last_value

    def to_dataframe(self) -> pd.DataFrame:
        """Long-format table (columns: mach, altitude, value)."""
        mach_grid, alt_grid = np.meshgrid(self.machs, self.altitudes, indexing='ij')
        return pd.DataFrame({
            'mach': mach_grid.ravel(),
            'altitude': alt_grid.ravel(),
            'value': self.values.ravel(),
        })

    def __repr__(self):
        return (f"TableCurve('{self.name}', mach {self.machs[0]:.1f}-{self.machs[-1]:.1f}, "
                f"altitude {self.altitudes[0]:.0f}-{self.altitudes[-1]:.0f} ft)")


# Default tables (rows = Mach, columns = altitude in ft)
DEFAULT_ALTITUDES = [-10000.0, 0.0, 10000.0, 20000.0, 30000.0, 40000.0, 50000.0]

IDLE_THRUST_MACHS = [0.0, 0.2, 0.4, 0.6, 0.8, 1.0]
IDLE_THRUST_DATA = [
    [0.0430, 0.0488, 0.0528, 0.0694, 0.0899, 0.1183, 0.1467],
    [0.0500, 0.0501, 0.0335, 0.0544, 0.0797, 0.1049, 0.1342],
    [0.0040, 0.0047, 0.0020, 0.0272, 0.0595, 0.0891, 0.1203],
    [0.0000, 0.0000, 0.0000, 0.0000, 0.0276, 0.0718, 0.1073],
    [0.0000, 0.0000, 0.0000, 0.0000, 0.0474, 0.0868, 0.0900],
    [0.0000, 0.0000, 0.0000, 0.0000, 0.0000, 0.0552, 0.0800],
]

MIL_THRUST_MACHS = [0.0, 0.2, 0.4, 0.6, 0.8, 1.0, 1.2, 1.4]
MIL_THRUST_DATA = [
    [1.2600, 1.0000, 0.7400, 0.5340, 0.3720, 0.2410, 0.1490],
    [1.1710, 0.9340, 0.6970, 0.5060, 0.3550, 0.2310, 0.1430],
    [1.1500, 0.9210, 0.6920, 0.5060, 0.3570, 0.2330, 0.1450],
    [1.1810, 0.9510, 0.7210, 0.5320, 0.3780, 0.2480, 0.1540],
    [1.2580, 1.0200, 0.7820, 0.5820, 0.4170, 0.2750, 0.1700],
    [1.3690, 1.1200, 0.8710, 0.6510, 0.4750, 0.3150, 0.1950],
    [1.4850, 1.2300, 0.9750, 0.7440, 0.5450, 0.3640, 0.2250],
    [1.6250, 1.3700, 1.1200, 0.8710, 0.6450, 0.4300, 0.2650],
]

AUG_THRUST_MACHS = [0.0, 0.2, 0.4, 0.6, 0.8, 1.0, 1.2, 1.4]
AUG_THRUST_DATA = [
    [1.1816, 1.0000, 0.8184, 0.6627, 0.5280, 0.3756, 0.2327],
    [1.1308, 0.9599, 0.7890, 0.6406, 0.5116, 0.3645, 0.2258],
    [1.1150, 0.9474, 0.7845, 0.6406, 0.5156, 0.3700, 0.2291],
    [1.1284, 0.9589, 0.8022, 0.6610, 0.5397, 0.3893, 0.2411],
    [1.1707, 0.9942, 0.8421, 0.7016, 0.5776, 0.4191, 0.2597],
    [1.2411, 1.0529, 0.8996, 0.7588, 0.6218, 0.4535, 0.2812],
    [1.3287, 1.1254, 0.9651, 0.8228, 0.6780, 0.4970, 0.3081],
    [1.4365, 1.2149, 1.0425, 0.8941, 0.7427, 0.5488, 0.3402],
]

INJECTION_FACTOR = 1.2


@dataclass
class EngineCurves:
    """Lookup curves consumed by the thrust pipeline."""
    idle_thrust: ThrustCurve           # Fraction of mil_thrust at idle
    mil_thrust: ThrustCurve            # Military thrust lapse
    aug_thrust: ThrustCurve            # Augmented thrust lapse
    injection: ThrustCurve = field(default_factory=lambda: ConstantCurve(INJECTION_FACTOR))

    @classmethod
    def defaults(cls) -> 'EngineCurves':
        """Curves for a generic low-bypass military turbofan."""
        return cls(
            idle_thrust=TableCurve(IDLE_THRUST_MACHS, DEFAULT_ALTITUDES, IDLE_THRUST_DATA,
                                   name='IdleThrust'),
            mil_thrust=TableCurve(MIL_THRUST_MACHS, DEFAULT_ALTITUDES, MIL_THRUST_DATA,
                                  name='MilThrust'),
            aug_thrust=TableCurve(AUG_THRUST_MACHS, DEFAULT_ALTITUDES, AUG_THRUST_DATA,
                                  name='AugThrust'),
        )

    @classmethod
    def constant(cls, idle: float = 0.05, mil: float = 1.0, aug: float = 1.0,
                 injection: float = INJECTION_FACTOR) -> 'EngineCurves':
        """Flight-condition independent curves."""
        return cls(
            idle_thrust=ConstantCurve(idle),
            mil_thrust=ConstantCurve(mil),
            aug_thrust=ConstantCurve(aug),
            injection=ConstantCurve(injection),
        )
