"""
US Standard Atmosphere 1976 and engine inlet flight conditions.

Provides:
- StandardAtmosphere: static temperature, pressure, density vs altitude
- FlightCondition: ambient record handed to the engine every tick

Units: US Customary (feet, slugs, lbf, Rankine)
"""

from dataclasses import dataclass

import numpy as np


class StandardAtmosphere:
    """
    US Standard Atmosphere 1976 model.

    Valid from sea level to 80,000 ft over three layers:
    - Troposphere: 0 - 36,089 ft (temperature decreases linearly)
    - Lower Stratosphere: 36,089 - 65,617 ft (isothermal)
    - Upper Stratosphere: 65,617 - 80,000 ft (temperature increases)

    Attributes
    ----------
    temperature : float
        Static temperature (Rankine)
    pressure : float
        Static pressure (lbf/ft²)
    density : float
        Air density (slugs/ft³)
    speed_of_sound : float
        Speed of sound (ft/s)
    """

    # Sea level conditions
    T0 = 518.67  # Rankine (59°F)
    P0 = 2116.22  # lbf/ft²
    rho0 = 0.002377  # slugs/ft³

    R = 1716.59  # ft·lbf/(slug·°R)
    gamma = 1.4
    g0 = 32.174  # ft/s²

    # Layer boundaries (ft) and lapse rates (°R/ft)
    h_trop = 36089.0
    h_strat1 = 65617.0
    lapse_trop = -0.00356616
    lapse_strat2 = 0.00054864

    def __init__(self, altitude: float = 0.0):
        """
        Initialize atmosphere at specified altitude.

        Parameters
        ----------
        altitude : float, optional
            Geometric altitude in feet (default: 0.0, sea level)
        """
        self.update(altitude)

    def update(self, altitude: float):
        """Recompute properties for a new altitude (ft)."""
        self.altitude = altitude
        self.temperature, self.pressure = self._temperature_pressure(altitude)
        self.density = self.pressure / (self.R * self.temperature)
        self.speed_of_sound = np.sqrt(self.gamma * self.R * self.temperature)

    def _temperature_pressure(self, h: float):
        """Static temperature and pressure from the layer equations."""
        T_trop = self.T0 + self.lapse_trop * self.h_trop
        P_trop = self.P0 * (T_trop / self.T0) ** (-self.g0 / (self.lapse_trop * self.R))

        if h <= self.h_trop:
            T = self.T0 + self.lapse_trop * h
            return T, self.P0 * (T / self.T0) ** (-self.g0 / (self.lapse_trop * self.R))

        if h <= self.h_strat1:
            return T_trop, P_trop * np.exp(-self.g0 * (h - self.h_trop) / (self.R * T_trop))

        P_strat1 = P_trop * np.exp(-self.g0 * (self.h_strat1 - self.h_trop) / (self.R * T_trop))
        T = T_trop + self.lapse_strat2 * (h - self.h_strat1)
        return T, P_strat1 * (T / T_trop) ** (-self.g0 / (self.lapse_strat2 * self.R))

    @property
    def density_ratio(self) -> float:
        """Density relative to sea level (sigma)."""
        return self.density / self.rho0

    def get_dynamic_pressure(self, velocity: float) -> float:
        """Dynamic pressure q = 0.5 * rho * V² (lbf/ft²) for true airspeed in ft/s."""
        return 0.5 * self.density * velocity**2

    def total_temperature(self, mach: float) -> float:
        """Stagnation temperature (Rankine) at the given Mach number."""
        return self.temperature * (1.0 + 0.5 * (self.gamma - 1.0) * mach**2)

    def __repr__(self):
        """String representation."""
        return (f"StandardAtmosphere(altitude={self.altitude:.0f} ft, "
                f"T={self.temperature-459.67:.1f}°F, "
                f"P={self.pressure/144:.2f} psi, "
                f"rho={self.density:.6f} slug/ft³)")


def rankine_to_celsius(temperature: float) -> float:
    """Convert Rankine to degrees Celsius."""
    return (temperature - 491.67) * 5.0 / 9.0


@dataclass(frozen=True)
class FlightCondition:
    """Ambient conditions at the engine inlet for one tick."""
    mach: float = 0.0
    altitude_ft: float = 0.0
    tat_degc: float = 15.0           # Total air temperature
    temperature_r: float = 518.67    # Static temperature
    density_ratio: float = 1.0       # sigma
    qbar_psf: float = 0.0            # Dynamic pressure

    @classmethod
    def sea_level_static(cls) -> 'FlightCondition':
        """ISA sea level, zero airspeed."""
        return cls()

    @classmethod
    def from_altitude_mach(cls, altitude_ft: float, mach: float = 0.0) -> 'FlightCondition':
        """
        Build a condition from the standard atmosphere.

        Parameters
        ----------
        altitude_ft : float
            Geometric altitude (ft)
        mach : float
            Flight Mach number

        Returns
        -------
        FlightCondition
        """
        atm = StandardAtmosphere(altitude_ft)
        velocity = mach * atm.speed_of_sound
        return cls(
            mach=mach,
            altitude_ft=altitude_ft,
            tat_degc=rankine_to_celsius(atm.total_temperature(mach)),
            temperature_r=atm.temperature,
            density_ratio=atm.density_ratio,
            qbar_psf=atm.get_dynamic_pressure(velocity),
        )
