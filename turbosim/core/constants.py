"""
Immutable turbine engine constants.

Produced once by the configuration loader and shared read-only by
every stage of the per-tick pipeline.
"""

import math
from dataclasses import dataclass, fields
from enum import Enum


class ConfigurationError(ValueError):
    """Raised when engine constants are missing or invalid."""


class AugMethod(Enum):
    """How the afterburner is commanded."""
    PROPERTY = 0         # external augmentation flag
    THROTTLE = 1         # last 1% of throttle travel
    EXTENDED_RANGE = 2   # throttle values above 1.0


@dataclass(frozen=True)
class EngineConstants:
    """
    Rated performance and limits of a turbine engine.

    Thrust in lbf, spool speeds in percent of rated maximum,
    TSFC in lbm/hr/lbf, times in seconds.
    """
    mil_thrust: float                  # Max unaugmented thrust, static @ S.L.
    max_thrust: float = 0.0            # Max augmented thrust, static @ S.L.
    bypass_ratio: float = 0.0          # Only scales spool-up time
    bleed: float = 0.0                 # Thrust loss factor (0..1)
    tsfc: float = 0.8
    atsfc: float = 1.7
    idle_n1: float = 30.0
    idle_n2: float = 60.0
    max_n1: float = 100.0
    max_n2: float = 100.0
    n1_spinup: float = 1.0             # Starter spin-up rates (%/s)
    n2_spinup: float = 3.0
    augmented: bool = False
    aug_method: AugMethod = AugMethod.PROPERTY
    injected: bool = False
    injection_time: float = 0.0

    # Limits
    egt_limit_degc: float = 850.0
    stall_margin: float = 35.0         # N2 lag behind target (%)
    stall_time: float = 2.0
    fire_delay: float = 5.0
    seize_delay: float = 10.0
    reverse_thrust_ratio: float = 0.5  # Fraction of thrust redirected forward

    def __post_init__(self):
        """Validate constants."""
        if not isinstance(self.aug_method, AugMethod):
            try:
                object.__setattr__(self, 'aug_method', AugMethod(self.aug_method))
            except ValueError as exc:
                raise ConfigurationError(f"Unknown augmentation method: {self.aug_method}") from exc

        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                raise ConfigurationError(f"{f.name} must be finite, got {value}")

        if self.mil_thrust <= 0.0:
            raise ConfigurationError(f"mil_thrust must be positive, got {self.mil_thrust}")
        if not 0.0 <= self.bleed <= 1.0:
            raise ConfigurationError(f"bleed must be within [0, 1], got {self.bleed}")
        if self.idle_n1 >= self.max_n1:
            raise ConfigurationError(f"idle_n1 ({self.idle_n1}) must be below max_n1 ({self.max_n1})")
        if self.idle_n2 >= self.max_n2:
            raise ConfigurationError(f"idle_n2 ({self.idle_n2}) must be below max_n2 ({self.max_n2})")
        if self.augmented and self.max_thrust <= self.mil_thrust:
            raise ConfigurationError(
                f"Augmented engine needs max_thrust > mil_thrust "
                f"({self.max_thrust} <= {self.mil_thrust})")
        if self.injected and self.injection_time <= 0.0:
            raise ConfigurationError("Water injection installed but injection_time is not positive")
        if not 0.0 <= self.reverse_thrust_ratio <= 1.0:
            raise ConfigurationError(
                f"reverse_thrust_ratio must be within [0, 1], got {self.reverse_thrust_ratio}")

        non_negative = ('bypass_ratio', 'tsfc', 'atsfc', 'idle_n1', 'idle_n2',
                        'n1_spinup', 'n2_spinup', 'injection_time', 'stall_margin',
                        'stall_time', 'fire_delay', 'seize_delay')
        for name in non_negative:
            if getattr(self, name) < 0.0:
                raise ConfigurationError(f"{name} must not be negative, got {getattr(self, name)}")

    @property
    def delay(self) -> float:
        """Inverse spool-up time from idle to 100% (%/s)."""
        return 90.0 / (self.bypass_ratio + 3.0)

    @property
    def n1_factor(self) -> float:
        """N1 span tied to throttle travel."""
        return self.max_n1 - self.idle_n1

    @property
    def n2_factor(self) -> float:
        """N2 span tied to throttle travel."""
        return self.max_n2 - self.idle_n2

    @property
    def idle_fuel_flow(self) -> float:
        """Estimated idle fuel flow (lbm/hr)."""
        return self.mil_thrust ** 0.2 * 107.0
