"""
Mutable operating state of a turbine engine.

State includes:
- Operating phase (exactly one active at a time)
- Spool speeds N1, N2 (percent of rated max)
- Thermal, pressure and geometry outputs
- Sticky fault flags
- Mirror of the control inputs written by the owning airframe
"""

from dataclasses import fields
from enum import Enum

from archimedes import struct


class EnginePhase(Enum):
    """Engine operating mode."""
    OFF = "off"
    RUN = "run"
    SPINUP = "spinup"
    START = "start"
    STALL = "stall"
    SEIZE = "seize"
    TRIM = "trim"


class EngineFault(Enum):
    """Mechanical and thermal faults reported by the engine."""
    STALL = "stalled"
    SEIZE = "seized"
    OVERTEMP = "overtemp"
    FIRE = "fire"


@struct(frozen=False)
class EngineState:
    """
    Complete per-tick state of one turbine engine.

    The simulation tick that drives the engine is the only writer.
    Spool speeds are in percent of rated maximum, temperatures in
    deg C (EGT) and Kelvin (oil), fuel flow in lbm/hr, thrust in lbf.
    """

    phase: EnginePhase = EnginePhase.TRIM
    running: bool = False
    starved: bool = False
    starter: bool = False
    cranking: bool = False

    # Spools
    n1: float = 0.0
    n2: float = 0.0
    n2norm: float = 0.0      # 0 at idle, 1 at max
    n2_target: float = 0.0

    # Thermal / pressure outputs
    egt_degc: float = 0.0
    epr: float = 1.0
    oil_pressure_psi: float = 0.0
    oil_temp_degk: float = 288.0

    # Geometry (normalized 0..1)
    inlet_position: float = 1.0
    nozzle_position: float = 1.0

    fuel_flow_pph: float = 0.0
    thrust_lbf: float = 0.0

    # Sticky faults
    stalled: bool = False
    seized: bool = False
    overtemp: bool = False
    fire: bool = False

    # Control inputs
    throttle_pos: float = 0.0
    augment_cmd: float = 0.0
    cutoff: bool = True
    ignition: int = 0
    augmentation: bool = False
    injection: bool = False
    reversed: bool = False
    bleed_demand: float = 0.0

    # Bookkeeping
    injection_timer: float = 0.0
    corrected_tsfc: float = 0.0
    stall_timer: float = 0.0
    fire_timer: float = 0.0
    seize_timer: float = 0.0
    stall_elapsed: float = 0.0

    @property
    def faults(self) -> dict:
        """Current fault flags keyed by fault."""
        return {
            EngineFault.STALL: self.stalled,
            EngineFault.SEIZE: self.seized,
            EngineFault.OVERTEMP: self.overtemp,
            EngineFault.FIRE: self.fire,
        }

    @property
    def oil_temp_degf(self) -> float:
        """Oil temperature (deg F)."""
        return (self.oil_temp_degk - 273.15) * 1.8 + 32.0

    def reset(self, tat_degc: float, injection_time: float = 0.0,
              running: bool = False, bleed: float = 0.0):
        """
        Restore the construction-time baseline in place.

        Parameters:
        -----------
        tat_degc : float
            Total air temperature used to seed oil temperature (deg C)
        injection_time : float
            Water injection duration available after reset (s)
        running : bool
            Whether the engine is preset to running
        bleed : float
            Default bleed demand (0..1)
        """
        baseline = EngineState()
        for f in fields(self):
            setattr(self, f.name, getattr(baseline, f.name))

        self.running = running
        self.bleed_demand = bleed
        self.injection_timer = injection_time
        self.egt_degc = tat_degc
        self.oil_temp_degk = tat_degc + 273.0

    def __repr__(self) -> str:
        """String representation."""
        return (f"EngineState(phase={self.phase.name}, n1={self.n1:.2f}, "
                f"n2={self.n2:.2f}, thrust={self.thrust_lbf:.1f})")

    def __str__(self) -> str:
        """Pretty print state."""
        active = [fault.value for fault, on in self.faults.items() if on]
        return (
            f"Turbine Engine State:\n"
            f"  Phase:            {self.phase.name}\n"
            f"  N1, N2:           [{self.n1:6.2f}, {self.n2:6.2f}] %\n"
            f"  Thrust:           {self.thrust_lbf:9.1f} lbf\n"
            f"  Fuel flow:        {self.fuel_flow_pph:9.1f} lbm/hr\n"
            f"  EGT, EPR:         [{self.egt_degc:6.1f} degC, {self.epr:5.3f}]\n"
            f"  Oil:              [{self.oil_pressure_psi:5.1f} psi, {self.oil_temp_degf:5.1f} degF]\n"
            f"  Faults:           {', '.join(active) if active else 'none'}"
        )
