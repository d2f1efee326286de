"""
Turbine engine performance and control model.

Here the term "phase" signifies the engine's mode of operation. At any
given time the engine is in exactly one phase. A new engine starts in the
Trim phase, which gives a steady-state thrust without throttle lag. On the
first tick with a positive time step the engine moves to Run if it was
preset to running, otherwise to Off.

Starting on the ground:
1. Set the starter. The engine spins up to about 25% N2 (5.2% N1).
2. After reaching 15% N2, release the fuel cutoff. With fuel available the
   engine accelerates to idle. The starter is cleared automatically.

Starting in the air: obtain at least 15% N2 (windmilling, or the starter),
then release the fuel cutoff. Ignition is assumed whenever cutoff is off.
"""

import logging
from typing import Dict, Iterable

import numpy as np

from .constants import AugMethod, EngineConstants
from .curves import EngineCurves
from .fuel import FuelSupply, UnlimitedFuelSupply
from .observers import EngineObserver
from .seek import seek, clamp
from .state import EnginePhase, EngineFault, EngineState
from ..environment.atmosphere import FlightCondition

logger = logging.getLogger(__name__)

# Starting
LIGHTOFF_N2 = 15.0               # Minimum N2 (%) for a start
STARTER_N2_FRACTION = 0.2518     # Starter-limited spool speeds (fraction of max)
STARTER_N1_FRACTION = 0.0521

# Exhaust gas temperature rise above TAT (deg C)
EGT_IDLE_RISE = 363.1
EGT_THROTTLE_RISE = 357.1
EGT_STALL_RISE = 903.14
EGT_RUN_RATES = (100.0, 50.0)    # accel, decel (deg C/s)

OIL_RUN_TEMP_K = 366.0
OIL_PSI_PER_N2 = 0.62
TSFC_REFERENCE_TEMP_R = 389.7
EPR_RATE = 0.5

# Augmentation by throttle
AUG_THROTTLE = 0.99
AUG_N2_FRACTION = 0.97

# Compressor stall
STALL_THRUST_FRACTION = 0.3
STALL_SURGE_HZ = 2.0
STALL_RECOVERY_THROTTLE = 0.01

FUELLED_PHASES = (EnginePhase.RUN, EnginePhase.START, EnginePhase.STALL)


class TurbineEngine:
    """
    Turbine engine driven once per simulation tick.

    Parameters
    ----------
    constants : EngineConstants
        Rated performance and limits
    curves : EngineCurves, optional
        Thrust lookup curves (defaults to the generic tables)
    fuel_supply : FuelSupply, optional
        Reports fuel availability and receives burned fuel
    observers : iterable of EngineObserver, optional
        Receive phase transitions, fault onsets and resets
    name : str
        Engine name used in telemetry labels
    engine_number : int
        Engine index on the airframe
    running : bool
        Preset the engine to running before the first tick
    conditions : FlightCondition, optional
        Initial flight condition (defaults to sea-level static)
    """

    def __init__(self, constants: EngineConstants,
                 curves: EngineCurves = None,
                 fuel_supply: FuelSupply = None,
                 observers: Iterable[EngineObserver] = None,
                 name: str = 'turbine',
                 engine_number: int = 0,
                 running: bool = False,
                 conditions: FlightCondition = None):
        self.constants = constants
        self.curves = curves or EngineCurves.defaults()
        self.fuel_supply = fuel_supply or UnlimitedFuelSupply()
        self.observers = list(observers) if observers else []
        self.name = name
        self.engine_number = engine_number

        self._preset_running = running
        self._initial_conditions = conditions or FlightCondition.sea_level_static()
        self._conditions = self._initial_conditions
        self._dt = 0.0
        self._settling = False

        self._handlers = {
            EnginePhase.OFF: self._off,
            EnginePhase.RUN: self._run,
            EnginePhase.SPINUP: self._spin_up,
            EnginePhase.START: self._start,
            EnginePhase.STALL: self._stall,
            EnginePhase.SEIZE: self._seize,
            EnginePhase.TRIM: self._trim,
        }

        self.state = EngineState()
        self._reset_state()

    # ------------------------------------------------------------------
    # Per-tick pipeline
    # ------------------------------------------------------------------

    def calculate(self, dt: float, conditions: FlightCondition = None) -> float:
        """
        Advance the engine by one tick.

        Parameters
        ----------
        dt : float
            Elapsed simulation time (s). Zero selects the Trim phase.
        conditions : FlightCondition, optional
            Inlet flight condition for this tick (keeps the previous one
            if omitted)

        Returns
        -------
        float
            Net thrust (lbf), negative when reversed
        """
        if dt < 0.0:
            raise ValueError(f"Time step must not be negative, got {dt}")

        s = self.state
        self._dt = dt
        if conditions is not None:
            self._conditions = conditions
        s.starved = not self.fuel_supply.fuel_available()

        self._enter(self._select_phase())
        thrust = self._handlers[s.phase]()
        self._update_faults()

        if s.seized:
            s.n2 = 0.0
            thrust = 0.0

        s.inlet_position = self._approach(s.inlet_position, self._inlet_schedule(), 0.2, 0.2)
        s.thrust_lbf = self._net_thrust(thrust)
        self.fuel_supply.draw(self.fuel_expended(dt))
        return s.thrust_lbf

    def _select_phase(self) -> EnginePhase:
        """Phase for this tick from the control inputs and fault flags."""
        s = self.state
        phase = s.phase

        # When trimming is finished check if the engine should be off or running
        if phase is EnginePhase.TRIM and self._dt > 0.0:
            if s.running and not s.starved:
                phase = EnginePhase.RUN
                self._set_steady_spools()
                s.oil_temp_degk = OIL_RUN_TEMP_K
                s.cutoff = False
            else:
                phase = EnginePhase.OFF
                s.cutoff = True
                s.egt_degc = self._conditions.tat_degc

        if not s.running and s.cutoff and s.starter and phase is EnginePhase.OFF:
            phase = EnginePhase.SPINUP
        if phase is EnginePhase.SPINUP and not s.starter:
            phase = EnginePhase.OFF
        if not s.running and not s.cutoff and s.n2 >= LIGHTOFF_N2:
            phase = EnginePhase.START
        if s.cutoff and phase is not EnginePhase.SPINUP:
            phase = EnginePhase.OFF
        if self._dt == 0.0:
            phase = EnginePhase.TRIM
        if s.starved:
            phase = EnginePhase.OFF
        if s.stalled:
            phase = EnginePhase.STALL
        if s.seized:
            phase = EnginePhase.SEIZE
        return phase

    def _update_faults(self):
        """Set fault flags whose trigger conditions have persisted."""
        c = self.constants
        s = self.state
        dt = self._dt

        hot = s.egt_degc > c.egt_limit_degc
        if hot:
            self._set_fault(EngineFault.OVERTEMP)

        if s.phase is EnginePhase.RUN:
            if s.n2_target - s.n2 > c.stall_margin:
                s.stall_timer += dt
            else:
                s.stall_timer = 0.0
            if s.stall_timer > c.stall_time:
                self._set_fault(EngineFault.STALL)
                s.stall_elapsed = 0.0
                self._enter(EnginePhase.STALL)

        fuelled = s.fuel_flow_pph > 0.0
        s.fire_timer = s.fire_timer + dt if (hot and fuelled) else 0.0
        if s.fire_timer > c.fire_delay:
            self._set_fault(EngineFault.FIRE)

        burning = s.fire and fuelled and s.phase in FUELLED_PHASES
        s.seize_timer = s.seize_timer + dt if burning else 0.0
        if s.seize_timer > c.seize_delay:
            self._set_fault(EngineFault.SEIZE)
            self._enter(EnginePhase.SEIZE)

    # ------------------------------------------------------------------
    # Phase handlers
    # ------------------------------------------------------------------

    def _off(self) -> float:
        s = self.state
        cond = self._conditions

        s.running = False
        s.cranking = False
        s.augmentation = False
        s.fuel_flow_pph = 0.0

        # Spools wind down to (or up to) windmilling speed
        n1_windmill, n2_windmill = self._windmill_speeds(10.0, 15.0)
        s.n1 = self._approach(s.n1, n1_windmill, max(s.n1 / 2.0, 1.0), s.n1 / 2.0)
        s.n2 = self._approach(s.n2, n2_windmill, max(s.n2 / 2.0, 1.0), s.n2 / 2.0)
        s.n2norm = self._normalized_n2(s.n2)
        s.n2_target = n2_windmill

        s.egt_degc = self._approach(s.egt_degc, cond.tat_degc, 11.7, 7.3)
        s.oil_temp_degk = self._approach(s.oil_temp_degk, cond.tat_degc + 273.0, 0.2, 0.2)
        s.oil_pressure_psi = s.n2 * OIL_PSI_PER_N2
        s.nozzle_position = self._approach(s.nozzle_position, 1.0, 0.8, 0.8)
        s.epr = self._approach(s.epr, 1.0, 0.2, 0.2)
        return 0.0

    def _spin_up(self) -> float:
        c = self.constants
        s = self.state
        cond = self._conditions

        s.running = False
        s.fuel_flow_pph = 0.0
        s.n2_target = STARTER_N2_FRACTION * c.max_n2
        s.n2 = self._approach(s.n2, s.n2_target, c.n2_spinup, s.n2 / 2.0)
        s.n1 = self._approach(s.n1, STARTER_N1_FRACTION * c.max_n1, c.n1_spinup, s.n1 / 2.0)
        s.n2norm = self._normalized_n2(s.n2)

        s.egt_degc = self._approach(s.egt_degc, cond.tat_degc, 11.7, 7.3)
        s.oil_temp_degk = self._approach(s.oil_temp_degk, cond.tat_degc + 273.0, 0.2, 0.2)
        s.oil_pressure_psi = s.n2 * OIL_PSI_PER_N2
        s.epr = 1.0
        s.nozzle_position = 1.0
        return 0.0

    def _start(self) -> float:
        c = self.constants
        s = self.state

        if s.n2 < LIGHTOFF_N2 or s.starved:
            s.starter = False
            s.cranking = False
            self._enter(EnginePhase.OFF)
            return 0.0

        s.starter = False
        if s.n2 >= c.idle_n2:
            s.running = True
            s.cranking = False
            self._enter(EnginePhase.RUN)
            return 0.0

        s.cranking = True
        rate = c.delay / 15.0
        s.n2_target = c.idle_n2
        s.n2 = self._approach(s.n2, c.idle_n2, rate, s.n2 / 2.0)
        s.n1 = self._approach(s.n1, c.idle_n1, 0.7 * rate, s.n1 / 2.0)
        s.n2norm = 0.0
        s.egt_degc = self._approach(s.egt_degc, self._conditions.tat_degc + EGT_IDLE_RISE, 21.3, 7.3)
        s.fuel_flow_pph = self.calc_fuel_need()
        s.oil_pressure_psi = s.n2 * OIL_PSI_PER_N2
        return 0.0

    def _run(self) -> float:
        c = self.constants
        s = self.state
        cond = self._conditions
        idle_thrust, mil_thrust = self._thrust_levels()

        s.running = True
        s.starter = False
        s.cranking = False

        # Acceleration slows near idle and in thin air
        n = min(s.n2norm + 0.1, 1.0)
        spoolup = c.delay / (1.0 + 3.0 * (1.0 - n)**3 + (1.0 - cond.density_ratio))

        s.n2_target = c.idle_n2 + s.throttle_pos * c.n2_factor
        s.n2 = self._approach(s.n2, s.n2_target, spoolup, spoolup * 3.0)
        s.n1 = self._approach(s.n1, c.idle_n1 + s.throttle_pos * c.n1_factor,
                              spoolup, spoolup * 2.4)
        s.n2norm = self._normalized_n2(s.n2)

        egt_target = cond.tat_degc + EGT_IDLE_RISE + s.throttle_pos * EGT_THROTTLE_RISE
        s.egt_degc = self._approach(s.egt_degc, egt_target, *EGT_RUN_RATES)
        s.oil_pressure_psi = s.n2 * OIL_PSI_PER_N2
        s.oil_temp_degk = self._approach(s.oil_temp_degk, OIL_RUN_TEMP_K, 1.2, 0.1)
        s.corrected_tsfc = self._corrected_tsfc(s.n2norm)

        thrust = (idle_thrust + mil_thrust * s.n2norm**2) * (1.0 - s.bleed_demand)

        self._update_augmentation(s.n2)
        need = self.calc_fuel_need()
        if s.augmentation:
            thrust = self._augmented_thrust(thrust)
            s.fuel_flow_pph = self._approach(s.fuel_flow_pph, need, 5000.0, 10000.0)
            s.nozzle_position = self._approach(s.nozzle_position, 1.0, 0.8, 0.8)
        else:
            s.fuel_flow_pph = self._approach(s.fuel_flow_pph, need, 1000.0, 100000.0)
            s.nozzle_position = self._approach(s.nozzle_position, 1.0 - s.n2norm, 0.8, 0.8)

        thrust = self._inject(thrust)
        s.epr = self._approach(s.epr, 1.0 + thrust / c.mil_thrust, EPR_RATE, EPR_RATE)

        if s.cutoff or s.starved:
            self._enter(EnginePhase.OFF)
        return thrust

    def _stall(self) -> float:
        s = self.state
        cond = self._conditions
        idle_thrust, mil_thrust = self._thrust_levels()

        s.egt_degc = cond.tat_degc + EGT_STALL_RISE
        s.fuel_flow_pph = self.calc_fuel_need()
        n1_windmill, n2_windmill = self._windmill_speeds(10.0, 15.0)
        s.n1 = self._approach(s.n1, n1_windmill, 0.0, s.n1 / 10.0)
        s.n2 = self._approach(s.n2, n2_windmill, 0.0, s.n2 / 10.0)
        s.n2norm = self._normalized_n2(s.n2)
        s.oil_pressure_psi = s.n2 * OIL_PSI_PER_N2
        s.stall_elapsed += self._dt

        # Surging, much reduced thrust
        core = (idle_thrust + mil_thrust * s.n2norm**2) * (1.0 - s.bleed_demand)
        surge = 0.5 * (1.0 + np.sin(2.0 * np.pi * STALL_SURGE_HZ * s.stall_elapsed))
        thrust = max(core * STALL_THRUST_FRACTION * surge, 0.0)

        if s.throttle_pos < STALL_RECOVERY_THROTTLE:
            # Throttle to idle clears the stall
            self._clear_stall()
            self._enter(EnginePhase.RUN)
        elif s.cutoff and s.n2 < LIGHTOFF_N2:
            # Flame-out ends the stall
            self._clear_stall()
            s.running = False
            self._enter(EnginePhase.OFF)
        return thrust

    def _seize(self) -> float:
        s = self.state
        cond = self._conditions

        s.seized = True
        s.running = False
        s.cranking = False
        s.augmentation = False
        s.n2 = 0.0
        s.n2norm = 0.0
        s.n2_target = 0.0
        n1_windmill, _ = self._windmill_speeds(20.0, 15.0)
        s.n1 = self._approach(s.n1, n1_windmill, 0.0, s.n1 / 15.0)
        s.fuel_flow_pph = self.calc_fuel_need()
        s.oil_pressure_psi = 0.0
        s.oil_temp_degk = self._approach(s.oil_temp_degk, cond.tat_degc + 273.0, 0.0, 0.2)
        s.egt_degc = self._approach(s.egt_degc, cond.tat_degc, 11.7, 7.3)
        s.epr = self._approach(s.epr, 1.0, 0.2, 0.2)
        return 0.0

    def _trim(self) -> float:
        c = self.constants
        s = self.state
        self._update_augmentation(c.idle_n2 + s.throttle_pos * c.n2_factor)
        return self._steady_state_thrust()

    # ------------------------------------------------------------------
    # Thrust and fuel helpers
    # ------------------------------------------------------------------

    def _thrust_levels(self):
        """Idle thrust and the military increment above idle (lbf)."""
        c = self.constants
        idle_thrust = c.mil_thrust * self.curves.idle_thrust.evaluate(self._conditions)
        mil_thrust = (c.mil_thrust - idle_thrust) * self.curves.mil_thrust.evaluate(self._conditions)
        return idle_thrust, mil_thrust

    def _steady_state_thrust(self) -> float:
        """Thrust the current throttle settles to, without lag (lbf)."""
        c = self.constants
        s = self.state
        idle_thrust, mil_thrust = self._thrust_levels()
        n2norm = self._normalized_n2(c.idle_n2 + s.throttle_pos * c.n2_factor)

        thrust = (idle_thrust + mil_thrust * n2norm**2) * (1.0 - s.bleed_demand)
        if s.augmentation and c.augmented:
            thrust = self._augmented_thrust(thrust)
        if c.injected and s.injection and s.injection_timer > 0.0:
            thrust *= self.curves.injection.evaluate(self._conditions)
        return thrust

    def _update_augmentation(self, n2: float):
        """Decide whether the afterburner is lit."""
        c = self.constants
        s = self.state
        if not c.augmented:
            s.augmentation = False
        elif c.aug_method is AugMethod.THROTTLE:
            s.augmentation = s.throttle_pos > AUG_THROTTLE and n2 > AUG_N2_FRACTION * c.max_n2
        elif c.aug_method is AugMethod.EXTENDED_RANGE:
            s.augmentation = s.augment_cmd > 0.0

    def _augmented_thrust(self, thrust: float) -> float:
        """
        Thrust with the afterburner lit, given unaugmented thrust.

        The lit level is the augmented table value, but never less than
        the unaugmented thrust scaled by max_thrust / mil_thrust.
        """
        c = self.constants
        s = self.state
        lit = max(c.max_thrust * self.curves.aug_thrust.evaluate(self._conditions),
                  thrust * c.max_thrust / c.mil_thrust)
        if c.aug_method is AugMethod.EXTENDED_RANGE:
            return thrust + (lit - thrust) * s.augment_cmd
        return lit

    def _inject(self, thrust: float) -> float:
        """Apply water injection while the injection timer lasts."""
        c = self.constants
        s = self.state
        if c.injected and s.injection and s.injection_timer > 0.0:
            thrust *= self.curves.injection.evaluate(self._conditions)
            if not self._settling:
                s.injection_timer = max(s.injection_timer - self._dt, 0.0)
        return thrust

    def _corrected_tsfc(self, n2norm: float) -> float:
        """TSFC corrected for ambient temperature and power setting."""
        theta = self._conditions.temperature_r / TSFC_REFERENCE_TEMP_R
        return self.constants.tsfc * np.sqrt(theta) * (0.84 + (1.0 - n2norm)**2)

    def _net_thrust(self, thrust: float) -> float:
        """Apply the thrust reverser."""
        if self.state.reversed:
            return -self.constants.reverse_thrust_ratio * thrust
        return thrust

    def calc_fuel_need(self) -> float:
        """
        Commanded fuel flow for the current phase and throttle.

        Returns
        -------
        float
            Fuel flow (lbm/hr). Zero when the engine is off or cut off.
        """
        c = self.constants
        s = self.state

        if s.cutoff or s.phase in (EnginePhase.OFF, EnginePhase.SPINUP):
            return 0.0
        if s.phase is EnginePhase.START:
            return c.idle_fuel_flow * s.n2 / c.idle_n2
        if s.phase in (EnginePhase.STALL, EnginePhase.SEIZE):
            return c.idle_fuel_flow

        idle_thrust, mil_thrust = self._thrust_levels()
        t = s.throttle_pos
        core = idle_thrust + mil_thrust * t**2
        flow = c.idle_fuel_flow + (core - idle_thrust) * self._corrected_tsfc(t)

        if s.augmentation and c.augmented:
            base = core * (1.0 - s.bleed_demand)
            flow += max(self._augmented_thrust(base) - base, 0.0) * c.atsfc
        return flow

    def fuel_expended(self, dt: float) -> float:
        """Fuel burned over dt at the current flow (lbm)."""
        return self.state.fuel_flow_pph / 3600.0 * max(dt, 0.0)

    def get_power_available(self) -> float:
        """
        Thrust still to come as the spools reach the throttle's target.

        Returns
        -------
        float
            Steady-state target thrust minus achieved thrust (lbf)
        """
        s = self.state
        if s.phase in (EnginePhase.RUN, EnginePhase.TRIM):
            target = self._net_thrust(self._steady_state_thrust())
        else:
            target = 0.0
        return target - s.thrust_lbf

    # ------------------------------------------------------------------
    # Start / stop control
    # ------------------------------------------------------------------

    def init_running(self) -> bool:
        """
        Put the engine directly into a stable Run state.

        Skips spin-up and start. Fails, leaving the state unchanged, when
        no fuel is available or the engine is seized.

        Returns
        -------
        bool
            True if the engine is now running
        """
        s = self.state
        if not self.fuel_supply.fuel_available():
            logger.warning(f"{self.label}: cannot start running, no fuel available")
            return False
        if s.seized:
            logger.warning(f"{self.label}: cannot start running, engine is seized")
            return False

        s.starved = False
        s.cutoff = False
        s.starter = False
        s.running = True
        self._enter(EnginePhase.RUN)
        self._set_steady_spools()
        s.oil_temp_degk = OIL_RUN_TEMP_K

        self._settling = True
        try:
            thrust = self._run()
            s.inlet_position = self._inlet_schedule()
        finally:
            self._settling = False
        s.thrust_lbf = self._net_thrust(thrust)
        return s.phase is EnginePhase.RUN

    def reset_to_ic(self):
        """Restore the construction-time state, clearing all faults."""
        self._conditions = self._initial_conditions
        previous = self.state.phase
        self._reset_state()
        if previous is not EnginePhase.TRIM:
            self.state.phase = previous
            self._enter(EnginePhase.TRIM)
        for observer in self.observers:
            observer.on_reset(self)

    def _reset_state(self):
        c = self.constants
        self._dt = 0.0
        self.state.reset(
            self._conditions.tat_degc,
            injection_time=c.injection_time if c.injected else 0.0,
            running=self._preset_running,
            bleed=c.bleed,
        )

    def _set_steady_spools(self):
        c = self.constants
        s = self.state
        s.n2_target = c.idle_n2 + s.throttle_pos * c.n2_factor
        s.n2 = s.n2_target
        s.n1 = c.idle_n1 + s.throttle_pos * c.n1_factor
        s.n2norm = self._normalized_n2(s.n2)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _approach(self, current: float, target: float, accel: float, decel: float) -> float:
        """Rate-limit toward target, or jump there while settling."""
        if self._settling:
            return target
        return seek(current, target, accel, decel, self._dt)

    def _normalized_n2(self, n2: float) -> float:
        c = self.constants
        return clamp((n2 - c.idle_n2) / c.n2_factor, 0.0, 1.0)

    def _windmill_speeds(self, n1_divisor: float, n2_divisor: float):
        """Ram-air spool speeds (N1, N2), held within the rated maxima."""
        c = self.constants
        qbar = self._conditions.qbar_psf
        return (clamp(qbar / n1_divisor, 0.0, c.max_n1),
                clamp(qbar / n2_divisor, 0.0, c.max_n2))

    def _inlet_schedule(self) -> float:
        """Inlet ramp: fully open subsonic, closing to half at Mach 2."""
        mach = self._conditions.mach
        if mach <= 1.0:
            return 1.0
        return max(1.0 - 0.5 * (mach - 1.0), 0.5)

    def _enter(self, phase: EnginePhase):
        previous = self.state.phase
        if phase is previous:
            return
        self.state.phase = phase
        for observer in self.observers:
            observer.on_phase_change(self, previous, phase)

    def _set_fault(self, fault: EngineFault):
        if getattr(self.state, fault.value):
            return
        setattr(self.state, fault.value, True)
        for observer in self.observers:
            observer.on_fault(self, fault)

    def _clear_stall(self):
        s = self.state
        s.stalled = False
        s.stall_timer = 0.0
        s.stall_elapsed = 0.0

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def label(self) -> str:
        return f"{self.name} (engine {self.engine_number})"

    @property
    def conditions(self) -> FlightCondition:
        """Flight condition used on the last tick."""
        return self._conditions

    @property
    def phase(self) -> EnginePhase:
        return self.state.phase

    @property
    def stalled(self) -> bool:
        return self.state.stalled

    @property
    def seized(self) -> bool:
        return self.state.seized

    @property
    def overtemp(self) -> bool:
        return self.state.overtemp

    @property
    def fire(self) -> bool:
        return self.state.fire

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def starter(self) -> bool:
        return self.state.starter

    @property
    def cranking(self) -> bool:
        return self.state.cranking

    @property
    def cutoff(self) -> bool:
        return self.state.cutoff

    @property
    def ignition(self) -> int:
        return self.state.ignition

    @property
    def augmentation(self) -> bool:
        return self.state.augmentation

    @property
    def injection(self) -> bool:
        return self.state.injection

    @property
    def reversed(self) -> bool:
        return self.state.reversed

    @property
    def throttle(self) -> float:
        """Throttle position including the afterburner range."""
        return self.state.throttle_pos + self.state.augment_cmd

    @property
    def inlet(self) -> float:
        return self.state.inlet_position

    @property
    def nozzle(self) -> float:
        return self.state.nozzle_position

    @property
    def bleed_demand(self) -> float:
        return self.state.bleed_demand

    @property
    def n1(self) -> float:
        return self.state.n1

    @property
    def n2(self) -> float:
        return self.state.n2

    @property
    def epr(self) -> float:
        return self.state.epr

    @property
    def egt(self) -> float:
        """Exhaust gas temperature (deg C)."""
        return self.state.egt_degc

    @property
    def oil_pressure_psi(self) -> float:
        return self.state.oil_pressure_psi

    @property
    def oil_temp_degf(self) -> float:
        return self.state.oil_temp_degf

    @property
    def fuel_flow_pph(self) -> float:
        return self.state.fuel_flow_pph

    @property
    def thrust(self) -> float:
        """Net thrust from the last tick (lbf)."""
        return self.state.thrust_lbf

    # ------------------------------------------------------------------
    # Control inputs
    # ------------------------------------------------------------------

    def set_throttle(self, throttle: float):
        """
        Set throttle position.

        With extended-range augmentation, values above 1.0 command the
        afterburner. Out-of-range values are clamped.
        """
        upper = 2.0 if self.constants.aug_method is AugMethod.EXTENDED_RANGE else 1.0
        throttle = clamp(throttle, 0.0, upper)
        self.state.throttle_pos = min(throttle, 1.0)
        self.state.augment_cmd = max(throttle - 1.0, 0.0)

    def set_starter(self, starter: bool):
        self.state.starter = bool(starter)

    def set_running(self, running: bool):
        """Preset the engine to running (takes effect when trim ends)."""
        self.state.running = bool(running)

    def set_cutoff(self, cutoff: bool):
        self.state.cutoff = bool(cutoff)

    def set_ignition(self, ignition: int):
        self.state.ignition = max(int(ignition), 0)

    def set_augmentation(self, augmentation: bool):
        self.state.augmentation = bool(augmentation)

    def set_injection(self, injection: bool):
        self.state.injection = bool(injection)

    def set_reverse(self, reversed_: bool):
        self.state.reversed = bool(reversed_)

    def set_bleed_demand(self, bleed_demand: float):
        self.state.bleed_demand = clamp(bleed_demand, 0.0, 1.0)

    def set_phase(self, phase: EnginePhase):
        """Diagnostic override of the operating phase."""
        self._enter(EnginePhase(phase))

    def set_epr(self, epr: float):
        """Diagnostic override of EPR."""
        self.state.epr = epr

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def telemetry(self) -> Dict[str, object]:
        """
        Engine outputs keyed by label, in fixed column order.

        Returns
        -------
        dict
            Label -> value (floats, phase name, fault flags as 0/1)
        """
        s = self.state
        columns = [
            ('N1', s.n1),
            ('N2', s.n2),
            ('Thrust', s.thrust_lbf),
            ('Fuel Flow', s.fuel_flow_pph),
            ('EGT', s.egt_degc),
            ('EPR', s.epr),
            ('Oil Pressure', s.oil_pressure_psi),
            ('Oil Temperature', s.oil_temp_degf),
            ('Nozzle', s.nozzle_position),
            ('Inlet', s.inlet_position),
            ('Phase', s.phase.name),
            ('Stalled', int(s.stalled)),
            ('Seized', int(s.seized)),
            ('Overtemp', int(s.overtemp)),
            ('Fire', int(s.fire)),
        ]
        return {f"{self.name} {key} (engine {self.engine_number})": value
                for key, value in columns}

    def get_engine_labels(self, delimiter: str = ',') -> str:
        """Telemetry column labels joined by delimiter."""
        return delimiter.join(self.telemetry().keys())

    def get_engine_values(self, delimiter: str = ',') -> str:
        """Telemetry values joined by delimiter, in label order."""
        return delimiter.join(_format_value(value) for value in self.telemetry().values())

    def __repr__(self):
        return (f"TurbineEngine('{self.name}', engine {self.engine_number}, "
                f"phase={self.state.phase.name}, thrust={self.state.thrust_lbf:.1f} lbf)")


def _format_value(value) -> str:
    if isinstance(value, float):
        return f"{value:.4f}"
    return str(value)
