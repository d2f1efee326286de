"""
Turbine engine phase state machine tests.

Covers trim, the ground start sequence (spin-up, start, run),
fuel cutoff, relight and fuel starvation.
"""

import pytest
import numpy as np
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from turbosim.core.constants import EngineConstants
from turbosim.core.curves import EngineCurves
from turbosim.core.fuel import FuelTank
from turbosim.core.observers import EventRecorder
from turbosim.core.state import EnginePhase
from turbosim.core.turbine import TurbineEngine

DT = 1.0 / 120.0


def make_engine(**kwargs):
    """10,000 lbf engine, idle N1 15%, idle N2 60%, flat thrust curves."""
    constants = kwargs.pop('constants', None) or EngineConstants(
        mil_thrust=10000.0, idle_n1=15.0, idle_n2=60.0)
    return TurbineEngine(constants, curves=EngineCurves.constant(), **kwargs)


def run_until(engine, condition, limit=120.0, dt=DT):
    """Tick until condition(engine) holds; return elapsed time."""
    t = 0.0
    while not condition(engine):
        assert t < limit, f"condition not reached within {limit} s"
        engine.calculate(dt)
        t += dt
    return t


class TestTrim:
    """Test the trim phase."""

    def test_new_engine_is_in_trim(self):
        engine = make_engine()
        assert engine.phase is EnginePhase.TRIM
        assert engine.cutoff
        assert not engine.running

    def test_zero_time_step_gives_steady_thrust(self):
        """Trim thrust is the steady-state value without spool lag."""
        engine = make_engine()
        engine.set_throttle(1.0)
        thrust = engine.calculate(0.0)
        assert engine.phase is EnginePhase.TRIM
        assert np.isclose(thrust, 10000.0)
        assert engine.n2 == 0.0

    def test_trim_thrust_follows_throttle(self):
        """Idle + military increment scaled by throttle squared."""
        engine = make_engine()
        engine.set_throttle(0.5)
        assert np.isclose(engine.calculate(0.0), 500.0 + 9500.0 * 0.25)

    def test_trim_applies_bleed(self):
        constants = EngineConstants(mil_thrust=10000.0, idle_n1=15.0, idle_n2=60.0, bleed=0.05)
        engine = make_engine(constants=constants)
        engine.set_throttle(1.0)
        assert np.isclose(engine.calculate(0.0), 9500.0)

    def test_trim_to_off(self):
        """Leaving trim without a running preset shuts the engine off."""
        engine = make_engine()
        engine.calculate(DT)
        assert engine.phase is EnginePhase.OFF
        assert engine.cutoff

    def test_trim_to_run_when_preset_running(self):
        """A running preset hands off to Run at steady spool speed."""
        engine = make_engine(running=True)
        engine.set_throttle(1.0)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.RUN
        assert not engine.cutoff
        assert np.isclose(engine.n2, 100.0)
        assert np.isclose(engine.n1, 100.0)

    def test_negative_time_step_rejected(self):
        engine = make_engine()
        with pytest.raises(ValueError):
            engine.calculate(-0.1)


class TestStartSequence:
    """Test the ground start sequence."""

    def test_off_engine_produces_nothing(self):
        engine = make_engine()
        for _ in range(10):
            assert engine.calculate(DT) == 0.0
        assert engine.fuel_flow_pph == 0.0
        assert engine.calc_fuel_need() == 0.0

    def test_starter_spins_up(self):
        """Starter accelerates N2 at the spin-up rate without fuel."""
        engine = make_engine()
        engine.calculate(DT)
        engine.set_starter(True)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.SPINUP

        elapsed = run_until(engine, lambda e: e.n2 >= 15.0)
        assert 4.9 < elapsed < 5.1
        assert engine.fuel_flow_pph == 0.0
        assert engine.thrust == 0.0

    def test_spin_up_limited_by_starter(self):
        """Starter alone cannot take N2 past about 25%."""
        engine = make_engine()
        engine.set_starter(True)
        for _ in range(int(30.0 / DT)):
            engine.calculate(DT)
        assert engine.phase is EnginePhase.SPINUP
        assert np.isclose(engine.n2, 25.18)
        assert np.isclose(engine.n1, 5.21)

    def test_releasing_starter_stops_spin_up(self):
        engine = make_engine()
        engine.set_starter(True)
        engine.calculate(DT)
        engine.set_starter(False)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.OFF

    def test_full_start_to_idle(self):
        """Spin-up, light-off at 15% N2, then self-sustained run at idle."""
        recorder = EventRecorder()
        engine = make_engine(observers=[recorder])
        engine.calculate(DT)
        engine.set_starter(True)
        run_until(engine, lambda e: e.n2 >= 15.0)

        engine.set_cutoff(False)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.START
        assert not engine.starter
        assert engine.cranking
        assert engine.fuel_flow_pph > 0.0

        elapsed = run_until(engine, lambda e: e.phase is EnginePhase.RUN)
        assert 22.0 < elapsed < 23.5
        assert engine.running
        assert not engine.cranking

        assert recorder.phases_visited == [
            EnginePhase.OFF, EnginePhase.SPINUP, EnginePhase.START, EnginePhase.RUN]

        # Settle at idle
        for _ in range(int(10.0 / DT)):
            engine.calculate(DT)
        assert np.isclose(engine.n2, 60.0)
        assert np.isclose(engine.n1, 15.0)
        assert np.isclose(engine.thrust, 500.0)
        assert np.isclose(engine.fuel_flow_pph, engine.constants.idle_fuel_flow)

    def test_accelerates_to_full_thrust(self):
        """Full throttle from idle reaches military thrust without stalling."""
        engine = make_engine()
        assert engine.init_running()
        engine.set_throttle(1.0)
        for _ in range(int(20.0 / DT)):
            engine.calculate(DT)
        assert engine.phase is EnginePhase.RUN
        assert np.isclose(engine.n2, 100.0)
        assert np.isclose(engine.thrust, 10000.0)
        assert not engine.stalled
        assert not engine.overtemp

    def test_start_aborted_by_cutoff(self):
        engine = make_engine()
        engine.set_starter(True)
        run_until(engine, lambda e: e.n2 >= 15.0)
        engine.set_cutoff(False)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.START

        engine.set_cutoff(True)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.OFF
        assert engine.fuel_flow_pph == 0.0


class TestShutdown:
    """Test fuel cutoff, relight and starvation."""

    def test_cutoff_shuts_engine_down(self):
        engine = make_engine()
        engine.init_running()
        engine.set_cutoff(True)
        engine.calculate(DT)
        assert engine.phase is EnginePhase.OFF
        assert not engine.running
        assert engine.fuel_flow_pph == 0.0
        assert engine.thrust == 0.0

        n2 = engine.n2
        for _ in range(int(5.0 / DT)):
            engine.calculate(DT)
        assert engine.n2 < n2

    def test_relight_while_spooling_down(self):
        """Releasing cutoff above 15% N2 restarts without the starter."""
        engine = make_engine()
        engine.init_running()
        engine.set_cutoff(True)
        engine.calculate(DT)
        engine.set_cutoff(False)
        engine.calculate(DT)
        assert engine.phase in (EnginePhase.START, EnginePhase.RUN)
        run_until(engine, lambda e: e.phase is EnginePhase.RUN)
        assert engine.running

    def test_windmilling_spins_spools(self):
        """Dynamic pressure turns an unlit engine."""
        from turbosim.environment.atmosphere import FlightCondition
        engine = make_engine()
        cond = FlightCondition.from_altitude_mach(10000.0, 0.8)
        for _ in range(int(30.0 / DT)):
            engine.calculate(DT, cond)
        assert engine.phase is EnginePhase.OFF
        assert np.isclose(engine.n2, cond.qbar_psf / 15.0, rtol=1e-3)

    @pytest.mark.parametrize("mach", [1.2, 2.0])
    def test_supersonic_windmill_stays_within_rated_speed(self, mach):
        """Ram air at low altitude cannot overspeed an unlit engine."""
        from turbosim.environment.atmosphere import FlightCondition
        engine = make_engine()
        cond = FlightCondition.from_altitude_mach(0.0, mach)
        assert cond.qbar_psf / 15.0 > 100.0
        for _ in range(int(30.0 / DT)):
            engine.calculate(DT, cond)
            assert engine.n1 <= 100.0
            assert engine.n2 <= 100.0
        assert engine.phase is EnginePhase.OFF
        assert np.isclose(engine.n1, 100.0)
        assert np.isclose(engine.n2, 100.0)

    def test_fuel_starvation(self):
        """An empty tank forces the engine off."""
        tank = FuelTank(contents_lbm=0.1)
        engine = make_engine(fuel_supply=tank)
        assert engine.init_running()
        run_until(engine, lambda e: e.phase is EnginePhase.OFF, limit=5.0)
        assert tank.contents_lbm == 0.0
        assert np.isclose(tank.total_drawn_lbm, 0.1)
        assert not engine.running


class TestStartControl:
    """Test direct start and reset."""

    def test_init_running_settles_immediately(self):
        engine = make_engine()
        engine.set_throttle(0.5)
        assert engine.init_running()
        assert engine.phase is EnginePhase.RUN
        assert engine.running
        assert not engine.cutoff
        assert np.isclose(engine.n2, 80.0)
        assert np.isclose(engine.thrust, 500.0 + 9500.0 * 0.25)
        assert np.isclose(engine.fuel_flow_pph, engine.calc_fuel_need())

    def test_init_running_without_fuel(self):
        """No fuel: init_running fails and leaves the engine untouched."""
        engine = make_engine(fuel_supply=FuelTank(contents_lbm=0.0))
        assert not engine.init_running()
        assert engine.phase is EnginePhase.TRIM
        assert not engine.running
        assert engine.cutoff

    def test_reset_restores_baseline(self):
        recorder = EventRecorder()
        engine = make_engine(observers=[recorder])
        engine.init_running()
        engine.set_throttle(0.8)
        engine.set_reverse(True)
        for _ in range(60):
            engine.calculate(DT)

        engine.reset_to_ic()
        assert recorder.resets == 1
        assert engine.phase is EnginePhase.TRIM
        assert engine.n2 == 0.0
        assert engine.throttle == 0.0
        assert not engine.reversed
        assert engine.cutoff

    def test_set_phase_override(self):
        engine = make_engine()
        engine.set_phase(EnginePhase.OFF)
        assert engine.phase is EnginePhase.OFF
