"""
Telemetry export and engine event observer tests.
"""

import logging
import numpy as np
import pandas as pd
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from turbosim.core.constants import EngineConstants
from turbosim.core.curves import EngineCurves
from turbosim.core.observers import LoggingObserver, EventRecorder
from turbosim.core.state import EnginePhase
from turbosim.core.turbine import TurbineEngine
from turbosim.io.telemetry import TelemetryRecorder

DT = 1.0 / 120.0


def make_engine(**kwargs):
    constants = EngineConstants(mil_thrust=10000.0, idle_n1=15.0, idle_n2=60.0)
    return TurbineEngine(constants, curves=EngineCurves.constant(), **kwargs)


class TestEngineTelemetry:
    """Test label and value strings."""

    def test_labels_match_values(self):
        engine = make_engine(name='left', engine_number=1)
        engine.init_running()
        labels = engine.get_engine_labels().split(',')
        values = engine.get_engine_values().split(',')
        assert len(labels) == len(values)
        assert labels[0] == 'left N1 (engine 1)'
        assert 'left Thrust (engine 1)' in labels

    def test_custom_delimiter(self):
        engine = make_engine()
        labels = engine.get_engine_labels(';').split(';')
        values = engine.get_engine_values(';').split(';')
        assert len(labels) == len(values) == len(engine.telemetry())

    def test_values_track_state(self):
        engine = make_engine()
        engine.init_running()
        row = dict(zip(engine.get_engine_labels().split(','),
                       engine.get_engine_values().split(',')))
        assert np.isclose(float(row['turbine Thrust (engine 0)']), engine.thrust)
        assert row['turbine Phase (engine 0)'] == 'RUN'
        assert row['turbine Stalled (engine 0)'] == '0'


class TestTelemetryRecorder:
    """Test run history export."""

    def test_records_rows(self, tmp_path):
        engine = make_engine()
        engine.init_running()
        engine.set_throttle(1.0)
        recorder = TelemetryRecorder(engine)
        for i in range(10):
            engine.calculate(DT)
            recorder.record(i * DT)

        df = recorder.to_dataframe()
        assert len(recorder) == 10
        assert df.shape == (10, len(engine.telemetry()) + 1)
        assert df['turbine N2 (engine 0)'].is_monotonic_increasing

        csv_file = tmp_path / 'run.csv'
        recorder.to_csv(str(csv_file))
        loaded = pd.read_csv(csv_file)
        assert list(loaded.columns) == list(df.columns)

        recorder.clear()
        assert len(recorder) == 0


class TestObservers:
    """Test engine event delivery."""

    def test_phase_changes_reported_once(self):
        recorder = EventRecorder()
        engine = make_engine(observers=[recorder])
        for _ in range(10):
            engine.calculate(DT)
        assert recorder.transitions == [(EnginePhase.TRIM, EnginePhase.OFF)]

    def test_transitions_are_real_changes(self):
        recorder = EventRecorder()
        engine = make_engine(observers=[recorder])
        engine.set_starter(True)
        for _ in range(int(10.0 / DT)):
            engine.calculate(DT)
        engine.set_cutoff(False)
        for _ in range(int(30.0 / DT)):
            engine.calculate(DT)
        assert all(previous is not current for previous, current in recorder.transitions)
        assert recorder.phases_visited[-1] is EnginePhase.RUN

    def test_reset_reports_return_to_trim(self):
        """Reset from RUN reports the edge back to TRIM; reset from TRIM reports none."""
        recorder = EventRecorder()
        engine = make_engine(observers=[recorder])
        engine.init_running()
        for _ in range(10):
            engine.calculate(DT)
        assert engine.phase is EnginePhase.RUN

        engine.reset_to_ic()
        assert recorder.transitions[-1] == (EnginePhase.RUN, EnginePhase.TRIM)
        assert recorder.resets == 1

        count = len(recorder.transitions)
        engine.reset_to_ic()
        assert len(recorder.transitions) == count
        assert recorder.resets == 2

    def test_logging_observer(self, caplog):
        caplog.set_level(logging.INFO, logger='turbosim.core.observers')
        engine = make_engine(observers=[LoggingObserver()])
        engine.calculate(DT)
        engine.reset_to_ic()
        assert 'phase TRIM -> OFF' in caplog.text
        assert 'reset to initial conditions' in caplog.text

    def test_init_running_failure_logged(self, caplog):
        from turbosim.core.fuel import FuelTank
        caplog.set_level(logging.WARNING, logger='turbosim.core.turbine')
        engine = make_engine(fuel_supply=FuelTank(0.0))
        assert not engine.init_running()
        assert 'no fuel available' in caplog.text
