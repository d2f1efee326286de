"""
Engine Start and Acceleration Demonstration

Runs a J79 through a complete ground start, a slam acceleration into
afterburner, and a shutdown. Shows how to:
- Load an engine from YAML configuration
- Drive the starter, cutoff and throttle
- Record telemetry and plot the run
"""

import logging
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from turbosim.core.observers import LoggingObserver
from turbosim.core.state import EnginePhase
from turbosim.environment.atmosphere import FlightCondition
from turbosim.io.config import load_engine_config
from turbosim.io.telemetry import TelemetryRecorder


def main():
    """Run engine start demonstration."""
    logging.basicConfig(level=logging.INFO, format='%(name)s: %(message)s')

    print("=" * 60)
    print("Engine Start and Acceleration")
    print("=" * 60)
    print()

    config_path = os.path.join(os.path.dirname(__file__), '..', 'config', 'j79.yaml')
    config = load_engine_config(config_path)
    print(f"Engine: {config}")
    print()

    engine = config.create_engine(observers=[LoggingObserver()])
    recorder = TelemetryRecorder(engine)
    conditions = FlightCondition.sea_level_static()

    dt = 1.0 / 120.0
    t_final = 70.0
    n_steps = int(t_final / dt)

    for i in range(n_steps):
        t = i * dt

        # Control schedule
        if i == 1:
            engine.set_starter(True)
        if engine.phase is EnginePhase.SPINUP and engine.n2 >= 15.0:
            engine.set_cutoff(False)
        if 40.0 <= t < 55.0:
            engine.set_throttle(1.0)
        elif t >= 55.0:
            engine.set_throttle(0.0)
        if t >= 65.0:
            engine.set_cutoff(True)

        engine.calculate(dt, conditions)
        recorder.record(t)

    df = recorder.to_dataframe()
    def label(key):
        return f"{engine.name} {key} (engine {engine.engine_number})"

    print()
    print(f"Peak thrust:    {df[label('Thrust')].max():9.1f} lbf")
    print(f"Peak fuel flow: {df[label('Fuel Flow')].max():9.1f} lbm/hr")
    print(f"Peak EGT:       {df[label('EGT')].max():9.1f} degC")
    print(f"Final phase:    {engine.phase.name}")
    print()

    # ========================================
    # Plot Results
    # ========================================

    print("Generating plots...")

    t_hist = df['time'].values
    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    fig.suptitle(f'Engine Run - {engine.name}', fontsize=14, fontweight='bold')

    axes[0, 0].plot(t_hist, df[label('N1')], 'b-', label='N1', linewidth=1.5)
    axes[0, 0].plot(t_hist, df[label('N2')], 'r-', label='N2', linewidth=1.5)
    axes[0, 0].set_ylabel('Spool speed (%)')
    axes[0, 0].set_title('Spool Speeds')
    axes[0, 0].legend()

    axes[0, 1].plot(t_hist, df[label('Thrust')], 'b-', linewidth=2)
    axes[0, 1].set_ylabel('Thrust (lbf)')
    axes[0, 1].set_title('Net Thrust')

    axes[1, 0].plot(t_hist, df[label('Fuel Flow')], 'g-', linewidth=2)
    axes[1, 0].set_ylabel('Fuel flow (lbm/hr)')
    axes[1, 0].set_title('Fuel Flow')

    axes[1, 1].plot(t_hist, df[label('EGT')], 'r-', linewidth=2)
    axes[1, 1].axhline(engine.constants.egt_limit_degc, color='k', linestyle='--', label='Limit')
    axes[1, 1].set_ylabel('EGT (degC)')
    axes[1, 1].set_title('Exhaust Gas Temperature')
    axes[1, 1].legend()

    for ax in np.ravel(axes):
        ax.set_xlabel('Time (s)')
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    output_file = os.path.join(os.path.dirname(__file__), 'engine_start.png')
    plt.savefig(output_file, dpi=150, bbox_inches='tight')
    print(f"Plot saved to: {output_file}")
    plt.close('all')

    csv_file = os.path.join(os.path.dirname(__file__), 'engine_start.csv')
    recorder.to_csv(csv_file)
    print(f"Telemetry saved to: {csv_file}")


if __name__ == "__main__":
    main()
