"""
Engine telemetry recording.

Collects one row per tick from TurbineEngine.telemetry() and exports the
history as a pandas DataFrame or CSV file.
"""

import logging
from typing import List, Dict

import pandas as pd

from ..core.turbine import TurbineEngine

logger = logging.getLogger(__name__)


class TelemetryRecorder:
    """
    Record engine telemetry over a run.

    Parameters
    ----------
    engine : TurbineEngine
        Engine to sample
    """

    def __init__(self, engine: TurbineEngine):
        self.engine = engine
        self.rows: List[Dict[str, object]] = []

    def record(self, time: float):
        """Sample the engine at simulation time (s)."""
        row = {'time': time}
        row.update(self.engine.telemetry())
        self.rows.append(row)

    def to_dataframe(self) -> pd.DataFrame:
        """Recorded history, one row per sample."""
        columns = ['time'] + list(self.engine.telemetry().keys())
        return pd.DataFrame(self.rows, columns=columns)

    def to_csv(self, csv_file: str, delimiter: str = ','):
        """Write the recorded history to a CSV file."""
        self.to_dataframe().to_csv(csv_file, sep=delimiter, index=False)
        logger.info(f"Telemetry ({len(self.rows)} samples) saved to: {csv_file}")

    def clear(self):
        self.rows = []

    def __len__(self):
        return len(self.rows)
