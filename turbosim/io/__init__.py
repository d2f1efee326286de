"""
Configuration and telemetry input/output.
"""

from .config import EngineConfig, load_engine_config, save_engine_config, create_example_config
from .telemetry import TelemetryRecorder

__all__ = [
    'EngineConfig',
    'load_engine_config',
    'save_engine_config',
    'create_example_config',
    'TelemetryRecorder'
]
