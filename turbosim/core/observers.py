"""
Observability hooks for engine events.

The engine reports phase transitions, fault onsets and resets through
observers instead of printing from inside the calculation.
"""

import logging
from typing import List, Tuple

from .state import EnginePhase, EngineFault

logger = logging.getLogger(__name__)


class EngineObserver:
    """
    Receives engine events. All hooks default to no-ops.
    """

    def on_phase_change(self, engine, previous: EnginePhase, current: EnginePhase):
        """Called once for every phase change."""
        pass

    def on_fault(self, engine, fault: EngineFault):
        """Called when a fault flag first becomes true."""
        pass

    def on_reset(self, engine):
        """Called after the engine is reset to initial conditions."""
        pass


class LoggingObserver(EngineObserver):
    """Writes engine events to the module logger."""

    def __init__(self, log: logging.Logger = None):
        self.log = log or logger

    def on_phase_change(self, engine, previous, current):
        self.log.info(f"{engine.label}: phase {previous.name} -> {current.name} "
                      f"(N2={engine.n2:.1f}%)")

    def on_fault(self, engine, fault):
        self.log.warning(f"{engine.label}: {fault.value} (EGT={engine.egt:.0f} degC, "
                         f"phase {engine.phase.name})")

    def on_reset(self, engine):
        self.log.info(f"{engine.label}: reset to initial conditions")


class EventRecorder(EngineObserver):
    """
    Keeps every event in memory.

    Attributes
    ----------
    transitions : list of (EnginePhase, EnginePhase)
    faults : list of EngineFault
    resets : int
    """

    def __init__(self):
        self.transitions: List[Tuple[EnginePhase, EnginePhase]] = []
        self.faults: List[EngineFault] = []
        self.resets = 0

    def on_phase_change(self, engine, previous, current):
        self.transitions.append((previous, current))

    def on_fault(self, engine, fault):
        self.faults.append(fault)

    def on_reset(self, engine):
        self.resets += 1

    @property
    def phases_visited(self) -> List[EnginePhase]:
        """Phases entered, in order."""
        return [current for _, current in self.transitions]
