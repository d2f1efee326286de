"""
Fuel supply collaborators.

The engine asks the supply whether fuel is available before starting or
running, and hands it the fuel burned each tick.
"""

from abc import ABC, abstractmethod


class FuelSupply(ABC):
    """Base class for fuel supplies feeding one engine."""

    @abstractmethod
    def fuel_available(self) -> bool:
        """True if the engine can draw fuel."""
        pass

    def draw(self, amount_lbm: float):
        """Remove burned fuel from the supply (lbm)."""
        pass


class UnlimitedFuelSupply(FuelSupply):
    """Supply that never runs dry."""

    def fuel_available(self) -> bool:
        return True


class FuelTank(FuelSupply):
    """
    Single tank with finite contents.

    Parameters:
    -----------
    contents_lbm : float
        Usable fuel (lbm)
    """

    def __init__(self, contents_lbm: float = 0.0):
        self.contents_lbm = max(contents_lbm, 0.0)
        self.total_drawn_lbm = 0.0

    def fuel_available(self) -> bool:
        return self.contents_lbm > 0.0

    def draw(self, amount_lbm: float):
        amount_lbm = min(max(amount_lbm, 0.0), self.contents_lbm)
        self.contents_lbm -= amount_lbm
        self.total_drawn_lbm += amount_lbm

    def __repr__(self):
        return f"FuelTank(contents={self.contents_lbm:.1f} lbm)"
