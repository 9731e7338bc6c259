"""Base class for components driven by a simulation clock."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SimulatorObject(ABC):
    """A component with a clock cycle counter and a per-cycle update."""

    def __init__(self) -> None:
        self.current_clock_cycle = 0

    def step(self) -> None:
        """Advance the clock by one cycle."""
        self.current_clock_cycle += 1

    @abstractmethod
    def update(self) -> None:
        """Do this component's work for the current cycle."""