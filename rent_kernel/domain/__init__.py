"""Kernel domain layer: clock, calendar arithmetic, workflow types and value enums."""

from rent_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from rent_kernel.domain.workflow import Guard, Transition, Workflow

__all__ = [
    "Clock",
    "DeterministicClock",
    "Guard",
    "SystemClock",
    "Transition",
    "Workflow",
]
