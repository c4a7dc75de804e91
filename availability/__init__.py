"""Slot computation and calendar rules for the salon."""

from .calendar import classify_cell, classify_day, day_grid
from .checker import (
    can_select_interval,
    is_before_today,
    is_slot_unavailable,
    selection_block_reason,
    unavailability_reason,
)
from .resolver import appointments_for_day, compute_available_slots
from .rules import SLOT_STEP_MINUTES

__all__ = [
    "SLOT_STEP_MINUTES",
    "appointments_for_day",
    "can_select_interval",
    "classify_cell",
    "classify_day",
    "compute_available_slots",
    "day_grid",
    "is_before_today",
    "is_slot_unavailable",
    "selection_block_reason",
    "unavailability_reason",
]
