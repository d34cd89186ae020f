"""Pixel displacement transforms for the row/column shift effect."""

from shift.manager import ShiftConfig, ShiftManager
from shift.transforms import (
    SHIFT_TYPE_LABELS,
    DefaultShift,
    EquationForm,
    LinearShift,
    ScaleShift,
    ShiftType,
    Sign,
    SkewShift,
    XYMultiplyShift,
)

__all__ = [
    "SHIFT_TYPE_LABELS",
    "DefaultShift",
    "EquationForm",
    "LinearShift",
    "ScaleShift",
    "ShiftConfig",
    "ShiftManager",
    "ShiftType",
    "Sign",
    "SkewShift",
    "XYMultiplyShift",
]
