"""Shift transforms — per-pixel offset functions for the row/column shift effect.

Each variant maps a pixel coordinate (x, y) on an image of (width, height)
to an integer offset along the selected axis. On the horizontal axis x is
the primary coordinate and y the other one; on the vertical axis it is the
reverse. ``shift`` is the caller-supplied bias added by every variant.

All arithmetic is float, truncated toward zero at the end. The same
formulas accept numpy integer arrays for x/y, in which case an int64 array
comes back (see ShiftManager.offset_map).
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

import numpy as np


class ShiftType(IntEnum):
    DEFAULT = 0
    SCALE = 1
    LINEAR = 2
    SKEW = 3
    XY_MULTIPLY = 4


SHIFT_TYPE_LABELS: dict[ShiftType, str] = {
    ShiftType.DEFAULT: "Default",
    ShiftType.SCALE: "Scale",
    ShiftType.LINEAR: "Linear",
    ShiftType.SKEW: "Skew",
    ShiftType.XY_MULTIPLY: "XY Multiply",
}


class Sign(Enum):
    POSITIVE = 1
    NEGATIVE = -1

    @classmethod
    def from_negative(cls, negative: bool) -> "Sign":
        """Map a "negative" checkbox state to a sign."""
        return cls.NEGATIVE if negative else cls.POSITIVE

    @property
    def marker(self) -> str:
        return "p" if self is Sign.POSITIVE else "n"


class EquationForm(Enum):
    Y_OF_X = "y_of_x"  # y = m*x + b
    X_OF_Y = "x_of_y"  # x = m*y + b


def _trunc(value):
    """Truncate toward zero (C cast semantics), scalar or array."""
    if isinstance(value, np.ndarray):
        return np.trunc(value).astype(np.int64)
    return int(value)


def _num(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class DefaultShift:
    """Identity plus shift."""

    def offset(self, x, y, width, height, shift, horizontal):
        return (x if horizontal else y) + shift

    def describe(self) -> str:
        return ""


@dataclass(frozen=True)
class ScaleShift:
    x_multiplier: float = 2.0
    y_multiplier: float = 2.0

    def multiplier(self, horizontal: bool) -> float:
        return self.x_multiplier if horizontal else self.y_multiplier

    def offset(self, x, y, width, height, shift, horizontal):
        if horizontal:
            return _trunc(x * self.x_multiplier) + shift
        return _trunc(y * self.y_multiplier) + shift

    def describe(self) -> str:
        return f"scale-x{_num(self.x_multiplier)}-y{_num(self.y_multiplier)}"


@dataclass(frozen=True)
class LinearShift:
    """Line equation with shift as the intercept.

    In Y_OF_X form the horizontal axis solves the line for x, so the
    coefficient ends up as a divisor; X_OF_Y swaps which axis divides.
    """

    coefficient: float = 1.0
    sign: Sign = Sign.POSITIVE
    form: EquationForm = EquationForm.Y_OF_X

    @property
    def slope(self) -> float:
        return self.sign.value * self.coefficient

    def offset(self, x, y, width, height, shift, horizontal):
        k = self.slope
        divides = horizontal == (self.form is EquationForm.Y_OF_X)
        if divides and k == 0:
            raise ZeroDivisionError("linear coefficient is zero")

        if self.form is EquationForm.Y_OF_X:
            if horizontal:
                return x + _trunc((y - shift) / k)
            return y + _trunc(k * x + shift)
        if horizontal:
            return x + _trunc(k * y + shift)
        return y + _trunc((x - shift) / k)

    def describe(self) -> str:
        form = "yx" if self.form is EquationForm.Y_OF_X else "xy"
        return f"linear-{form}-{self.sign.marker}{_num(self.coefficient)}"


@dataclass(frozen=True)
class SkewShift:
    x_skew: float = 2.0
    y_skew: float = 2.0
    x_sign: Sign = Sign.POSITIVE
    y_sign: Sign = Sign.POSITIVE

    def skew(self, horizontal: bool) -> float:
        return self.x_skew if horizontal else self.y_skew

    def sign(self, horizontal: bool) -> Sign:
        return self.x_sign if horizontal else self.y_sign

    def offset(self, x, y, width, height, shift, horizontal):
        if horizontal:
            return x + shift + _trunc(self.x_sign.value * self.x_skew * y)
        return y + shift + _trunc(self.y_sign.value * self.y_skew * x)

    def describe(self) -> str:
        tag = "skew"
        if self.x_skew > 0:
            tag += f"-x{self.x_sign.marker}{_num(self.x_skew)}"
        if self.y_skew > 0:
            tag += f"-y{self.y_sign.marker}{_num(self.y_skew)}"
        return tag


@dataclass(frozen=True)
class XYMultiplyShift:
    """Cross-axis product term, normalized by the opposite image dimension."""

    multiply_x: bool = False
    multiply_y: bool = False
    x_sign: Sign = Sign.POSITIVE
    y_sign: Sign = Sign.POSITIVE

    def multiply(self, horizontal: bool) -> bool:
        return self.multiply_x if horizontal else self.multiply_y

    def sign(self, horizontal: bool) -> Sign:
        return self.x_sign if horizontal else self.y_sign

    def offset(self, x, y, width, height, shift, horizontal):
        if horizontal:
            if not self.multiply_x:
                return x + shift
            if height == 0:
                raise ZeroDivisionError("image height is zero")
            return x + shift + _trunc(self.x_sign.value * x * y / height)
        if not self.multiply_y:
            return y + shift
        if width == 0:
            raise ZeroDivisionError("image width is zero")
        return y + shift + _trunc(self.y_sign.value * y * x / width)

    def describe(self) -> str:
        tag = "xymult"
        if self.multiply_x:
            tag += f"-x{self.x_sign.marker}"
        if self.multiply_y:
            tag += f"-y{self.y_sign.marker}"
        return tag


ShiftVariant = DefaultShift | ScaleShift | LinearShift | SkewShift | XYMultiplyShift
