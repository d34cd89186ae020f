"""Shift manager — owns every transform variant and the active selection.

Configuration lives in an immutable ShiftConfig snapshot. Setters run under
a lock and publish a new snapshot with a single reference swap, so a render
pass on another thread can read one consistent configuration without
locking (take snapshot() once per pass).
"""

import logging
import threading
from dataclasses import dataclass, field, replace

import numpy as np

from shift.transforms import (
    DefaultShift,
    EquationForm,
    LinearShift,
    ScaleShift,
    ShiftType,
    ShiftVariant,
    Sign,
    SkewShift,
    XYMultiplyShift,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftConfig:
    """Parameters of all five variants plus the active type."""

    default: DefaultShift = field(default_factory=DefaultShift)
    scale: ScaleShift = field(default_factory=ScaleShift)
    linear: LinearShift = field(default_factory=LinearShift)
    skew: SkewShift = field(default_factory=SkewShift)
    xy_multiply: XYMultiplyShift = field(default_factory=XYMultiplyShift)
    active: ShiftType = ShiftType.DEFAULT
    # Indexed by ShiftType; built once per snapshot
    _variants: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        variants = (
            self.default,
            self.scale,
            self.linear,
            self.skew,
            self.xy_multiply,
        )
        object.__setattr__(self, "_variants", variants)

    def variant(self, shift_type: ShiftType) -> ShiftVariant:
        return self._variants[shift_type]

    @property
    def active_variant(self) -> ShiftVariant:
        return self._variants[self.active]

    def offset(self, x, y, width, height, shift, horizontal):
        return self.active_variant.offset(x, y, width, height, shift, horizontal)

    def describe(self) -> str:
        return self.active_variant.describe()


class ShiftManager:
    """Selects among the shift transforms and holds their parameters.

    Every variant keeps its own parameters for the manager's lifetime;
    switching the active type never resets them, and the typed accessors
    work on a variant whether or not it is active.
    """

    def __init__(self, config: ShiftConfig | None = None):
        self._config = config if config is not None else ShiftConfig()
        self._lock = threading.Lock()

    def snapshot(self) -> ShiftConfig:
        return self._config

    def _set(self, variant: str, **changes):
        with self._lock:
            current = getattr(self._config, variant)
            self._config = replace(
                self._config, **{variant: replace(current, **changes)}
            )

    # --- Active selection ---

    @property
    def shift_type(self) -> ShiftType:
        return self._config.active

    def set_shift_type(self, index: int):
        """Select the active transform. Out-of-range indices select DEFAULT."""
        if 0 <= index < len(ShiftType):
            shift_type = ShiftType(index)
        else:
            logger.debug("Shift type %r out of range, using default", index)
            shift_type = ShiftType.DEFAULT
        with self._lock:
            if shift_type != self._config.active:
                logger.debug(
                    "Active shift type -> %s",
                    shift_type.name,
                    extra={"shift_type": shift_type.name},
                )
            self._config = replace(self._config, active=shift_type)

    def is_default_active(self) -> bool:
        return self._config.active == ShiftType.DEFAULT

    # --- Delegation ---

    def offset(
        self, x: int, y: int, width: int, height: int, shift: int, horizontal: bool
    ) -> int:
        """Offset of (x, y) along the selected axis from the active transform."""
        return self._config.offset(x, y, width, height, shift, horizontal)

    def offset_map(
        self, width: int, height: int, shift: int, horizontal: bool
    ) -> np.ndarray:
        """Offsets for every pixel of a (height, width) image as int64.

        Raises:
            ZeroDivisionError: Linear coefficient is zero, or XY multiply
                is enabled on an axis whose opposite dimension is zero.
        """
        config = self._config
        ys, xs = np.indices((height, width), dtype=np.int64)
        offsets = config.offset(xs, ys, width, height, shift, horizontal)
        return np.asarray(offsets, dtype=np.int64)

    def describe(self) -> str:
        return self._config.describe()

    # --- Scale ---

    def set_scale_multiplier(self, horizontal: bool, value: float):
        key = "x_multiplier" if horizontal else "y_multiplier"
        self._set("scale", **{key: value})

    def get_scale_multiplier(self, horizontal: bool) -> float:
        return self._config.scale.multiplier(horizontal)

    # --- Linear ---

    def set_linear_coefficient(self, value: float):
        self._set("linear", coefficient=value)

    def get_linear_coefficient(self) -> float:
        return self._config.linear.coefficient

    def set_linear_sign(self, sign: Sign):
        self._set("linear", sign=sign)

    def get_linear_sign(self) -> Sign:
        return self._config.linear.sign

    def set_linear_form(self, form: EquationForm):
        self._set("linear", form=form)

    def get_linear_form(self) -> EquationForm:
        return self._config.linear.form

    # --- Skew ---

    def set_skew(self, horizontal: bool, value: float):
        key = "x_skew" if horizontal else "y_skew"
        self._set("skew", **{key: value})

    def get_skew(self, horizontal: bool) -> float:
        return self._config.skew.skew(horizontal)

    def set_skew_sign(self, horizontal: bool, sign: Sign):
        key = "x_sign" if horizontal else "y_sign"
        self._set("skew", **{key: sign})

    def get_skew_sign(self, horizontal: bool) -> Sign:
        return self._config.skew.sign(horizontal)

    # --- XY multiply ---

    def set_multiply(self, horizontal: bool, enabled: bool):
        key = "multiply_x" if horizontal else "multiply_y"
        self._set("xy_multiply", **{key: enabled})

    def get_multiply(self, horizontal: bool) -> bool:
        return self._config.xy_multiply.multiply(horizontal)

    def set_multiply_sign(self, horizontal: bool, sign: Sign):
        key = "x_sign" if horizontal else "y_sign"
        self._set("xy_multiply", **{key: sign})

    def get_multiply_sign(self, horizontal: bool) -> Sign:
        return self._config.xy_multiply.sign(horizontal)
