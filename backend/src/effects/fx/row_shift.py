"""Row Shift — per-pixel scanline/column displacement driven by a shift transform."""

import numpy as np

from shift import SHIFT_TYPE_LABELS, EquationForm, ShiftManager, ShiftType, Sign

EFFECT_ID = "fx.row_shift"
EFFECT_NAME = "Row Shift"
EFFECT_CATEGORY = "glitch"

_LABEL_TO_TYPE = {label: shift_type for shift_type, label in SHIFT_TYPE_LABELS.items()}

PARAMS: dict = {
    "shift_type": {
        "type": "choice",
        "options": list(SHIFT_TYPE_LABELS.values()),
        "default": "Default",
        "label": "Shift Type",
        "description": "Transform that maps each pixel to its sample offset",
    },
    "direction": {
        "type": "choice",
        "options": ["horizontal", "vertical"],
        "default": "horizontal",
        "label": "Direction",
        "description": "Shift along rows (horizontal) or columns (vertical)",
    },
    "shift": {
        "type": "int",
        "min": -500,
        "max": 500,
        "default": 0,
        "label": "Shift",
        "curve": "linear",
        "unit": "px",
        "description": "Bias added to every offset (the line intercept)",
    },
    "scale_x": {
        "type": "float",
        "min": -10.0,
        "max": 10.0,
        "default": 2.0,
        "label": "Scale X",
    },
    "scale_y": {
        "type": "float",
        "min": -10.0,
        "max": 10.0,
        "default": 2.0,
        "label": "Scale Y",
    },
    "linear_coefficient": {
        "type": "float",
        "min": 0.0,
        "max": 10.0,
        "default": 1.0,
        "label": "Slope",
        "description": "Line coefficient m; zero is rejected at render time",
    },
    "linear_negative": {"type": "bool", "default": False, "label": "Negative Slope"},
    "linear_form": {
        "type": "choice",
        "options": [form.value for form in EquationForm],
        "default": EquationForm.Y_OF_X.value,
        "label": "Equation Form",
    },
    "skew_x": {
        "type": "float",
        "min": 0.0,
        "max": 10.0,
        "default": 2.0,
        "label": "Skew X",
    },
    "skew_y": {
        "type": "float",
        "min": 0.0,
        "max": 10.0,
        "default": 2.0,
        "label": "Skew Y",
    },
    "skew_x_negative": {"type": "bool", "default": False, "label": "Negative Skew X"},
    "skew_y_negative": {"type": "bool", "default": False, "label": "Negative Skew Y"},
    "multiply_x": {"type": "bool", "default": False, "label": "Multiply X"},
    "multiply_y": {"type": "bool", "default": False, "label": "Multiply Y"},
    "multiply_x_negative": {
        "type": "bool",
        "default": False,
        "label": "Negative Multiply X",
    },
    "multiply_y_negative": {
        "type": "bool",
        "default": False,
        "label": "Negative Multiply Y",
    },
}


def _shift_type(value) -> int:
    if isinstance(value, str):
        return int(_LABEL_TO_TYPE.get(value, ShiftType.DEFAULT))
    return int(value)


def manager_from_params(params: dict) -> ShiftManager:
    """Build a ShiftManager with every variant configured from effect params."""
    manager = ShiftManager()

    manager.set_scale_multiplier(True, float(params.get("scale_x", 2.0)))
    manager.set_scale_multiplier(False, float(params.get("scale_y", 2.0)))

    manager.set_linear_coefficient(float(params.get("linear_coefficient", 1.0)))
    manager.set_linear_sign(Sign.from_negative(bool(params.get("linear_negative"))))
    manager.set_linear_form(
        EquationForm(params.get("linear_form", EquationForm.Y_OF_X.value))
    )

    manager.set_skew(True, float(params.get("skew_x", 2.0)))
    manager.set_skew(False, float(params.get("skew_y", 2.0)))
    manager.set_skew_sign(True, Sign.from_negative(bool(params.get("skew_x_negative"))))
    manager.set_skew_sign(
        False, Sign.from_negative(bool(params.get("skew_y_negative")))
    )

    manager.set_multiply(True, bool(params.get("multiply_x", False)))
    manager.set_multiply(False, bool(params.get("multiply_y", False)))
    manager.set_multiply_sign(
        True, Sign.from_negative(bool(params.get("multiply_x_negative")))
    )
    manager.set_multiply_sign(
        False, Sign.from_negative(bool(params.get("multiply_y_negative")))
    )

    manager.set_shift_type(_shift_type(params.get("shift_type", "Default")))
    return manager


def describe_params(params: dict) -> str:
    """Step description for a parameter set, usable as a filename fragment."""
    return manager_from_params(params).describe()


def apply(
    frame: np.ndarray,
    params: dict,
    state_in: dict | None = None,
    *,
    frame_index: int,
    resolution: tuple[int, int],
) -> tuple[np.ndarray, dict | None]:
    """Resample each row (or column) at the offsets of the active transform.

    Horizontal: output[y, x] = frame[y, offset(x, y) mod w].
    Vertical:   output[y, x] = frame[offset(x, y) mod h, x].
    Alpha is preserved. Stateless.
    """
    h, w = frame.shape[:2]
    horizontal = params.get("direction", "horizontal") != "vertical"
    shift = int(params.get("shift", 0))

    manager = manager_from_params(params)
    offsets = manager.offset_map(w, h, shift, horizontal)

    rows = np.arange(h)[:, np.newaxis]
    cols = np.arange(w)[np.newaxis, :]
    if horizontal:
        rgb = frame[rows, offsets % w, :3]
    else:
        rgb = frame[offsets % h, cols, :3]
    alpha = frame[:, :, 3:4]

    return np.concatenate([rgb, alpha], axis=2), None
