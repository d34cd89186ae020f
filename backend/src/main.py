"""rowshift entry point — print the step description for a set of effect params.

Usage: rowshift-describe '{"shift_type": "Skew", "skew_x": 1.5}'

Params are the fx.row_shift PARAMS keys as a JSON object (omitted = all
defaults). Output is KEY=value lines for a filename/history builder.
"""

import json
import logging
import os
import sys

import sentry_sdk

from diagnostics import init_diagnostics
from effects.fx.row_shift import EFFECT_ID, manager_from_params

logger = logging.getLogger(__name__)


def _init_sentry():
    sentry_sdk.init(
        dsn=os.environ.get("SENTRY_DSN", ""),
        environment=os.environ.get("SENTRY_ENV", "development"),
        max_breadcrumbs=50,
    )


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    init_diagnostics()
    _init_sentry()

    try:
        params = json.loads(args[0]) if args else {}
        if not isinstance(params, dict):
            raise ValueError("params must be a JSON object")
        manager = manager_from_params(params)
    except (ValueError, TypeError) as e:
        # JSONDecodeError and unknown equation forms are ValueErrors
        logger.error("Rejected params: %s", e, extra={"effect_id": EFFECT_ID})
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    shift_type = manager.shift_type.name
    step = manager.describe()
    logger.info(
        "Step description %r",
        step,
        extra={"effect_id": EFFECT_ID, "shift_type": shift_type},
    )
    print(f"SHIFT_TYPE={shift_type}", flush=True)
    print(f"STEP={step}", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
