"""Effect container — isolates effect failures and blends the result."""

import logging
import math

import numpy as np
import sentry_sdk

logger = logging.getLogger(__name__)


def _capture_with_context(e: Exception, effect_id: str, extra: dict):
    """Report to Sentry, deduplicated per effect and exception type."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("effect_id", effect_id)
        scope.fingerprint = ["effect-crash", effect_id, type(e).__name__]
        scope.set_context("effect", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def _sanitize(params: dict) -> dict:
    # Dropped NaN/Inf params fall back to the effect default
    return {
        k: v
        for k, v in params.items()
        if not (isinstance(v, float) and (math.isnan(v) or math.isinf(v)))
    }


def _blend(dry: np.ndarray, wet: np.ndarray, weight) -> np.ndarray:
    return np.clip(
        dry.astype(np.float32) * (1.0 - weight) + wet.astype(np.float32) * weight,
        0,
        255,
    ).astype(np.uint8)


class EffectContainer:
    """Runs an effect's apply() and guarantees a usable frame comes back.

    A failing effect (for example a shift transform dividing by a zero
    coefficient) yields the input frame unchanged and records last_error.
    Optional ``_mix`` (0..1) and ``_mask`` (H, W float) params blend the
    result with the input.
    """

    def __init__(self, effect_fn, effect_id: str):
        self.effect_fn = effect_fn
        self.effect_id = effect_id
        self.last_error: Exception | None = None

    def _fail(self, e: Exception, stage: str, frame_index: int, extra: dict):
        self.last_error = e
        _capture_with_context(e, self.effect_id, extra)
        logger.error(
            "Effect %s %s failed on frame %d: %s",
            self.effect_id,
            stage,
            frame_index,
            type(e).__name__,
            extra={"effect_id": self.effect_id, "frame_index": frame_index},
        )
        logger.debug("Effect %s %s detail: %s", self.effect_id, stage, e)

    def process(
        self,
        frame: np.ndarray,
        params: dict,
        state_in: dict | None,
        *,
        frame_index: int,
        resolution: tuple[int, int],
    ) -> tuple[np.ndarray, dict | None]:
        self.last_error = None

        effect_params = _sanitize(params)
        mask = effect_params.pop("_mask", None)
        mix = effect_params.pop("_mix", 1.0)

        # Keys only; values may hold user paths
        sentry_ctx = {
            "frame_index": frame_index,
            "param_keys": list(effect_params.keys()),
            "resolution": resolution,
            "frame_shape": list(frame.shape),
        }

        try:
            wet_frame, state_out = self.effect_fn(
                frame,
                effect_params,
                state_in,
                frame_index=frame_index,
                resolution=resolution,
            )
        except Exception as e:
            self._fail(e, "apply", frame_index, sentry_ctx)
            return frame.copy(), state_in

        try:
            if not isinstance(wet_frame, np.ndarray):
                raise TypeError(
                    f"Effect returned {type(wet_frame).__name__}, expected ndarray"
                )
            if wet_frame.shape != frame.shape:
                raise ValueError(
                    f"Effect returned shape {wet_frame.shape}, expected {frame.shape}"
                )
            if wet_frame.dtype != np.uint8:
                wet_frame = np.clip(wet_frame, 0, 255).astype(np.uint8)
        except (TypeError, ValueError) as e:
            self._fail(e, "output", frame_index, sentry_ctx)
            return frame.copy(), state_in

        try:
            output = _blend(frame, wet_frame, mix) if mix < 1.0 else wet_frame
            if mask is not None:
                output = _blend(frame, output, mask[:, :, np.newaxis])
        except Exception as e:
            self._fail(e, "mix/mask", frame_index, sentry_ctx)
            return frame.copy(), state_in

        return output, state_out
