from __future__ import annotations
from typing import Tuple

from mockbatch.layout.geometry import PlacementResult, Rect, Size

SCALE_EPSILON = 0.01  # percent


class PlacementPlanner:
    """Uniform fit-inside scale and center offset of an asset within a placeholder box.

    Pure: no memory between calls, never touches pixels.
    """

    @staticmethod
    def _check(placeholder: Rect, asset_size: Size):
        if placeholder.is_empty:
            raise ValueError(f"Placeholder must have positive size, got {placeholder.w}x{placeholder.h}")
        if asset_size.is_empty:
            raise ValueError(f"Asset must have positive size, got {asset_size.w}x{asset_size.h}")

    @staticmethod
    def plan_scale(placeholder: Rect, asset_size: Size) -> float:
        PlacementPlanner._check(placeholder, asset_size)
        return min(placeholder.w / asset_size.w, placeholder.h / asset_size.h) * 100.0

    @staticmethod
    def is_noop_scale(scale_percent: float, epsilon: float = SCALE_EPSILON) -> bool:
        return abs(scale_percent - 100.0) <= epsilon

    @staticmethod
    def plan_offset(placeholder: Rect, after_bounds: Rect) -> Tuple[float, float]:
        pcx, pcy = placeholder.center
        acx, acy = after_bounds.center
        return pcx - acx, pcy - acy

    @staticmethod
    def plan(placeholder: Rect, asset_size: Size, current_bounds: Rect,
             epsilon: float = SCALE_EPSILON) -> PlacementResult:
        """Predict the placement for an asset freshly reset to natural scale.

        The offset is computed from ``current_bounds`` scaled about its center;
        callers that apply the scale on a real document should re-measure and
        use :meth:`plan_offset` instead (see :func:`fit_and_center`).
        """
        scale = PlacementPlanner.plan_scale(placeholder, asset_size)
        if current_bounds.is_empty:
            raise ValueError("Current asset bounds are empty; reset the asset before planning")
        needs_scale = not PlacementPlanner.is_noop_scale(scale, epsilon)
        after = current_bounds.scaled_about_center(scale) if needs_scale else current_bounds
        dx, dy = PlacementPlanner.plan_offset(placeholder, after)
        return PlacementResult(scale, dx, dy, needs_scale)


def fit_and_center(doc, layer, placeholder: Rect, asset_size: Size,
                   epsilon: float = SCALE_EPSILON) -> PlacementResult:
    """Reset, scale to fit inside ``placeholder``, re-measure and center.

    Returns what was actually applied to the layer.
    """
    doc.reset_transform(layer)

    scale = PlacementPlanner.plan_scale(placeholder, asset_size)
    needs_scale = not PlacementPlanner.is_noop_scale(scale, epsilon)
    if needs_scale:
        doc.scale_layer(layer, scale)

    # Host rounds to whole pixels, so measure instead of predicting
    after = doc.bounding_box(layer, excluding_effects=True)
    dx, dy = PlacementPlanner.plan_offset(placeholder, after)
    if dx != 0 or dy != 0:
        doc.translate_layer(layer, dx, dy)
    return PlacementResult(scale, dx, dy, needs_scale)
