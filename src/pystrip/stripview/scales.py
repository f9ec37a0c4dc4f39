from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from .context import ChartContext
from .series import AxisSide, Domains, WidgetType

ArrayOrScalar = Union[np.ndarray, float]


@dataclass(frozen=True)
class LinearScale:
    """
    Linear mapping from a value domain onto an output range.

    A degenerate domain (``domain[0] == domain[1]``) maps every value to the
    middle of the range.
    """

    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value: ArrayOrScalar) -> ArrayOrScalar:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        if span == 0:
            t = np.full_like(np.asarray(value, dtype=np.float64), 0.5)
        else:
            t = (np.asarray(value, dtype=np.float64) - d0) / span
        out = r0 + t * (r1 - r0)
        return float(out) if np.ndim(out) == 0 else out

    def invert(self, pixel: ArrayOrScalar) -> ArrayOrScalar:
        """Map a range value back into the domain."""
        d0, d1 = self.domain
        r0, r1 = self.range
        span = r1 - r0
        if span == 0:
            t = np.full_like(np.asarray(pixel, dtype=np.float64), 0.5)
        else:
            t = (np.asarray(pixel, dtype=np.float64) - r0) / span
        out = d0 + t * (d1 - d0)
        return float(out) if np.ndim(out) == 0 else out


@dataclass(frozen=True)
class ScaleSet:
    """
    The five mappings the renderer needs.

    ``left``/``right`` map values to layout space for axis ticks, ``bottom``
    maps point indices to the horizontal layout span and ``left_y``/``right_y``
    map values to render-surface pixels (layout range times pixel ratio).
    """

    left: LinearScale
    right: LinearScale
    bottom: LinearScale
    left_y: LinearScale
    right_y: LinearScale

    def for_side(self, side: AxisSide) -> LinearScale:
        """Render-surface scale of an axis side."""
        return self.left_y if side is AxisSide.LEFT else self.right_y

    @classmethod
    def build(
        cls,
        domains: Domains,
        context: ChartContext,
        widget_type: WidgetType = WidgetType.TIME_SERIES,
    ) -> "ScaleSet":
        """
        Build scales from the current domains and host geometry.

        Parameters
        ----------
        domains : Domains
            Current left and right domains.
        context : ChartContext
            Source of inner size, pixel ratio and view size. Read at call time.
        widget_type : WidgetType, default=WidgetType.TIME_SERIES
            Vertical ranges run bottom-up for horizontal time series and
            top-down for vertical ones.

        Returns
        -------
        ScaleSet
            Freshly built scales.
        """
        height = context.inner_height
        if widget_type is WidgetType.TIME_SERIES_VERTICAL:
            value_range = (0.0, height)
        else:
            value_range = (height, 0.0)
        ratio = context.pixel_ratio
        pixel_range = (value_range[0] * ratio, value_range[1] * ratio)

        left_domain = (domains.left.min, domains.left.max)
        right_domain = (domains.right.min, domains.right.max)
        return cls(
            left=LinearScale(left_domain, value_range),
            right=LinearScale(right_domain, value_range),
            bottom=LinearScale((0.0, float(context.view_size - 1)), (0.0, context.inner_width)),
            left_y=LinearScale(left_domain, pixel_range),
            right_y=LinearScale(right_domain, pixel_range),
        )
