from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from numba import njit

from .errors import LayerMismatchError
from .series import AxisSide, ChartType, DataPoint, Domain, Domains, Legend


@njit
def _fold_min_max_numba(
    values: np.ndarray, tails: np.ndarray, stacked: np.ndarray
) -> Tuple[float, float, bool]:
    """
    Numba-optimized min/max fold over a layers x points matrix.

    Parameters
    ----------
    values : np.ndarray
        2D float64 array of y values, NaN where the point is absent.
    tails : np.ndarray
        2D float64 array of bubble tail values, NaN where absent or unused.
    stacked : np.ndarray
        1D bool array, True for layers drawn as stacked bars.

    Returns
    -------
    Tuple[float, float, bool]
        Running min, running max and whether any numeric value was seen.
    """
    lo = np.inf
    hi = -np.inf
    seen = False
    n_layers = values.shape[0]
    n_points = values.shape[1]

    for i in range(n_points):
        positive_sum = 0.0
        negative_sum = 0.0
        has_bar = False

        for k in range(n_layers):
            y = values[k, i]
            if np.isnan(y):
                continue
            seen = True
            if stacked[k]:
                if y > 0:
                    positive_sum += y
                else:
                    negative_sum += y
                has_bar = True
            else:
                tail = tails[k, i]
                if not np.isnan(tail):
                    lo = min(lo, tail)
                    hi = max(hi, tail)
                lo = min(lo, y)
                hi = max(hi, y)

        # Bars stack, so the domain has to bound the stacked totals
        if has_bar:
            lo = min(lo, negative_sum)
            hi = max(hi, positive_sum)

    return lo, hi, seen


def _point_at(layer: Sequence[Optional[DataPoint]], index: int) -> Optional[DataPoint]:
    return layer[index] if index < len(layer) else None


def find_min_and_max(
    layered_points: Sequence[Sequence[Optional[DataPoint]]],
    legends: Sequence[Legend],
    layer_indices: Sequence[int],
) -> Domain:
    """
    Compute the value domain of a subset of layers.

    Parameters
    ----------
    layered_points : Sequence[Sequence[Optional[DataPoint]]]
        Points per layer. The length of layer 0 sets the number of indices
        examined; missing or absent points are skipped.
    legends : Sequence[Legend]
        Legend of every layer, same order as ``layered_points``.
    layer_indices : Sequence[int]
        Layers to include. Inactive legends among them are ignored.

    Returns
    -------
    Domain
        ``Domain(0, 0)`` when no numeric value was found.
    """
    active = [i for i in layer_indices if legends[i].is_active]
    n_points = len(layered_points[0]) if len(layered_points) > 0 else 0
    if not active or n_points == 0:
        return Domain()

    values = np.full((len(active), n_points), np.nan, dtype=np.float64)
    tails = np.full((len(active), n_points), np.nan, dtype=np.float64)
    stacked = np.zeros(len(active), dtype=np.bool_)

    for row, layer_idx in enumerate(active):
        chart_type = legends[layer_idx].chart_type
        stacked[row] = chart_type is ChartType.STACKED_BAR
        layer = layered_points[layer_idx] if layer_idx < len(layered_points) else []
        for i in range(n_points):
            point = _point_at(layer, i)
            if point is None:
                continue
            y = point.value
            if y is None:
                continue
            values[row, i] = y
            if chart_type is ChartType.BUBBLE:
                tail = point.tail_value
                if tail is not None:
                    tails[row, i] = tail

    lo, hi, seen = _fold_min_max_numba(values, tails, stacked)
    if not seen:
        return Domain()
    return Domain(min=float(lo), max=float(hi))


def find_domains(
    layered_points: Sequence[Sequence[Optional[DataPoint]]],
    legends: Sequence[Legend],
) -> Domains:
    """Compute left and right axis domains of layered points."""
    left: List[int] = []
    right: List[int] = []
    for i, legend in enumerate(legends):
        if legend.side is AxisSide.LEFT:
            left.append(i)
        else:
            right.append(i)

    return Domains(
        left=find_min_and_max(layered_points, legends, left),
        right=find_min_and_max(layered_points, legends, right),
    )


def update_domains(existing: Domains, new: Domains) -> Tuple[Domains, bool]:
    """
    Widen ``existing`` so that it also covers ``new``.

    Returns
    -------
    Tuple[Domains, bool]
        The combined domains and whether any side widened. Domains never
        narrow here.
    """
    widened = not (existing.left.contains(new.left) and existing.right.contains(new.right))
    if not widened:
        return existing, False
    combined = Domains(left=existing.left.widen(new.left), right=existing.right.widen(new.right))
    logger.debug(f"Domains widened: {existing} -> {combined}")
    return combined, True


class DomainTracker:
    """Domain computation bound to the legends of one chart."""

    def __init__(self, legends: Sequence[Legend]):
        self.legends = list(legends)

    def check_layers(self, layered_points: Sequence[Sequence[DataPoint]]) -> None:
        if len(layered_points) != len(self.legends):
            raise LayerMismatchError(
                f"Got {len(layered_points)} layers for {len(self.legends)} legends"
            )

    def find_domains(self, layered_points: Sequence[Sequence[Optional[DataPoint]]]) -> Domains:
        return find_domains(layered_points, self.legends)

    def find_min_and_max(
        self,
        layered_points: Sequence[Sequence[Optional[DataPoint]]],
        layer_indices: Sequence[int],
    ) -> Domain:
        return find_min_and_max(layered_points, self.legends, layer_indices)

    @staticmethod
    def update_domains(existing: Domains, new: Domains) -> Tuple[Domains, bool]:
        return update_domains(existing, new)
