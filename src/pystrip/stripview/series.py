import math
import numbers
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

Timestamp = Union[datetime, float, int]

# Plain decimal notation: optional sign, digits with an optional fraction
_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)", re.ASCII)


class ChartType(Enum):
    """Chart types a legend can be drawn with."""

    STACKED_BAR = "bar"
    NON_STACKED_BAR = "bar2"
    BUBBLE = "bubble"
    LINE = "line"


class AxisSide(Enum):
    LEFT = "left"
    RIGHT = "right"


class WidgetType(Enum):
    TIME_SERIES = "TIME_SERIES"
    TIME_SERIES_VERTICAL = "TIME_SERIES_VERTICAL"


class UpdateDirection(Enum):
    APPEND = "append"
    PREPEND = "prepend"


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a raw point value to a float, or None if it is absent.

    Parameters
    ----------
    value : Any
        Raw value. ``None``, booleans, non-finite numbers and strings that are
        not plain decimal notation (e.g. ``"1e5"``, ``"inf"``) are absent.

    Returns
    -------
    Optional[float]
        The numeric value, or None.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, str):
        text = value.strip()
        if _DECIMAL.fullmatch(text) is None:
            return None
        number = float(text)
    elif isinstance(value, (numbers.Real, np.number)):
        if isinstance(value, np.complexfloating):
            return None
        number = float(value)
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_number(value: Any) -> bool:
    return to_number(value) is not None


@dataclass
class DataPoint:
    """A single sample of one layer."""

    time: Optional[Timestamp] = None
    y: Any = None
    tail_point: Any = None
    scaled_y: Optional[float] = None

    @property
    def value(self) -> Optional[float]:
        """Numeric ``y``, or None when the point is absent."""
        return to_number(self.y)

    @property
    def tail_value(self) -> Optional[float]:
        return to_number(self.tail_point)

    @classmethod
    def from_dict(cls, record: Optional[Mapping[str, Any]]) -> "DataPoint":
        if record is None:
            return cls()
        return cls(
            time=record.get("time"),
            y=record.get("y"),
            tail_point=record.get("tailPoint", record.get("tail_point")),
            scaled_y=record.get("scaledY", record.get("scaled_y")),
        )

    def copy(self) -> "DataPoint":
        return DataPoint(self.time, self.y, self.tail_point, self.scaled_y)


Layer = List[DataPoint]


def layers_from_records(
    records: Sequence[Sequence[Optional[Mapping[str, Any]]]],
) -> List[Layer]:
    """Build layers of DataPoint from nested lists of ``{"time", "y", ...}`` dicts."""
    return [
        [
            point if isinstance(point, DataPoint) else DataPoint.from_dict(point)
            for point in layer
        ]
        for layer in records
    ]


@dataclass
class LegendParameters:
    is_active: bool = False
    y_axis_side: AxisSide = AxisSide.LEFT
    chart_type: ChartType = ChartType.LINE


@dataclass
class Legend:
    id: Any
    parameters: LegendParameters = field(default_factory=LegendParameters)

    @property
    def is_active(self) -> bool:
        return bool(self.parameters.is_active)

    @property
    def side(self) -> AxisSide:
        return self.parameters.y_axis_side

    @property
    def chart_type(self) -> ChartType:
        return self.parameters.chart_type

    @classmethod
    def from_dict(cls, descriptor: Mapping[str, Any]) -> "Legend":
        """
        Parse a legend descriptor.

        Accepts the camelCase keys used by widget descriptors (``isActive``,
        ``yAxisSide``, ``chartType``) as well as snake_case keys. Missing chart
        types default to a line chart and missing sides to the left axis.
        """
        params = descriptor.get("parameters") or {}
        side = params.get("yAxisSide", params.get("y_axis_side", AxisSide.LEFT))
        chart_type = params.get("chartType", params.get("chart_type"))
        return cls(
            id=descriptor.get("id"),
            parameters=LegendParameters(
                is_active=bool(params.get("isActive", params.get("is_active", False))),
                y_axis_side=AxisSide(side),
                chart_type=ChartType(chart_type) if chart_type else ChartType.LINE,
            ),
        )


@dataclass
class Widget:
    legends: List[Legend]
    type: WidgetType = WidgetType.TIME_SERIES

    @property
    def is_vertical(self) -> bool:
        return self.type is WidgetType.TIME_SERIES_VERTICAL

    def required_axes(self) -> Dict[str, bool]:
        """Return which axes the legends of this widget need."""
        axes = {"left": False, "right": False, "bottom": True}
        for legend in self.legends:
            axes[legend.side.value] = True
        return axes

    @classmethod
    def from_dict(cls, descriptor: Mapping[str, Any]) -> "Widget":
        return cls(
            legends=[Legend.from_dict(item) for item in descriptor.get("legends", [])],
            type=WidgetType(descriptor.get("type", WidgetType.TIME_SERIES.value)),
        )


@dataclass(frozen=True)
class Domain:
    min: float = 0.0
    max: float = 0.0

    def widen(self, other: "Domain") -> "Domain":
        return Domain(min=min(self.min, other.min), max=max(self.max, other.max))

    def contains(self, other: "Domain") -> bool:
        return self.min <= other.min and self.max >= other.max


@dataclass(frozen=True)
class Domains:
    left: Domain = field(default_factory=Domain)
    right: Domain = field(default_factory=Domain)

    def for_side(self, side: AxisSide) -> Domain:
        return self.left if side is AxisSide.LEFT else self.right
