import time
from datetime import datetime, timedelta, timezone

import numpy as np
from loguru import logger

from pystrip import ChartContext, StripChart, Widget, configure_logging
from pystrip.stripview import format_time_label

# --- User configuration dictionary ---
CONFIG = {
    "VIEW_SIZE": 20,  # nominal number of visible points
    "TIME_INTERVAL": 5,  # a time label every 5 points
    "CYCLE_LENGTH": 10,  # ticks per scroll cycle
    "MIN_VIEW_SIZE": 10,  # zoom-in floor
    "WIDTH": 900,
    "HEIGHT": 400,
    "PIXEL_RATIO": 2.0,
    "MODE": "realtime",  # "realtime" or "paging"
    "LOG_LEVEL": "INFO",  # logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    "TICK_SECONDS": 0.01,  # host tick period
    "N_BATCHES": 30,  # batches pushed by the fake producer
    "WIDGET": {
        "type": "TIME_SERIES",
        "legends": [
            {"id": "price", "parameters": {"isActive": True, "yAxisSide": "left", "chartType": "line"}},
            {"id": "buy", "parameters": {"isActive": True, "yAxisSide": "right", "chartType": "bar"}},
            {"id": "sell", "parameters": {"isActive": True, "yAxisSide": "right", "chartType": "bar"}},
        ],
    },
}


class LogRenderer:
    """Stand-in renderer that reports frames and axis updates through the logger."""

    def __init__(self):
        self.frames = 0

    def draw(self, frame) -> None:
        self.frames += 1

    def update_axes(self, scales, domains) -> None:
        logger.info(f"Axes refreshed: left={domains.left}, right={domains.right}")


def make_batch(rng: np.random.Generator, t: datetime, price: float):
    buy = float(rng.integers(0, 10))
    sell = -float(rng.integers(0, 10))
    return [
        [{"time": t, "y": round(price, 2)}],
        [{"time": t, "y": buy}],
        [{"time": t, "y": sell}],
    ]


def main() -> None:
    """
    Stream synthetic data through a chart and report the final window.
    """
    configure_logging(CONFIG.get("LOG_LEVEL", "INFO"))

    rng = np.random.default_rng(0)
    widget = Widget.from_dict(CONFIG["WIDGET"])
    context = ChartContext.from_config(CONFIG)

    start = datetime.now(timezone.utc)
    price = 100.0
    history = [[], [], []]
    for i in range(CONFIG["VIEW_SIZE"]):
        price += rng.normal(0, 1)
        for layer, points in zip(history, make_batch(rng, start + timedelta(seconds=i), price)):
            layer.extend(points)

    renderer = LogRenderer()
    chart = StripChart(widget, history, context=context, renderer=renderer)

    for i in range(CONFIG["N_BATCHES"]):
        price += rng.normal(0, 1)
        t = start + timedelta(seconds=CONFIG["VIEW_SIZE"] + i)
        chart.push_data(make_batch(rng, t, price))

    while chart.queue or chart.animation.active:
        chart.handle_tick()
        time.sleep(CONFIG["TICK_SECONDS"])

    chart.zoom_out(10)
    labels = [label for label in chart.view_window.time_track.formatted() if label]
    logger.success(
        f"Rendered {renderer.frames} frames; window has {len(chart.view_window)} points, labels {labels}"
    )
    logger.info(f"First visible label: {format_time_label(chart.time_data[0])}")


if __name__ == "__main__":
    main()
