"""
Tick-driven playback for PyStrip.

This package buffers pushed data and drives the scroll cycle of a chart from
externally delivered ticks.
"""

from pystrip.playback.animation import AnimationCycle
from pystrip.playback.chart import Frame, Renderer, StripChart, configure_logging
from pystrip.playback.queue import PlaybackQueue

__all__ = [
    "AnimationCycle",
    "Frame",
    "PlaybackQueue",
    "Renderer",
    "StripChart",
    "configure_logging",
]
