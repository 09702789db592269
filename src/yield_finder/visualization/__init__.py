"""Chart helpers for :mod:`yield_finder`."""

from .visualizer import Visualizer

__all__ = ["Visualizer"]
