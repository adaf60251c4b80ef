"""Reporting utilities for NLayerNet."""

from .console import ConsoleReporter
from .metrics import JsonlSink, MetricsCapture
from .plots import PlotAdapter

__all__ = ["ConsoleReporter", "JsonlSink", "MetricsCapture", "PlotAdapter"]
