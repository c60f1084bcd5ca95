"""Loading, alignment and dual-axis plotting of INL instrumentation logs.

The package is UI-free: models, IO, extraction and matplotlib rendering can be
imported and tested without Qt. The GUI lives in ``inl_qt``.
"""

from __future__ import annotations

from inlplot.inl_extract import extract_data, extract_variable, pack, parse_timestamps
from inlplot.inl_io import read_data, read_raw
from inlplot.inl_model import (
    ConfigurationError,
    ExtractionResult,
    ExtractionWarning,
    ExtractOptions,
    MalformedDataError,
    PlotOptions,
    RawDataset,
)
from inlplot.inl_render import inl_plot

__all__ = [
    "ConfigurationError",
    "ExtractOptions",
    "ExtractionResult",
    "ExtractionWarning",
    "MalformedDataError",
    "PlotOptions",
    "RawDataset",
    "extract_data",
    "extract_variable",
    "inl_plot",
    "pack",
    "parse_timestamps",
    "read_data",
    "read_raw",
]
