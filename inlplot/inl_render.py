from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
from matplotlib import dates as mdates
from matplotlib import rcParams
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from inlplot.inl_extract import extract_data
from inlplot.inl_io import read_data
from inlplot.inl_model import (
    DEFAULT_LEGEND_LOCATION,
    ConfigurationError,
    DualAxisRequest,
    PlotOptions,
    PlotRequest,
    PlotResult,
    RawDataset,
    SingleAxisRequest,
)


_logger = logging.getLogger(__name__)

# MATLAB-style compass names mapped to matplotlib locations.
_COMPASS_LOCATIONS: Dict[str, str] = {
    "best": "best",
    "north": "upper center",
    "south": "lower center",
    "east": "center right",
    "west": "center left",
    "northeast": "upper right",
    "northwest": "upper left",
    "southeast": "lower right",
    "southwest": "lower left",
}

_MPL_LOCATIONS = (
    "best",
    "upper right",
    "upper left",
    "lower left",
    "lower right",
    "right",
    "center left",
    "center right",
    "lower center",
    "upper center",
    "center",
)

# Anchor points just outside the axes for each inside location.
_OUTSIDE_ANCHORS: Dict[str, tuple] = {
    "upper center": ("lower center", (0.5, 1.02)),
    "lower center": ("upper center", (0.5, -0.12)),
    "center right": ("center left", (1.02, 0.5)),
    "center left": ("center right", (-0.08, 0.5)),
    "upper right": ("upper left", (1.02, 1.0)),
    "upper left": ("upper right", (-0.08, 1.0)),
    "lower right": ("lower left", (1.02, 0.0)),
    "lower left": ("lower right", (-0.08, 0.0)),
}

_MIRROR = {"left": "right", "right": "left"}

LEFT_LINESTYLE = "-"
RIGHT_LINESTYLE = "--"


def resolve_location(location: str) -> tuple[str, bool]:
    """Translate a legend keyword into (matplotlib location, outside flag)."""
    key = str(location or DEFAULT_LEGEND_LOCATION).strip().lower().replace("_", " ")
    if key in ("best-outside", "best outside", "bestoutside"):
        return "best", True

    outside = False
    for suffix in ("-outside", " outside", "outside"):
        if key.endswith(suffix):
            key = key[: -len(suffix)].strip()
            outside = True
            break

    if key in _COMPASS_LOCATIONS:
        return _COMPASS_LOCATIONS[key], outside
    if key in _MPL_LOCATIONS:
        return ("center right" if key == "right" else key), outside
    raise ConfigurationError(f"Unknown legend location '{location}'.")


def _mirror(loc: str) -> str:
    parts = loc.split()
    return " ".join(_MIRROR.get(p, p) for p in parts)


def _legend_kwargs(location: str, *, side: str, dual: bool) -> Dict[str, Any]:
    loc, outside = resolve_location(location)
    if side == "right":
        loc = _mirror(loc) if loc != "best" else loc

    if not outside:
        if dual and loc == "best":
            loc = "upper left" if side == "left" else "upper right"
        return {"loc": loc}

    if loc == "best":
        if dual:
            # Above the axes, one legend per side.
            if side == "left":
                return {"loc": "lower left", "bbox_to_anchor": (0.0, 1.02)}
            return {"loc": "lower right", "bbox_to_anchor": (1.0, 1.02)}
        return {"loc": "upper left", "bbox_to_anchor": (1.02, 1.0)}

    anchor_loc, anchor = _OUTSIDE_ANCHORS.get(loc, ("upper left", (1.02, 1.0)))
    if dual and side == "right" and anchor[0] > 1.0:
        # Clear the right-hand tick labels.
        anchor = (anchor[0] + 0.08, anchor[1])
    return {"loc": anchor_loc, "bbox_to_anchor": anchor}


def _format_elapsed(days: float, _pos: Any = None) -> str:
    total = int(round(float(days) * 86400.0))
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{sign}{hours}:{minutes:02d}:{seconds:02d}"


def _format_time_axis(ax: Axes, *, overlay: bool) -> None:
    if overlay:
        ax.xaxis.set_major_formatter(FuncFormatter(_format_elapsed))
        ax.set_xlabel("Elapsed time")
        return
    locator = mdates.AutoDateLocator()
    ax.xaxis.set_major_locator(locator)
    ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
    ax.set_xlabel("Time")


def _plot_series(ax: Axes, x: np.ndarray, y: np.ndarray, labels: List[str], *, linestyle: str) -> list:
    if not labels:
        return []
    return ax.plot(x, y, linestyle=linestyle)


def _normalize_inputs(inputs: Any, *, raw: bool) -> List[Any]:
    if isinstance(inputs, (str, os.PathLike, RawDataset)):
        items = [inputs]
    elif isinstance(inputs, np.ndarray) and inputs.ndim == 2:
        items = [inputs]
    else:
        items = list(inputs)

    if raw:
        out = []
        for i, item in enumerate(items):
            if isinstance(item, (str, os.PathLike)):
                raise ConfigurationError("raw=True expects loaded datasets, got a path.")
            try:
                out.append(RawDataset.from_grid(item, name=f"dataset {i + 1}"))
            except ValueError as exc:
                raise ConfigurationError(f"Input {i + 1} is not a raw data grid: {exc}") from exc
        return out

    for item in items:
        if not isinstance(item, (str, os.PathLike)):
            raise ConfigurationError("Inputs must be file paths unless raw=True.")
    return items


def build_plot_request(datasets: Sequence[RawDataset], options: PlotOptions) -> PlotRequest:
    ext = options.extract_options()
    left = extract_data(datasets, options.left, ext)
    if options.right:
        right = extract_data(datasets, options.right, ext)
        return DualAxisRequest(left=left, right=right, overlay=options.overlay, location=options.location)
    return SingleAxisRequest(left=left, overlay=options.overlay, location=options.location)


def render_request(request: PlotRequest, figure: Optional[Figure] = None) -> PlotResult:
    """Draw a plot request on ``figure`` (cleared) or on a new figure."""
    if figure is None:
        figure = Figure(figsize=(11, 6))
    else:
        figure.clear()

    dual = isinstance(request, DualAxisRequest)
    ax = figure.add_subplot(111)
    axes = [ax]

    left = request.left
    _plot_series(ax, left.x, left.y, left.labels, linestyle=LEFT_LINESTYLE)
    _format_time_axis(ax, overlay=request.overlay)
    if left.labels:
        ax.legend(left.labels, **_legend_kwargs(request.location, side="left", dual=dual))

    if dual:
        ax2 = ax.twinx()
        axes.append(ax2)
        right = request.right
        # Continue the colour cycle so right-hand lines are distinguishable.
        colors = list(rcParams["axes.prop_cycle"].by_key().get("color", []))
        if colors:
            shift = left.n_series % len(colors)
            ax2.set_prop_cycle(color=colors[shift:] + colors[:shift])
        _plot_series(ax2, right.x, right.y, right.labels, linestyle=RIGHT_LINESTYLE)
        if right.labels:
            ax2.legend(right.labels, **_legend_kwargs(request.location, side="right", dual=True))

    ax.grid(True, alpha=0.25)
    return PlotResult(figure=figure, axes=axes, request=request, warnings=request.warnings)


def inl_plot(
    inputs: Union[str, os.PathLike, RawDataset, Sequence[Any]],
    *,
    left: Union[str, Sequence[str], None] = None,
    right: Union[str, Sequence[str], None] = None,
    overlay: bool = False,
    sort: bool = False,
    prefix: Union[str, Sequence[str], None] = None,
    hide_prefix: bool = False,
    location: str = DEFAULT_LEGEND_LOCATION,
    clear_figure: bool = False,
    raw: bool = False,
    figure: Optional[Figure] = None,
    sheet_name: Optional[str] = None,
) -> PlotResult:
    """Plot variables from INL data files against their logged time.

    ``inputs`` is a path, a list of paths or, with ``raw=True``, already
    loaded datasets. ``left`` names the variables for the left axis and is
    required; ``right`` adds a second, independently scaled axis.
    ``clear_figure`` redraws on ``figure`` instead of creating a new one.
    """
    options = PlotOptions(
        left=left,
        right=right,
        overlay=overlay,
        sort=sort,
        prefix=prefix,
        hide_prefix=hide_prefix,
        location=location,
        clear_figure=clear_figure,
        raw=raw,
    ).validate()
    resolve_location(options.location)

    items = _normalize_inputs(inputs, raw=options.raw)
    datasets = items if options.raw else read_data(items, sheet_name=sheet_name)

    request = build_plot_request(datasets, options)
    for event in request.warnings:
        _logger.debug("Plot warning: %s", event)

    target = figure if options.clear_figure else None
    return render_request(request, target)
