from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from inlplot.inl_model import DEFAULT_LEGEND_LOCATION, ConfigurationError, PlotOptions


_logger = logging.getLogger("inlplot")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inlplot",
        description="Plot INL instrumentation variables against logged time.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="CSV or Excel data files")
    parser.add_argument("--left", nargs="+", default=[], help="Variables for the left-hand axis (required)")
    parser.add_argument("--right", nargs="+", default=[], help="Variables for the right-hand axis")
    parser.add_argument("--overlay", action="store_true", help="Start every file at time zero")
    parser.add_argument("--sort", action="store_true", help="Sort samples by timestamp")
    parser.add_argument("--prefix", nargs="+", default=[], help="Legend prefix per file")
    parser.add_argument("--hide-prefix", action="store_true", help="Never prefix legend entries")
    parser.add_argument("--location", default=DEFAULT_LEGEND_LOCATION, help="Legend location keyword")
    parser.add_argument("--sheet", default=None, help="Workbook sheet to read (default: first)")
    parser.add_argument("--save", type=Path, default=None, help="Write the figure to this image file instead of showing it")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def _init_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("matplotlib").setLevel(logging.WARNING)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _init_logging(args.log_level)

    try:
        PlotOptions(left=args.left).validate()
    except ConfigurationError as exc:
        parser.error(str(exc))

    # Imported late so --help stays fast.
    from inlplot.inl_render import inl_plot

    figure = None
    if args.save is None:
        import matplotlib.pyplot as plt

        figure = plt.figure(figsize=(11, 6))

    files: List[str] = [str(p) for p in args.files]
    try:
        result = inl_plot(
            files,
            left=args.left,
            right=args.right,
            overlay=args.overlay,
            sort=args.sort,
            prefix=args.prefix,
            hide_prefix=args.hide_prefix,
            location=args.location,
            clear_figure=figure is not None,
            figure=figure,
            sheet_name=args.sheet,
        )
    except ConfigurationError as exc:
        parser.error(str(exc))
    except (OSError, ValueError) as exc:
        _logger.error("%s", exc)
        return 1

    if result.warnings:
        _logger.info("%d requested variable/file pair(s) skipped", len(result.warnings))

    if args.save is not None:
        result.figure.savefig(str(args.save), bbox_inches="tight")
        _logger.info("Saved %s", args.save)
        return 0

    import matplotlib.pyplot as plt

    plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
