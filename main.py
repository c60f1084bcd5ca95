from __future__ import annotations

import sys


def _run_cli(argv: list[str]) -> int:
    from inlplot.cli import main as cli_main

    return cli_main(argv)


def _run_gui() -> int:
    from inl_qt.main import main as gui_main

    return gui_main()


if __name__ == "__main__":
    # With arguments behave like the `inlplot` command; without, open the window.
    args = sys.argv[1:]
    raise SystemExit(_run_cli(args) if args else _run_gui())
