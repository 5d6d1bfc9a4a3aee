"""
Image to yayagram converter: picture -> text puzzle board.

Usage:
    img2yaya photo.png                   -> board on stdout, 16 columns
    img2yaya photo.png board.txt -w 20   -> 20 columns, square cells
    img2yaya photo.png -w 20 -h 10 -i    -> 20x10 cells, inverted
    img2yaya photo.png -c board.yaml     -> settings from a YAML file
    img2yaya photo.png --debug           -> diagnostics + debug_board.png

Requirements:
    pip install opencv-python numpy pyyaml
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import cv2
import numpy as np

from yaya import __version__
from yaya.board import write_board
from yaya.config import (
    DEFAULT_THRESHOLD,
    BoardConfigError,
    BoardSettings,
    load_board_config,
    merge_settings,
    parse_dimension,
    parse_threshold,
    resolve_step_sizes,
)
from yaya.sampler import load_grayscale, render_preview, sample_grid

_DEBUG = False


# ── helpers ─────────────────────────────────────────────────────────────────

def _dbg(msg: str) -> None:
    if _DEBUG:
        print(f"  [debug] {msg}", file=sys.stderr)


def _dbg_save(name: str, img: np.ndarray) -> None:
    if _DEBUG:
        cv2.imwrite(name, img)


def _dimension_arg(name: str):
    def parse(text: str) -> int:
        try:
            return parse_dimension(text, name=name)
        except BoardConfigError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from None
    parse.__name__ = name
    return parse


# ── main pipeline ──────────────────────────────────────────────────────────

def img2yaya(img_path: Path, settings: BoardSettings | None = None) -> np.ndarray:
    """Decode `img_path` and sample it into a cell grid."""
    settings = settings or BoardSettings()
    gray = load_grayscale(img_path)
    h, w = gray.shape
    _dbg(f"Image: {w}x{h}")

    x_step, y_step = resolve_step_sizes(w, h, settings.width, settings.height)
    _dbg(f"Step size: {x_step}x{y_step}")

    grid = sample_grid(gray, x_step, y_step, settings.threshold, settings.invert)
    rows, cols = grid.shape
    _dbg(f"Board: {cols}x{rows}, threshold={settings.threshold}, invert={settings.invert}")
    _dbg(f"Filled cells: {int(grid.sum())}/{grid.size}")
    if _DEBUG:
        _dbg_save("debug_board.png", render_preview(grid))
    return grid


def _build_parser() -> argparse.ArgumentParser:
    # -h is the board height, so help is long-form only
    ap = argparse.ArgumentParser(
        prog="img2yaya",
        description="Image to yayagram converter",
        add_help=False,
    )
    ap.add_argument("input", metavar="INPUT", help="input image file (PNG, JPG, ...)")
    ap.add_argument(
        "output", metavar="OUTPUT", nargs="?",
        help="output yayagram file; stdout when omitted",
    )
    ap.add_argument("-w", "--width", type=_dimension_arg("width"),
                    help="width of the yayagram board in cells")
    ap.add_argument("-h", "--height", type=_dimension_arg("height"),
                    help="height of the yayagram board in cells")
    ap.add_argument("-t", "--threshold", metavar="0-255",
                    help=f"8-bit grayscale threshold for filled cells (default {DEFAULT_THRESHOLD})")
    ap.add_argument("-i", "--invert", action="store_true", default=None,
                    help="invert filled and empty cells")
    ap.add_argument("-c", "--config", metavar="FILE", help="YAML settings file")
    ap.add_argument("--debug", action="store_true", help="print diagnostics and save debug_board.png")
    ap.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--help", action="help", help="show this help message and exit")
    return ap


def main(argv: list[str] | None = None) -> None:
    global _DEBUG
    args = _build_parser().parse_args(argv)

    _DEBUG = args.debug

    try:
        base = load_board_config(Path(args.config)) if args.config else BoardSettings()
        settings = merge_settings(
            base,
            width=args.width,
            height=args.height,
            threshold=None if args.threshold is None else parse_threshold(args.threshold),
            invert=args.invert,
        )
        _dbg(f"Settings: {settings}")

        path = Path(args.input)
        if not path.is_file():
            raise FileNotFoundError(f"{path} not found")
        grid = img2yaya(path, settings)

        if args.output:
            out = Path(args.output)
            with open(out, "wb") as f:
                write_board(grid, f)
            print(f"Wrote {out}", file=sys.stderr)
        else:
            write_board(grid, sys.stdout.buffer)
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
