"""
Grid sampler: reduce a grayscale image to a filled/empty cell grid.

The image is split into blocks of x_step by y_step pixels. Each block's mean
brightness is compared against the threshold; brighter blocks are filled
unless the board is inverted. Partial blocks at the right and bottom edges
are dropped.
"""
from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np

from yaya.config import DEFAULT_THRESHOLD, BoardConfigError


# Rec. 709 luma weights in OpenCV's B, G, R channel order
_LUMA_BGR = (np.float32(0.0722), np.float32(0.7152), np.float32(0.2126))


def to_luma(img: np.ndarray) -> np.ndarray:
    """
    Reduce a decoded image to an HxW uint8 luma array.

    Gray input is kept as is. Color input uses Rec. 709 weights in float32,
    truncated to an integer; alpha is ignored. 16-bit input is scaled to 8 bits.
    """
    if img.dtype == np.uint16:
        img = np.round(img.astype(np.float32) / 257.0).astype(np.uint8)
    elif img.dtype != np.uint8:
        raise ValueError(f"Unsupported pixel type: {img.dtype}")

    if img.ndim == 2:
        return img
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ValueError(f"Unsupported image shape: {img.shape}")

    wb, wg, wr = _LUMA_BGR
    b = img[:, :, 0].astype(np.float32)
    g = img[:, :, 1].astype(np.float32)
    r = img[:, :, 2].astype(np.float32)
    luma = wr * r + wg * g + wb * b
    return np.clip(luma, 0, 255).astype(np.uint8)


def load_grayscale(img_path: Path) -> np.ndarray:
    """Decode an image file to an HxW uint8 array (luma for color input)."""
    img = cv2.imread(str(img_path), cv2.IMREAD_UNCHANGED)
    if img is None:
        raise FileNotFoundError(f"Cannot read: {img_path}")
    return to_luma(img)


def local_average(
    gray: np.ndarray, x_start: int, y_start: int, width: int, height: int,
) -> int:
    """Mean brightness of a block, truncated to an integer."""
    if width < 1 or height < 1:
        raise ValueError(f"Block size must be positive, got {width}x{height}")
    h, w = gray.shape[:2]
    if x_start < 0 or y_start < 0 or x_start + width > w or y_start + height > h:
        raise ValueError(
            f"Block {width}x{height} at ({x_start},{y_start}) is outside the {w}x{h} image"
        )
    block = gray[y_start:y_start + height, x_start:x_start + width]
    total = int(block.sum(dtype=np.int64))
    return total // (width * height)


def grid_shape(gray: np.ndarray, x_step: int, y_step: int) -> tuple[int, int]:
    """(y_steps, x_steps) for the given step sizes."""
    h, w = gray.shape[:2]
    return h // y_step, w // x_step


def block_averages(gray: np.ndarray, x_step: int, y_step: int) -> np.ndarray:
    """Per-block integer means as a (y_steps, x_steps) uint8 array."""
    y_steps, x_steps = grid_shape(gray, x_step, y_step)
    crop = gray[:y_steps * y_step, :x_steps * x_step].astype(np.int64)
    blocks = crop.reshape(y_steps, y_step, x_steps, x_step)
    sums = blocks.sum(axis=(1, 3))
    return (sums // (x_step * y_step)).astype(np.uint8)


def sample_grid(
    gray: np.ndarray,
    x_step: int,
    y_step: int,
    threshold: int = DEFAULT_THRESHOLD,
    invert: bool = False,
) -> np.ndarray:
    """
    Build the cell grid, indexed grid[row, col]. True means filled.

    A cell is filled when (block average > threshold) XOR invert. The returned
    array is read-only.
    """
    if gray.ndim != 2:
        raise ValueError(f"Expected a 2-D grayscale image, got shape {gray.shape}")
    if x_step < 1 or y_step < 1:
        raise BoardConfigError(f"Step sizes must be at least 1, got {x_step}x{y_step}")
    if not 0 <= threshold <= 255:
        raise BoardConfigError(f"Threshold must be in 0..255, got {threshold}")

    averages = block_averages(gray, x_step, y_step)
    grid = (averages > threshold) != bool(invert)
    grid.setflags(write=False)
    return grid


def render_preview(grid: np.ndarray, cell_px: int = 8) -> np.ndarray:
    """Draw the grid as black (filled) on white, with light cell lines."""
    rows, cols = grid.shape
    img = np.full((rows * cell_px + 1, cols * cell_px + 1), 255, np.uint8)
    for r in range(rows):
        for c in range(cols):
            if grid[r, c]:
                y, x = r * cell_px, c * cell_px
                img[y:y + cell_px, x:x + cell_px] = 0
    img[::cell_px, :] = np.minimum(img[::cell_px, :], 192)
    img[:, ::cell_px] = np.minimum(img[:, ::cell_px], 192)
    return img
