#!/usr/bin/env python3
"""
Derive palettes from a seed color or from an image.

Color harmonies rotate hue and adjust chroma in CIE LCH so that every shift is
perceptually even. Image palettes sample the image, drop near-transparent
pixels and cluster what remains in LAB with k-means.
"""

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from color_space import (
    hex_to_lch, lch_to_hex, lab_to_hex, normalize_hex, rgb_to_hex, rgb_to_lab,
)
from palette_errors import NoColorsExtracted

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

PALETTE_SIZE = 5
LCH_STEP = 18  # L (or C) units per darken/brighten/saturate step

MODES = ('monochromatic', 'analogous', 'complementary', 'triadic', 'tetradic', 'random')

# Image sampling
MAX_SAMPLES = 2000
MIN_ALPHA = 50  # pixels with alpha <= this are ignored
KMEANS_SEED = 0

# Image size limits (prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000
MAX_IMAGE_DIMENSION = 10_000


@dataclass(frozen=True)
class GeneratedPalette:
    """A generation result: default name plus ordered hex colors."""
    name: str
    colors: tuple[str, ...]


# =============================================================================
# LCH helpers
# =============================================================================

def shift_hue(lch: np.ndarray, degrees: float) -> np.ndarray:
    """Rotate hue by the given degrees, modulo 360. Achromatic colors are unchanged."""
    L, c, h = lch
    if np.isnan(h):
        return np.array([L, c, h])
    return np.array([L, c, (h + degrees) % 360])


def saturate(lch: np.ndarray, amount: float = 1) -> np.ndarray:
    L, c, h = lch
    return np.array([L, max(0.0, c + LCH_STEP * amount), h])


def darken(lch: np.ndarray, amount: float = 1) -> np.ndarray:
    L, c, h = lch
    return np.array([L - LCH_STEP * amount, c, h])


def brighten(lch: np.ndarray, amount: float = 1) -> np.ndarray:
    return darken(lch, -amount)


def interpolate_lch(start: np.ndarray, end: np.ndarray, t: float) -> np.ndarray:
    """
    Interpolate between two LCH colors along the shortest hue arc.

    If only one side has a hue, that hue is held; if neither does the
    result is achromatic.
    """
    h0, h1 = start[2], end[2]
    if not np.isnan(h0) and not np.isnan(h1):
        dh = h1 - h0
        if dh > 180:
            dh -= 360
        elif dh < -180:
            dh += 360
        hue = (h0 + t * dh) % 360
    elif not np.isnan(h0):
        hue = h0
    elif not np.isnan(h1):
        hue = h1
    else:
        hue = np.nan

    L = start[0] + t * (end[0] - start[0])
    c = start[1] + t * (end[1] - start[1])
    return np.array([L, c, hue])


def lch_scale(stops: list[np.ndarray], count: int) -> list[str]:
    """Sample `count` evenly spaced hex colors from a piecewise LCH gradient."""
    segments = len(stops) - 1
    colors = []
    for t in np.linspace(0.0, 1.0, count):
        pos = t * segments
        i = min(int(pos), segments - 1)
        colors.append(lch_to_hex(interpolate_lch(stops[i], stops[i + 1], pos - i)))
    return colors


# =============================================================================
# Seed-based generation
# =============================================================================

def palette_name(mode: str) -> str:
    return f"{mode.capitalize()} Palette"


def harmony_colors(seed: str, mode: str) -> list[str]:
    """
    Derive five hex colors from a seed for a non-random mode.

    Raises:
        InvalidColor: If the seed is not a valid color.
        ValueError: If the mode is unknown.
    """
    base = hex_to_lch(seed)

    if mode == 'monochromatic':
        return lch_scale([darken(base, 2), base, brighten(base, 2)], PALETTE_SIZE)

    if mode == 'analogous':
        derived = [base, shift_hue(base, 30), shift_hue(base, -30),
                   shift_hue(base, 60), shift_hue(base, -60)]
    elif mode == 'complementary':
        derived = [base, shift_hue(base, 180), shift_hue(base, 150),
                   shift_hue(base, -150), saturate(base, 2)]
    elif mode == 'triadic':
        derived = [base, shift_hue(base, 120), shift_hue(base, -120),
                   saturate(shift_hue(base, 120), 1), saturate(shift_hue(base, -120), 1)]
    elif mode == 'tetradic':
        derived = [base, shift_hue(base, 90), shift_hue(base, 180),
                   shift_hue(base, 270), saturate(base, 2)]
    else:
        raise ValueError(f"Unknown palette mode: {mode!r}")

    # The seed itself is passed through untouched rather than round-tripped
    return [normalize_hex(seed)] + [lch_to_hex(lch) for lch in derived[1:]]


def random_colors(rng: Optional[random.Random] = None) -> list[str]:
    rng = rng or random.Random()
    return [rgb_to_hex([rng.randrange(256) for _ in range(3)]) for _ in range(PALETTE_SIZE)]


def generate(seed: str, mode: str, rng: Optional[random.Random] = None) -> GeneratedPalette:
    """
    Generate a named palette from a seed color.

    The seed is ignored in `random` mode.
    """
    if mode == 'random':
        colors = random_colors(rng)
    else:
        colors = harmony_colors(seed, mode)
    logger.debug("Generated %s palette from %s: %s", mode, seed, colors)
    return GeneratedPalette(name=palette_name(mode), colors=tuple(colors))


# =============================================================================
# Image-based generation
# =============================================================================

def sample_pixels(pixels: np.ndarray) -> np.ndarray:
    """
    Sample an (h, w, 3|4) uint8 image at a stride capping the sample count
    near MAX_SAMPLES, keeping only opaque-enough pixels.

    Returns:
        (n, 3) array of RGB samples
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (h, w, 3|4) pixel array, got shape {pixels.shape}")

    flat = pixels.reshape(-1, pixels.shape[2])
    stride = max(1, len(flat) // MAX_SAMPLES)
    sampled = flat[::stride]

    if sampled.shape[1] == 4:
        sampled = sampled[sampled[:, 3] > MIN_ALPHA]

    return sampled[:, :3]


def cluster_colors(samples: np.ndarray, num_clusters: int = PALETTE_SIZE) -> list[str]:
    """
    Cluster RGB samples in LAB and return one hex per non-empty cluster.

    When there are no more distinct samples than clusters, each distinct
    sample is its own cluster.
    """
    from scipy.cluster.vq import kmeans2

    lab = rgb_to_lab(samples)
    distinct = np.unique(lab, axis=0)

    if len(distinct) <= num_clusters:
        return [lab_to_hex(c) for c in distinct]

    centroids, labels = kmeans2(lab, num_clusters, minit='++', seed=KMEANS_SEED)
    return [lab_to_hex(centroids[i]) for i in range(num_clusters) if np.any(labels == i)]


def generate_from_pixels(pixels: np.ndarray, name: str = 'Image Palette') -> GeneratedPalette:
    """
    Generate a palette from decoded image pixels.

    Raises:
        NoColorsExtracted: If no sufficiently opaque pixel was sampled.
    """
    samples = sample_pixels(pixels)
    if len(samples) == 0:
        raise NoColorsExtracted("Could not extract colors from this image")

    colors = cluster_colors(samples)
    logger.debug("Clustered %d samples into %d colors", len(samples), len(colors))
    return GeneratedPalette(name=name, colors=tuple(colors))


def load_image_pixels(image_path: str) -> np.ndarray:
    """
    Decode an image file into an (h, w, 4) RGBA array.

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If file is not a valid image or exceeds size limits
    """
    try:
        img = Image.open(image_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {image_path}")
    except Exception as e:
        raise ValueError(f"Could not open image: {e}")

    with img:
        width, height = img.size
        if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
            raise ValueError(
                f"Image dimensions {width}x{height} exceed maximum "
                f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
            )
        if width * height > MAX_IMAGE_PIXELS:
            raise ValueError(
                f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
            )
        return np.array(img.convert('RGBA'))


def image_palette_name(image_path: str) -> str:
    return f"{Path(image_path).name.split('.')[0]} Palette"


def generate_from_image(image_path: str) -> GeneratedPalette:
    """Generate a palette from an image file, named after the file."""
    pixels = load_image_pixels(image_path)
    return generate_from_pixels(pixels, name=image_palette_name(image_path))
