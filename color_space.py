"""
Color parsing and conversions between sRGB, CIE LAB, LCH and HSL.

LAB and LCH are the perceptually uniform spaces used for hue rotation,
interpolation and clustering. All array conversions work on (n, 3) arrays;
single colors can be passed as 1-D arrays.
"""

import colorsys

import numpy as np
from PIL import ImageColor

from palette_errors import InvalidColor


# =============================================================================
# Constants
# =============================================================================

# D65 reference white
XN, YN, ZN = 0.95047, 1.0, 1.08883

# CIE LAB nonlinearity
EPSILON = 0.008856
KAPPA = 903.3

# Chroma below this is treated as achromatic (hue undefined)
ACHROMATIC_CHROMA = 1e-4


# =============================================================================
# Parsing
# =============================================================================

def parse_color(value) -> tuple[int, int, int]:
    """
    Parse any CSS-style color representation into an (r, g, b) tuple.

    Accepts #rgb, #rrggbb, rgb(), hsl() and named colors. Alpha components
    are dropped.

    Raises:
        InvalidColor: If the value is not a recognised color.
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidColor(value)
    try:
        rgb = ImageColor.getrgb(value.strip())
    except ValueError:
        raise InvalidColor(value) from None
    return int(rgb[0]), int(rgb[1]), int(rgb[2])


def rgb_to_hex(rgb) -> str:
    r, g, b = (int(c) for c in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def normalize_hex(value) -> str:
    """Normalize any parseable color to lower-case #rrggbb."""
    return rgb_to_hex(parse_color(value))


# =============================================================================
# RGB <-> LAB
# =============================================================================

def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB array (0-255) to LAB color space."""
    rgb = np.asarray(rgb)
    if rgb.ndim == 1:
        rgb = rgb.reshape(1, -1)
    rgb_norm = rgb.astype(np.float64) / 255.0

    # Undo sRGB gamma
    mask = rgb_norm > 0.04045
    rgb_linear = np.where(mask, ((rgb_norm + 0.055) / 1.055) ** 2.4, rgb_norm / 12.92)

    r, g, b = rgb_linear[:, 0], rgb_linear[:, 1], rgb_linear[:, 2]
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    z = r * 0.0193339 + g * 0.1191920 + b * 0.9503041

    x, y, z = x / XN, y / YN, z / ZN

    fx = np.where(x > EPSILON, np.cbrt(x), (KAPPA * x + 16) / 116)
    fy = np.where(y > EPSILON, np.cbrt(y), (KAPPA * y + 16) / 116)
    fz = np.where(z > EPSILON, np.cbrt(z), (KAPPA * z + 16) / 116)

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b_val = 200 * (fy - fz)

    return np.column_stack([L, a, b_val])


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert LAB array to RGB (0-255), clipping out-of-gamut values."""
    lab = np.asarray(lab, dtype=np.float64)
    if lab.ndim == 1:
        lab = lab.reshape(1, -1)

    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]

    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    x = np.where(fx**3 > EPSILON, fx**3, (116 * fx - 16) / KAPPA)
    y = np.where(L > KAPPA * EPSILON, ((L + 16) / 116) ** 3, L / KAPPA)
    z = np.where(fz**3 > EPSILON, fz**3, (116 * fz - 16) / KAPPA)

    x = x * XN
    z = z * ZN

    r = x * 3.2404542 - y * 1.5371385 - z * 0.4985314
    g = -x * 0.9692660 + y * 1.8760108 + z * 0.0415560
    b_out = x * 0.0556434 - y * 0.2040259 + z * 1.0572252

    rgb_linear = np.column_stack([r, g, b_out])
    mask = rgb_linear > 0.0031308
    rgb = np.where(mask, 1.055 * np.power(np.clip(rgb_linear, 0, None), 1/2.4) - 0.055, 12.92 * rgb_linear)

    return np.clip(np.rint(rgb * 255), 0, 255).astype(np.uint8)


def lab_to_hex(lab: np.ndarray) -> str:
    """Convert a single LAB color to a hex string."""
    return rgb_to_hex(lab_to_rgb(lab)[0])


def hex_to_lab(value: str) -> np.ndarray:
    return rgb_to_lab(np.array(parse_color(value)))[0]


# =============================================================================
# LAB <-> LCH
# =============================================================================

def lab_to_lch(lab: np.ndarray) -> np.ndarray:
    """
    Convert LAB to LCH (hue in degrees, 0-360).

    Achromatic colors get a NaN hue so interpolation and hue rotation can
    tell "no hue" apart from red.
    """
    lab = np.asarray(lab, dtype=np.float64)
    single = lab.ndim == 1
    if single:
        lab = lab.reshape(1, -1)

    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]
    c = np.hypot(a, b)
    h = np.degrees(np.arctan2(b, a)) % 360
    h = np.where(c < ACHROMATIC_CHROMA, np.nan, h)

    lch = np.column_stack([L, c, h])
    return lch[0] if single else lch


def lch_to_lab(lch: np.ndarray) -> np.ndarray:
    """Convert LCH to LAB. A NaN hue is treated as 0 degrees."""
    lch = np.asarray(lch, dtype=np.float64)
    single = lch.ndim == 1
    if single:
        lch = lch.reshape(1, -1)

    L, c = lch[:, 0], lch[:, 1]
    h = np.radians(np.nan_to_num(lch[:, 2], nan=0.0))
    lab = np.column_stack([L, c * np.cos(h), c * np.sin(h)])
    return lab[0] if single else lab


def hex_to_lch(value: str) -> np.ndarray:
    return lab_to_lch(hex_to_lab(value))


def lch_to_hex(lch: np.ndarray) -> str:
    return lab_to_hex(lch_to_lab(lch))


# =============================================================================
# CSS renderings
# =============================================================================

def rgb_string(value: str) -> str:
    r, g, b = parse_color(value)
    return f"rgb({r},{g},{b})"


def hsl_string(value: str) -> str:
    r, g, b = parse_color(value)
    h, l, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return f"hsl({round(h * 360) % 360},{round(s * 100)}%,{round(l * 100)}%)"
