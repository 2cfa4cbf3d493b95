#!/usr/bin/env python3
"""
Export a palette as CSS, SCSS, JSON or a PNG swatch strip.

Every color gets a slot name "{palette}-{group}-{i}" (1-based, slugged)
shared by all text formats. The PNG is drawn from a `SwatchStrip`, a
vector description of the image that can also be written out as SVG.
"""

import io
import json
import logging
import re
from dataclasses import dataclass
from html import escape

from PIL import Image, ImageColor, ImageDraw, ImageFont

from palette_errors import EmptyPaletteExport
from palette_model import Palette

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

SWATCH_SIZE = 150
SWATCH_PADDING = 20
LABEL_BAND = 40  # extra height below the swatches for hex labels
CORNER_RADIUS = 8
LABEL_FONT_SIZE = 14
LABEL_COLOR = '#333333'
BACKGROUND_COLOR = '#ffffff'


# =============================================================================
# Slot names
# =============================================================================

def slugify(name: str) -> str:
    """Trim, turn whitespace runs into hyphens and lower-case."""
    return re.sub(r'\s+', '-', name.strip()).lower()


def palette_slug(palette: Palette) -> str:
    return slugify(palette.name) or 'palette'


def color_slots(palette: Palette) -> list[tuple[str, str]]:
    """
    (slot name, hex) for every color in document order.

    Raises:
        EmptyPaletteExport: If the palette has no colors.
    """
    if palette.total_colors() == 0:
        raise EmptyPaletteExport("Cannot export an empty palette")

    prefix = palette_slug(palette)
    slots = []
    for group in palette.groups:
        group_slug = slugify(group.name)
        for i, color in enumerate(group.colors, 1):
            slots.append((f"{prefix}-{group_slug}-{i}", color.hex))
    return slots


# =============================================================================
# Text export
# =============================================================================

@dataclass
class ExportBundle:
    css: str
    scss: str
    json: str


def export_css(palette: Palette) -> str:
    lines = ''.join(f"  --{slot}: {hex_value};\n" for slot, hex_value in color_slots(palette))
    return f":root {{\n{lines}}}"


def export_scss(palette: Palette) -> str:
    return ''.join(f"${slot}: {hex_value};\n" for slot, hex_value in color_slots(palette))


def export_json(palette: Palette) -> str:
    return json.dumps({'colors': dict(color_slots(palette))}, indent=2)


def export_all(palette: Palette) -> ExportBundle:
    return ExportBundle(
        css=export_css(palette),
        scss=export_scss(palette),
        json=export_json(palette),
    )


# =============================================================================
# Image export
# =============================================================================

@dataclass(frozen=True)
class Swatch:
    x: int
    y: int
    size: int
    hex: str
    label: str
    label_x: float  # horizontal center of the label
    label_y: int  # label baseline


@dataclass
class SwatchStrip:
    width: int
    height: int
    swatches: list[Swatch]


def layout_swatch_strip(colors: list[str]) -> SwatchStrip:
    """
    Lay out a horizontal strip of square swatches with hex labels beneath.

    Raises:
        EmptyPaletteExport: If there are no colors.
    """
    if not colors:
        raise EmptyPaletteExport("Please create a palette first")

    count = len(colors)
    width = count * SWATCH_SIZE + (count + 1) * SWATCH_PADDING
    height = SWATCH_SIZE + 2 * SWATCH_PADDING + LABEL_BAND

    swatches = []
    for i, hex_value in enumerate(colors):
        x = SWATCH_PADDING + i * (SWATCH_SIZE + SWATCH_PADDING)
        swatches.append(Swatch(
            x=x,
            y=SWATCH_PADDING,
            size=SWATCH_SIZE,
            hex=hex_value,
            label=hex_value.upper(),
            label_x=x + SWATCH_SIZE / 2,
            label_y=height - SWATCH_PADDING,
        ))

    return SwatchStrip(width=width, height=height, swatches=swatches)


def strip_to_svg(strip: SwatchStrip) -> str:
    parts = [
        f'<svg width="{strip.width}" height="{strip.height}" xmlns="http://www.w3.org/2000/svg" '
        f'style="background-color: {BACKGROUND_COLOR}; font-family: sans-serif;">'
    ]
    for s in strip.swatches:
        parts.append(
            f'<rect x="{s.x}" y="{s.y}" width="{s.size}" height="{s.size}" '
            f'fill="{s.hex}" rx="{CORNER_RADIUS}"/>'
        )
        parts.append(
            f'<text x="{s.label_x:g}" y="{s.label_y}" text-anchor="middle" '
            f'font-size="{LABEL_FONT_SIZE}" fill="{LABEL_COLOR}">{escape(s.label)}</text>'
        )
    parts.append('</svg>')
    return ''.join(parts)


def rasterize_strip(strip: SwatchStrip) -> Image.Image:
    img = Image.new('RGB', (strip.width, strip.height), ImageColor.getrgb(BACKGROUND_COLOR))
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default(size=LABEL_FONT_SIZE)

    for s in strip.swatches:
        draw.rounded_rectangle(
            [s.x, s.y, s.x + s.size - 1, s.y + s.size - 1],
            radius=CORNER_RADIUS,
            fill=ImageColor.getrgb(s.hex),
        )
        # Middle-baseline anchor matches text-anchor="middle" in the SVG
        draw.text((s.label_x, s.label_y), s.label, fill=ImageColor.getrgb(LABEL_COLOR),
                  font=font, anchor='ms')

    return img


def render_png(palette: Palette) -> bytes:
    """
    Render the palette's colors, in group order, as a PNG swatch strip.

    Raises:
        EmptyPaletteExport: If the palette has no colors.
    """
    strip = layout_swatch_strip([c.hex for c in palette.all_colors()])
    buffer = io.BytesIO()
    rasterize_strip(strip).save(buffer, format='PNG')
    logger.debug("Rendered %dx%d swatch strip", strip.width, strip.height)
    return buffer.getvalue()


def png_filename(palette: Palette) -> str:
    stem = re.sub(r'\s+', '-', palette.name) or 'palette'
    return f"{stem}.png"
