"""
WCAG contrast between palette colors and black/white text.
"""

from color_space import parse_color

WCAG_AA_NORMAL = 4.5
WCAG_AA_LARGE = 3.0
WCAG_AAA_NORMAL = 7.0


def relative_luminance(rgb) -> float:
    """WCAG relative luminance of an (r, g, b) tuple in 0-255."""
    def linearize(channel):
        c = channel / 255.0
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (linearize(c) for c in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast(color: str, reference: str = 'white') -> float:
    """
    Contrast ratio between a color and a reference, in [1, 21].

    `reference` may be 'white', 'black' or any parseable color.

    Raises:
        InvalidColor: If either color cannot be parsed.
    """
    l1 = relative_luminance(parse_color(color))
    l2 = relative_luminance(parse_color(reference))

    lighter = max(l1, l2)
    darker = min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def wcag_level(ratio: float) -> str:
    if ratio >= WCAG_AAA_NORMAL:
        return "AAA"
    elif ratio >= WCAG_AA_NORMAL:
        return "AA"
    elif ratio >= WCAG_AA_LARGE:
        return "AA-large"
    return "fail"


def readable_text_color(background: str) -> str:
    """Pick white or black text, whichever contrasts more with the background."""
    if contrast(background, 'white') > contrast(background, 'black'):
        return '#ffffff'
    return '#000000'


def contrast_report(color: str) -> dict:
    """Ratios against white and black, rounded for display."""
    return {
        'white': round(contrast(color, 'white'), 2),
        'black': round(contrast(color, 'black'), 2),
    }
