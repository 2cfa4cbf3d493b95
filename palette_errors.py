"""
Errors raised by the palette workspace.

Every operation validates before it mutates, so catching any of these means
the document is exactly as it was before the call.
"""


class PaletteError(Exception):
    """Base class for all palette workspace errors."""


class InvalidColor(PaletteError, ValueError):
    """A seed or manually entered color failed format validation."""

    def __init__(self, value):
        super().__init__(f"Invalid color: {value!r}")
        self.value = value


class NoGroupAvailable(PaletteError):
    """A color was added while the palette has no group to receive it."""


class NoColorsExtracted(PaletteError):
    """Image sampling produced no usable (sufficiently opaque) pixels."""


class InvalidShareToken(PaletteError, ValueError):
    """A share token could not be decoded into a valid palette."""


class EmptyPaletteExport(PaletteError):
    """Export was attempted on a palette without any colors."""


class EmptyPaletteShare(PaletteError):
    """Sharing was attempted on a palette without any colors."""


class UnsavablePalette(PaletteError):
    """Saving requires a palette name and at least one group."""
