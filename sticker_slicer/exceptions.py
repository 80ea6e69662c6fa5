class StickerSlicerError(Exception):
    """Base class for errors raised by sticker_slicer."""


class ImageDecodeError(StickerSlicerError):
    """Input bytes or file could not be decoded into pixels."""


class InvalidColorError(StickerSlicerError, ValueError):
    """A color string is not a valid #RRGGBB / #RGB hex value."""
