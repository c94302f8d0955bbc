"""Exceptions and warnings raised while rendering text."""


class RenderError(Exception):
    """Base class for all rendering errors."""


class InvalidDimension(RenderError, ValueError):
    """The measured text box has a zero or negative side."""

    def __init__(self, width, height):
        super().__init__(
            f"cannot allocate a {width}x{height} image; "
            "text must measure to a positive width and height"
        )
        self.width = width
        self.height = height


class UnsupportedFormat(RenderError, ValueError):
    """No image encoder is registered for the requested format."""

    def __init__(self, fmt):
        super().__init__(f"unsupported image format: {fmt!r}")
        self.format = fmt


class OutputError(RenderError, OSError):
    """Writing encoded image data to a file or stream failed."""


class FontResolutionWarning(UserWarning):
    """The requested font could not be found and a default was used."""
