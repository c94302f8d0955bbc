"""textart - Render text to images and three-level ASCII art."""

from .errors import (
    FontResolutionWarning,
    InvalidDimension,
    OutputError,
    RenderError,
    UnsupportedFormat,
)
from .font import FontConfig, FontStyle, resolve_font
from .renderer import (
    PillowBackend,
    Renderer,
    encode_to_file,
    encode_to_stream,
    measure,
    rasterize,
    to_ascii_art,
)

__version__ = "0.1.0"
__all__ = [
    "FontConfig",
    "FontResolutionWarning",
    "FontStyle",
    "InvalidDimension",
    "OutputError",
    "PillowBackend",
    "RenderError",
    "Renderer",
    "UnsupportedFormat",
    "encode_to_file",
    "encode_to_stream",
    "generate",
    "measure",
    "rasterize",
    "resolve_font",
    "to_ascii_art",
]


def generate(text, **kwargs):
    """Render text to an image.

    Args:
        text: Single line of text to render.
        **kwargs: FontConfig fields (family, size, styles).

    Returns:
        PIL Image in RGB mode, white text on black, sized to the text.
    """
    config = FontConfig(**kwargs)
    return rasterize(text, config)
