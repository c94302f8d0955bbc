"""Text rasterization, image encoding and ASCII-art conversion.

A Renderer turns a line of text into a black RGB image with the text drawn
in white, then either encodes that image with one of Pillow's codecs or
quantizes it into a three-character ASCII grid.
"""

import io
import logging
import math
import os
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .errors import InvalidDimension, OutputError, UnsupportedFormat
from .font import FontConfig, resolve_font

logger = logging.getLogger(__name__)

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)

# Extra advance per character, as a fraction of the point size
LOOSE_TRACKING = 0.04

BLANK_CHAR = " "
WHITE_CHAR = "#"
MIXED_CHAR = "*"


class PillowBackend:
    """Measures and draws text with Pillow.

    Characters are laid out one at a time so the tracking can be added
    after every advance. Pillow has no tracking support of its own.
    """

    def __init__(self, tracking=LOOSE_TRACKING):
        self.tracking = tracking

    def _advances(self, text, resolved):
        extra = self.tracking * resolved.size
        return [resolved.font.getlength(ch) + extra for ch in text]

    def measure_text(self, text, resolved):
        """Return (width, height) of the text box in whole pixels.

        Width is the tracked advance width rounded up; height is the
        font's ascent plus descent.
        """
        width = math.ceil(round(sum(self._advances(text, resolved)), 6))
        return width, _line_height(resolved.font)

    def draw_text(self, image, text, resolved, origin):
        """Draw text in white with its baseline starting at origin."""
        draw = ImageDraw.Draw(image)
        draw.fontmode = "L"  # anti-aliased glyphs

        x, y = origin
        font = resolved.font
        if isinstance(font, ImageFont.FreeTypeFont):
            anchor = "ls"
        else:
            # Bitmap fonts only support top-left anchoring
            anchor = None
            y -= font.getbbox("A")[3]

        for ch, advance in zip(text, self._advances(text, resolved)):
            draw.text((x, y), ch, font=font, fill=WHITE, anchor=anchor)
            x += advance


def _line_height(font):
    if hasattr(font, "getmetrics"):
        ascent, descent = font.getmetrics()
        return ascent + descent
    return font.getbbox("Ag")[3]


def format_for_name(fmt):
    """Map a format name such as ``"png"`` or ``"jpg"`` to a Pillow format."""
    Image.init()
    name = fmt.upper()
    if name in Image.SAVE:
        return name
    name = Image.registered_extensions().get("." + fmt.lower().lstrip("."))
    if name is None or name not in Image.SAVE:
        raise UnsupportedFormat(fmt)
    return name


def format_for_path(path):
    """Infer the Pillow format from a file extension (case-insensitive)."""
    suffix = Path(path).suffix.lower()
    name = Image.registered_extensions().get(suffix)
    if name is None or name not in Image.SAVE:
        raise UnsupportedFormat(suffix or str(path))
    return name


class Renderer:
    """Renders text with a FontConfig passed to every call.

    The renderer holds no per-call state. Any object providing
    ``measure_text(text, resolved)`` and
    ``draw_text(image, text, resolved, origin)`` can be used as backend.
    """

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else PillowBackend()

    def measure(self, text, config=None):
        """Return the (width, height) needed to render text.

        Empty text measures to zero width; that only becomes an error
        when an image of that size is requested.
        """
        resolved = resolve_font(config or FontConfig())
        return self.backend.measure_text(text, resolved)

    def rasterize(self, text, config=None):
        """Render text into a new RGB image.

        Args:
            text: A single line of text.
            config: FontConfig; defaults to bold 12pt Serif.

        Returns:
            PIL Image in RGB mode, black background with white text.

        Raises:
            InvalidDimension: if the text measures to an empty box.
        """
        config = config or FontConfig()
        resolved = resolve_font(config)
        width, height = self.backend.measure_text(text, resolved)
        if width <= 0 or height <= 0:
            raise InvalidDimension(width, height)

        image = Image.new("RGB", (width, height), BLACK)
        # Baseline sits at the point size, not the font ascent
        self.backend.draw_text(image, text, resolved, (0, config.size))
        return image

    def encode(self, text, config=None, fmt="png"):
        """Rasterize text and return the encoded image bytes."""
        data, _ = self._encode(text, config, format_for_name(fmt))
        return data

    def _encode(self, text, config, format_name):
        image = self.rasterize(text, config)
        buf = io.BytesIO()
        try:
            image.save(buf, format=format_name)
        except (OSError, ValueError) as exc:
            raise UnsupportedFormat(format_name) from exc
        logger.debug("encoded %dx%d image as %s (%d bytes)",
                     image.width, image.height, format_name, buf.tell())
        return buf.getvalue(), image.size

    def encode_to_file(self, text, config, path):
        """Write the rendered text to path, format taken from its extension.

        The image is fully encoded before the file is opened, so an
        unsupported format never creates a file and a failed write
        removes what was written.

        Returns:
            (width, height) of the written image.
        """
        path = Path(path)
        data, size = self._encode(text, config, format_for_path(path))
        opened = False
        try:
            with open(path, "wb") as fh:
                opened = True
                fh.write(data)
        except OSError as exc:
            if opened:
                path.unlink(missing_ok=True)
            raise OutputError(f"cannot write image to {path}: {exc}") from exc
        logger.debug("wrote %s", path)
        return size

    def encode_to_stream(self, text, config, fmt, stream):
        """Encode with an explicit format name and write to a binary stream."""
        data = self.encode(text, config, fmt)
        try:
            stream.write(data)
        except (OSError, ValueError, TypeError) as exc:
            raise OutputError(f"cannot write image to stream: {exc}") from exc

    def to_ascii_art(self, text, config=None, line_separator=os.linesep):
        """Render text as a grid of ``' '``, ``'#'`` and ``'*'``.

        Exactly black pixels become spaces, exactly white pixels ``#`` and
        anything else (anti-aliased edges) ``*``. Rows with nothing but
        spaces are dropped; every kept row ends with line_separator.
        """
        pixels = np.asarray(self.rasterize(text, config))
        black = (pixels == 0).all(axis=2)
        white = (pixels == 255).all(axis=2)
        grid = np.where(black, BLANK_CHAR, np.where(white, WHITE_CHAR, MIXED_CHAR))

        lines = []
        for row in grid:
            line = "".join(row)
            if line.strip():
                lines.append(line + line_separator)
        return "".join(lines)


_default_renderer = Renderer()


def measure(text, config=None):
    return _default_renderer.measure(text, config)


def rasterize(text, config=None):
    return _default_renderer.rasterize(text, config)


def encode_to_file(text, config, path):
    return _default_renderer.encode_to_file(text, config, path)


def encode_to_stream(text, config, fmt, stream):
    _default_renderer.encode_to_stream(text, config, fmt, stream)


def to_ascii_art(text, config=None, line_separator=os.linesep):
    return _default_renderer.to_ascii_art(text, config, line_separator)
