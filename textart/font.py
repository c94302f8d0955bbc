"""Font configuration and resolution to Pillow font objects."""

import enum
import logging
import warnings
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from PIL import ImageFont

from .errors import FontResolutionWarning

logger = logging.getLogger(__name__)


class FontStyle(enum.Enum):
    PLAIN = "plain"
    BOLD = "bold"
    ITALIC = "italic"


def _normalize_styles(styles):
    if isinstance(styles, FontStyle):
        styles = (styles,)
    normalized = frozenset(styles)
    for style in normalized:
        if not isinstance(style, FontStyle):
            raise TypeError(f"not a FontStyle: {style!r}")
    return normalized


@dataclass(frozen=True)
class FontConfig:
    """Font used to render text.

    Styles combine: BOLD and ITALIC are independent flags and PLAIN adds
    nothing, so ``{PLAIN, BOLD}`` renders the same as ``{BOLD}``.
    """

    family: str = "Serif"
    size: int = 12
    styles: frozenset = field(default_factory=lambda: frozenset({FontStyle.BOLD}))

    def __post_init__(self):
        if isinstance(self.size, bool) or not isinstance(self.size, int):
            raise ValueError(f"font size must be an integer, got {self.size!r}")
        if self.size <= 0:
            raise ValueError(f"font size must be positive, got {self.size}")
        object.__setattr__(self, "styles", _normalize_styles(self.styles))

    @property
    def bold(self):
        return FontStyle.BOLD in self.styles

    @property
    def italic(self):
        return FontStyle.ITALIC in self.styles

    def with_style(self, style):
        """Return a copy whose style set is exactly ``{style}``."""
        return replace(self, styles=frozenset({style}))

    def with_styles(self, styles):
        return replace(self, styles=styles)


@dataclass
class ResolvedFont:
    """A loaded font and where it came from."""
    font: object  # FreeTypeFont, or ImageFont for the bitmap fallback
    size: int
    path: Optional[str] = None
    substituted: bool = False


# Candidate font files per generic family, keyed by (bold, italic).
# Each entry is one concrete family; the first one found wins.
_GENERIC_FAMILIES = {
    "serif": [
        {
            (False, False): "DejaVuSerif.ttf",
            (True, False): "DejaVuSerif-Bold.ttf",
            (False, True): "DejaVuSerif-Italic.ttf",
            (True, True): "DejaVuSerif-BoldItalic.ttf",
        },
        {
            (False, False): "LiberationSerif-Regular.ttf",
            (True, False): "LiberationSerif-Bold.ttf",
            (False, True): "LiberationSerif-Italic.ttf",
            (True, True): "LiberationSerif-BoldItalic.ttf",
        },
        {
            (False, False): "FreeSerif.ttf",
            (True, False): "FreeSerifBold.ttf",
            (False, True): "FreeSerifItalic.ttf",
            (True, True): "FreeSerifBoldItalic.ttf",
        },
        {
            (False, False): "times.ttf",
            (True, False): "timesbd.ttf",
            (False, True): "timesi.ttf",
            (True, True): "timesbi.ttf",
        },
        {
            (False, False): "Times New Roman.ttf",
            (True, False): "Times New Roman Bold.ttf",
            (False, True): "Times New Roman Italic.ttf",
            (True, True): "Times New Roman Bold Italic.ttf",
        },
    ],
    "sansserif": [
        {
            (False, False): "DejaVuSans.ttf",
            (True, False): "DejaVuSans-Bold.ttf",
            (False, True): "DejaVuSans-Oblique.ttf",
            (True, True): "DejaVuSans-BoldOblique.ttf",
        },
        {
            (False, False): "LiberationSans-Regular.ttf",
            (True, False): "LiberationSans-Bold.ttf",
            (False, True): "LiberationSans-Italic.ttf",
            (True, True): "LiberationSans-BoldItalic.ttf",
        },
        {
            (False, False): "FreeSans.ttf",
            (True, False): "FreeSansBold.ttf",
            (False, True): "FreeSansOblique.ttf",
            (True, True): "FreeSansBoldOblique.ttf",
        },
        {
            (False, False): "arial.ttf",
            (True, False): "arialbd.ttf",
            (False, True): "ariali.ttf",
            (True, True): "arialbi.ttf",
        },
    ],
    "monospaced": [
        {
            (False, False): "DejaVuSansMono.ttf",
            (True, False): "DejaVuSansMono-Bold.ttf",
            (False, True): "DejaVuSansMono-Oblique.ttf",
            (True, True): "DejaVuSansMono-BoldOblique.ttf",
        },
        {
            (False, False): "LiberationMono-Regular.ttf",
            (True, False): "LiberationMono-Bold.ttf",
            (False, True): "LiberationMono-Italic.ttf",
            (True, True): "LiberationMono-BoldItalic.ttf",
        },
        {
            (False, False): "FreeMono.ttf",
            (True, False): "FreeMonoBold.ttf",
            (False, True): "FreeMonoOblique.ttf",
            (True, True): "FreeMonoBoldOblique.ttf",
        },
        {
            (False, False): "cour.ttf",
            (True, False): "courbd.ttf",
            (False, True): "couri.ttf",
            (True, True): "courbi.ttf",
        },
    ],
}

_FAMILY_ALIASES = {
    "serif": "serif",
    "sansserif": "sansserif",
    "sans": "sansserif",
    "dialog": "sansserif",
    "monospaced": "monospaced",
    "monospace": "monospaced",
    "mono": "monospaced",
    "dialoginput": "monospaced",
}

_STYLE_SUFFIXES = {
    (False, False): ("Regular", ""),
    (True, False): ("Bold",),
    (False, True): ("Italic", "Oblique"),
    (True, True): ("BoldItalic", "BoldOblique"),
}


def _generic_key(family):
    key = family.lower().replace(" ", "").replace("-", "").replace("_", "")
    return _FAMILY_ALIASES.get(key)


def _named_candidates(family, style_key):
    """File names to try for a family that is not a generic alias."""
    names = []
    for suffix in _STYLE_SUFFIXES[style_key]:
        if suffix:
            names.append(f"{family}-{suffix}.ttf")
            names.append(f"{family}{suffix}.ttf")
        else:
            names.append(f"{family}.ttf")
    return names


def _is_file(name):
    try:
        return Path(name).is_file()
    except (OSError, ValueError):
        return False


def _try_load(name, size):
    try:
        font = ImageFont.truetype(name, size)
    except (OSError, ValueError, TypeError):
        return None
    logger.debug("loaded font %s at %dpt", name, size)
    return font


def resolve_font(config):
    """Load the Pillow font described by a FontConfig.

    Args:
        config: FontConfig with family, size and styles.

    Returns:
        ResolvedFont. When no matching file can be loaded, Pillow's default
        font is substituted, ``substituted`` is set and a
        FontResolutionWarning is issued.
    """
    style_key = (config.bold, config.italic)
    size = config.size

    if _is_file(config.family):
        font = _try_load(config.family, size)
        if font is not None:
            return ResolvedFont(font=font, size=size, path=config.family)

    generic = _generic_key(config.family)
    if generic is not None:
        tables = _GENERIC_FAMILIES[generic]
        for table in tables:
            font = _try_load(table[style_key], size)
            if font is not None:
                return ResolvedFont(font=font, size=size, path=table[style_key])
        # No styled face anywhere; settle for a regular face
        if style_key != (False, False):
            for table in tables:
                name = table[(False, False)]
                font = _try_load(name, size)
                if font is not None:
                    warnings.warn(
                        f"no {_style_label(config)} face for {config.family!r}; "
                        f"using regular {name}",
                        FontResolutionWarning,
                    )
                    return ResolvedFont(font=font, size=size, path=name, substituted=True)
    else:
        for name in _named_candidates(config.family, style_key):
            font = _try_load(name, size)
            if font is not None:
                return ResolvedFont(font=font, size=size, path=name)

    warnings.warn(
        f"font family {config.family!r} ({_style_label(config)}) not found; "
        "using the default font",
        FontResolutionWarning,
    )
    return ResolvedFont(font=ImageFont.load_default(size), size=size, substituted=True)


def _style_label(config):
    if config.bold and config.italic:
        return "bold italic"
    if config.bold:
        return "bold"
    if config.italic:
        return "italic"
    return "plain"
