"""Font loading and glyph advance measurement."""

import subprocess
import threading
from dataclasses import dataclass
from functools import lru_cache

import freetype

# Needed for "Open Sans": its ascent-to-descent span is 2789 units on a
# 2048 unit em, and widths are laid out against that span.
OPEN_SANS_SCALE_CORRECTION = 1.3618165

DEFAULT_FONT_FAMILY = "Open Sans"
DEFAULT_FONT_SIZE = 16.0


@dataclass
class FontConfig:
    """Font configuration used to measure text runs.

    ``scale_correction`` of None derives the correction from the loaded
    font so that widths come out at its true em size.
    """

    family: str = DEFAULT_FONT_FAMILY
    path: str | None = None
    scale_correction: float | None = OPEN_SANS_SCALE_CORRECTION
    default_size: float = DEFAULT_FONT_SIZE


@lru_cache(maxsize=32)
def match_font(font_family: str) -> tuple[str, tuple[str, ...]] | None:
    """Ask fc-match for the best font file for a family.

    Args:
        font_family: Font family name.

    Returns:
        Tuple of (font file path, family names of that file), or None if
        fontconfig is unavailable or returns nothing.
    """
    try:
        result = subprocess.run(
            ["fc-match", font_family, "-f", "%{file}\n%{family}"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError):
        return None
    if result.returncode != 0:
        return None
    font_path, _, families = result.stdout.strip().partition("\n")
    if not font_path:
        return None
    names = tuple(name.strip() for name in families.split(",") if name.strip())
    return font_path, names


def is_family_match(requested: str, families: tuple[str, ...]) -> bool:
    """Check if a matched file belongs to the requested family (case-insensitive)."""
    wanted = requested.strip().casefold()
    return any(name.casefold() == wanted for name in families)


def find_font_file(font_family: str) -> str | None:
    """Find font file path using fc-match.

    fontconfig always answers with its nearest match; a file belonging to a
    different family is rejected rather than substituted.

    Args:
        font_family: Font family name.

    Returns:
        Path to font file or None if not found.
    """
    match = match_font(font_family)
    if match is None:
        return None
    font_path, families = match
    if not is_family_match(font_family, families):
        return None
    return font_path


@lru_cache(maxsize=8)
def load_font_face(font_path: str) -> freetype.Face:
    """Load a FreeType font face.

    Args:
        font_path: Path to font file.

    Returns:
        FreeType Face object.
    """
    return freetype.Face(font_path)


def resolve_font_path(config: FontConfig) -> str:
    """Resolve the font file for a configuration.

    Raises:
        FileNotFoundError: If neither the configured path nor fontconfig
            yields a font file of the requested family.
    """
    if config.path is not None:
        return config.path
    font_path = find_font_file(config.family)
    if font_path is None:
        match = match_font(config.family)
        if match is not None and match[1]:
            raise FileNotFoundError(
                f"No font file found for family '{config.family}' "
                f"(fontconfig would substitute '{match[1][0]}'); "
                "install the font or set its path explicitly"
            )
        raise FileNotFoundError(f"No font file found for family '{config.family}'")
    return font_path


class GlyphMetrics:
    """Read-only glyph advance provider over one loaded font face.

    Widths use pixel-height scaling: ``point_size * scale_correction`` is the
    height of the font's ascender-to-descender span, and each glyph advance
    is scaled by the same factor. Kerning is not applied.
    """

    def __init__(self, face, scale_correction: float | None = None):
        self.face = face
        self.span = face.ascender - face.descender
        if self.span <= 0:
            raise ValueError("Font has no vertical extent (ascender <= descender)")
        if scale_correction is None:
            scale_correction = self.span / face.units_per_EM
        self.scale_correction = scale_correction
        self._advances: dict[str, int] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: FontConfig) -> "GlyphMetrics":
        """Load the configured font and build a metrics provider."""
        face = load_font_face(resolve_font_path(config))
        return cls(face, config.scale_correction)

    def advance_units(self, char: str) -> int:
        """Unscaled horizontal advance of one character, in font units."""
        with self._lock:
            advance = self._advances.get(char)
            if advance is None:
                self.face.load_char(char, freetype.FT_LOAD_NO_SCALE)
                advance = self.face.glyph.advance.x
                self._advances[char] = advance
        return advance

    def measure(self, text: str, point_size: float) -> float:
        """Total advance width of ``text`` at ``point_size``.

        Args:
            text: Text to measure.
            point_size: Nominal font size in document units.

        Returns:
            Width in document units. Empty text measures 0.
        """
        if not text:
            return 0.0
        units = sum(self.advance_units(char) for char in text)
        return units * point_size * self.scale_correction / self.span
