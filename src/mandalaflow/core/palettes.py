"""
Static colour tables and colour helpers.
"""

import enum

RGB = tuple[int, int, int]


class ColorMode(str, enum.Enum):
    """Palette selection for gradient colouring."""

    MONOCHROME = "monochrome"
    RAINBOW = "rainbow"
    COMPLEMENTARY = "complementary"
    EARTH = "earth"
    OCEAN = "ocean"


def hex_to_rgb(value: str) -> RGB:
    """
    Parse a ``#rrggbb`` (or ``#rgb``) colour string.

    Raises:
        ValueError: If the string is not a hex colour.
    """
    text = value.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"Not a hex colour: {value!r}")
    try:
        return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
    except ValueError:
        raise ValueError(f"Not a hex colour: {value!r}") from None


def rgb_to_hex(color: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


_HEX_PALETTES = {
    ColorMode.MONOCHROME: ["#ffffff", "#cccccc", "#999999", "#666666", "#333333"],
    ColorMode.RAINBOW: ["#ff3366", "#ff6633", "#ffcc33", "#33cc33", "#3366ff", "#cc33ff"],
    ColorMode.COMPLEMENTARY: ["#ff3366", "#33ccff", "#ffcc33", "#33ff99", "#cc33ff", "#ff9933"],
    ColorMode.EARTH: ["#996633", "#cc9966", "#ffcc99", "#669933", "#336633", "#003300"],
    ColorMode.OCEAN: ["#003366", "#0066cc", "#3399ff", "#66ccff", "#99ffff", "#ccffff"],
}

COLOR_PALETTES: dict[ColorMode, tuple[RGB, ...]] = {
    mode: tuple(hex_to_rgb(c) for c in colors) for mode, colors in _HEX_PALETTES.items()
}


def palette_for(mode, palettes=None) -> tuple[RGB, ...]:
    """Colours for ``mode``, falling back to monochrome for unknown modes."""
    palettes = palettes if palettes is not None else COLOR_PALETTES
    try:
        return palettes[ColorMode(mode)]
    except (ValueError, KeyError):
        return palettes[ColorMode.MONOCHROME]
