"""Light/dark classification of skin background colors.

Used to pick a code-highlight palette that stays readable on the resolved
``--blog-bg``. Any color that cannot be parsed is treated as black, and
therefore dark.
"""

import re
from typing import Dict, Tuple

DARK_THRESHOLD = 128

# GitHub Light based
LIGHT_CODE_PALETTE: Dict[str, str] = {
    "--blog-code-fg": "#24292e",
    "--blog-code-keyword": "#d73a49",
    "--blog-code-function": "#6f42c1",
    "--blog-code-attr": "#005cc5",
    "--blog-code-string": "#032f62",
    "--blog-code-builtin": "#e36209",
    "--blog-code-comment": "#6a737d",
    "--blog-code-tag": "#22863a",
}

# GitHub Dark based
DARK_CODE_PALETTE: Dict[str, str] = {
    "--blog-code-fg": "#c9d1d9",
    "--blog-code-keyword": "#ff7b72",
    "--blog-code-function": "#d2a8ff",
    "--blog-code-attr": "#79c0ff",
    "--blog-code-string": "#a5d6ff",
    "--blog-code-builtin": "#ffa657",
    "--blog-code-comment": "#8b949e",
    "--blog-code-tag": "#7ee787",
}

_HEX_RE = re.compile(r"#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")

BLACK = (0, 0, 0)


def parse_color(color: str) -> Tuple[int, int, int]:
    """Parse a CSS color into an ``(r, g, b)`` triple.

    Accepts ``#abc``, ``#aabbcc``, ``rgb(...)`` and ``rgba(...)``; alpha is
    ignored. Anything else yields black.
    """
    if not isinstance(color, str):
        return BLACK

    value = color.strip()

    match = _HEX_RE.fullmatch(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)

    if value.lower().startswith("rgb"):
        numbers = _NUMBER_RE.findall(value)
        if len(numbers) >= 3:
            r, g, b = (min(255, int(float(n))) for n in numbers[:3])
            return r, g, b

    return BLACK


def brightness(color: str) -> float:
    """Perceived brightness (0-255) using the YIQ luma weights."""
    r, g, b = parse_color(color)
    return 0.299 * r + 0.587 * g + 0.114 * b


def is_dark_background(color: str) -> bool:
    """Whether text on this background should use the dark palette."""
    return brightness(color) < DARK_THRESHOLD


def palette_for(is_dark: bool) -> Dict[str, str]:
    """Return a copy of the code-highlight palette for a light or dark page."""
    return dict(DARK_CODE_PALETTE if is_dark else LIGHT_CODE_PALETTE)


def code_palette(background: str) -> Dict[str, str]:
    """Derive the eight ``--blog-code-*`` variables for a background color."""
    return palette_for(is_dark_background(background))
