"""Font discovery and measurement helpers shared by the renderers."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

ELLIPSIS = "…"


def text_width(font: ImageFont.ImageFont, text: str) -> float:
    try:
        return font.getlength(text)  # type: ignore[attr-defined]
    except AttributeError:  # pragma: no cover - fallback for older Pillow
        dummy_img = Image.new("L", (1, 1), color=255)
        draw = ImageDraw.Draw(dummy_img)
        return float(draw.textlength(text, font=font))


def load_font(path_candidates: Sequence[Path], size: int) -> ImageFont.ImageFont:
    for candidate in path_candidates:
        if candidate and candidate.exists():
            return ImageFont.truetype(str(candidate), size=size)
    return ImageFont.load_default(size=size)


def default_font_candidates(bold: bool) -> List[Path]:
    names = [
        "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf",
        "LiberationSans-Bold.ttf" if bold else "LiberationSans-Regular.ttf",
        "Arial Bold.ttf" if bold else "Arial.ttf",
    ]
    search_dirs = [
        Path("/usr/share/fonts/truetype/dejavu"),
        Path("/usr/share/fonts/truetype/liberation"),
        Path("/usr/share/fonts"),
        Path("/Library/Fonts"),
        Path.home() / ".fonts",
    ]
    candidates: List[Path] = []
    for name in names:
        for directory in search_dirs:
            candidates.append(directory / name)
    return candidates


def font_candidates(provided: Optional[Path], bold: bool) -> List[Path]:
    candidates: List[Path] = []
    if provided is not None:
        candidates.append(Path(provided))
    candidates.extend(default_font_candidates(bold))
    return candidates


def truncate_text(text: str, font: ImageFont.ImageFont, max_width: float) -> str:
    """Shorten ``text`` with a trailing ellipsis so it fits ``max_width``.

    Text that already fits is returned unchanged. Otherwise the longest prefix
    whose ``prefix + "…"`` fits is used. When not even the ellipsis fits, the
    bare ellipsis is returned.
    """

    if text_width(font, text) <= max_width:
        return text

    for length in range(len(text) - 1, 0, -1):
        candidate = text[:length].rstrip() + ELLIPSIS
        if text_width(font, candidate) <= max_width:
            return candidate
    return ELLIPSIS


def wrap_text(text: str, font: ImageFont.ImageFont, *, max_width: float) -> List[str]:
    """Greedy word wrap. Words wider than a line are truncated."""

    lines: List[str] = []
    for paragraph in text.splitlines() or [""]:
        words = paragraph.split()
        if not words:
            lines.append("")
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if text_width(font, candidate) <= max_width:
                current = candidate
            else:
                lines.append(truncate_text(current, font, max_width))
                current = word
        lines.append(truncate_text(current, font, max_width))
    return lines


__all__ = [
    "ELLIPSIS",
    "default_font_candidates",
    "font_candidates",
    "load_font",
    "text_width",
    "truncate_text",
    "wrap_text",
]
