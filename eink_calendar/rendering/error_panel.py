"""Full-screen error report shown when the month view cannot be produced."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from PIL import Image, ImageDraw

from .fonts import truncate_text, wrap_text
from .layout import RenderError
from .renderer import RendererConfig, save_png

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "Error Generating Calendar"


@dataclass(frozen=True)
class ErrorPanelMetrics:
    margin: int = 40
    inner_padding: int = 30
    border_width: int = 3
    title_font_size: int = 32
    message_font_size: int = 18
    detail_font_size: int = 14
    message_line_spacing: float = 1.5
    detail_row_height: int = 25
    detail_key_width: int = 120


class ErrorPanelRenderer:
    """Draw a bordered panel with the failure message and a details table."""

    def __init__(
        self,
        config: RendererConfig | None = None,
        metrics: ErrorPanelMetrics | None = None,
    ) -> None:
        self.config = config or RendererConfig()
        self.metrics = metrics or ErrorPanelMetrics()

    def render_error(
        self,
        message: str,
        details: Mapping[str, str],
        *,
        output_path: str | Path | None = None,
        title: str = DEFAULT_TITLE,
    ) -> Image.Image:
        cfg = self.config
        metrics = self.metrics
        width = cfg.layout.canvas_width
        height = cfg.layout.canvas_height
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}.")

        image = Image.new("RGB", (width, height), color=cfg.background_color)
        draw = ImageDraw.Draw(image)

        try:
            title_font = cfg.font(metrics.title_font_size, bold=True)
            message_font = cfg.font(metrics.message_font_size)
            detail_font = cfg.font(metrics.detail_font_size)
        except OSError as exc:
            raise RenderError(f"Unable to load fonts: {exc}", stage="fonts") from exc

        margin = metrics.margin
        if width > 2 * margin and height > 2 * margin:
            draw.rectangle(
                (margin, margin, width - margin, height - margin),
                outline=cfg.accent_color,
                width=metrics.border_width,
            )

        left = margin + metrics.inner_padding
        content_width = width - 2 * left
        y = margin + metrics.inner_padding

        draw.text(
            (left, y),
            truncate_text(title, title_font, content_width),
            font=title_font,
            fill=cfg.accent_color,
        )
        y += metrics.title_font_size + metrics.inner_padding

        line_height = int(metrics.message_font_size * metrics.message_line_spacing)
        for line in wrap_text(message, message_font, max_width=content_width):
            draw.text((left, y), line, font=message_font, fill=cfg.foreground_color)
            y += line_height
        y += metrics.inner_padding // 2

        value_x = left + metrics.detail_key_width
        value_width = width - margin - metrics.inner_padding - value_x
        for key, value in details.items():
            if y + metrics.detail_row_height > height - margin:
                LOGGER.debug("Error panel ran out of room before detail %r", key)
                break
            label = truncate_text(f"{key}:", detail_font, metrics.detail_key_width - 8)
            draw.text((left, y), label, font=detail_font, fill=cfg.foreground_color)
            draw.text(
                (value_x, y),
                truncate_text(str(value), detail_font, value_width),
                font=detail_font,
                fill=cfg.muted_color,
            )
            y += metrics.detail_row_height

        if output_path is not None:
            save_png(image, output_path)
        return image


__all__ = ["DEFAULT_TITLE", "ErrorPanelMetrics", "ErrorPanelRenderer"]
