"""Renderer for composing the month-view calendar image."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from ..month.compose import DayCell, MonthGrid, MonthView
from .fonts import font_candidates, load_font, text_width, truncate_text
from .layout import DEFAULT_LAYOUT, CellBox, MonthLayoutMetrics, RenderError

LOGGER = logging.getLogger(__name__)

Color = str


@dataclass
class RendererConfig:
    """Configuration values and font management for the renderer."""

    layout: MonthLayoutMetrics = DEFAULT_LAYOUT
    font_regular_path: Path | None = None
    font_bold_path: Path | None = None
    background_color: Color = "#ffffff"
    foreground_color: Color = "#343a40"
    accent_color: Color = "#dc3545"
    muted_color: Color = "#6c757d"
    inverse_color: Color = "#ffffff"
    weekend_background: Color | None = None
    title_font_size: int = 28
    status_font_size: int = 12
    weekday_font_size: int = 13
    day_number_font_size: int = 18
    month_abbr_font_size: int = 12
    temperature_font_size: int = 13
    event_font_size: int = 13

    def font(self, size: int, *, bold: bool = False) -> ImageFont.ImageFont:
        provided = self.font_bold_path if bold else self.font_regular_path
        return load_font(font_candidates(provided, bold), size)


@dataclass(frozen=True)
class _Fonts:
    title: ImageFont.ImageFont
    status: ImageFont.ImageFont
    weekday: ImageFont.ImageFont
    day_number: ImageFont.ImageFont
    month_abbr: ImageFont.ImageFont
    temperature: ImageFont.ImageFont
    event: ImageFont.ImageFont


def save_png(image: Image.Image, output_path: str | Path) -> None:
    """Write ``image`` losslessly, reporting failures as :class:`RenderError`."""

    path = Path(output_path)
    try:
        image.save(path, format="PNG")
    except (OSError, ValueError) as exc:
        raise RenderError(
            f"Failed to write image to {path}: {exc}", stage="encode", path=str(path)
        ) from exc
    LOGGER.info("Wrote %dx%d image to %s", image.width, image.height, path)


def header_line(view: MonthView) -> str:
    """Text for the right side of the header, e.g. ``Generated: 2024-03-15 10:00 | Battery: 87%``."""

    line = f"Generated: {view.generated_at.strftime('%Y-%m-%d %H:%M')}"
    if view.battery:
        line += f" | Battery: {view.battery}"
    return line


class MonthRenderer:
    """Compose the month view image for the e-ink display."""

    def __init__(self, config: RendererConfig | None = None) -> None:
        self.config = config or RendererConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def render_month(
        self,
        view: MonthView,
        *,
        output_path: str | Path | None = None,
    ) -> Image.Image:
        """Render the month view image.

        Args:
            view: Composed grid plus header information.
            output_path: Optional PNG destination. Write failures raise
                :class:`RenderError`.
        Returns:
            A Pillow image of exactly ``canvas_width`` x ``canvas_height``.
        """

        cfg = self.config
        layout = cfg.layout
        layout.validate(len(view.grid.weeks))

        image = Image.new(
            "RGB",
            (layout.canvas_width, layout.canvas_height),
            color=cfg.background_color,
        )
        draw = ImageDraw.Draw(image)
        fonts = self._load_fonts()

        self._draw_header(draw, fonts, view)
        self._draw_weekday_band(draw, fonts, view.weekday_labels)
        self._draw_grid(draw, fonts, view.grid)

        if output_path is not None:
            save_png(image, output_path)
        return image

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------
    def _load_fonts(self) -> _Fonts:
        cfg = self.config
        try:
            return _Fonts(
                title=cfg.font(cfg.title_font_size, bold=True),
                status=cfg.font(cfg.status_font_size),
                weekday=cfg.font(cfg.weekday_font_size, bold=True),
                day_number=cfg.font(cfg.day_number_font_size),
                month_abbr=cfg.font(cfg.month_abbr_font_size, bold=True),
                temperature=cfg.font(cfg.temperature_font_size),
                event=cfg.font(cfg.event_font_size),
            )
        except OSError as exc:
            raise RenderError(f"Unable to load fonts: {exc}", stage="fonts") from exc

    def _draw_header(self, draw: ImageDraw.ImageDraw, fonts: _Fonts, view: MonthView) -> None:
        cfg = self.config
        layout = cfg.layout
        padding = layout.header_padding

        draw.line(
            (0, layout.header_height, layout.canvas_width, layout.header_height),
            fill=cfg.muted_color,
            width=layout.header_rule_width,
        )

        title = view.grid.title
        title_y = (layout.header_height - cfg.title_font_size) // 2
        draw.text((padding, title_y), title, font=fonts.title, fill=cfg.foreground_color)

        right = layout.canvas_width - padding
        available = right - (padding + text_width(fonts.title, title) + padding)

        generated = truncate_text(header_line(view), fonts.status, available)
        generated_y = title_y + 4 if not view.status else title_y - 2
        draw.text(
            (right - text_width(fonts.status, generated), generated_y),
            generated,
            font=fonts.status,
            fill=cfg.muted_color,
        )

        if view.status:
            status = truncate_text(view.status, fonts.status, available)
            draw.text(
                (right - text_width(fonts.status, status), generated_y + cfg.status_font_size + 4),
                status,
                font=fonts.status,
                fill=cfg.accent_color,
            )

    def _draw_weekday_band(
        self,
        draw: ImageDraw.ImageDraw,
        fonts: _Fonts,
        labels: Sequence[str],
    ) -> None:
        cfg = self.config
        layout = cfg.layout
        top = layout.header_height
        bottom = layout.grid_top

        draw.line(
            (0, bottom, layout.canvas_width, bottom),
            fill=cfg.muted_color,
            width=layout.header_rule_width,
        )

        label_y = top + (layout.weekday_band_height - cfg.weekday_font_size) // 2
        for index, label in enumerate(labels):
            left = layout.column_edge(index)
            draw.text(
                (left + layout.weekday_label_inset, label_y),
                label,
                font=fonts.weekday,
                fill=cfg.foreground_color,
            )
            if index < len(labels) - 1:
                edge = layout.column_edge(index + 1)
                draw.line((edge, top, edge, bottom), fill=cfg.muted_color, width=layout.grid_line_width)

    def _draw_grid(self, draw: ImageDraw.ImageDraw, fonts: _Fonts, grid: MonthGrid) -> None:
        cfg = self.config
        layout = cfg.layout
        num_weeks = len(grid.weeks)

        for week_index, week in enumerate(grid.weeks):
            for day_index, cell in enumerate(week.days):
                box = layout.cell_box(week_index, day_index, num_weeks)
                self._draw_day(draw, fonts, cell, box)
                if day_index < len(week.days) - 1:
                    draw.line(
                        (box.right, box.top, box.right, box.bottom),
                        fill=cfg.muted_color,
                        width=layout.grid_line_width,
                    )

            if week_index < num_weeks - 1:
                edge = layout.row_edge(week_index + 1, num_weeks)
                draw.line(
                    (0, edge, layout.canvas_width, edge),
                    fill=cfg.muted_color,
                    width=layout.grid_line_width,
                )

    def _draw_day(
        self,
        draw: ImageDraw.ImageDraw,
        fonts: _Fonts,
        cell: DayCell,
        box: CellBox,
    ) -> None:
        cfg = self.config
        layout = cfg.layout
        padding = layout.cell_padding

        if cell.is_weekend and cfg.weekend_background:
            draw.rectangle(
                (box.left, box.top, box.right - 1, box.bottom - 1),
                fill=cfg.weekend_background,
            )

        number_color = cfg.foreground_color if cell.is_current_month else cfg.muted_color
        radius = layout.today_circle_radius
        center_x = box.left + padding + radius
        center_y = box.top + 8 + radius

        if cell.is_today:
            draw.ellipse(
                (center_x - radius, center_y - radius, center_x + radius, center_y + radius),
                fill=cfg.accent_color,
            )
            number_color = cfg.inverse_color

        left, top, right, bottom = fonts.day_number.getbbox(cell.day_label)
        draw.text(
            (center_x - (left + right) / 2, center_y - (top + bottom) / 2),
            cell.day_label,
            font=fonts.day_number,
            fill=number_color,
        )

        if cell.is_first_of_month:
            draw.text(
                (center_x + radius + 4, box.top + 16),
                cell.month_abbr,
                font=fonts.month_abbr,
                fill=cfg.foreground_color,
            )

        if cell.day_temp:
            right_edge = box.right - padding
            draw.text(
                (right_edge - text_width(fonts.temperature, cell.day_temp), box.top + padding),
                cell.day_temp,
                font=fonts.temperature,
                fill=cfg.foreground_color,
            )
            draw.text(
                (
                    right_edge - text_width(fonts.temperature, cell.night_temp),
                    box.top + padding + cfg.temperature_font_size,
                ),
                cell.night_temp,
                font=fonts.temperature,
                fill=cfg.muted_color,
            )

        self._draw_events(draw, fonts, cell, box)

    def _draw_events(
        self,
        draw: ImageDraw.ImageDraw,
        fonts: _Fonts,
        cell: DayCell,
        box: CellBox,
    ) -> int:
        """Draw the event rows that fit inside ``box`` and return how many were drawn."""

        cfg = self.config
        layout = cfg.layout
        row_height = layout.event_row_height
        padding = layout.event_padding
        inset = layout.event_text_inset
        text_y_offset = (row_height - cfg.event_font_size) // 2 - 1

        cursor = box.top + layout.event_list_offset
        drawn = 0
        for event in cell.events:
            if cursor + row_height > box.bottom:
                break

            if event.all_day:
                fill = cfg.muted_color if cell.is_past else cfg.foreground_color
                rect_right = max(box.left + padding, box.right - padding)
                draw.rounded_rectangle(
                    (box.left + padding, cursor, rect_right, cursor + row_height),
                    radius=layout.event_corner_radius,
                    fill=fill,
                )
                available = box.width - 2 * padding - 2 * inset
                summary = truncate_text(event.summary, fonts.event, available)
                draw.text(
                    (box.left + padding + inset, cursor + text_y_offset),
                    summary,
                    font=fonts.event,
                    fill=cfg.inverse_color,
                )
            else:
                time_color = cfg.muted_color if cell.is_past else cfg.accent_color
                title_color = cfg.muted_color if cell.is_past else cfg.foreground_color
                time_x = box.left + padding + inset
                draw.text(
                    (time_x, cursor + text_y_offset),
                    event.time,
                    font=fonts.event,
                    fill=time_color,
                )
                time_width = text_width(fonts.event, event.time)
                summary_x = time_x + time_width + inset
                available = box.right - padding - summary_x
                summary = truncate_text(event.summary, fonts.event, available)
                draw.text(
                    (summary_x, cursor + text_y_offset),
                    summary,
                    font=fonts.event,
                    fill=title_color,
                )

            cursor += row_height + layout.event_row_gap
            drawn += 1

        if drawn < len(cell.events):
            LOGGER.debug(
                "Only %d of %d event(s) fit in the cell for %s",
                drawn,
                len(cell.events),
                cell.date,
            )
        return drawn


__all__ = [
    "MonthRenderer",
    "RendererConfig",
    "header_line",
    "save_png",
]
