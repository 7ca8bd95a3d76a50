"""Layout constants and helpers for the month-view calendar."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional


class RenderError(RuntimeError):
    """Raised when a calendar image cannot be produced.

    ``stage`` names the step that failed (``"layout"``, ``"fonts"`` or
    ``"encode"``) and ``path`` is the output file when one was involved.
    """

    def __init__(self, message: str, *, stage: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage
        self.path = path


@dataclass(frozen=True)
class CellBox:
    """Pixel bounds of one grid cell. ``right`` and ``bottom`` are exclusive."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top


@dataclass(frozen=True)
class MonthLayoutMetrics:
    """Collection of reusable layout constants derived from the design."""

    canvas_width: int = 800
    canvas_height: int = 480
    header_height: int = 60
    header_padding: int = 24
    weekday_band_height: int = 35
    weekday_label_inset: int = 12
    cell_padding: int = 10
    event_list_offset: int = 40
    event_row_height: int = 22
    event_row_gap: int = 2
    event_padding: int = 6
    event_text_inset: int = 6
    event_corner_radius: int = 3
    today_circle_radius: int = 16
    header_rule_width: int = 2
    grid_line_width: int = 1

    @property
    def column_width(self) -> float:
        return self.canvas_width / 7

    @property
    def grid_top(self) -> int:
        return self.header_height + self.weekday_band_height

    @property
    def grid_height(self) -> int:
        return self.canvas_height - self.grid_top

    def row_height(self, num_weeks: int) -> float:
        return self.grid_height / num_weeks

    def column_edge(self, index: int) -> int:
        """Return the x coordinate where column ``index`` starts."""

        return int(round(index * self.column_width))

    def row_edge(self, index: int, num_weeks: int) -> int:
        """Return the y coordinate where week row ``index`` starts."""

        return self.grid_top + int(round(index * self.row_height(num_weeks)))

    def cell_box(self, week_index: int, day_index: int, num_weeks: int) -> CellBox:
        """Bounds of a cell; neighbours share edges so rounding never drifts."""

        return CellBox(
            left=self.column_edge(day_index),
            top=self.row_edge(week_index, num_weeks),
            right=self.column_edge(day_index + 1),
            bottom=self.row_edge(week_index + 1, num_weeks),
        )

    def validate(self, num_weeks: int) -> None:
        """Fail fast on dimensions the grid cannot be drawn into."""

        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Canvas dimensions must be positive, got {self.canvas_width}x{self.canvas_height}."
            )
        if num_weeks <= 0:
            raise ValueError(f"Month grid must contain at least one week, got {num_weeks}.")
        if self.grid_height <= 0:
            raise RenderError(
                f"Canvas height {self.canvas_height}px leaves no room for the grid below "
                f"the {self.grid_top}px header bands.",
                stage="layout",
            )
        if self.canvas_width < 7:
            raise RenderError(
                f"Canvas width {self.canvas_width}px is too narrow for seven columns.",
                stage="layout",
            )


DEFAULT_LAYOUT: Final[MonthLayoutMetrics] = MonthLayoutMetrics()

__all__ = ["CellBox", "DEFAULT_LAYOUT", "MonthLayoutMetrics", "RenderError"]
