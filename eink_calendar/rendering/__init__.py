"""Pillow renderers for the month view and the error panel."""

from .error_panel import ErrorPanelRenderer
from .fonts import truncate_text
from .layout import DEFAULT_LAYOUT, MonthLayoutMetrics, RenderError
from .renderer import MonthRenderer, RendererConfig

__all__ = [
    "DEFAULT_LAYOUT",
    "ErrorPanelRenderer",
    "MonthLayoutMetrics",
    "MonthRenderer",
    "RenderError",
    "RendererConfig",
    "truncate_text",
]
