from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
from PIL import Image, ImageColor

from eink_calendar.rendering import DEFAULT_LAYOUT, ErrorPanelRenderer, RenderError, RendererConfig


def test_error_panel_is_written_at_display_size(tmp_path: Path) -> None:
    output = tmp_path / "calendar.png"
    config = RendererConfig()
    details = {
        "Error": "failed to fetch events",
        "Time": "2024-03-15 10:00:00 CET",
        "Args": "eink-calendar --output calendar.png",
        "Python Version": "3.12.1",
        "OS/Arch": "Linux/armv7l",
    }

    image = ErrorPanelRenderer(config).render_error(
        "failed to fetch events: " + "very long explanation " * 20,
        details,
        output_path=output,
    )

    assert image.size == (800, 480)
    assert image.getpixel((40, 240)) == ImageColor.getrgb(config.accent_color)
    with Image.open(output) as saved:
        assert saved.size == (800, 480)


def test_error_panel_handles_small_canvas() -> None:
    layout = replace(DEFAULT_LAYOUT, canvas_width=60, canvas_height=60)

    image = ErrorPanelRenderer(RendererConfig(layout=layout)).render_error("boom", {"Error": "boom"})

    assert image.size == (60, 60)


def test_error_panel_write_failure_raises(tmp_path: Path) -> None:
    with pytest.raises(RenderError) as excinfo:
        ErrorPanelRenderer().render_error("boom", {}, output_path=tmp_path / "nope" / "x.png")

    assert excinfo.value.stage == "encode"
