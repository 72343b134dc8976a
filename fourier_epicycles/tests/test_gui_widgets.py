from __future__ import annotations

"""Headless smoke tests for the notebook viewer.

These tests run without a display and verify that:
1. build_gui returns a widget tree with an Output area for the drawing
2. buttons and the Play widget are wired to engine commands
3. draw_frame produces the expected matplotlib artists
4. HtmlLog classifies and coalesces messages
"""

import matplotlib

matplotlib.use("Agg")

import ipywidgets as w
import numpy as np
import pytest
from matplotlib.figure import Figure

from fourier_epicycles.animation.engine import AnimationEngine
from fourier_epicycles.gui.log_view import HtmlLog
from fourier_epicycles.gui.plots import circle_colors, draw_frame
from fourier_epicycles.models.functions import FunctionKind
from fourier_epicycles.models.profile import EngineProfile


def _small_profile() -> EngineProfile:
    return EngineProfile(
        function=FunctionKind.STEP,
        order=1,
        parallel="serial",
        trace_samples=50,
        max_trace_samples=200,
    )


def _find(widget, cls, description=None):
    if isinstance(widget, cls) and (description is None or getattr(widget, "description", None) == description):
        return widget
    for child in getattr(widget, "children", ()):
        found = _find(child, cls, description)
        if found is not None:
            return found
    return None


@pytest.fixture()
def gui():
    from fourier_epicycles.gui.app import build_gui

    return build_gui(_small_profile())


def test_build_gui_returns_panel_with_output(gui) -> None:
    assert isinstance(gui, w.VBox)
    assert _find(gui, w.Output) is not None
    assert _find(gui, w.Play) is not None
    assert gui.viewer_state.frames_drawn >= 1


def test_order_buttons_drive_engine(gui) -> None:
    eng = gui.engine
    btn_up = _find(gui, w.Button, "N +")
    btn_down = _find(gui, w.Button, "N -")
    assert btn_up is not None and btn_down is not None

    btn_up.click()
    assert eng.order == 3
    btn_down.click()
    assert eng.order == 1
    btn_down.click()  # would drop below 1: ignored
    assert eng.order == 1


def test_zoom_speed_and_play(gui) -> None:
    eng = gui.engine
    _find(gui, w.Button, "Zoom +").click()
    assert eng.state.zoom == 2.0
    _find(gui, w.Button, "Faster").click()
    assert eng.state.speed == pytest.approx(0.2)

    play = _find(gui, w.Play)
    play.value = 1
    play.value = 2
    assert eng.state.progress == pytest.approx(2 * 0.2 / 60.0)


def test_function_dropdown_switches_variant(gui) -> None:
    dd = _find(gui, w.Dropdown, "Function")
    dd.value = "circle"
    assert gui.engine.function is FunctionKind.CIRCLE
    assert gui.engine.state.progress == 0.0


def test_draw_frame_artists() -> None:
    eng = AnimationEngine(_small_profile())
    eng.tick(3.0)
    fig = Figure()
    ax = fig.add_subplot(1, 1, 1)

    draw_frame(ax, eng.frame())
    assert len(ax.get_lines()) == 1  # trace only
    assert len(ax.collections) == 3  # circles, vectors, arrow heads

    # redrawing clears the previous frame
    draw_frame(ax, eng.frame(), show_circles=False)
    assert len(ax.get_lines()) == 1
    assert len(ax.collections) == 2


def test_circle_colors_are_seeded() -> None:
    a = circle_colors(5, seed=0)
    b = circle_colors(5, seed=0)
    assert a.shape == (5, 3)
    np.testing.assert_array_equal(a, b)
    assert np.all((a >= 0.0) & (a <= 1.0))


def test_html_log_levels_and_coalescing() -> None:
    log = HtmlLog()
    log("Increased n to 18")
    log("WARNING: order 0 rejected")
    log("WARNING: order 0 rejected")
    log.error("ERROR: boom")

    assert log.entries == [
        ("info", "Increased n to 18", 1),
        ("warning", "WARNING: order 0 rejected", 2),
        ("error", "ERROR: boom", 1),
    ]
    assert "(x2)" in log.widget.value

    log.clear()
    assert log.entries == []
    assert "Log is empty" in log.widget.value
