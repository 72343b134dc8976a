from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import ipywidgets as w
from IPython.display import display
from matplotlib.figure import Figure

from fourier_epicycles.animation.engine import AnimationEngine
from fourier_epicycles.gui.log_view import HtmlLog
from fourier_epicycles.gui.plots import draw_frame
from fourier_epicycles.models.functions import FunctionKind
from fourier_epicycles.models.profile import EngineProfile


# Keep a single active GUI instance per kernel to avoid duplicated callbacks / stacked widgets.
_ACTIVE_GUI: Optional[w.Widget] = None


@dataclass
class ViewerState:
    """Mutable GUI-side state; the animation itself lives in the engine."""

    engine: AnimationEngine
    fig: Optional[Figure] = None
    ax: object = None
    busy: bool = False
    frames_drawn: int = 0


def build_gui(
    profile: Optional[EngineProfile] = None,
    *,
    engine: Optional[AnimationEngine] = None,
    figsize: float = 6.0,
) -> w.Widget:
    """
    Epicycle viewer panel (Jupyter / VSCode notebooks).

    Controls map one-to-one onto engine commands:
      - Function dropdown -> set_function
      - N + / N - -> increase_order / decrease_order
      - Faster / Slower / Reverse -> change_speed / reverse
      - Zoom + / Zoom - -> zoom_in / zoom_out
      - Play widget -> tick() once per step, then redraw

    Notes on "widget multiplication":
      - This function closes the previous GUI instance created from this module.
    """
    global _ACTIVE_GUI

    if _ACTIVE_GUI is not None:
        try:
            _ACTIVE_GUI.close()
        except Exception:
            pass
        _ACTIVE_GUI = None

    log = HtmlLog(title="Log", height_px=140)
    if engine is None:
        engine = AnimationEngine(profile, log=log)
    profile = engine.profile
    st = ViewerState(engine=engine)

    out_plot = w.Output(layout=w.Layout(border="1px solid #ddd"))
    out_table = w.Output(layout=w.Layout(max_height="320px", overflow_y="auto"))
    status = w.HTML()

    dd_function = w.Dropdown(
        options=[(k.label, k.value) for k in FunctionKind],
        value=engine.function.value,
        description="Function",
        layout=w.Layout(width="220px"),
    )
    btn_order_down = w.Button(description="N -", layout=w.Layout(width="70px"))
    btn_order_up = w.Button(description="N +", layout=w.Layout(width="70px"))
    btn_slower = w.Button(description="Slower", layout=w.Layout(width="80px"))
    btn_faster = w.Button(description="Faster", layout=w.Layout(width="80px"))
    btn_reverse = w.Button(description="Reverse", layout=w.Layout(width="80px"))
    btn_zoom_out = w.Button(description="Zoom -", layout=w.Layout(width="80px"))
    btn_zoom_in = w.Button(description="Zoom +", layout=w.Layout(width="80px"))
    btn_restart = w.Button(description="Restart", button_style="warning", layout=w.Layout(width="80px"))
    chk_circles = w.Checkbox(value=True, description="Circles", indent=False, layout=w.Layout(width="90px"))
    play = w.Play(
        value=0,
        min=0,
        max=10**9,
        step=1,
        interval=max(1, int(round(1000.0 * profile.tick_seconds))),
        description="Run",
    )

    def _refresh_status() -> None:
        snap = engine.snapshot
        s = snap.state
        lap = "complete" if s.lap_completed else "open"
        status.value = (
            f"<b>{snap.function.label}</b> &nbsp; N={snap.order} ({len(snap.coefficients)} terms) &nbsp; "
            f"t={s.progress:.3f} &nbsp; speed={s.speed:+.4g} laps/s &nbsp; zoom={s.zoom:g}x &nbsp; lap {lap}"
        )

    def _refresh_table() -> None:
        with out_table:
            out_table.clear_output(wait=True)
            display(engine.coefficients.to_frame())

    def _redraw() -> None:
        if st.fig is None:
            st.fig = Figure(figsize=(figsize, figsize))
            st.ax = st.fig.add_subplot(1, 1, 1)
        frame = engine.frame()
        draw_frame(st.ax, frame, show_circles=chk_circles.value)
        with out_plot:
            out_plot.clear_output(wait=True)
            display(st.fig)
        st.frames_drawn += 1
        _refresh_status()

    def _run_command(fn, *, recomputes: bool = False) -> None:
        # Debounce: ignore clicks while a recompute is still running.
        if st.busy:
            return
        st.busy = True
        try:
            fn()
            if recomputes:
                dd_function.value = engine.function.value
                _refresh_table()
            _redraw()
        except Exception as e:
            log.error(f"ERROR: {e!r}")
        finally:
            st.busy = False

    def _on_function(change) -> None:
        if change["new"] == engine.function.value:
            return
        _run_command(lambda: engine.set_function(change["new"]), recomputes=True)

    def _on_play(_change) -> None:
        if st.busy:
            return
        engine.tick(profile.tick_seconds)
        _redraw()

    dd_function.observe(_on_function, names="value")
    play.observe(_on_play, names="value")
    btn_order_up.on_click(lambda _b: _run_command(engine.increase_order, recomputes=True))
    btn_order_down.on_click(lambda _b: _run_command(engine.decrease_order, recomputes=True))
    btn_faster.on_click(lambda _b: _run_command(lambda: engine.change_speed(2.0)))
    btn_slower.on_click(lambda _b: _run_command(lambda: engine.change_speed(0.5)))
    btn_reverse.on_click(lambda _b: _run_command(engine.reverse))
    btn_zoom_in.on_click(lambda _b: _run_command(engine.zoom_in))
    btn_zoom_out.on_click(lambda _b: _run_command(engine.zoom_out))
    btn_restart.on_click(lambda _b: _run_command(engine.reset))
    chk_circles.observe(lambda _c: _redraw(), names="value")

    controls = w.VBox(
        [
            w.HBox([dd_function, btn_order_down, btn_order_up, btn_restart]),
            w.HBox([play, btn_slower, btn_faster, btn_reverse, btn_zoom_out, btn_zoom_in, chk_circles]),
            status,
        ]
    )
    gui = w.VBox([controls, w.HBox([out_plot, out_table]), log.panel])
    gui.engine = engine
    gui.viewer_state = st

    _refresh_table()
    _redraw()

    _ACTIVE_GUI = gui
    return gui
