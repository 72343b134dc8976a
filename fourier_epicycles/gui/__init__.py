"""GUI package - interactive ipywidgets interface.

The panel is a thin shell around :class:`~fourier_epicycles.animation.engine.AnimationEngine`:
buttons and the Play widget translate into engine commands, and every frame
is drawn from ``engine.frame()`` with matplotlib.

Entry point:
    from fourier_epicycles.gui.app import build_gui
    gui = build_gui()
"""
