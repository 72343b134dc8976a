from __future__ import annotations

import numpy as np
import pytest

from fourier_epicycles.analysis.coefficients import solve_coefficients
from fourier_epicycles.analysis.superposition import total
from fourier_epicycles.animation.projector import (
    HEAD_LENGTH_FACTOR,
    epicycle_segments,
    project_state,
    trace_points,
    trace_sample_count,
)
from fourier_epicycles.models.functions import FunctionKind
from fourier_epicycles.models.state import AnimationState


@pytest.fixture(scope="module")
def tent_coeffs():
    return solve_coefficients(FunctionKind.TENT, 3, parallel="serial")


def test_open_trace_ends_at_exact_progress(tent_coeffs) -> None:
    st = AnimationState(progress=0.4567)
    pts = trace_points(tent_coeffs, st, 100)

    # k = 0..45 on the grid, plus the exact sample at progress
    assert pts.shape == (47, 2)
    z0 = total(tent_coeffs, 0.0)
    zp = total(tent_coeffs, 0.4567)
    np.testing.assert_allclose(pts[0], [z0.real, z0.imag], atol=1e-12)
    np.testing.assert_allclose(pts[-1], [zp.real, zp.imag], atol=1e-12)


def test_trace_at_start_is_a_single_point_pair(tent_coeffs) -> None:
    pts = trace_points(tent_coeffs, AnimationState(progress=0.0), 100)
    assert pts.shape == (2, 2)
    np.testing.assert_allclose(pts[0], pts[1])


def test_completed_lap_traces_full_period(tent_coeffs) -> None:
    st = AnimationState(progress=0.2, lap_completed=True)
    pts = trace_points(tent_coeffs, st, 100)
    # 100 grid points, k = 20 coincides with progress; plus the closing sample
    assert pts.shape == (101, 2)
    np.testing.assert_allclose(pts[0], pts[-1], atol=1e-12)


def test_completed_lap_still_ends_at_exact_progress(tent_coeffs) -> None:
    st = AnimationState(progress=0.4567, lap_completed=True)
    pts = trace_points(tent_coeffs, st, 100)
    assert pts.shape == (102, 2)

    zp = total(tent_coeffs, 0.4567)
    z46 = total(tent_coeffs, 0.46)
    z45 = total(tent_coeffs, 0.45)
    np.testing.assert_allclose(pts[0], [zp.real, zp.imag], atol=1e-12)
    np.testing.assert_allclose(pts[1], [z46.real, z46.imag], atol=1e-12)
    np.testing.assert_allclose(pts[-2], [z45.real, z45.imag], atol=1e-12)
    np.testing.assert_allclose(pts[-1], [zp.real, zp.imag], atol=1e-12)

    # no chord: consecutive points stay one grid step apart
    steps = np.hypot(*np.diff(pts, axis=0).T)
    assert steps.max() < 0.2


def test_segments_form_a_chain(tent_coeffs) -> None:
    t = 0.31
    segs = epicycle_segments(tent_coeffs, t)
    assert [s.index for s in segs] == list(range(-3, 4))
    np.testing.assert_allclose(segs[0].start, [0.0, 0.0])
    for a, b in zip(segs[:-1], segs[1:]):
        np.testing.assert_allclose(a.end, b.start)

    z = total(tent_coeffs, t)
    np.testing.assert_allclose(segs[-1].end, [z.real, z.imag], atol=1e-12)

    for s in segs:
        assert s.radius == pytest.approx(abs(tent_coeffs.coefficient(s.index)), abs=1e-12)
        assert s.radius == pytest.approx(float(np.hypot(*(s.end - s.start))), abs=1e-12)


def test_arrow_heads_hang_off_the_vector_end(tent_coeffs) -> None:
    for s in epicycle_segments(tent_coeffs, 0.7):
        assert s.head.shape == (3, 2)
        np.testing.assert_allclose(s.head[0], s.end)
        barb = float(np.hypot(*(s.head[1] - s.end)))
        assert barb == pytest.approx(HEAD_LENGTH_FACTOR * s.radius, abs=1e-12)


def test_camera_follows_tip_only_when_zoomed(tent_coeffs) -> None:
    flat = project_state(tent_coeffs, AnimationState(progress=0.3, zoom=1.0), trace_samples=50)
    np.testing.assert_allclose(flat.center, [0.0, 0.0])
    assert flat.line_scale == 1.0

    zoomed = project_state(tent_coeffs, AnimationState(progress=0.3, zoom=4.0), trace_samples=50)
    np.testing.assert_allclose(zoomed.center, zoomed.tip)
    np.testing.assert_allclose(zoomed.tip, flat.tip)
    assert zoomed.line_scale == 0.25

    xmin, xmax, ymin, ymax = zoomed.view_limits(margin=1.0)
    assert xmax - xmin == pytest.approx(0.5)
    assert (xmin + xmax) / 2 == pytest.approx(zoomed.tip[0])


def test_trace_density_scales_with_zoom() -> None:
    assert trace_sample_count(1.0, 5000, 80000) == 5000
    assert trace_sample_count(4.0, 5000, 80000) == 20000
    assert trace_sample_count(64.0, 5000, 80000) == 80000


def test_zoomed_frame_uses_denser_trace(tent_coeffs) -> None:
    st = AnimationState(progress=0.5, zoom=2.0)
    frame = project_state(tent_coeffs, st, trace_samples=100, max_trace_samples=1000)
    # 200 samples per period at zoom 2: k = 0..100 plus the exact sample
    assert frame.trace.shape == (102, 2)


def test_segment_arrays(tent_coeffs) -> None:
    frame = project_state(tent_coeffs, AnimationState(progress=0.1), trace_samples=20)
    starts, ends, radii = frame.segment_arrays()
    assert starts.shape == ends.shape == (7, 2)
    assert radii.shape == (7,)
    np.testing.assert_allclose(ends[-1], frame.tip)


def test_invalid_sample_count(tent_coeffs) -> None:
    with pytest.raises(ValueError):
        trace_points(tent_coeffs, AnimationState(), 0)
