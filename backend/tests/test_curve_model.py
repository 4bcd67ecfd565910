"""
Unit tests for the point/curve model.

These tests exercise id assignment, sorting, the manual/auto tangent
state machine, silent no-ops on unknown ids and the joined polyline
produced by ``curve_polyline``.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

# Add backend to sys.path for importing modules when running tests directly
sys.path.append(str(Path(__file__).resolve().parents[1]))

from curve_editor.services.curve_model import (
    AUTO,
    AutoTangent,
    CurveModel,
    ManualTangent,
)
from curve_editor.services.hermite import InvalidArgument


def _model(*coords: tuple[float, float], tension: float = 0.0) -> CurveModel:
    model = CurveModel(tension=tension)
    for x, y in coords:
        model.add_point(x, y)
    return model


def test_ids_are_monotonic_and_never_reused() -> None:
    model = CurveModel()
    a = model.add_point(0.0, 0.0)
    b = model.add_point(1.0, 0.0)
    assert (a, b) == (1, 2)
    model.delete_point(b)
    c = model.add_point(2.0, 0.0)
    assert c == 3
    model.clear()
    assert len(model) == 0
    assert model.add_point(0.0, 0.0) == 4


def test_sorted_points_break_ties_by_id() -> None:
    model = _model((2.0, 0.0), (1.0, 5.0), (1.0, -5.0), (0.0, 0.0))
    assert [p.id for p in model.sorted_points()] == [4, 2, 3, 1]


def test_new_points_start_with_auto_tangent() -> None:
    model = _model((0.0, 0.0))
    point = model.get_point(1)
    assert point.tangent == AUTO
    assert isinstance(point.tangent, AutoTangent)
    assert not point.is_manual


def test_unknown_ids_are_silent_no_ops() -> None:
    model = _model((0.0, 0.0), (1.0, 1.0))
    before = model.points()
    assert model.move_point(99, 5.0, 5.0) is False
    assert model.delete_point(99) is False
    assert model.set_manual_tangent(99, 1.0, 1.0) is False
    assert model.clear_tangent(99) is False
    assert model.enable_manual(99) is False
    assert model.resolved_tangent(99) is None
    assert model.clamped_tangent(99) is None
    assert model.points() == before


def test_move_keeps_tangent_mode() -> None:
    model = _model((0.0, 0.0), (1.0, 1.0))
    model.set_manual_tangent(1, 0.5, 0.25)
    model.move_point(1, -1.0, 2.0)
    point = model.get_point(1)
    assert point.position == (-1.0, 2.0)
    assert point.tangent == ManualTangent(0.5, 0.25)


def test_non_finite_input_falls_back_to_zero() -> None:
    model = CurveModel()
    pid = model.add_point(float("nan"), float("inf"))
    assert model.get_point(pid).position == (0.0, 0.0)
    model.move_point(pid, "abc", 3.0)
    assert model.get_point(pid).position == (0.0, 3.0)


def test_resolved_tangent_for_auto_point_matches_engine() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0), tension=0.25)
    auto = model.auto_tangents()
    for point in model.points():
        assert model.resolved_tangent(point.id) == auto[point.id]


def test_manual_tangent_overrides_auto() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    model.set_manual_tangent(2, -4.0, 0.5)
    assert model.resolved_tangent(2) == (-4.0, 0.5)
    assert model.get_point(2).is_manual


def test_clear_after_set_restores_exact_auto_value() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0), tension=0.3)
    original = model.resolved_tangent(2)
    model.set_manual_tangent(2, 7.0, -7.0)
    model.clear_tangent(2)
    assert model.resolved_tangent(2) == original
    assert not model.get_point(2).is_manual


def test_clear_on_auto_point_is_a_no_op() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0))
    assert model.clear_tangent(1) is True
    assert model.get_point(1).tangent == AUTO


def test_enable_manual_freezes_current_auto_value() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    auto = model.resolved_tangent(2)
    model.enable_manual(2)
    assert model.get_point(2).tangent == ManualTangent(*auto)
    # Moving a neighbour no longer changes the frozen value
    model.move_point(3, 5.0, 5.0)
    assert model.resolved_tangent(2) == auto


def test_delete_leaves_manual_neighbour_unchanged() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    model.set_manual_tangent(3, 0.2, -0.1)
    model.delete_point(2)
    assert model.resolved_tangent(3) == (0.2, -0.1)


def test_delete_changes_auto_neighbours() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    before = model.resolved_tangent(1)
    model.delete_point(2)
    assert model.resolved_tangent(1) != before
    assert model.resolved_tangent(1) == pytest.approx((3.0, 1.0))


def test_clamped_tangents_respect_chord_bound() -> None:
    model = _model((0.0, 0.0), (1.0, 0.0), (1.5, 0.0))
    model.set_manual_tangent(3, 100.0, 100.0)
    tangent = model.clamped_tangent(3)
    assert math.hypot(*tangent) == pytest.approx(0.75)
    # The stored manual value itself is not modified
    assert model.resolved_tangent(3) == (100.0, 100.0)


def test_segment_count() -> None:
    assert _model().segments() == []
    assert _model((0.0, 0.0)).segments() == []
    assert len(_model((0.0, 0.0), (1.0, 0.0), (2.0, 1.0)).segments()) == 2


def test_segments_share_the_point_tangent() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    first, second = model.segments()
    assert first.m1 == second.m0
    assert first.p1 == second.p0


def test_samples_are_continuous_across_segments() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0), (4.0, -1.0))
    segments = model.segments()
    for left, right in zip(segments, segments[1:]):
        assert left.sample(6)[-1] == right.sample(6)[0]


@pytest.mark.parametrize("n,k", [(2, 1), (3, 5), (5, 48)])
def test_polyline_sample_count(n: int, k: int) -> None:
    model = _model(*[(float(i), float(i % 2)) for i in range(n)])
    assert len(model.curve_polyline(k)) == 1 + (n - 1) * k


def test_polyline_empty_for_fewer_than_two_points() -> None:
    assert _model().curve_polyline(10) == []
    assert _model((1.0, 1.0)).curve_polyline(10) == []


def test_collinear_points_give_straight_line() -> None:
    model = _model((0.0, 0.0), (2.0, 0.0), (4.0, 0.0))
    polyline = model.curve_polyline(2)
    assert len(polyline) == 5
    assert polyline[0] == (0.0, 0.0)
    assert polyline[-1] == (4.0, 0.0)
    assert all(y == pytest.approx(0.0) for _, y in polyline)
    xs = [x for x, _ in polyline]
    assert xs == pytest.approx([0.0, 1.0, 2.0, 3.0, 4.0])


def test_polyline_rejects_invalid_sample_count() -> None:
    model = _model((0.0, 0.0), (1.0, 1.0))
    with pytest.raises(InvalidArgument):
        model.curve_polyline(0)


def test_tension_setter_clips_and_sanitises() -> None:
    model = CurveModel()
    model.tension = 3.0
    assert model.tension == 1.0
    model.tension = -1.0
    assert model.tension == 0.0
    model.tension = float("nan")
    assert model.tension == 0.0
