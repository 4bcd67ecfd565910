"""
Tests for the polyline, spline, parametric and CSV exporters.
"""

from __future__ import annotations

import csv
import io
import re
import sys
from pathlib import Path

import pytest

# Add backend to sys.path for importing modules when running tests directly
sys.path.append(str(Path(__file__).resolve().parents[1]))

from curve_editor.services.curve_model import CurveModel
from curve_editor.services.exporters import (
    INSUFFICIENT_POINTS_MESSAGE,
    build_parametric_pieces,
    compose_piecewise,
    hermite_to_power_basis,
    make_csv,
    make_parametric_curve,
    make_polyline_command,
    make_spline_command,
    sanitize_samples_per_segment,
    sanitize_spline_order,
    sanitize_spline_weight,
    to_list_literal,
)


def _model(*coords: tuple[float, float]) -> CurveModel:
    model = CurveModel()
    for x, y in coords:
        model.add_point(x, y)
    return model


def _cubic(c, s: float) -> float:
    return c.a * s ** 3 + c.b * s ** 2 + c.c * s + c.d


def test_list_literal_format() -> None:
    assert to_list_literal([(1.0, -2.5), (0.1234567, 3.0)]) == (
        "{ (1.000000,-2.500000), (0.123457,3.000000) }"
    )
    assert to_list_literal([]) == "{  }"
    assert to_list_literal([(float("nan"), 1.0)]) == "{ (NaN,1.000000) }"


def test_polyline_command_wraps_sampled_points() -> None:
    model = _model((0.0, 0.0), (1.0, 0.0), (2.0, 1.0))
    text = make_polyline_command(model, 4)
    assert text.startswith("Polyline({ (0.000000,0.000000), ")
    assert text.endswith("(2.000000,1.000000) })")
    assert len(re.findall(r"\([-\d.]+,[-\d.]+\)", text)) == 1 + 2 * 4


def test_polyline_command_with_invalid_samples_uses_default() -> None:
    model = _model((0.0, 0.0), (1.0, 0.0))
    text = make_polyline_command(model, 1)
    assert len(re.findall(r"\([-\d.]+,[-\d.]+\)", text)) == 1 + 48


def test_polyline_command_without_segments() -> None:
    assert make_polyline_command(_model((1.0, 1.0)), 10) == "Polyline({  })"


def test_spline_command_uses_sorted_control_points() -> None:
    model = _model((2.0, 1.0), (0.0, 0.0), (1.0, 3.0))
    text = make_spline_command(model)
    assert text == (
        "list1 = { (0.000000,0.000000), (1.000000,3.000000), (2.000000,1.000000) }\n"
        "spl = Spline(list1)"
    )


def test_spline_command_with_order_and_weight() -> None:
    model = _model((0.0, 0.0), (1.0, 3.0))
    assert make_spline_command(model, 3).splitlines()[1] == "spl = Spline(list1, 3, sqrt(x^2+y^2))"
    assert make_spline_command(model, 4, "absx").splitlines()[1] == "spl = Spline(list1, 4, abs(x)+0*y)"


def test_spline_command_ignores_small_order() -> None:
    model = _model((0.0, 0.0), (1.0, 3.0))
    assert make_spline_command(model, 2, "absx").splitlines()[1] == "spl = Spline(list1)"


def test_parametric_placeholder_for_fewer_than_two_points() -> None:
    assert make_parametric_curve(_model()) == INSUFFICIENT_POINTS_MESSAGE
    assert make_parametric_curve(_model((1.0, 1.0))) == INSUFFICIENT_POINTS_MESSAGE


def test_parametric_single_segment() -> None:
    text = make_parametric_curve(_model((0.0, 0.0), (1.0, 0.0)))
    s = "( 1 * t - 0 )"
    x_expr = (
        f"0.00000000*({s})^3 + 0.00000000*({s})^2 + 1.00000000*({s}) + 0.00000000"
    )
    y_expr = (
        f"0.00000000*({s})^3 + 0.00000000*({s})^2 + 0.00000000*({s}) + 0.00000000"
    )
    assert text == f"Curve( {x_expr}, {y_expr}, t, 0, 1 )"
    assert "If(" not in text


def test_parametric_nests_one_if_per_inner_boundary() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (2.0, 0.0), (3.0, 1.0))
    text = make_parametric_curve(model)
    assert text.startswith("Curve( If((t < 0.33333333), ")
    # Two If( per axis for three segments
    assert text.count("If(") == 4
    assert "(t < 0.66666667)" in text
    assert "( 3 * t - 2 )" in text
    assert text.count("(") == text.count(")")


def test_piecewise_bracket_count_matches_structure() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (2.0, 0.0), (3.0, 1.0), (4.0, 4.0))
    pieces = build_parametric_pieces(model.segments())
    assert [p.upper for p in pieces[:-1]] == pytest.approx([0.25, 0.5, 0.75])
    assert pieces[-1].upper is None
    expr = compose_piecewise(pieces, "x")
    assert expr.count("If(") == len(pieces) - 1
    assert expr.endswith(")" * (len(pieces) - 1))


def test_power_basis_reproduces_hermite_endpoints() -> None:
    c = hermite_to_power_basis(p0=1.0, p1=4.0, m0=2.0, m1=-1.0)
    assert _cubic(c, 0.0) == pytest.approx(1.0)
    assert _cubic(c, 1.0) == pytest.approx(4.0)
    # Derivative at the ends equals the tangents
    assert c.c == pytest.approx(2.0)
    assert 3 * c.a + 2 * c.b + c.c == pytest.approx(-1.0)


def test_parametric_coefficients_match_sampled_curve() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    model.set_manual_tangent(2, 50.0, -50.0)
    segments = model.segments()
    pieces = build_parametric_pieces(segments)
    for seg, piece in zip(segments, pieces):
        samples = seg.sample(4)
        for i, (x, y) in enumerate(samples):
            s = i / 4
            assert _cubic(piece.x, s) == pytest.approx(x)
            assert _cubic(piece.y, s) == pytest.approx(y)


def test_csv_has_header_and_full_precision() -> None:
    model = _model((0.0, 0.0), (1.0, 1.0 / 3.0))
    text = make_csv(model, 2)
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[0] == ["x", "y"]
    assert len(rows) == 1 + 3
    assert rows[-1] == ["1.0", repr(1.0 / 3.0)]


def test_csv_uses_same_sampling_as_polyline() -> None:
    model = _model((0.0, 0.0), (1.0, 2.0), (3.0, 1.0))
    rows = list(csv.reader(io.StringIO(make_csv(model, 5))))[1:]
    polyline = model.curve_polyline(5)
    assert [(float(x), float(y)) for x, y in rows] == polyline


def test_csv_default_sample_count() -> None:
    rows = make_csv(_model((0.0, 0.0), (1.0, 1.0))).strip().split("\n")
    assert len(rows) == 1 + 49


def test_csv_with_fewer_than_two_points_is_header_only() -> None:
    assert make_csv(_model((1.0, 1.0))) == "x,y\n"


@pytest.mark.parametrize(
    "raw,expected",
    [(5, 5), (2, 2), (1, 48), (0, 48), ("7", 7), ("x", 48), (None, 48), (10 ** 8, 5000), (5000, 5000)],
)
def test_sanitize_samples(raw, expected) -> None:
    assert sanitize_samples_per_segment(raw) == expected


def test_sanitize_spline_options() -> None:
    assert sanitize_spline_order(3) == 3
    assert sanitize_spline_order(2) is None
    assert sanitize_spline_order("bad") is None
    assert sanitize_spline_weight("ABSX") == "absx"
    assert sanitize_spline_weight("other") == "default"
