"""Tests for curve capture, loading and evaluation."""

import pytest

from ghostreplay.models.curve import Curve, Keyframe, approximately


def _captured(*points: tuple[float, float]) -> Curve:
    curve = Curve()
    for t, v in points:
        curve.capture(t, v)
    return curve


class TestApproximately:
    def test_equal_values(self):
        assert approximately(5.0, 5.0)

    def test_within_relative_tolerance(self):
        assert approximately(1000.0, 1000.0 + 1e-3)

    def test_near_zero_uses_absolute_tolerance(self):
        assert approximately(0.0, 1e-7)

    def test_different_values(self):
        assert not approximately(1.0, 1.01)


class TestCurveCapture:
    def test_first_keys_are_appended(self):
        curve = _captured((0.0, 1.0), (1.0, 1.0))
        assert len(curve) == 2

    def test_flat_run_collapses(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0), (2.0, 5.0), (3.0, 5.0), (4.0, 5.0))
        assert curve.keys == (
            Keyframe(0.0, 0.0),
            Keyframe(1.0, 5.0),
            Keyframe(4.0, 5.0),
        )

    def test_long_flat_run_stays_bounded(self):
        curve = _captured((0.0, 0.0), (1.0, 2.0))
        for i in range(2, 200):
            curve.capture(float(i), 2.0)
        assert len(curve) == 3
        assert curve.end_time == pytest.approx(199.0)

    def test_change_after_flat_run_appends(self):
        curve = _captured((0.0, 1.0), (1.0, 1.0), (2.0, 1.0), (3.0, 4.0))
        assert [k.time for k in curve] == [0.0, 2.0, 3.0]

    def test_no_collapse_when_last_two_differ(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0), (2.0, 5.0))
        assert len(curve) == 3

    def test_same_time_overwrites_last_key(self):
        curve = _captured((0.0, 1.0), (0.0, 3.0))
        assert curve.keys == (Keyframe(0.0, 3.0),)


class TestCurveLoading:
    def test_keys_are_sorted(self):
        curve = Curve()
        curve.add_key(2.0, 20.0)
        curve.add_key(0.0, 0.0)
        curve.add_key(1.0, 10.0)
        assert [k.time for k in curve] == [0.0, 1.0, 2.0]

    def test_no_collapsing_on_load(self):
        curve = Curve()
        for t in range(5):
            curve.add_key(float(t), 7.0)
        assert len(curve) == 5

    def test_duplicate_time_keeps_first(self):
        curve = Curve()
        assert curve.add_key(1.0, 1.0)
        assert not curve.add_key(1.0, 2.0)
        assert curve.keys == (Keyframe(1.0, 1.0),)


class TestCurveEvaluate:
    def test_empty_curve(self):
        assert Curve().evaluate(3.0) == 0.0

    def test_single_key(self):
        curve = _captured((1.0, 4.0))
        assert curve.evaluate(0.0) == 4.0
        assert curve.evaluate(5.0) == 4.0

    def test_hits_keys_exactly(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0), (3.0, -2.0))
        assert curve.evaluate(0.0) == 0.0
        assert curve.evaluate(1.0) == 5.0
        assert curve.evaluate(3.0) == -2.0

    def test_clamped_before_first(self):
        curve = _captured((1.0, 3.0), (2.0, 6.0))
        assert curve.evaluate(-10.0) == 3.0

    def test_clamped_after_last(self):
        curve = _captured((1.0, 3.0), (2.0, 6.0))
        assert curve.evaluate(100.0) == 6.0

    def test_midpoint(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0))
        assert curve.evaluate(0.5) == pytest.approx(2.5)

    def test_eases_in(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0))
        # 5 * (3 * 0.25^2 - 2 * 0.25^3)
        assert curve.evaluate(0.25) == pytest.approx(0.78125)

    def test_no_overshoot(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0), (2.0, 5.0), (3.0, 0.0))
        for i in range(31):
            assert 0.0 <= curve.evaluate(i / 10) <= 5.0

    def test_flat_span_is_exact(self):
        curve = _captured((0.0, 0.0), (1.0, 5.0), (2.0, 5.0), (6.0, 5.0))
        for t in (1.0, 1.5, 2.25, 4.0, 5.99, 6.0):
            assert curve.evaluate(t) == 5.0


class TestCurveAccessors:
    def test_end_time(self):
        curve = _captured((0.0, 1.0), (2.0, 3.0))
        assert curve.end_time == 2.0

    def test_empty_accessors(self):
        curve = Curve()
        assert curve.keys == ()
        assert curve.end_time == 0.0
