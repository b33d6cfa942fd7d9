import numpy as np
import pytest

from divesim.core.metrics import EMPTY_SUMMARY, compute_trend, session_summary, summarize_history


def test_empty_history():
    assert summarize_history([], []) == EMPTY_SUMMARY


def test_single_point_has_no_trend():
    summary = summarize_history([5.0], [12.0])
    assert summary["count"] == 1
    assert summary["mean"] == 12.0
    assert summary["rate_per_min"] == 0.0


def test_trend_per_minute():
    times = np.arange(0, 60, 1.0)
    values = 0.5 * times  # 0.5 m/s descent
    assert compute_trend(times, values) == pytest.approx(30.0)


def test_flat_timestamps():
    assert compute_trend(np.array([3.0, 3.0]), np.array([1.0, 2.0])) == 0.0


def test_session_summary(sim):
    for i, depth in enumerate((10, 20, 30)):
        sim.set_depth(depth)
        sim.append_history(now=float(i))
    summary = session_summary(sim.get_latest_state())
    assert summary["depth"]["max"] == 30
    assert summary["depth"]["mean"] == pytest.approx(20)
    assert summary["depth"]["rate_per_min"] == pytest.approx(600)
    assert summary["umbilical_pressure"]["min"] == 10.0
    assert summary["umbilical_pressure"]["rate_per_min"] == pytest.approx(0.0)
