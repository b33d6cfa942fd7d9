import numpy as np

from divesim.core.state import DiveState

EMPTY_SUMMARY = {"count": 0, "mean": 0.0, "min": 0.0, "max": 0.0, "rate_per_min": 0.0}


def compute_trend(times: np.ndarray, values: np.ndarray) -> float:
    """
    Least-squares slope of values over time, per minute.
    Returns 0 when fewer than two distinct timestamps are available.
    """
    if values.size < 2 or np.ptp(times) <= 0:
        return 0.0
    slope, _ = np.polyfit(times, values, 1)
    return float(slope * 60.0)


def summarize_history(times: list, values: list) -> dict:
    """
    Summary statistics of one gauge history.

    Args:
        times: List of timestamps (s)
        values: List of gauge values

    Returns:
        dict: {count, mean, min, max, rate_per_min}
    """
    t_arr = np.asarray(times, dtype=float)
    v_arr = np.asarray(values, dtype=float)
    if v_arr.size == 0:
        return dict(EMPTY_SUMMARY)

    return {
        "count": int(v_arr.size),
        "mean": float(np.mean(v_arr)),
        "min": float(np.min(v_arr)),
        "max": float(np.max(v_arr)),
        "rate_per_min": compute_trend(t_arr, v_arr),
    }


def session_summary(state: DiveState) -> dict:
    """Depth and umbilical pressure summaries over the recorded history."""
    return {
        "depth": summarize_history(
            [p.time for p in state.depth_history], [p.value for p in state.depth_history]
        ),
        "umbilical_pressure": summarize_history(
            [p.time for p in state.pressure_history], [p.value for p in state.pressure_history]
        ),
    }
