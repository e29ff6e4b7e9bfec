# tests/test_integrator.py
import warnings

import numpy as np
import pytest

from taylor_integration import (
    DataLog,
    DegenerateStepError,
    DimensionMismatchError,
    InvalidConfigurationError,
    MinimumStepSize,
    StepLimitWarning,
    taylor_integrate,
)

TWO_PI = 2 * np.pi


def test_harmonic_oscillator_full_period(harmonic):
    state = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20)
    assert state[0] == pytest.approx(TWO_PI, abs=1e-15)
    assert state[1] == pytest.approx(1.0, abs=1e-12)
    assert state[2] == pytest.approx(0.0, abs=1e-12)


def test_overshoot_when_final_step_not_clamped(harmonic):
    state = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, clamp_final_step=False)
    assert state[0] >= TWO_PI
    assert state[1] == pytest.approx(np.cos(state[0]), abs=1e-12)
    assert state[2] == pytest.approx(-np.sin(state[0]), abs=1e-12)


def test_exponential_decay():
    state = taylor_integrate(lambda x, p: [1, -x[1]], [0.0, 1.0], 1.0, 1e-20, 20)
    assert state[1] == pytest.approx(np.exp(-1.0), rel=1e-14)


def test_kepler_circular_orbit():
    def kepler(x, params):
        t, qx, qy, vx, vy = x
        r3 = (qx * qx + qy * qy) ** 1.5
        return [1, vx, vy, -qx / r3, -qy / r3]

    state = taylor_integrate(kepler, [0.0, 1.0, 0.0, 0.0, 1.0], TWO_PI, 1e-20, 20)
    np.testing.assert_allclose(state[1:], [1.0, 0.0, 0.0, 1.0], atol=1e-10)


def test_logging_records_every_step(harmonic):
    state, log = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True)
    table = log.as_array()
    assert table.shape == (len(log), 3)
    assert len(log) > 2
    np.testing.assert_array_equal(table[0], [0.0, 1.0, 0.0])
    np.testing.assert_array_equal(table[-1], state)
    assert np.all(np.diff(log.t) > 0)
    np.testing.assert_allclose(table[:, 1], np.cos(table[:, 0]), atol=1e-12)


def test_caller_owned_columns_are_filled(harmonic):
    columns = [[], [], []]
    state, log = taylor_integrate(harmonic, [0.0, 1.0, 0.0], 1.0, 1e-20, 20, datalog=columns)
    assert log.columns is columns
    assert columns[0][0] == 0.0
    assert len(columns[0]) == len(columns[1]) == len(columns[2]) == len(log)
    assert columns[1][-1] == state[1]


def test_datalog_width_mismatch(harmonic):
    with pytest.raises(DimensionMismatchError):
        taylor_integrate(harmonic, [0.0, 1.0, 0.0], 1.0, 1e-20, 20, datalog=DataLog.empty(2))


def test_datalog_rejects_record_of_wrong_width():
    log = DataLog.empty(2)
    log.append([0.0, 1.0])
    with pytest.raises(DimensionMismatchError):
        log.append([0.5, 1.0, 2.0])
    assert len(log) == 1


def test_bounded_matches_unbounded_when_cap_not_reached(harmonic):
    _, log = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True)
    steps = len(log) - 1
    with warnings.catch_warnings():
        warnings.simplefilter("error", StepLimitWarning)
        _, bounded = taylor_integrate(
            harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True, max_steps=steps + 5
        )
    np.testing.assert_array_equal(bounded.as_array(), log.as_array())


def test_step_cap_returns_unfinished_state(harmonic):
    with pytest.warns(StepLimitWarning):
        state, log = taylor_integrate(
            harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True, max_steps=3
        )
    assert len(log) == 4
    assert state[0] < TWO_PI


def test_zero_step_cap_returns_initial_state(harmonic):
    with pytest.warns(StepLimitWarning):
        state = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, max_steps=0)
    np.testing.assert_array_equal(state, [0.0, 1.0, 0.0])


def test_reused_buffer_gives_same_trajectory(harmonic):
    _, log = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True)
    _, reused = taylor_integrate(
        harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True, reuse_buffer=True
    )
    np.testing.assert_array_equal(reused.as_array(), log.as_array())


def test_params_reach_rhs():
    def oscillator(x, omega):
        return [1, x[2], -omega ** 2 * x[1]]

    state = taylor_integrate(oscillator, [0.0, 1.0, 0.0], 1.0, 1e-20, 20, params=2.0)
    assert state[1] == pytest.approx(np.cos(2.0), abs=1e-12)
    assert state[2] == pytest.approx(-2.0 * np.sin(2.0), abs=1e-12)


def test_already_past_t_max(harmonic):
    state, log = taylor_integrate(harmonic, [3.0, 1.0, 0.0], 1.0, 1e-20, 20, with_logging=True)
    np.testing.assert_array_equal(state, [3.0, 1.0, 0.0])
    assert len(log) == 1


def test_integer_initial_state_is_promoted(harmonic):
    state = taylor_integrate(harmonic, [0, 1, 0], 1.0, 1e-20, 20)
    assert state.dtype == np.float64
    assert state[1] == pytest.approx(np.cos(1.0), abs=1e-13)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(order=0),
        dict(order=-3),
        dict(order=2.5),
        dict(abs_tol=0.0),
        dict(abs_tol=-1e-10),
        dict(abs_tol=float("nan")),
        dict(max_steps=-1),
        dict(max_step=0.0),
    ],
)
def test_invalid_configuration_is_rejected_before_stepping(kwargs):
    def f(x, params):
        raise AssertionError("right-hand side must not be evaluated")

    args = dict(order=20, abs_tol=1e-20)
    args.update(kwargs)
    order = args.pop("order")
    abs_tol = args.pop("abs_tol")
    with pytest.raises(InvalidConfigurationError):
        taylor_integrate(f, [0.0, 1.0], 1.0, abs_tol, order, **args)


def test_empty_state_is_rejected(harmonic):
    with pytest.raises(InvalidConfigurationError):
        taylor_integrate(harmonic, [], 1.0, 1e-20, 20)


def test_rhs_length_checked_at_entry():
    calls = []

    def f(x, params):
        calls.append(x)
        return [1, x[1]]

    with pytest.raises(DimensionMismatchError):
        taylor_integrate(f, [0.0, 1.0, 0.0], 1.0, 1e-20, 20)
    assert len(calls) == 1


def test_degenerate_step_aborts_integration():
    constant = lambda x, p: [1, 0]
    with pytest.raises(DegenerateStepError):
        taylor_integrate(constant, [0.0, 5.0], 1.0, 1e-10, 5)


def test_step_below_time_resolution_aborts_integration(harmonic):
    # at t=1e20 the float spacing is far larger than any accepted step
    with pytest.raises(DegenerateStepError):
        taylor_integrate(harmonic, [1e20, 1.0, 0.0], 2e20, 1e-20, 20)


def test_max_step_bounds_degenerate_step():
    constant = lambda x, p: [1, 0]
    state, log = taylor_integrate(constant, [0.0, 5.0], 1.0, 1e-10, 5, max_step=0.25, with_logging=True)
    assert len(log) == 5
    np.testing.assert_allclose(log.t, [0.0, 0.25, 0.5, 0.75, 1.0])
    assert state[1] == 5.0


def test_custom_step_policy(harmonic):
    _, default = taylor_integrate(harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True)
    state, halved = taylor_integrate(
        harmonic, [0.0, 1.0, 0.0], TWO_PI, 1e-20, 20, with_logging=True,
        step_policy=MinimumStepSize(0.5),
    )
    assert len(halved) > len(default)
    assert state[1] == pytest.approx(1.0, abs=1e-12)
