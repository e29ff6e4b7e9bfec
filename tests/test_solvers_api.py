# tests/test_solvers_api.py
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from taylor_integration import (
    InvalidConfigurationError,
    MinimumStepSize,
    ODESolverBase,
    TaylorSolver,
    solve_ode,
)


def test_solver_interface(harmonic):
    solver = TaylorSolver(harmonic, order=15)
    assert isinstance(solver, ODESolverBase)
    assert solver.name == "Taylor(order=15)"


def test_solve_returns_history(harmonic):
    solver = TaylorSolver(harmonic)
    t, y = solver.solve([0.0, np.pi], [1.0, 0.0])
    assert y.shape == (len(t), 2)
    assert t[0] == 0.0
    assert t[-1] == pytest.approx(np.pi, abs=1e-15)
    np.testing.assert_allclose(y[-1], [-1.0, 0.0], atol=1e-12)


def test_solve_with_overridden_tolerance(harmonic):
    solver = TaylorSolver(harmonic)
    t_fine, _ = solver.solve([0.0, np.pi], [1.0, 0.0])
    t_coarse, y = solver.solve([0.0, np.pi], [1.0, 0.0], tol=1e-8)
    assert len(t_coarse) < len(t_fine)
    np.testing.assert_allclose(y[-1], [-1.0, 0.0], atol=1e-7)


def test_single_step_with_bound(harmonic):
    solver = TaylorSolver(harmonic)
    y_next, h = solver.step(0.0, [1.0, 0.0], 0.1)
    assert h == 0.1
    np.testing.assert_allclose(y_next, [np.cos(0.1), -np.sin(0.1)], atol=1e-15)


@pytest.mark.parametrize("h", [0.0, -0.1])
def test_single_step_rejects_non_positive_bound(harmonic, h):
    solver = TaylorSolver(harmonic)
    with pytest.raises(InvalidConfigurationError):
        solver.step(0.0, [1.0, 0.0], h)


def test_single_step_adaptive(harmonic):
    solver = TaylorSolver(harmonic)
    y_next, h = solver.step(0.0, [1.0, 0.0])
    assert h > 0.1
    np.testing.assert_allclose(y_next, [np.cos(h), -np.sin(h)], atol=1e-14)


def test_solve_ode_agrees_with_scipy(harmonic):
    t, y = solve_ode(harmonic, [0.0, 3.0], [1.0, 0.0], order=20)
    t_ref, y_ref = solve_ode(harmonic, [0.0, 3.0], [1.0, 0.0], method='scipy')
    assert t[-1] == pytest.approx(t_ref[-1])
    np.testing.assert_allclose(y[-1], y_ref[-1], atol=1e-9)


def test_solve_ode_params():
    def oscillator(x, omega):
        return [1, x[2], -omega ** 2 * x[1]]

    _, y = solve_ode(oscillator, [0.0, 1.0], [1.0, 0.0], params=3.0)
    assert y[-1, 0] == pytest.approx(np.cos(3.0), abs=1e-12)


def test_solve_ode_forwards_final_step_option(harmonic):
    t, _ = solve_ode(harmonic, [0.0, 1.0], [1.0, 0.0])
    assert t[-1] == pytest.approx(1.0, abs=1e-15)
    t, y = solve_ode(harmonic, [0.0, 1.0], [1.0, 0.0], clamp_final_step=False)
    assert t[-1] > 1.0
    assert y[-1, 0] == pytest.approx(np.cos(t[-1]), abs=1e-12)


def test_solve_ode_forwards_step_policy(harmonic):
    t_default, _ = solve_ode(harmonic, [0.0, 3.0], [1.0, 0.0])
    t_halved, y = solve_ode(harmonic, [0.0, 3.0], [1.0, 0.0], step_policy=MinimumStepSize(0.5))
    assert len(t_halved) > len(t_default)
    assert y[-1, 0] == pytest.approx(np.cos(3.0), abs=1e-12)


def test_solve_ode_scipy_tolerances(harmonic):
    t_fine, _ = solve_ode(harmonic, [0.0, 3.0], [1.0, 0.0], method='scipy')
    t_coarse, y = solve_ode(harmonic, [0.0, 3.0], [1.0, 0.0], method='scipy', rtol=1e-6, atol=1e-6)
    assert len(t_coarse) < len(t_fine)
    assert y[-1, 0] == pytest.approx(np.cos(3.0), abs=1e-4)


def test_solve_ode_unknown_method(harmonic):
    with pytest.raises(ValueError):
        solve_ode(harmonic, [0.0, 1.0], [1.0, 0.0], method='radau')


def test_solve_ode_verbose(harmonic, capsys):
    solve_ode(harmonic, [0.0, 1.0], [1.0, 0.0], verbose=True)
    assert "积分完成" in capsys.readouterr().out


def test_solve_ode_plot(harmonic, monkeypatch):
    shown = []
    monkeypatch.setattr(plt, "show", lambda: shown.append(True))
    solve_ode(harmonic, [0.0, 1.0], [1.0, 0.0], plot=True)
    assert shown == [True]
    plt.close("all")
