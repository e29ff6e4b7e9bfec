from .series import Taylor1
from .core import (
    taylor_coefficients,
    stepsize,
    stepsize_all,
    taylor_propagator,
    taylor_step,
    taylor_one_step,
    taylor_one_step_inplace,
    new_series_vector,
    reset_series_vector,
)
from .integrator import DataLog, taylor_integrate
from .errors import (
    TaylorIntegrationError,
    DimensionMismatchError,
    InvalidConfigurationError,
    DegenerateStepError,
    StepLimitWarning,
)

# 统一接口
from .api import solve_ode
from .base import ODESolverBase, StepSizePolicy, MinimumStepSize
from .solvers import TaylorSolver
from .utils import rhs_from_sympy, symbolic_rhs, series_from_sympy, reference_solution

__version__ = '0.3.0'
