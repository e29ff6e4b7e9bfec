import numpy as np

from .base import ODESolverBase
from .core import new_series_vector, taylor_step
from .errors import InvalidConfigurationError
from .integrator import taylor_integrate


class TaylorSolver(ODESolverBase):
    """自动微分泰勒级数求解器"""

    def __init__(self, f, order=20, abs_tol=1e-20, params=None, step_policy=None,
                 max_step=None, max_steps=None, reuse_buffer=False, verbose=False):
        """
        初始化求解器

        参数:
            f: 右端函数 f(x, params)，x[0]为时间，返回值第0个分量应为1
            order: 泰勒展开阶数
            abs_tol: 默认绝对容差
            params: 原样传给f的参数
            step_policy: 步长策略，默认stepsize_all
            max_step: 最大允许步长
            max_steps: 最大步数
            reuse_buffer: 是否复用级数缓冲区
            verbose: 是否打印积分信息
        """
        self.f = f
        self.order = order
        self.abs_tol = abs_tol
        self.params = params
        self.step_policy = step_policy
        self.max_step = max_step
        self.max_steps = max_steps
        self.reuse_buffer = reuse_buffer
        self.verbose = verbose

    def solve(self, t_span, y0, tol=None, **kwargs):
        """
        求解ODE，返回整个解曲线

        参数:
            t_span: 时间区间 [t0, t_end]
            y0: 初始状态 (不含时间分量)
            tol: 绝对容差，默认使用构造时的abs_tol
            **kwargs: 覆盖构造参数 (params, max_step, max_steps, clamp_final_step)

        返回:
            (时间点数组, 解数组)，解数组形状为 (步数+1, len(y0))
        """
        tol = self.abs_tol if tol is None else tol
        initial_state = np.concatenate([[t_span[0]], np.atleast_1d(y0)])

        state, log = taylor_integrate(
            self.f, initial_state, t_span[1], tol, self.order,
            step_policy=self.step_policy,
            params=kwargs.get('params', self.params),
            with_logging=True,
            max_steps=kwargs.get('max_steps', self.max_steps),
            max_step=kwargs.get('max_step', self.max_step),
            clamp_final_step=kwargs.get('clamp_final_step', True),
            reuse_buffer=self.reuse_buffer,
        )

        table = log.as_array()
        if self.verbose:
            print(f"{self.name} 积分完成: 步数={len(log) - 1}, t={state[0]}")
        return table[:, 0], table[:, 1:]

    def step(self, t, y, h=None):
        """
        执行单步求解

        参数:
            t: 当前时间
            y: 当前状态 (不含时间分量)
            h: 可选的步长上限，必须为正数

        返回:
            (下一状态, 实际步长)
        """
        if h is not None and not h > 0:
            raise InvalidConfigurationError(f"步长上限必须为正数，得到 {h!r}")
        state = np.concatenate([[t], np.atleast_1d(y)])
        x = new_series_vector(state, self.order)
        max_step = self.max_step if h is None else h
        new_state, h_used = taylor_step(self.f, self.step_policy, x, self.abs_tol, self.order,
                                        self.params, max_step)
        return new_state[1:], h_used

    @property
    def name(self):
        return f"Taylor(order={self.order})"
