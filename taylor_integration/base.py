from abc import ABC, abstractmethod

from .core import stepsize_all


class ODESolverBase(ABC):
    """ODE求解器的基类接口"""

    @abstractmethod
    def solve(self, t_span, y0, tol=None, **kwargs):
        """求解ODE"""
        pass

    @abstractmethod
    def step(self, t, y, h=None):
        """单步求解"""
        pass

    @property
    @abstractmethod
    def name(self):
        """求解器名称"""
        pass


class StepSizePolicy(ABC):
    """
    步长策略接口

    子类实现estimate(级数向量, abs_tol) -> h；实例本身可直接作为
    taylor_integrate的step_policy参数使用。
    """

    @abstractmethod
    def estimate(self, q, abs_tol):
        """由已填充系数的级数向量估计步长"""
        pass

    def __call__(self, q, abs_tol):
        return self.estimate(q, abs_tol)


class MinimumStepSize(StepSizePolicy):
    """默认策略：所有分量步长估计的最小值，可选乘以安全系数"""

    def __init__(self, safety=1.0):
        if not 0 < safety <= 1:
            raise ValueError(f"安全系数必须在(0, 1]内，得到 {safety}")
        self.safety = safety

    def estimate(self, q, abs_tol):
        return self.safety * stepsize_all(q, abs_tol)

