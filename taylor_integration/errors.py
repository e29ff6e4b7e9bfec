"""泰勒积分器的异常与警告类型"""

__all__ = [
    "TaylorIntegrationError",
    "DimensionMismatchError",
    "InvalidConfigurationError",
    "DegenerateStepError",
    "StepLimitWarning",
]


class TaylorIntegrationError(Exception):
    """taylor_integration包的基础异常"""


class DimensionMismatchError(TaylorIntegrationError, ValueError):
    """右端函数返回的长度与状态向量长度不一致"""

    def __init__(self, expected, got, where="右端函数"):
        self.expected = expected
        self.got = got
        super().__init__(f"{where}返回长度为{got}，状态向量长度为{expected}")


class InvalidConfigurationError(TaylorIntegrationError, ValueError):
    """积分参数不合法 (阶数、容差、步数上限等)"""


class DegenerateStepError(TaylorIntegrationError, RuntimeError):
    """步长估计得到无穷大、NaN或非正值"""

    def __init__(self, step, time=None):
        self.step = step
        self.time = time
        msg = f"步长估计无效: h={step}"
        if time is not None:
            msg += f" (t={time})"
        if step == float("inf"):
            msg += "；所有控制系数均为零，请设置max_step限制步长"
        super().__init__(msg)


class StepLimitWarning(RuntimeWarning):
    """达到max_steps上限时积分尚未到达t_max"""
