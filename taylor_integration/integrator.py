"""泰勒积分主循环与历史记录"""
import warnings

import numpy as np

from .core import new_series_vector, stepsize_all, taylor_one_step, taylor_one_step_inplace
from .errors import DimensionMismatchError, InvalidConfigurationError, StepLimitWarning


class DataLog:
    """
    积分历史记录

    每个状态分量对应一个只追加的列表 (columns[0] 为时间)，每接受一步追加一条记录。
    可以包装调用方持有的列表的列表，此时记录直接写入调用方的列表。
    """

    def __init__(self, columns=None):
        self.columns = [] if columns is None else columns

    @classmethod
    def empty(cls, width):
        return cls([[] for _ in range(width)])

    @property
    def width(self):
        return len(self.columns)

    def __len__(self):
        return len(self.columns[0]) if self.columns else 0

    def append(self, state):
        """追加一条状态记录；空记录在首次追加时按状态长度建立各列"""
        if not self.columns:
            self.columns.extend([] for _ in range(len(state)))
        if len(state) != self.width:
            raise DimensionMismatchError(self.width, len(state), where="状态记录")
        for column, value in zip(self.columns, state):
            column.append(value)

    def column(self, i):
        return np.asarray(self.columns[i])

    @property
    def t(self):
        return self.column(0)

    def as_array(self):
        """按行排列的历史表，形状 (步数+1, N)"""
        if not self.columns:
            return np.empty((0, 0))
        return np.array(self.columns).T


def _as_datalog(datalog, width):
    if datalog is None:
        return DataLog.empty(width)
    if not isinstance(datalog, DataLog):
        datalog = DataLog(datalog)
    if datalog.width and datalog.width != width:
        raise DimensionMismatchError(width, datalog.width, where="历史记录")
    return datalog


def _validate(f, initial_state, abs_tol, order, params, max_steps, max_step):
    """积分开始前一次性检查全部配置，返回规范化的初始状态"""
    if isinstance(order, bool) or not isinstance(order, (int, np.integer)) or order < 1:
        raise InvalidConfigurationError(f"展开阶数必须为不小于1的整数，得到 {order!r}")
    if not abs_tol > 0:
        raise InvalidConfigurationError(f"绝对容差必须为正数，得到 {abs_tol!r}")
    if max_steps is not None and (not isinstance(max_steps, (int, np.integer)) or max_steps < 0):
        raise InvalidConfigurationError(f"max_steps必须为非负整数，得到 {max_steps!r}")
    if max_step is not None and not max_step > 0:
        raise InvalidConfigurationError(f"max_step必须为正数，得到 {max_step!r}")

    state = np.array(initial_state)
    if state.ndim != 1 or state.size == 0:
        raise InvalidConfigurationError(f"初始状态必须为非空一维序列，得到形状 {state.shape}")
    if state.dtype.kind in "biu":
        state = state.astype(np.float64)

    F = f(state, params)
    if len(F) != len(state):
        raise DimensionMismatchError(len(state), len(F))
    return state


def taylor_integrate(f, initial_state, t_max, abs_tol, order, *, step_policy=None, params=None,
                     with_logging=False, datalog=None, max_steps=None, max_step=None,
                     clamp_final_step=True, reuse_buffer=False):
    """
    通用泰勒积分器：求解显式一阶初值问题 ẋ=f(x)，直到时间分量达到t_max

    状态向量的第0个分量必须是自变量，其方程 ṫ=1 需包含在f中。
    所有变体 (带记录、限步数、带参数、复用缓冲区) 都由关键字参数配置。

    参数:
        f: 右端函数 f(x, params)
        initial_state: 初始状态 [t0, x1, ..., x_{N-1}]
        t_max: 终止时间
        abs_tol: 绝对容差
        order: 泰勒展开阶数
        step_policy: 步长策略 (级数向量, abs_tol) -> h，默认stepsize_all
        params: 原样传给f的参数
        with_logging: 是否记录每一步的状态
        datalog: 可选的DataLog或N个列表组成的列表，给定时自动开启记录
        max_steps: 可选的最大步数；达到上限时返回尚未到达t_max的状态并发出StepLimitWarning
        max_step: 可选的最大步长，用于限制无穷大的步长估计
        clamp_final_step: 为True时最后一步恰好落在t_max上，否则允许越过t_max
        reuse_buffer: 为True时整个积分复用同一个级数向量

    返回:
        最终状态；记录模式下返回 (最终状态, DataLog)
    """
    state = _validate(f, initial_state, abs_tol, order, params, max_steps, max_step)
    if step_policy is None:
        step_policy = stepsize_all

    log = None
    if with_logging or datalog is not None:
        log = _as_datalog(datalog, len(state))
        log.append(state)

    buffer = new_series_vector(state, order) if reuse_buffer else None
    limit = t_max if clamp_final_step else None

    steps = 0
    while state[0] < t_max:
        if max_steps is not None and steps >= max_steps:
            warnings.warn(
                f"达到最大步数 {max_steps} 时 t={state[0]} 仍小于 t_max={t_max}",
                StepLimitWarning,
                stacklevel=2,
            )
            break

        if buffer is None:
            state = taylor_one_step(f, step_policy, state, abs_tol, order, params, max_step, limit)
        else:
            state = taylor_one_step_inplace(f, step_policy, buffer, state, abs_tol, order, params,
                                            max_step, limit)
        steps += 1

        if log is not None:
            log.append(state)

    if log is not None:
        return state, log
    return state
