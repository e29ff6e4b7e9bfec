"""泰勒积分的核心算法

- taylor_coefficients: 由右端函数递推计算解的泰勒系数 (原位填充)
- stepsize / stepsize_all: 由最后两阶系数和绝对容差估计步长
- taylor_propagator: Horner方法求级数在步长处的值，得到新状态
- taylor_step / taylor_one_step / taylor_one_step_inplace: 组合以上步骤完成一步积分

约定状态向量第0个分量为自变量 (时间)，右端函数中其导数恒为1。
"""
import numpy as np

from .errors import DegenerateStepError, DimensionMismatchError
from .optimizations import coefficient_matrix, jit_horner
from .series import Taylor1


def new_series_vector(state, order):
    """为状态向量创建级数向量：0次系数为当前状态，其余系数为零"""
    return [Taylor1.from_scalar(value, order) for value in state]


def reset_series_vector(x, state):
    """原位重置级数向量，使其可用于下一步 (缓冲区复用)"""
    if len(x) != len(state):
        raise DimensionMismatchError(len(state), len(x), where="级数缓冲区")
    for jet, value in zip(x, state):
        jet.coeffs[:] = 0
        jet.coeffs[0] = value
    return x


def _coefficient(value, k):
    """取右端函数结果第k次系数，标量视为常数级数"""
    if isinstance(value, Taylor1):
        return value[k] if k <= value.order else 0
    return value if k == 0 else 0


def taylor_coefficients(f, x, order, params=None):
    """
    递推计算ẋ=f(x)解的泰勒系数

    对 i = 1..order，用截断到i-1次的级数向量求 F = f(y, params)，
    然后令 x[j] 的第i次系数为 F[j] 的第i-1次系数除以i。
    计算第i次系数时只读取0..i-1次系数。

    参数:
        f: 右端函数 f(x, params)，返回与x等长的序列
        x: 级数向量，0次系数为当前状态；原位填充1..order次系数
        order: 展开阶数，小于1时不做任何事
        params: 原样传给f的参数
    """
    n = len(x)
    for i in range(1, order + 1):
        y = [jet.restrict(i - 1) for jet in x]
        F = f(y, params)
        if len(F) != n:
            raise DimensionMismatchError(n, len(F))
        for j in range(n):
            x[j][i] = _coefficient(F[j], i - 1) / i
    return x


def stepsize(x, abs_tol):
    """
    单个级数的步长估计

    对 k ∈ {order-1, order} 计算 (abs_tol/|x_k|)^(1/k) 并取最小值；
    系数为零的候选值为 +inf。
    """
    order = x.order
    h = np.inf
    for k in (order - 1, order):
        if k < 1:
            continue
        aux = abs(x[k])
        if aux == 0:
            continue
        candidate = (abs_tol / aux) ** (1.0 / k)
        if np.isnan(candidate):
            return candidate
        h = min(h, candidate)
    return h


def stepsize_all(q, abs_tol):
    """级数向量的整体步长：所有分量步长估计的最小值"""
    hh = np.inf
    for x in q:
        h1 = stepsize(x, abs_tol)
        if np.isnan(h1):
            return h1
        hh = min(hh, h1)
    return hh


def taylor_propagator(order, h, jets):
    """
    用Horner方法将级数向量在步长h处求值，返回新状态

    第0个分量 (自变量) 直接取 jets[0][0] + h。h为0时返回各级数的0次系数。
    不修改输入的级数。
    """
    if h == 0:
        return np.array([jet[0] for jet in jets])

    matrix = coefficient_matrix(jets)
    if matrix is not None and isinstance(h, (float, np.floating)):
        new_state = jit_horner(matrix[:, :order + 1], float(h))
        new_state[0] = jets[0][0] + h
        return new_state

    new_state = [jets[0][0] + h]
    for jet in jets[1:]:
        acc = jet[order]
        for k in range(order, 0, -1):
            acc = jet[k - 1] + acc * h
        new_state.append(acc)
    return np.array(new_state)


def _limit_step(h, time, max_step=None, t_max=None):
    """按max_step和t_max限制步长；无效步长抛出DegenerateStepError"""
    if max_step is not None and h > max_step:
        h = max_step
    if h != h or h == np.inf or h <= 0:
        raise DegenerateStepError(h, time)
    if t_max is not None and time + h > t_max:
        h = t_max - time
        if h <= 0:
            raise DegenerateStepError(h, time)
    return h


def taylor_step(f, step_policy, x, abs_tol, order, params=None, max_step=None, t_max=None):
    """
    对已设置好0次系数的级数向量执行一个泰勒步

    参数:
        f: 右端函数 f(x, params)
        step_policy: 步长策略 (x, abs_tol) -> h，为None时使用stepsize_all
        x: 级数向量 (原位填充)
        abs_tol: 绝对容差
        order: 展开阶数
        params: 传给f的参数
        max_step: 可选的最大步长
        t_max: 可选的终点时间，步长不超过 t_max - t

    返回:
        (新状态, 实际步长)
    """
    if step_policy is None:
        step_policy = stepsize_all
    time = x[0][0]
    taylor_coefficients(f, x, order, params)
    h = _limit_step(step_policy(x, abs_tol), time, max_step, t_max)
    new_state = taylor_propagator(order, h, x)
    if new_state[0] == time:
        # 步长小于时间的浮点分辨率，积分无法推进
        raise DegenerateStepError(h, time)
    return new_state, h


def taylor_one_step(f, step_policy, state, abs_tol, order, params=None, max_step=None, t_max=None):
    """
    通用的单步泰勒迭代：由状态创建新的级数向量，计算系数、步长并传播

    返回:
        新状态
    """
    x = new_series_vector(state, order)
    return taylor_step(f, step_policy, x, abs_tol, order, params, max_step, t_max)[0]


def taylor_one_step_inplace(f, step_policy, x, state, abs_tol, order, params=None,
                            max_step=None, t_max=None):
    """
    复用调用方持有的级数向量x的单步泰勒迭代，结果与taylor_one_step相同

    x在整个积分过程中归调用方独占，不能在同时进行的多个积分之间共享。
    """
    reset_series_vector(x, state)
    return taylor_step(f, step_policy, x, abs_tol, order, params, max_step, t_max)[0]
