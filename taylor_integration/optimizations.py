import numpy as np
from numba import jit


@jit(nopython=True)
def jit_horner(coeffs, h):
    """
    使用Numba JIT加速的Horner求值

    参数:
        coeffs: 系数矩阵，形状 (N, order+1)，第i行为第i个分量的泰勒系数
        h: 步长

    返回:
        长度N的数组，各分量级数在h处的值
    """
    n, m = coeffs.shape
    result = np.empty(n)
    for i in range(n):
        acc = coeffs[i, m - 1]
        for k in range(m - 1, 0, -1):
            acc = coeffs[i, k - 1] + acc * h
        result[i] = acc
    return result


def coefficient_matrix(jets):
    """
    将级数列表堆叠为float64系数矩阵

    只有当所有级数阶数相同且系数均为float64时返回矩阵，否则返回None
    (调用方回退到通用的Python实现)。
    """
    if not jets:
        return None
    order = jets[0].order
    for jet in jets:
        if jet.coeffs.dtype != np.float64 or jet.order != order:
            return None
    return np.stack([jet.coeffs for jet in jets])
