import numpy as np
from scipy.integrate import solve_ivp
from sympy import diff, factorial, lambdify, symbols

from .math_compat import (
    compatible_cos,
    compatible_exp,
    compatible_log,
    compatible_sin,
    compatible_sqrt,
    compatible_tan,
)

# lambdify使用的函数映射：让符号表达式在级数状态上也能求值
_COMPAT_FUNCTIONS = {
    'sin': compatible_sin,
    'cos': compatible_cos,
    'tan': compatible_tan,
    'exp': compatible_exp,
    'log': compatible_log,
    'sqrt': compatible_sqrt,
}


def rhs_from_sympy(exprs, variables, parameters=()):
    """
    由sympy表达式构造右端函数 f(x, params)

    参数:
        exprs: 各状态分量导数的表达式，第0项通常为1 (ṫ=1)
        variables: 与状态分量一一对应的符号，第0个为时间
        parameters: 可选的参数符号，调用时params按相同顺序给出

    返回:
        可同时用于数值状态和级数状态的右端函数
    """
    exprs = list(exprs)
    variables = list(variables)
    parameters = list(parameters)
    if len(exprs) != len(variables):
        raise ValueError(f"表达式数量({len(exprs)})与变量数量({len(variables)})不一致")

    func = lambdify(variables + parameters, exprs, modules=[_COMPAT_FUNCTIONS, 'numpy'])

    def f(x, params=None):
        values = () if params is None else tuple(params)
        if len(values) != len(parameters):
            raise ValueError(f"需要{len(parameters)}个参数，得到{len(values)}个")
        return func(*x, *values)

    f.exprs = exprs
    f.variables = variables
    return f


def symbolic_rhs(f, names, params=None):
    """
    将右端函数作用于sympy符号，得到方程的符号形式 (用于检查和打印方程)

    f中的初等函数需使用math_compat中的兼容函数。
    """
    syms = symbols(names)
    return list(f(list(syms), params))


def series_from_sympy(expr, symbol, x0, order):
    """
    计算sympy表达式在x0处的泰勒系数 (精确求导后转为浮点数)

    返回:
        长度order+1的系数数组
    """
    coeffs = []
    current = expr
    for k in range(order + 1):
        coeffs.append(float(current.subs(symbol, x0) / factorial(k)))
        current = diff(current, symbol)
    return np.array(coeffs)


def reference_solution(f, initial_state, t_max, params=None, rtol=1e-12, atol=1e-12):
    """
    使用scipy的solve_ivp (DOP853) 求解同一问题，作为泰勒积分的参考解

    参数:
        f: 右端函数 f(x, params)，x[0]为时间
        initial_state: 初始状态 [t0, x1, ...]
        t_max: 终止时间
        params: 传给f的参数

    返回:
        (时间点数组, 解数组)，解数组不含时间分量
    """
    initial_state = np.asarray(initial_state, dtype=float)

    def rhs(t, y):
        derivative = f(np.concatenate([[t], y]), params)
        return np.asarray(derivative[1:], dtype=float)

    sol = solve_ivp(
        rhs,
        (initial_state[0], t_max),
        initial_state[1:],
        method='DOP853',
        rtol=rtol,
        atol=atol,
    )
    if not sol.success:
        raise RuntimeError(f"参考解求解失败: {sol.message}")
    return sol.t, sol.y.T
