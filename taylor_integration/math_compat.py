"""兼容级数、符号计算和数值计算的数学函数模块

右端函数f中使用这些函数代替numpy函数，即可同时在普通数值状态、
截断级数状态 (泰勒系数递推) 和sympy符号状态上求值。
"""
import numpy as np
import sympy

from . import series
from .series import Taylor1

__all__ = [
    "is_symbolic",
    "compatible_sin",
    "compatible_cos",
    "compatible_tan",
    "compatible_exp",
    "compatible_log",
    "compatible_sqrt",
]


def is_symbolic(obj):
    """检查一个对象是否为符号类型"""
    if hasattr(obj, 'is_Symbol') and obj.is_Symbol:
        return True
    if hasattr(obj, 'free_symbols') and len(obj.free_symbols) > 0:
        return True
    return False


def _dispatch(x, series_func, sympy_func, numpy_func):
    if isinstance(x, Taylor1):
        return series_func(x)
    if is_symbolic(x):
        return sympy_func(x)
    return numpy_func(x)


def compatible_sin(x):
    """兼容级数、符号和数值计算的sin函数"""
    return _dispatch(x, series.sin, sympy.sin, np.sin)


def compatible_cos(x):
    """兼容级数、符号和数值计算的cos函数"""
    return _dispatch(x, series.cos, sympy.cos, np.cos)


def compatible_tan(x):
    return _dispatch(x, series.tan, sympy.tan, np.tan)


def compatible_exp(x):
    """兼容级数、符号和数值计算的exp函数"""
    return _dispatch(x, series.exp, sympy.exp, np.exp)


def compatible_log(x):
    return _dispatch(x, series.log, sympy.log, np.log)


def compatible_sqrt(x):
    return _dispatch(x, series.sqrt, sympy.sqrt, np.sqrt)
