"""截断幂级数 Taylor1

系数按次数 0..order 存放在一维numpy数组中，第k个系数等于展开点处的k阶导数除以k!。
支持与标量及其他Taylor1的四则运算、幂运算，以及exp/log/sin/cos/tan/sqrt
等初等函数 (均通过标准系数递推计算，结果截断到运算数的阶数)。

系数类型跟随构造时的数值类型：整数提升为float64，复数保持复数，
fractions.Fraction等Python对象使用object数组 (此时四则运算可用，初等函数不可用)。
"""
import numpy as np

__all__ = ["Taylor1", "exp", "log", "sin", "cos", "sin_cos", "tan", "sqrt"]


def _coeff_dtype(*dtypes):
    """系数数组的数据类型：整数与布尔提升为float64"""
    dtype = np.result_type(*dtypes)
    if dtype.kind in "biu":
        return np.dtype(np.float64)
    return dtype


def _as_coeffs(values):
    coeffs = np.asarray(values)
    if coeffs.ndim == 0:
        coeffs = coeffs.reshape(1)
    if coeffs.ndim != 1:
        raise ValueError(f"系数必须是一维序列，得到形状 {coeffs.shape}")
    if coeffs.size == 0:
        raise ValueError("系数序列不能为空")
    dtype = _coeff_dtype(coeffs.dtype)
    if dtype != coeffs.dtype:
        coeffs = coeffs.astype(dtype)
    return coeffs


def _pad(coeffs, order):
    """将系数数组截断或补零到给定阶数"""
    n = order + 1
    if len(coeffs) >= n:
        return coeffs[:n]
    out = np.zeros(n, dtype=coeffs.dtype)
    out[:len(coeffs)] = coeffs
    return out


def _constant(value, order):
    coeffs = np.zeros(order + 1, dtype=_coeff_dtype(np.asarray(value).dtype))
    coeffs[0] = value
    return coeffs


def _convolve(a, b):
    """截断乘积的系数 c_k = sum_j a_j b_{k-j}"""
    n = len(a)
    if a.dtype.kind in "fc" and b.dtype.kind in "fc":
        return np.convolve(a, b)[:n]
    out = np.empty(n, dtype=_coeff_dtype(a.dtype, b.dtype))
    for k in range(n):
        out[k] = np.dot(a[:k + 1], b[k::-1])
    return out


def _divide(a, b):
    """截断商 c = a / b，要求 b_0 != 0"""
    if b[0] == 0:
        raise ZeroDivisionError("除数级数的常数项为零")
    n = len(a)
    c = np.empty(n, dtype=_coeff_dtype(a.dtype, b.dtype))
    c[0] = a[0] / b[0]
    for k in range(1, n):
        c[k] = (a[k] - np.dot(b[1:k + 1], c[k - 1::-1])) / b[0]
    return c


class Taylor1:
    """单变量截断幂级数

    参数:
        coeffs: 系数序列 (第k项为k次系数) 或标量
        order: 可选的阶数，给定时对系数截断或补零
    """

    # 让numpy标量/数组在左侧时交给本类的反射运算
    __array_ufunc__ = None

    def __init__(self, coeffs, order=None):
        coeffs = _as_coeffs(coeffs)
        if order is not None:
            if order < 0:
                raise ValueError(f"阶数必须非负，得到 {order}")
            coeffs = _pad(coeffs, order)
        self.coeffs = coeffs

    @classmethod
    def from_scalar(cls, value, order):
        """构造常数级数 [value, 0, ..., 0]"""
        if order < 0:
            raise ValueError(f"阶数必须非负，得到 {order}")
        return cls(_constant(value, order))

    @property
    def order(self):
        return len(self.coeffs) - 1

    def __getitem__(self, k):
        return self.coeffs[k]

    def __setitem__(self, k, value):
        self.coeffs[k] = value

    def restrict(self, degree):
        """截断到较低的次数，返回的级数与原级数共享系数存储"""
        if degree < 0 or degree > self.order:
            raise ValueError(f"截断次数 {degree} 超出范围 0..{self.order}")
        return Taylor1(self.coeffs[:degree + 1])

    def copy(self):
        return Taylor1(self.coeffs.copy())

    def evaluate(self, h):
        """Horner方法求级数在h处的值"""
        acc = self.coeffs[-1]
        for k in range(self.order, 0, -1):
            acc = self.coeffs[k - 1] + acc * h
        return acc

    def __repr__(self):
        return f"Taylor1({self.coeffs.tolist()})"

    # ---- 四则运算 ----

    def _operands(self, other):
        """返回对齐到同一阶数的两个系数数组；不支持的类型返回None"""
        if isinstance(other, Taylor1):
            order = max(self.order, other.order)
            return _pad(self.coeffs, order), _pad(other.coeffs, order)
        if isinstance(other, (np.ndarray, list, tuple)):
            return None
        return self.coeffs, _constant(other, self.order)

    def __add__(self, other):
        ops = self._operands(other)
        if ops is None:
            return NotImplemented
        return Taylor1(ops[0] + ops[1])

    __radd__ = __add__

    def __sub__(self, other):
        ops = self._operands(other)
        if ops is None:
            return NotImplemented
        return Taylor1(ops[0] - ops[1])

    def __rsub__(self, other):
        ops = self._operands(other)
        if ops is None:
            return NotImplemented
        return Taylor1(ops[1] - ops[0])

    def __mul__(self, other):
        if isinstance(other, Taylor1):
            a, b = self._operands(other)
            return Taylor1(_convolve(a, b))
        if isinstance(other, (np.ndarray, list, tuple)):
            return NotImplemented
        return Taylor1(self.coeffs * other)

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Taylor1):
            a, b = self._operands(other)
            return Taylor1(_divide(a, b))
        if isinstance(other, (np.ndarray, list, tuple)):
            return NotImplemented
        return Taylor1(self.coeffs / other)

    def __rtruediv__(self, other):
        ops = self._operands(other)
        if ops is None:
            return NotImplemented
        return Taylor1(_divide(ops[1], ops[0]))

    def __neg__(self):
        return Taylor1(-self.coeffs)

    def __pos__(self):
        return self.copy()

    def __pow__(self, p):
        if isinstance(p, Taylor1):
            return exp(p * log(self))
        if isinstance(p, (int, np.integer)):
            return _integer_power(self, int(p))
        if isinstance(p, (float, np.floating)) and float(p).is_integer():
            return _integer_power(self, int(p))
        return _real_power(self, p)

    def __rpow__(self, base):
        return exp(self * np.log(base))


def _integer_power(x, p):
    if p < 0:
        return 1 / _integer_power(x, -p)
    result = Taylor1.from_scalar(1, x.order)
    base = x
    while p:
        if p & 1:
            result = result * base
        p >>= 1
        if p:
            base = base * base
    return result


def _real_power(x, p):
    a = x.coeffs
    if a[0] == 0:
        raise ZeroDivisionError("非整数次幂要求级数常数项非零")
    n = len(a)
    u = np.empty(n, dtype=_coeff_dtype(a.dtype, np.asarray(p).dtype))
    u[0] = a[0] ** p
    for k in range(1, n):
        j = np.arange(k)
        u[k] = np.dot((p * (k - j) - j) * a[k:0:-1], u[:k]) / (k * a[0])
    return Taylor1(u)


# ---- 初等函数 ----

def exp(x):
    """级数指数函数: e_k = (1/k) sum_{j=1..k} j a_j e_{k-j}"""
    a = x.coeffs
    e = np.empty_like(a)
    e[0] = np.exp(a[0])
    for k in range(1, len(a)):
        j = np.arange(1, k + 1)
        e[k] = np.dot(j * a[1:k + 1], e[k - 1::-1]) / k
    return Taylor1(e)


def log(x):
    """级数自然对数，要求常数项非零"""
    a = x.coeffs
    if a[0] == 0:
        raise ZeroDivisionError("log要求级数常数项非零")
    l = np.empty_like(a)
    l[0] = np.log(a[0])
    for k in range(1, len(a)):
        j = np.arange(1, k)
        l[k] = (a[k] - np.dot(j * l[1:k], a[k - 1:0:-1]) / k) / a[0]
    return Taylor1(l)


def sin_cos(x):
    """同时计算级数的sin与cos (两者的递推相互依赖)"""
    a = x.coeffs
    s = np.empty_like(a)
    c = np.empty_like(a)
    s[0] = np.sin(a[0])
    c[0] = np.cos(a[0])
    for k in range(1, len(a)):
        ja = np.arange(1, k + 1) * a[1:k + 1]
        s[k] = np.dot(ja, c[k - 1::-1]) / k
        c[k] = -np.dot(ja, s[k - 1::-1]) / k
    return Taylor1(s), Taylor1(c)


def sin(x):
    return sin_cos(x)[0]


def cos(x):
    return sin_cos(x)[1]


def tan(x):
    s, c = sin_cos(x)
    return s / c


def sqrt(x):
    """级数平方根，要求常数项非零"""
    a = x.coeffs
    if a[0] == 0:
        raise ZeroDivisionError("sqrt要求级数常数项非零")
    r = np.empty_like(a)
    r[0] = np.sqrt(a[0])
    for k in range(1, len(a)):
        r[k] = (a[k] - np.dot(r[1:k], r[k - 1:0:-1])) / (2 * r[0])
    return Taylor1(r)
