import numpy as np
import matplotlib.pyplot as plt
import time
import sys
import os

# 添加中文字体支持
plt.rcParams['font.sans-serif'] = ['Microsoft YaHei', 'SimHei', 'Arial Unicode MS']
plt.rcParams['axes.unicode_minus'] = False

# 添加父目录到搜索路径
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# 导入自定义模块
from taylor_integration import solve_ode

# 创建results主目录及compare子目录
results_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "results")
compare_dir = os.path.join(results_dir, "compare")
os.makedirs(compare_dir, exist_ok=True)


def lotka_volterra(state, params):
    """
    Lotka-Volterra 捕食者-猎物模型

    参数:
        state: [t, x, y] 其中 x 是猎物数量, y 是捕食者数量
        params: (alpha, beta, gamma, delta)
    """
    t, x, y = state
    alpha, beta, gamma, delta = params
    return [1, alpha * x - beta * x * y, delta * x * y - gamma * y]


def run_comparison():
    """比较泰勒积分与scipy DOP853在不同容差下的步数和耗时"""
    params = (1.5, 1.0, 3.0, 1.0)
    t_span = [0.0, 15.0]
    y0 = [10.0, 5.0]

    start = time.perf_counter()
    t_ref, y_ref = solve_ode(lotka_volterra, t_span, y0, method='scipy', params=params)
    print(f"DOP853: 步数={len(t_ref) - 1}, 耗时={time.perf_counter() - start:.3f}s")

    plt.figure(figsize=(10, 6))
    for order, tol in [(10, 1e-10), (15, 1e-15), (25, 1e-20)]:
        start = time.perf_counter()
        t, y = solve_ode(lotka_volterra, t_span, y0, order=order, tol=tol, params=params)
        elapsed = time.perf_counter() - start
        error = np.max(np.abs(y[-1] - y_ref[-1]))
        print(f"Taylor(order={order}, tol={tol:.0e}): 步数={len(t) - 1}, "
              f"耗时={elapsed:.3f}s, 终点差异={error:.2e}")
        plt.plot(t[:-1], np.diff(t), 'o-', label=f'order={order}, tol={tol:.0e}')

    plt.xlabel('时间')
    plt.ylabel('步长')
    plt.title('泰勒积分的自适应步长')
    plt.legend()
    plt.grid(True)
    plt.savefig(os.path.join(compare_dir, "compare_stepsize.png"), dpi=300)
    plt.show()


if __name__ == "__main__":
    run_comparison()
