import numpy as np
import matplotlib.pyplot as plt
import sys
import os
import datetime

# 添加中文字体支持
plt.rcParams['font.sans-serif'] = ['Microsoft YaHei', 'SimHei', 'Arial Unicode MS']
plt.rcParams['axes.unicode_minus'] = False

# 添加父目录到搜索路径
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# 导入自定义模块
from taylor_integration import taylor_integrate

# 创建results主目录及simple_ode子目录
results_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "results")
simple_ode_dir = os.path.join(results_dir, "simple_ode")
os.makedirs(simple_ode_dir, exist_ok=True)


def exponential_decay(x, k):
    """
    指数衰减方程 dy/dt = -k*y
    状态向量 x = [t, y]
    """
    return [1, -k * x[1]]


def oscillator(x, params=None):
    """
    简谐振荡器 d²y/dt² + y = 0
    转为一阶方程组: dy1/dt = y2, dy2/dt = -y1
    状态向量 x = [t, y1, y2]
    """
    return [1, x[2], -x[1]]


def run_simple_example():
    """运行简单的ODE示例"""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")

    print("示例1: 指数衰减")
    k = 0.5
    state, log = taylor_integrate(exponential_decay, [0.0, 1.0], 10.0, 1e-20, 20,
                                  params=k, with_logging=True)
    t = log.t
    y = log.column(1)
    exact = np.exp(-k * t)
    print(f"最大误差: {np.max(np.abs(y - exact)):.2e}")
    print(f"使用步数: {len(log) - 1}")

    plt.figure(figsize=(10, 6))
    plt.plot(t, y, 'bo', label='泰勒积分数值解')
    t_fine = np.linspace(0, 10, 400)
    plt.plot(t_fine, np.exp(-k * t_fine), 'r-', label='解析解')
    plt.legend()
    plt.xlabel('时间')
    plt.ylabel('y(t)')
    plt.title('指数衰减方程')
    plt.grid(True)
    plt.savefig(os.path.join(simple_ode_dir, f"simple_ode_exponential_decay_{timestamp}.png"), dpi=300)

    print("\n示例2: 简谐振荡器，积分一个周期")
    state, log = taylor_integrate(oscillator, [0.0, 1.0, 0.0], 2 * np.pi, 1e-20, 20,
                                  with_logging=True)
    print(f"终点状态: t={state[0]:.15f}, y1={state[1]:.15f}, y2={state[2]:.3e}")
    print(f"使用步数: {len(log) - 1}")

    table = log.as_array()
    plt.figure(figsize=(8, 8))
    plt.plot(table[:, 1], table[:, 2], 'bo', label='数值解')
    theta = np.linspace(0, 2 * np.pi, 400)
    plt.plot(np.cos(theta), -np.sin(theta), 'r--', label='解析解')
    plt.xlabel('位置')
    plt.ylabel('速度')
    plt.title('简谐振荡器相图')
    plt.axis('equal')
    plt.legend()
    plt.grid(True)
    plt.savefig(os.path.join(simple_ode_dir, f"simple_ode_phase_portrait_{timestamp}.png"), dpi=300)

    print(f"图像已保存到 {simple_ode_dir} 目录")
    plt.show()


if __name__ == "__main__":
    run_simple_example()
