import numpy as np
import matplotlib.pyplot as plt
import sys
import os
import datetime

# 设置中文字体支持
plt.rcParams['font.sans-serif'] = ['Microsoft YaHei', 'SimHei', 'Arial Unicode MS']
plt.rcParams['axes.unicode_minus'] = False

# 添加父目录到搜索路径
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# 导入自定义模块
from taylor_integration import DataLog, taylor_integrate

# 创建results主目录及orbital子目录
results_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "results")
orbital_dir = os.path.join(results_dir, "orbital")
os.makedirs(orbital_dir, exist_ok=True)


def kepler(state, mu):
    """
    二体问题 (平面)

    参数:
        state: 状态向量 [t, x, y, vx, vy]
        mu: 引力参数

    返回:
        导数 [1, vx, vy, ax, ay]
    """
    t, x, y, vx, vy = state
    r3 = (x * x + y * y) ** 1.5
    return [1, vx, vy, -mu * x / r3, -mu * y / r3]


def energy(table, mu):
    x, y, vx, vy = table[:, 1], table[:, 2], table[:, 3], table[:, 4]
    return 0.5 * (vx ** 2 + vy ** 2) - mu / np.sqrt(x ** 2 + y ** 2)


def run_orbital_simulation():
    """执行偏心轨道的长时间积分并检查能量守恒"""
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    data_file = os.path.join(orbital_dir, f"orbital_data_{timestamp}.csv")

    mu = 1.0
    e = 0.6
    # 近心点出发的偏心轨道，半长轴为1，周期为2π
    initial_state = [0.0, 1 - e, 0.0, 0.0, np.sqrt(mu * (1 + e) / (1 - e))]

    print("开始计算轨道...")
    log = DataLog()
    state, log = taylor_integrate(kepler, initial_state, 20 * np.pi, 1e-20, 25,
                                  params=mu, datalog=log, reuse_buffer=True)
    print(f"计算完成。使用了 {len(log) - 1} 个时间步骤")

    table = log.as_array()
    e_hist = energy(table, mu)
    print(f"相对能量误差: {np.max(np.abs(e_hist - e_hist[0]) / abs(e_hist[0])):.2e}")
    print(f"十个周期后位置: x={state[1]:.12f}, y={state[2]:.3e}")

    np.savetxt(data_file, table, delimiter=',', header='t,x,y,vx,vy', comments='')

    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))
    ax1.plot(table[:, 1], table[:, 2], 'b.-', linewidth=0.5)
    ax1.plot(0, 0, 'yo', markersize=12)
    ax1.set_title('轨道')
    ax1.axis('equal')
    ax1.grid(True)

    ax2.semilogy(table[1:, 0], np.abs(e_hist[1:] - e_hist[0]) + 1e-18)
    ax2.set_xlabel('时间')
    ax2.set_title('能量误差')
    ax2.grid(True)

    plt.tight_layout()
    plt.savefig(os.path.join(orbital_dir, f"orbital_{timestamp}.png"), dpi=300)
    print(f"数据已保存到 {data_file}")
    plt.show()


if __name__ == "__main__":
    run_orbital_simulation()
