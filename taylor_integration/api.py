import numpy as np

from .solvers import TaylorSolver
from .utils import reference_solution


def solve_ode(f, t_span, y0, method='taylor', tol=1e-20, **kwargs):
    """
    统一的ODE求解接口

    参数:
        f: ODE右侧函数 f(x, params)，x[0]为时间
        t_span: 时间区间 [t0, tf]
        y0: 初始值 (不含时间分量)
        method: 求解方法 ('taylor', 'scipy')，'scipy'使用DOP853作为对照
        tol: 泰勒方法的绝对容差 ('scipy'方法不使用，改用rtol/atol)
        **kwargs: 额外参数
            - order: 泰勒展开阶数
            - params: 传给f的参数
            - step_policy: 步长策略，默认stepsize_all
            - max_step: 最大步长
            - max_steps: 最大步数
            - clamp_final_step: 是否将最后一步截断到tf (默认True)
            - reuse_buffer: 是否复用级数缓冲区
            - rtol, atol: 'scipy'方法的相对/绝对容差 (默认1e-12)
            - plot: 是否绘制解曲线
            - verbose: 是否打印积分信息

    返回:
        (t, y): 时间点和对应的解
    """
    order = kwargs.get('order', 20)
    params = kwargs.get('params', None)
    plot = kwargs.get('plot', False)
    verbose = kwargs.get('verbose', False)

    if method == 'taylor':
        solver = TaylorSolver(
            f,
            order=order,
            abs_tol=tol,
            params=params,
            step_policy=kwargs.get('step_policy', None),
            max_step=kwargs.get('max_step', None),
            max_steps=kwargs.get('max_steps', None),
            reuse_buffer=kwargs.get('reuse_buffer', False),
            verbose=verbose,
        )
        name = solver.name
        t, y = solver.solve(t_span, y0, clamp_final_step=kwargs.get('clamp_final_step', True))
    elif method == 'scipy':
        name = "DOP853(scipy)"
        initial_state = np.concatenate([[t_span[0]], np.atleast_1d(y0)])
        t, y = reference_solution(f, initial_state, t_span[1], params=params,
                                  rtol=kwargs.get('rtol', 1e-12), atol=kwargs.get('atol', 1e-12))
        if verbose:
            print(f"{name} 积分完成: 步数={len(t) - 1}")
    else:
        raise ValueError(f"不支持的求解方法: {method}")

    # 如果需要绘图
    if plot:
        import matplotlib.pyplot as plt
        plt.figure(figsize=(10, 6))
        for i in range(y.shape[1]):
            plt.plot(t, y[:, i], '-', label=f'x{i + 1}')
        plt.xlabel('t')
        plt.ylabel('x')
        plt.legend()
        plt.title(f'ODE Solution using {name}')
        plt.grid(True)
        plt.show()

    return t, y
