"""
进程守护

HTTP 服务异常退出时按指数退避重启，连续失败超过上限后放弃
"""

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class SupervisorGaveUp(RuntimeError):
    """连续重启次数超过上限"""

    def __init__(self, failures: int):
        super().__init__(f"entry point failed {failures} times in a row, giving up")
        self.failures = failures


def backoff_delay(failures: int, base: float, maximum: float) -> float:
    """第 N 次连续失败后的等待时间"""
    return min(maximum, base * 2 ** max(0, failures - 1))


def run_supervised(
    entry: Callable[[], None],
    max_restarts: int = 5,
    backoff_base: float = 1.0,
    backoff_max: float = 60.0,
    reset_after: float = 300.0,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """
    运行 entry，异常时重启

    SystemExit / KeyboardInterrupt 不会被拦截，启动失败（如端口被占用）直接退出进程

    Args:
        entry: 服务入口，正常返回表示服务已关闭
        max_restarts: 连续重启次数上限
        backoff_base: 首次重启前的等待（秒）
        backoff_max: 等待上限（秒）
        reset_after: 单次运行超过该时长后清零失败计数（秒）
        sleep: 等待函数
        clock: 单调时钟

    Raises:
        SupervisorGaveUp: 连续失败次数超过 max_restarts
    """
    failures = 0

    while True:
        started = clock()
        try:
            entry()
            return
        except Exception as e:
            if clock() - started >= reset_after:
                failures = 0
            failures += 1

            if failures > max_restarts:
                logger.critical(f"entry point failed: {e}, restart limit ({max_restarts}) reached")
                raise SupervisorGaveUp(failures) from e

            delay = backoff_delay(failures, backoff_base, backoff_max)
            logger.exception(f"entry point failed: {e}, restart {failures}/{max_restarts} in {delay}s")
            sleep(delay)
