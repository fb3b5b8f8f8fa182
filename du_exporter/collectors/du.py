"""
du 采集器

通过 `du -k -d 1 <path>` 测量目录及其直接子项的大小
"""

import logging
import subprocess
from typing import Optional

from du_exporter.models import UsageSnapshot

logger = logging.getLogger(__name__)


class DuError(Exception):
    """du 启动失败或返回非零退出码"""

    def __init__(self, path: str, message: str, returncode: Optional[int] = None):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.returncode = returncode


class DuTimeoutError(DuError):
    """du 在超时时间内没有结束"""


def run_du(path: str, binary: str = "du", timeout: float = 30.0) -> str:
    """
    执行 du 并返回标准输出

    Args:
        path: 需要测量的路径
        binary: du 可执行文件
        timeout: 超时时间（秒），超时后子进程会被杀掉

    Returns:
        du 的原始输出

    Raises:
        DuTimeoutError: 超时
        DuError: 启动失败或退出码非零
    """
    cmd = [binary, "-k", "-d", "1", path]
    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise DuTimeoutError(path, f"timed out after {timeout}s") from e
    except OSError as e:
        raise DuError(path, f"failed to run {binary}: {e}") from e

    if proc.returncode != 0:
        stderr = proc.stderr.decode(errors="replace").strip()
        raise DuError(path, f"exit status {proc.returncode}: {stderr}", proc.returncode)

    return proc.stdout.decode(errors="replace")


def parse_du_output(output: str) -> UsageSnapshot:
    """
    解析 du 输出

    每行格式为 `<KB>\\t<name>`，空行跳过；大小无法解析时记为 0

    Args:
        output: du 的标准输出

    Returns:
        条目名到 KB 的映射
    """
    result: UsageSnapshot = {}

    for line in output.split("\n"):
        if not line:
            continue

        size, sep, name = line.partition("\t")
        if not sep or not name:
            logger.debug(f"skip malformed du line: {line!r}")
            continue

        try:
            value = int(size)
        except ValueError:
            value = 0
        result[name] = max(value, 0)

    return result
