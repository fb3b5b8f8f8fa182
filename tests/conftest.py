"""测试公共 fixture"""

import stat
from pathlib import Path

import pytest


def _write_script(path: Path, body: str) -> str:
    path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def make_du(tmp_path):
    """生成一个假的 du 脚本，返回其路径"""

    def _make(body: str, name: str = "fake-du") -> str:
        return _write_script(tmp_path / name, body)

    return _make
