"""全局 fixture - 独立配置单例 + 快速模拟参数 + 线程辅助"""

from __future__ import annotations

import threading
import time
from typing import Callable

import pytest

import libsim.core.config as cfgmod
from libsim.core.config import SimulationConfig


@pytest.fixture(autouse=True)
def _reset_config():
    """每个测试使用干净的全局配置"""
    cfgmod._current = None
    yield
    cfgmod._current = None


@pytest.fixture()
def fast_config() -> Callable[..., SimulationConfig]:
    """毫秒级时长的配置工厂，关键字参数覆盖默认值"""

    def _make(**overrides: object) -> SimulationConfig:
        base = SimulationConfig(
            capacity=2, actors=4, open_duration=5.0,
            jitter_min=0.0, jitter_max=0.02,
            hold_min=0.01, hold_max=0.03,
            seed=7,
        )
        return base.replace(**overrides)

    return _make


@pytest.fixture()
def wait_until() -> Callable[..., bool]:
    """轮询等待条件成立，超时返回 False"""

    def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.005)
        return predicate()

    return _wait


@pytest.fixture()
def spawn():
    """启动守护线程，测试结束时统一 join"""
    threads: list[threading.Thread] = []

    def _spawn(target: Callable[[], object]) -> threading.Thread:
        t = threading.Thread(target=target, daemon=True)
        t.start()
        threads.append(t)
        return t

    yield _spawn
    for t in threads:
        t.join(timeout=2.0)
