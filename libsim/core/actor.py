"""学生 - 对副本池执行一次 等待 → 借书 → 阅读 → 还书 的固定流程

每个学生在自己的线程中运行 run()，任何一步失败都不重试：
  - 借书时图书馆已关闭或被中断 → aborted_before_acquire
  - 还书时图书馆已关闭         → abandoned_holding（书留在手中）
"""

from __future__ import annotations

import logging
import random
import threading
import time

from libsim.core.exceptions import AcquireCancelledError, PoolClosedError
from libsim.core.models import ActorResult, ActorState
from libsim.core.pool import ResourcePool

logger = logging.getLogger(__name__)

# 秒数区间 (最小, 最大)
DurationRange = tuple[float, float]


class Actor:
    """单个学生，run() 只能执行一次"""

    def __init__(
        self,
        name: str,
        pool: ResourcePool,
        jitter: DurationRange = (0.5, 2.5),
        hold: DurationRange = (1.0, 4.0),
        rng: random.Random | None = None,
    ) -> None:
        self.name = name
        self.pool = pool
        self.jitter = jitter
        self.hold = hold
        self._rng = rng or random.Random()
        self._cancel = threading.Event()
        self._log_extra = {"actor": name}
        self._state = ActorState.IDLE
        self._started = False

    @property
    def state(self) -> ActorState:
        return self._state

    @property
    def holding(self) -> bool:
        """是否持有一本书；闭馆后未能归还的学生永久持有"""
        return self._state in (ActorState.HOLDING, ActorState.ABANDONED_HOLDING)

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """中断该学生：打断睡眠，并唤醒其在池中的等待"""
        self._cancel.set()
        self.pool.interrupt(self.name)

    def _pause(self, bounds: DurationRange) -> bool:
        """可中断睡眠，返回 True 表示被中断"""
        return self._cancel.wait(self._rng.uniform(*bounds))

    def _finish(self, state: ActorState, waited: float = 0.0, held: float = 0.0,
                message: str = "") -> ActorResult:
        self._state = state
        return ActorResult(name=self.name, state=state, waited=waited, held=held, message=message)

    def run(self) -> ActorResult:
        """执行完整流程，返回终态"""
        if self._started:
            raise RuntimeError(f"{self.name} 已经运行过，不能重启")
        self._started = True

        if self._pause(self.jitter):
            logger.info("%s 在出发前被中断", self.name, extra=self._log_extra)
            return self._finish(ActorState.ABORTED_BEFORE_ACQUIRE, message="出发前被中断")

        self._state = ActorState.WAITING
        start = time.monotonic()
        try:
            self.pool.acquire(self.name, cancel_event=self._cancel)
        except PoolClosedError:
            logger.info("%s 无法借书: 图书馆已关闭", self.name, extra=self._log_extra)
            return self._finish(ActorState.ABORTED_BEFORE_ACQUIRE, time.monotonic() - start,
                                message="图书馆已关闭，未能借书")
        except AcquireCancelledError:
            logger.info("%s 等待借书时被中断", self.name, extra=self._log_extra)
            return self._finish(ActorState.ABORTED_BEFORE_ACQUIRE, time.monotonic() - start,
                                message="等待借书时被中断")
        waited = time.monotonic() - start

        self._state = ActorState.HOLDING
        held_since = time.monotonic()
        if self._pause(self.hold):
            logger.info("%s 阅读被中断，提前还书", self.name, extra=self._log_extra)

        try:
            self.pool.release(self.name)
        except PoolClosedError:
            logger.info("%s 无法还书: 图书馆已关闭", self.name, extra=self._log_extra)
            return self._finish(ActorState.ABANDONED_HOLDING, waited, time.monotonic() - held_since,
                                message="图书馆已关闭，书未归还")
        return self._finish(ActorState.RETURNED, waited, time.monotonic() - held_since)
