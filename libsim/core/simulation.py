"""模拟驱动器 - 开馆、放学生进场、到点闭馆、等待所有人结束

每名学生独占一个线程（ThreadPoolExecutor 的 worker 数 = 学生数），
保证是真实的并发竞争而非协作式轮转。

闭馆会唤醒所有阻塞在 acquire 中的学生，因此 close() 之后
每个学生都会在有限时间内到达终态，驱动器的 join 不会死锁。
"""

from __future__ import annotations

import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor, wait

from libsim.core.actor import Actor
from libsim.core.config import SimulationConfig, get_config
from libsim.core.events import EventRecorder
from libsim.core.models import EventKind, RunSummary
from libsim.core.pool import ResourcePool

logger = logging.getLogger(__name__)


class Simulation:
    """一轮完整模拟，run() 只能调用一次"""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or get_config()
        self.config.validate()

        self.pool = ResourcePool(self.config.capacity)
        self.recorder = EventRecorder()
        self.pool.subscribe(self.recorder)

        # 由主种子派生每名学生的随机源，同一 seed 下结果可复现
        master = random.Random(self.config.seed)
        self.actors = [
            Actor(
                f"{self.config.actor_prefix} #{i}",
                self.pool,
                jitter=self.config.jitter,
                hold=self.config.hold,
                rng=random.Random(master.getrandbits(64)),
            )
            for i in range(1, self.config.actors + 1)
        ]
        self._ran = False

    def cancel(self) -> None:
        """中断所有学生（睡眠中或阻塞在 acquire 中的都会被唤醒）"""
        for actor in self.actors:
            actor.cancel()

    def run(self) -> RunSummary:
        """执行模拟，返回汇总；结果顺序与学生创建顺序一致"""
        if self._ran:
            raise RuntimeError("Simulation.run() 只能调用一次")
        self._ran = True

        cfg = self.config
        logger.info(
            "图书馆开馆: %d 本副本, %d 名学生, 开放 %.1f 秒",
            cfg.capacity, len(self.actors), cfg.open_duration,
        )
        start = time.monotonic()

        with ThreadPoolExecutor(
            max_workers=len(self.actors), thread_name_prefix="student",
        ) as executor:
            futures = [executor.submit(a.run) for a in self.actors]
            try:
                # 所有学生提前结束时无需空等到闭馆时间
                wait(futures, timeout=cfg.open_duration)
            except KeyboardInterrupt:
                logger.warning("收到中断信号，正在停止所有学生")
                self.cancel()
                raise
            finally:
                self.pool.close()
            results = [f.result() for f in futures]

        summary = RunSummary.from_actors(
            results,
            capacity=cfg.capacity,
            acquires=self.recorder.count(EventKind.ACQUIRED),
            releases=self.recorder.count(EventKind.RELEASED),
            units_lost=cfg.capacity - self.pool.available,
            peak_in_use=self.recorder.peak_in_use,
            duration=time.monotonic() - start,
        )
        logger.info(
            "所有学生都已结束借还尝试: 归还=%d 未借到=%d 未归还=%d "
            "(借出 %d 次, 归还 %d 次, 峰值在借 %d/%d, 耗时 %.1f 秒)",
            summary.returned, summary.aborted, summary.abandoned,
            summary.acquires, summary.releases, summary.peak_in_use,
            summary.capacity, summary.duration,
        )
        return summary
