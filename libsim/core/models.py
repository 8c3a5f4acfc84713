"""核心数据模型

池事件、池状态快照、学生执行结果与整轮模拟汇总集中定义在此，
pool / actor / simulation 三个模块统一从这里导入，避免互相依赖。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ActorState(str, Enum):
    """学生生命周期状态机

    idle → waiting → holding → returned 为正常路径，
    aborted_before_acquire / abandoned_holding 为两条提前终止路径。
    """

    IDLE = "idle"
    WAITING = "waiting"
    HOLDING = "holding"
    RETURNED = "returned"
    ABORTED_BEFORE_ACQUIRE = "aborted_before_acquire"
    ABANDONED_HOLDING = "abandoned_holding"

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({
    ActorState.RETURNED,
    ActorState.ABORTED_BEFORE_ACQUIRE,
    ActorState.ABANDONED_HOLDING,
})


class EventKind(str, Enum):
    """池对外可观察的事件类型"""

    ACQUIRED = "acquired"
    RELEASED = "released"
    ACQUIRE_REJECTED = "acquire_rejected"
    RELEASE_REJECTED = "release_rejected"
    CANCELLED = "cancelled"
    CLOSED = "closed"


@dataclass(frozen=True)
class PoolEvent:
    """一次池操作的记录，available / in_use 为操作完成后的值"""

    kind: EventKind
    actor: str = ""
    available: int = 0
    in_use: int = 0
    timestamp: float = 0.0


@dataclass
class PoolStatus:
    """池状态快照"""

    capacity: int = 0
    in_use: int = 0
    available: int = 0
    is_open: bool = True
    holders: list[str] = field(default_factory=list)
    waiting: list[str] = field(default_factory=list)  # FIFO 顺序
    timestamp: float = 0.0


@dataclass
class ActorResult:
    """单个学生的执行结果"""

    name: str
    state: ActorState
    waited: float = 0.0  # 阻塞在 acquire 中的秒数
    held: float = 0.0    # 持有书本的秒数
    message: str = ""


@dataclass
class RunSummary:
    """一轮模拟的汇总"""

    capacity: int
    actors: int = 0
    returned: int = 0
    aborted: int = 0
    abandoned: int = 0
    acquires: int = 0
    releases: int = 0
    units_lost: int = 0
    peak_in_use: int = 0
    duration: float = 0.0
    results: list[ActorResult] = field(default_factory=list)

    @classmethod
    def from_actors(
        cls,
        results: list[ActorResult],
        *,
        capacity: int,
        acquires: int = 0,
        releases: int = 0,
        units_lost: int = 0,
        peak_in_use: int = 0,
        duration: float = 0.0,
    ) -> RunSummary:
        """从 ActorResult 列表构建汇总，自动统计各终态人数"""
        return cls(
            capacity=capacity,
            actors=len(results),
            returned=sum(1 for r in results if r.state == ActorState.RETURNED),
            aborted=sum(1 for r in results if r.state == ActorState.ABORTED_BEFORE_ACQUIRE),
            abandoned=sum(1 for r in results if r.state == ActorState.ABANDONED_HOLDING),
            acquires=acquires,
            releases=releases,
            units_lost=units_lost,
            peak_in_use=peak_in_use,
            duration=duration,
            results=results,
        )

    @property
    def consistent(self) -> bool:
        """借出次数 = 归还次数 + 未归还人数，且峰值不超过容量"""
        return (
            self.acquires == self.releases + self.abandoned
            and self.units_lost == self.abandoned
            and self.peak_in_use <= self.capacity
        )

    def to_dict(self) -> dict:
        from dataclasses import asdict
        data = asdict(self)
        for r in data["results"]:
            r["state"] = ActorState(r["state"]).value
        data["consistent"] = self.consistent
        return data
