"""图书馆副本池 - 有界资源协调器

一个 threading.Condition 同时保护可用数量、开放标志、持有者集合和 FIFO 等待队列，
任何 acquire / release / close 都不会在读写这些状态的中途交错。

公平性：每次 acquire 先在队尾登记一张票据，只有队首票据且有空闲副本时才能借出，
先到先得，不会出现某个学生被后来者无限期插队。

关闭语义（刻意不对称）：
  - 关闭后借书：立即抛出 PoolClosedError，不排队、不修改状态
  - 关闭后还书：同样抛出 PoolClosedError，但书不会回到池中（视为闭馆后未能归还）
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque

from libsim.core.events import PoolListener
from libsim.core.exceptions import AcquireCancelledError, PoolClosedError, ValidationError
from libsim.core.models import EventKind, PoolEvent, PoolStatus

logger = logging.getLogger(__name__)


class _Ticket:
    """等待队列中的一张借书票据"""

    __slots__ = ("actor", "cancelled", "cancel_event")

    def __init__(self, actor: str, cancel_event: threading.Event | None = None) -> None:
        self.actor = actor
        self.cancelled = False
        self.cancel_event = cancel_event

    def check_cancelled(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.cancelled = True
        return self.cancelled


class ResourcePool:
    """固定容量、可关闭、FIFO 公平的副本池"""

    def __init__(self, capacity: int) -> None:
        """
        参数:
            capacity: 副本总数，必须为正整数
        """
        if capacity < 1:
            raise ValidationError(f"容量必须为正整数: {capacity}")
        self._capacity = capacity
        self._available = capacity
        self._open = True
        self._cond = threading.Condition(threading.Lock())
        self._holders: set[str] = set()
        self._waiters: deque[_Ticket] = deque()
        self._listeners: list[PoolListener] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def available(self) -> int:
        with self._cond:
            return self._available

    @property
    def is_open(self) -> bool:
        """开放标志的非阻塞快照"""
        return self._open

    def subscribe(self, listener: PoolListener) -> None:
        """注册事件观察者"""
        with self._cond:
            self._listeners.append(listener)

    # ---- 借 / 还 / 关闭 ----

    def acquire(self, actor_id: str, cancel_event: threading.Event | None = None) -> None:
        """借出一本书，必要时按到达顺序阻塞等待

        参数:
            actor_id: 学生名称
            cancel_event: 可选的取消信号；置位后需再调用 interrupt() 唤醒等待者

        异常:
            PoolClosedError: 调用时或等待期间图书馆已关闭
            AcquireCancelledError: 等待期间被 interrupt() 中断
            ValidationError: 该学生已持有一本书（不支持重入）
        """
        with self._cond:
            if not self._open:
                self._emit(EventKind.ACQUIRE_REJECTED, actor_id)
                raise PoolClosedError(f"图书馆已关闭，{actor_id} 不能借书", actor=actor_id)
            if actor_id in self._holders:
                raise ValidationError(f"{actor_id} 已持有一本书，不支持重复借阅")

            ticket = _Ticket(actor_id, cancel_event)
            self._waiters.append(ticket)
            try:
                while not self._can_take(ticket):
                    self._cond.wait()
            finally:
                self._waiters.remove(ticket)
                # 队首变化，唤醒其余等待者重新检查
                self._cond.notify_all()

            if ticket.cancelled:
                self._emit(EventKind.CANCELLED, actor_id)
                raise AcquireCancelledError(f"{actor_id} 等待借书时被中断", actor=actor_id)
            if not self._open:
                self._emit(EventKind.ACQUIRE_REJECTED, actor_id)
                raise PoolClosedError(f"图书馆已关闭，{actor_id} 不能借书", actor=actor_id)

            self._available -= 1
            self._holders.add(actor_id)
            logger.info("%s 借到一本书 (在借 %d/%d)", actor_id, self._in_use(), self._capacity,
                        extra={"actor": actor_id})
            self._emit(EventKind.ACQUIRED, actor_id)

    def _can_take(self, ticket: _Ticket) -> bool:
        """票据是否可以结束等待（成功、关闭或取消）"""
        if ticket.check_cancelled() or not self._open:
            return True
        return self._waiters[0] is ticket and self._available > 0

    def release(self, actor_id: str) -> None:
        """归还一本书

        异常:
            PoolClosedError: 图书馆已关闭，书留在学生手中
        """
        with self._cond:
            if not self._open:
                self._emit(EventKind.RELEASE_REJECTED, actor_id)
                raise PoolClosedError(f"图书馆已关闭，{actor_id} 现在不能还书", actor=actor_id)
            if actor_id not in self._holders:
                logger.warning("%s 未持有书本，忽略归还", actor_id, extra={"actor": actor_id})
                return

            self._holders.remove(actor_id)
            self._available = min(self._capacity, self._available + 1)
            logger.info("%s 归还了一本书 (在借 %d/%d)", actor_id, self._in_use(), self._capacity,
                        extra={"actor": actor_id})
            self._cond.notify_all()
            self._emit(EventKind.RELEASED, actor_id)

    def close(self) -> bool:
        """关闭图书馆，唤醒所有等待者；重复调用无副作用

        返回:
            bool: 本次调用是否真正完成了关闭
        """
        with self._cond:
            if not self._open:
                logger.debug("图书馆已处于关闭状态，忽略重复关闭")
                return False
            self._open = False
            self._cond.notify_all()
            logger.info("图书馆已关闭，不再受理任何借还操作")
            self._emit(EventKind.CLOSED)
            return True

    # ---- 中断 ----

    def interrupt(self, actor_id: str) -> bool:
        """中断某个学生正在进行的等待，返回是否找到该等待者"""
        with self._cond:
            found = False
            for ticket in self._waiters:
                if ticket.actor == actor_id:
                    ticket.cancelled = True
                    found = True
            if found:
                self._cond.notify_all()
            return found

    def interrupt_all(self) -> int:
        """中断所有等待者，返回被中断的数量"""
        with self._cond:
            for ticket in self._waiters:
                ticket.cancelled = True
            self._cond.notify_all()
            return len(self._waiters)

    # ---- 查询 ----

    def status(self) -> PoolStatus:
        """查询当前池状态"""
        with self._cond:
            return PoolStatus(
                capacity=self._capacity,
                in_use=self._in_use(),
                available=self._available,
                is_open=self._open,
                holders=sorted(self._holders),
                waiting=[t.actor for t in self._waiters],
                timestamp=time.time(),
            )

    def _in_use(self) -> int:
        return self._capacity - self._available

    def _emit(self, kind: EventKind, actor: str = "") -> None:
        """在持锁状态下按顺序通知观察者"""
        event = PoolEvent(
            kind=kind, actor=actor, available=self._available,
            in_use=self._in_use(), timestamp=time.monotonic(),
        )
        for listener in self._listeners:
            try:
                listener.on_event(event)
            except Exception:  # noqa: BLE001  监听器异常不得打断池状态变更
                logger.exception("池事件监听器执行失败: %s", type(listener).__name__)
