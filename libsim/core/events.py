"""池事件观察者（Observer 模式）

ResourcePool 在持锁状态下按发生顺序通知所有已订阅的 PoolListener，
因此监听器看到的 available / in_use 序列与池内部状态变化完全一致。
监听器应当轻量，不得回调池本身，否则会在池锁上死锁。

用法:
    recorder = EventRecorder()
    pool.subscribe(recorder)
    ...
    recorder.count(EventKind.ACQUIRED)
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from libsim.core.models import EventKind, PoolEvent


class PoolListener(ABC):
    """池观察者基类，实现 on_event 即可接入"""

    @abstractmethod
    def on_event(self, event: PoolEvent) -> None:
        """接收一条池事件"""


class EventRecorder(PoolListener):
    """线程安全的事件记录器，供驱动器汇总与测试校验不变量"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[PoolEvent] = []
        self._peak_in_use = 0

    def on_event(self, event: PoolEvent) -> None:
        with self._lock:
            self._events.append(event)
            self._peak_in_use = max(self._peak_in_use, event.in_use)

    @property
    def events(self) -> list[PoolEvent]:
        with self._lock:
            return list(self._events)

    @property
    def peak_in_use(self) -> int:
        with self._lock:
            return self._peak_in_use

    def count(self, kind: EventKind) -> int:
        with self._lock:
            return sum(1 for e in self._events if e.kind == kind)

    def actors_for(self, kind: EventKind) -> list[str]:
        """按发生顺序返回某类事件涉及的学生"""
        with self._lock:
            return [e.actor for e in self._events if e.kind == kind]
