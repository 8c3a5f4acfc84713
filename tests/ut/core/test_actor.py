"""学生生命周期测试"""

from __future__ import annotations

import random

import pytest

from libsim.core.actor import Actor
from libsim.core.events import EventRecorder
from libsim.core.models import ActorResult, ActorState, EventKind
from libsim.core.pool import ResourcePool

_INSTANT = (0.0, 0.0)


def _run_in_thread(actor: Actor, spawn) -> tuple[list[ActorResult], object]:
    results: list[ActorResult] = []
    t = spawn(lambda: results.append(actor.run()))
    return results, t


class TestActorHappyPath:
    def test_borrow_and_return(self) -> None:
        pool = ResourcePool(1)
        actor = Actor("Student #1", pool, jitter=_INSTANT, hold=_INSTANT)
        assert actor.state == ActorState.IDLE

        result = actor.run()
        assert result.name == "Student #1"
        assert result.state == ActorState.RETURNED
        assert result.message == ""
        assert actor.state == ActorState.RETURNED
        assert pool.available == 1

    def test_cannot_restart(self) -> None:
        actor = Actor("s", ResourcePool(1), jitter=_INSTANT, hold=_INSTANT)
        actor.run()
        with pytest.raises(RuntimeError):
            actor.run()

    def test_durations_drawn_from_ranges(self) -> None:
        class FixedRandom(random.Random):
            def __init__(self) -> None:
                super().__init__(0)
                self.calls: list[tuple[float, float]] = []

            def uniform(self, a: float, b: float) -> float:
                self.calls.append((a, b))
                return 0.0

        rng = FixedRandom()
        Actor("s", ResourcePool(1), jitter=(0.5, 2.5), hold=(1.0, 4.0), rng=rng).run()
        assert rng.calls == [(0.5, 2.5), (1.0, 4.0)]


class TestActorClosedPaths:
    def test_pool_closed_before_acquire(self) -> None:
        pool = ResourcePool(2)
        pool.close()
        result = Actor("late", pool, jitter=_INSTANT, hold=_INSTANT).run()
        assert result.state == ActorState.ABORTED_BEFORE_ACQUIRE
        assert pool.available == 2

    def test_closed_while_holding_abandons_unit(self, spawn, wait_until) -> None:
        pool = ResourcePool(2)
        actor = Actor("reader", pool, jitter=_INSTANT, hold=(0.3, 0.3))
        results, t = _run_in_thread(actor, spawn)

        assert wait_until(lambda: actor.holding)
        pool.close()
        t.join(timeout=2.0)

        assert results[0].state == ActorState.ABANDONED_HOLDING
        assert actor.holding is True
        assert pool.available == 1
        assert pool.status().holders == ["reader"]

    def test_closed_while_waiting(self, spawn, wait_until) -> None:
        pool = ResourcePool(1)
        pool.acquire("holder")
        actor = Actor("waiter", pool, jitter=_INSTANT, hold=_INSTANT)
        results, t = _run_in_thread(actor, spawn)

        assert wait_until(lambda: pool.status().waiting == ["waiter"])
        assert actor.state == ActorState.WAITING
        pool.close()
        t.join(timeout=2.0)
        assert results[0].state == ActorState.ABORTED_BEFORE_ACQUIRE


class TestActorCancel:
    def test_cancel_during_jitter(self, spawn) -> None:
        pool = ResourcePool(1)
        actor = Actor("sleepy", pool, jitter=(10.0, 10.0), hold=_INSTANT)
        results, t = _run_in_thread(actor, spawn)

        actor.cancel()
        t.join(timeout=2.0)
        assert not t.is_alive()
        assert results[0].state == ActorState.ABORTED_BEFORE_ACQUIRE
        assert actor.cancelled is True

    def test_cancel_while_blocked_in_acquire(self, spawn, wait_until) -> None:
        pool = ResourcePool(1)
        recorder = EventRecorder()
        pool.subscribe(recorder)
        pool.acquire("holder")
        actor = Actor("blocked", pool, jitter=_INSTANT, hold=_INSTANT)
        results, t = _run_in_thread(actor, spawn)

        assert wait_until(lambda: pool.status().waiting == ["blocked"])
        actor.cancel()
        t.join(timeout=2.0)

        assert results[0].state == ActorState.ABORTED_BEFORE_ACQUIRE
        assert results[0].message == "等待借书时被中断"
        assert recorder.actors_for(EventKind.CANCELLED) == ["blocked"]
        assert pool.is_open is True

    def test_cancel_while_holding_returns_early(self, spawn, wait_until) -> None:
        pool = ResourcePool(1)
        actor = Actor("reader", pool, jitter=_INSTANT, hold=(10.0, 10.0))
        results, t = _run_in_thread(actor, spawn)

        assert wait_until(lambda: actor.holding)
        actor.cancel()
        t.join(timeout=2.0)

        assert not t.is_alive()
        assert results[0].state == ActorState.RETURNED
        assert results[0].held < 5.0
        assert pool.available == 1
