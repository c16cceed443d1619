import threading

from navigation.rehearsal.scheduler import TimerScheduler, VirtualScheduler


def test_virtual_fires_in_due_order():
    clock = VirtualScheduler()
    fired = []
    clock.schedule(200, lambda: fired.append("b"))
    clock.schedule(100, lambda: fired.append("a"))
    clock.schedule(200, lambda: fired.append("c"))

    assert clock.advance(150) == 1
    assert clock.advance(50) == 2
    assert fired == ["a", "b", "c"]
    assert clock.now() == 0.2


def test_virtual_cancel():
    clock = VirtualScheduler()
    fired = []
    token = clock.schedule(10, lambda: fired.append(1))
    clock.cancel(token)

    assert clock.pending == 0
    clock.advance(100)
    assert fired == []


def test_virtual_callbacks_can_reschedule():
    clock = VirtualScheduler()
    fired = []

    def tick():
        fired.append(clock.now_ms)
        if len(fired) < 3:
            clock.schedule(10, tick)

    clock.schedule(10, tick)
    assert clock.run_until_idle() == 3
    assert fired == [10, 20, 30]


def test_timer_scheduler_runs_and_cancels():
    scheduler = TimerScheduler()
    done = threading.Event()
    scheduler.schedule(1, done.set)
    assert done.wait(2)

    never = threading.Event()
    token = scheduler.schedule(200, never.set)
    scheduler.cancel(token)
    assert not never.wait(0.4)
