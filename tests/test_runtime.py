import numpy as np

from barchoice.runtime import EventLoop


class Recorder:
    """Collect callback invocations in order."""

    def __init__(self):
        self.calls = []

    def key(self, key, rt):
        self.calls.append(("key", key, rt))

    def timer(self):
        self.calls.append(("timer",))


def test_default_rng():

    host = EventLoop()
    assert isinstance(host.rng, np.random.RandomState)


def test_listener_fires_once_for_valid_key():

    host, rec = EventLoop(), Recorder()
    host.register_key_response(["f", "j"], rec.key)

    host.press("x", 100)
    host.poll(100)
    assert rec.calls == []

    host.press("j", 250)
    host.press("f", 260)
    host.poll(300)
    assert rec.calls == [("key", "j", 250)]
    assert host.pending == 0


def test_press_without_rt_uses_poll_time():

    host, rec = EventLoop(), Recorder()
    host.register_key_response(["f"], rec.key)
    host.press("f")
    host.poll(512)
    assert rec.calls == [("key", "f", 512)]


def test_timer_fires_when_due():

    host, rec = EventLoop(), Recorder()
    host.schedule_timeout(1000, rec.timer)

    host.poll(999)
    assert rec.calls == []

    host.poll(1000)
    host.poll(1500)
    assert rec.calls == [("timer",)]
    assert host.pending == 0


def test_keys_are_dispatched_before_timers():

    host, rec = EventLoop(), Recorder()
    host.schedule_timeout(500, rec.timer)
    host.register_key_response(["f"], rec.key)

    host.press("f", 500)
    host.poll(500)
    assert rec.calls == [("key", "f", 500), ("timer",)]


def test_timers_fire_in_due_order():

    host, order = EventLoop(), []
    host.schedule_timeout(300, lambda: order.append(300))
    host.schedule_timeout(100, lambda: order.append(100))
    host.poll(1000)
    assert order == [100, 300]


def test_callback_can_cancel_other_handles():

    host, rec = EventLoop(), Recorder()
    timer = host.schedule_timeout(100, rec.timer)

    def on_key(key, rt):
        rec.key(key, rt)
        host.cancel_timeout(timer)

    host.register_key_response(["f"], on_key)
    host.press("f", 100)
    host.poll(100)
    assert rec.calls == [("key", "f", 100)]


def test_cancel_is_idempotent():

    host, rec = EventLoop(), Recorder()
    listener = host.register_key_response(["f"], rec.key)
    timer = host.schedule_timeout(10, rec.timer)

    for _ in range(2):
        host.cancel_key_response(listener)
        host.cancel_timeout(timer)

    host.press("f", 10)
    host.poll(10)
    assert rec.calls == []
    assert host.pending == 0


def test_timeouts_are_relative_to_current_time():

    host, rec = EventLoop(), Recorder()
    host.poll(200)
    host.schedule_timeout(100, rec.timer)
    host.poll(250)
    assert rec.calls == []
    host.poll(300)
    assert rec.calls == [("timer",)]


def test_reset_clock_discards_queued_keys():

    host, rec = EventLoop(), Recorder()
    host.poll(700)
    host.press("f", 650)
    host.reset_clock()
    assert host.now == 0

    host.register_key_response(["f"], rec.key)
    host.poll(10)
    assert rec.calls == []


def test_sink_and_messages():

    host = EventLoop()
    host.poll(20)
    host.send_message("stimulus_on")
    host.report_trial_complete({"key": "f"})
    assert host.messages == [(20, "stimulus_on")]
    assert host.trial_data == [{"key": "f"}]


def test_earlier_timer_fires_before_later_key():

    host, rec = EventLoop(), Recorder()
    host.register_key_response(["f"], rec.key)
    host.schedule_timeout(100, rec.timer)

    host.press("f", 150)
    host.poll(160)
    assert rec.calls == [("timer",), ("key", "f", 150)]
