"""Single-threaded host runtime for running trials.

The EventLoop implements the host side of the trial engine: random number
generation, key listeners, timers, an event marker log, and the sink that
receives completed trial data. It does not know about any display. Input
comes from `read_keys` and time from `current_time`, which subclasses
override to talk to real hardware; the base class reads keys queued with
`press` and uses whatever time is passed to `poll`.

"""
import itertools

import numpy as np


class EventLoop(object):
    """Dispatch key and timer callbacks one at a time.

    All times are in milliseconds relative to stimulus onset. Within a
    single `poll`, key presses and due timers are dispatched in time order,
    and a key press wins a tie with a timer due at the same time.

    Listeners are one-shot: a listener is removed before its callback runs
    and will not fire again. Timers are also removed before firing.
    Cancelling a handle that has already fired or been cancelled is a no-op.

    """
    def __init__(self, rng=None):

        if rng is None:
            rng = np.random.RandomState()
        self.rng = rng

        self.now = 0
        self.trial_data = []
        self.messages = []

        self._pending_keys = []
        self._listeners = {}
        self._timers = {}
        self._handles = itertools.count(1)

    # =================================================================== #
    # Interface used by the trial engine
    # =================================================================== #

    def register_key_response(self, valid_keys, callback):
        """Call `callback(key, rt)` on the first press of a valid key."""
        handle = next(self._handles)
        self._listeners[handle] = tuple(valid_keys), callback
        return handle

    def cancel_key_response(self, handle):
        self._listeners.pop(handle, None)

    def schedule_timeout(self, duration, callback):
        """Call `callback()` once, `duration` ms from now."""
        handle = next(self._handles)
        self._timers[handle] = self.now + duration, callback
        return handle

    def cancel_timeout(self, handle):
        self._timers.pop(handle, None)

    def report_trial_complete(self, result):
        self.trial_data.append(result)

    def send_message(self, msg):
        """Record an event marker with the current time."""
        self.messages.append((self.now, msg))

    # =================================================================== #
    # Event dispatch
    # =================================================================== #

    @property
    def pending(self):
        """Number of listeners and timers that could still fire."""
        return len(self._listeners) + len(self._timers)

    def reset_clock(self):
        """Set the time origin to the current stimulus onset."""
        self.now = 0
        self._pending_keys = []

    def press(self, key, rt=None):
        """Queue a key press to be dispatched on the next poll."""
        self._pending_keys.append((key, rt))

    def read_keys(self):
        """Return (key, rt) pairs received since the last poll."""
        keys, self._pending_keys = self._pending_keys, []
        return keys

    def current_time(self):
        return self.now

    def poll(self, now=None):
        """Dispatch new key presses and due timers in time order."""
        if now is None:
            now = self.current_time()
        self.now = now

        for key, rt in self.read_keys():
            if rt is None:
                rt = now
            self.fire_timers(rt, inclusive=False)
            self.dispatch_key(key, rt)

        self.fire_timers(now)

    def dispatch_key(self, key, rt):

        for handle, (valid_keys, callback) in list(self._listeners.items()):
            # An earlier callback may have cancelled this listener
            if handle not in self._listeners:
                continue
            if key in valid_keys:
                del self._listeners[handle]
                callback(key, rt)

    def fire_timers(self, now, inclusive=True):

        due = sorted((when, handle)
                     for handle, (when, _) in self._timers.items()
                     if when < now or (inclusive and when == now))

        for _, handle in due:
            if handle not in self._timers:
                continue
            _, callback = self._timers.pop(handle)
            callback()
