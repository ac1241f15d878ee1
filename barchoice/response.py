"""Race a keyboard response against the trial timer."""
from collections import namedtuple


ResponseEvent = namedtuple("ResponseEvent", ["key", "rt"])

NO_RESPONSE = ResponseEvent(key=None, rt=None)


class ResponseCollector(object):
    """Own the key listener and timer for one trial.

    Whichever of a qualifying response or the timer comes first resolves
    the trial, and ``on_resolved`` is called exactly once with the recorded
    response. The listener and timer handles are released before that call.

    """
    def __init__(self, config, host, on_resolved):

        self.config = config
        self.host = host
        self.on_resolved = on_resolved

        self.response = None
        self.resolution = None

        self._listener = None
        self._timer = None

    @property
    def resolved(self):
        return self.resolution is not None

    def start(self):
        """Register the listener and timer with the host."""
        if self.config.response_enabled:
            self._listener = self.host.register_key_response(
                self.config.choices, self._on_capture
            )

        if self.config.trial_duration is not None:
            self._timer = self.host.schedule_timeout(
                self.config.trial_duration, self._on_timeout
            )

    def _on_capture(self, key, rt):

        if self.resolved:
            return

        # Only the first response is kept
        if self.response is None:
            self.response = ResponseEvent(key, rt)

        if self.config.response_ends_trial:
            self.resolve("response")

    def _on_timeout(self):

        self._timer = None
        self.resolve("timeout")

    def resolve(self, cause):
        """Fix the outcome of the trial; return False if already fixed."""
        if self.resolved:
            return False
        self.resolution = cause
        self.release()
        response = NO_RESPONSE if self.response is None else self.response
        self.on_resolved(response)
        return True

    def release(self):
        """Cancel whatever the host still holds for this trial."""
        listener, self._listener = self._listener, None
        if listener is not None:
            self.host.cancel_key_response(listener)

        timer, self._timer = self._timer, None
        if timer is not None:
            self.host.cancel_timeout(timer)
