"""Trial controller: state machine and result assembly."""
import pandas as pd

from .config import TrialConfig
from .design import generate_stimulus
from .response import ResponseCollector


# Trial states
INITIALIZED = "initialized"
AWAITING_RESPONSE = "awaiting_response"
RESOLVED = "resolved"
FINALIZED = "finalized"
ABORTED = "aborted"

TRANSITIONS = {
    INITIALIZED: (AWAITING_RESPONSE, ABORTED),
    AWAITING_RESPONSE: (RESOLVED, ABORTED),
    RESOLVED: (FINALIZED,),
    FINALIZED: (),
    ABORTED: (),
}


def side_for_key(key, choices):
    """Map a response key onto the side it selects, or None."""
    if key is None or not isinstance(choices, tuple):
        return None
    if key == choices[0]:
        return "left"
    elif key == choices[1]:
        return "right"
    return None


def score_accuracy(chosen_side, correct_side):
    """Return 1 or 0 when both sides are known, otherwise None."""
    if chosen_side is None or correct_side is None:
        return None
    return int(chosen_side == correct_side)


def finalize_trial(config, outcome, response):
    """Assemble the data record for a resolved trial."""
    chosen_side = side_for_key(response.key, config.choices)

    trial_data = dict(

        # Subject response fields
        rt=response.rt,
        key=response.key,
        prompt=config.prompt,
        chosen_side=chosen_side,
        correct_side=config.correct_side,
        accuracy=score_accuracy(chosen_side, config.correct_side),

        # Stimulus parameters
        final_left=outcome.final_left,
        final_right=outcome.final_right,
        left_jitter=outcome.left_jitter,
        right_jitter=outcome.right_jitter,
        stimulus_kind=config.stimulus_kind,

    )
    trial_data.update(config.echoed_params)

    return pd.Series(trial_data, dtype=object)


class TrialSession(object):
    """Controller object for a single trial.

    The session samples the stimulus on construction, shows it on `start`,
    and reports exactly one result to the host once the response collector
    resolves. Used as a context manager, it guarantees that the listener and
    timer are handed back to the host on every exit path::

        with TrialSession(config, host, renderer) as trial:
            trial.start()
            while not trial.finished:
                host.poll()

    """
    def __init__(self, config, host, renderer=None):

        if not isinstance(config, TrialConfig):
            config = TrialConfig(**config)

        self.config = config
        self.host = host
        self.renderer = renderer

        self.state = INITIALIZED
        self.outcome = generate_stimulus(config, host.rng)
        self.collector = ResponseCollector(config, host, self._on_resolved)
        self.result = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.collector.release()
        if self.state in (INITIALIZED, AWAITING_RESPONSE):
            self._transition(ABORTED)
            self.host.send_message("trial_aborted")
            if self.renderer is not None:
                self.renderer.clear()

    def _transition(self, state):
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError("Cannot move trial from {} to {}"
                               .format(self.state, state))
        self.state = state

    @property
    def finished(self):
        return self.state in (FINALIZED, ABORTED)

    @property
    def resolved_by(self):
        return self.collector.resolution

    def start(self):
        """Show the stimulus and begin waiting for a response."""
        self._transition(AWAITING_RESPONSE)
        if self.renderer is not None:
            self.renderer.show(self.config, self.outcome)
        self.host.send_message("stimulus_on")
        self.collector.start()
        return self

    def end(self):
        """End the trial from outside, keeping any recorded response."""
        if self.state != AWAITING_RESPONSE:
            return False
        return self.collector.resolve("external")

    def _on_resolved(self, response):

        self._transition(RESOLVED)
        self.host.send_message("resolved_{}".format(self.resolved_by))

        result = finalize_trial(self.config, self.outcome, response)

        if self.renderer is not None:
            self.renderer.clear()

        self.result = result
        self._transition(FINALIZED)
        self.host.send_message("trial_end")
        self.host.report_trial_complete(result)
