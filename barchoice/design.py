"""Sample the stimulus magnitudes for a trial."""
from collections import namedtuple

import numpy as np


StimulusOutcome = namedtuple(
    "StimulusOutcome",
    ["left_height", "right_height",
     "left_jitter", "right_jitter",
     "final_left", "final_right"],
)


def round_half_away(x):
    """Round to the nearest integer, with ties going away from zero."""
    return int(np.sign(x) * np.floor(np.abs(x) + .5))


def sample_height(height_range, rng):
    """Draw an integer uniformly from an inclusive (min, max) range."""
    low, high = height_range
    return int(rng.randint(low, high + 1))


def sample_jitter(bound, rng):
    """Draw a real value in [-bound, bound] and round it to an integer."""
    if not bound:
        return 0
    return round_half_away(rng.uniform(-bound, bound))


def generate_stimulus(config, rng=None):
    """Return the jittered bar heights for one trial.

    Each side gets an independent height and an independent jitter. The
    final magnitudes are fixed here and never recomputed afterwards.

    """
    if rng is None:
        rng = np.random.RandomState()

    left_height = sample_height(config.left_height_range, rng)
    right_height = sample_height(config.right_height_range, rng)

    left_jitter = sample_jitter(config.jitter, rng)
    right_jitter = sample_jitter(config.jitter, rng)

    return StimulusOutcome(
        left_height=left_height,
        right_height=right_height,
        left_jitter=left_jitter,
        right_jitter=right_jitter,
        final_left=left_height + left_jitter,
        final_right=right_height + right_jitter,
    )
