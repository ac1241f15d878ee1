"""Two-alternative forced-choice trials with jittered bar stimuli."""
from .config import TrialConfig, ConfigurationError, NO_KEYS  # noqa: F401
from .design import StimulusOutcome, generate_stimulus  # noqa: F401
from .response import ResponseEvent, ResponseCollector  # noqa: F401
from .runtime import EventLoop  # noqa: F401
from .trial import TrialSession, finalize_trial  # noqa: F401

__version__ = "0.1.0"
