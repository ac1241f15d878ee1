"""Trial configuration and validation.

A TrialConfig is built once per trial and is read-only afterwards. All the
checks happen in the constructor so a bad configuration fails before any
keyboard listener or timer has been registered with the host.

"""
import numbers
import warnings
from types import MappingProxyType

import numpy as np


# Sentinel for `choices` that disables response capture entirely
NO_KEYS = "NO_KEYS"

SIDES = ("left", "right")

# Side-specific rendering parameters echoed into the trial data
STIMULUS_KINDS = dict(
    bar=("left_color", "right_color"),
    image=("left_image", "right_image"),
)

# Parameters understood by the engine; everything else is passed through
# untouched to the rendering adapter
TRIAL_FIELDS = dict(
    prompt=None,
    left_height_range=(50, 150),
    right_height_range=(50, 150),
    jitter=5,
    choices=("f", "j"),
    correct_side=None,
    trial_duration=None,
    response_ends_trial=True,
    stimulus_kind="bar",
)

RENDER_DEFAULTS = dict(
    left_color="#3498db",
    right_color="#e74c3c",
    bg_color="#ffffff",
    left_image=None,
    right_image=None,
)


class ConfigurationError(ValueError):
    """Raised when a trial cannot be run as configured."""


def _is_integer(value):
    return (isinstance(value, numbers.Integral)
            and not isinstance(value, bool))


class TrialConfig(object):
    """Immutable description of a single bar choice trial.

    Parameters that the engine does not use are kept in ``render_params``
    and are available as attributes as well, so rendering adapters can
    read e.g. ``config.left_color`` regardless of stimulus kind.

    """
    def __init__(self, **kwargs):

        fields = dict(TRIAL_FIELDS)
        render_params = dict(RENDER_DEFAULTS)
        for key, val in kwargs.items():
            if key in fields:
                fields[key] = val
            else:
                render_params[key] = val

        prompt = fields["prompt"]
        left_range = self._check_range("left_height_range",
                                       fields["left_height_range"])
        right_range = self._check_range("right_height_range",
                                        fields["right_height_range"])
        jitter = self._check_jitter(fields["jitter"])
        choices = self._check_choices(fields["choices"])
        correct_side = self._check_side(fields["correct_side"])
        duration = self._check_duration(fields["trial_duration"])
        ends_trial = fields["response_ends_trial"]
        if not isinstance(ends_trial, bool):
            raise ConfigurationError(
                "`response_ends_trial` must be True or False, not {!r}"
                .format(ends_trial)
            )
        kind = fields["stimulus_kind"]
        if kind not in STIMULUS_KINDS:
            raise ConfigurationError(
                "`stimulus_kind` must be one of {}, not {!r}"
                .format(sorted(STIMULUS_KINDS), kind)
            )

        if kind == "image":
            missing = [k for k in STIMULUS_KINDS["image"]
                       if render_params.get(k) is None]
            if missing:
                raise ConfigurationError(
                    "Image stimuli need both images; missing {}"
                    .format(", ".join(missing))
                )

        # Catch trials that would never end
        if duration is None:
            if choices == NO_KEYS:
                raise ConfigurationError(
                    "Trial cannot end: `choices` is NO_KEYS and no "
                    "`trial_duration` is set"
                )
            if not ends_trial:
                raise ConfigurationError(
                    "Trial cannot end: `response_ends_trial` is False and "
                    "no `trial_duration` is set"
                )

        for side, (low, _) in zip(SIDES, (left_range, right_range)):
            if low - jitter < 0:
                warnings.warn("Jittered {} height can fall below zero "
                              "({} - {})".format(side, low, jitter))

        object.__setattr__(self, "_fields", dict(
            prompt=prompt,
            left_height_range=left_range,
            right_height_range=right_range,
            jitter=jitter,
            choices=choices,
            correct_side=correct_side,
            trial_duration=duration,
            response_ends_trial=ends_trial,
            stimulus_kind=kind,
        ))
        object.__setattr__(self, "render_params",
                           MappingProxyType(render_params))

    @classmethod
    def from_params(cls, p, **overrides):
        """Build a config from a parameter set, ignoring run-level keys."""
        known = set(TRIAL_FIELDS) | set(RENDER_DEFAULTS)
        kwargs = {k: v for k, v in p.items() if k in known}
        kwargs.update(overrides)
        return cls(**kwargs)

    # --- Validation helpers

    @staticmethod
    def _check_range(name, value):
        try:
            low, high = value
        except (TypeError, ValueError):
            raise ConfigurationError(
                "`{}` must be a (min, max) pair, not {!r}".format(name, value)
            )
        if not (_is_integer(low) and _is_integer(high)):
            raise ConfigurationError(
                "`{}` bounds must be integers, not {!r}".format(name, value)
            )
        if low > high:
            raise ConfigurationError(
                "`{}` is inverted: min {} > max {}".format(name, low, high)
            )
        return int(low), int(high)

    @staticmethod
    def _check_jitter(value):
        if not _is_integer(value) or value < 0:
            raise ConfigurationError(
                "`jitter` must be a non-negative integer, not {!r}"
                .format(value)
            )
        return int(value)

    @staticmethod
    def _check_choices(value):
        if isinstance(value, str):
            if value == NO_KEYS:
                return NO_KEYS
            raise ConfigurationError(
                "`choices` must be two keys or NO_KEYS, not {!r}"
                .format(value)
            )
        try:
            choices = tuple(value)
        except TypeError:
            raise ConfigurationError(
                "`choices` must be two keys or NO_KEYS, not {!r}"
                .format(value)
            )
        if len(choices) != 2:
            raise ConfigurationError(
                "`choices` needs exactly two keys, got {}".format(len(choices))
            )
        if choices[0] == choices[1]:
            raise ConfigurationError(
                "`choices` keys must differ, got {!r} twice"
                .format(choices[0])
            )
        return choices

    @staticmethod
    def _check_side(value):
        if value is not None and value not in SIDES:
            raise ConfigurationError(
                "`correct_side` must be 'left', 'right' or None, not {!r}"
                .format(value)
            )
        return value

    @staticmethod
    def _check_duration(value):
        if value is None:
            return None
        if (not isinstance(value, numbers.Real)
                or isinstance(value, bool)
                or not np.isfinite(value) or value < 0):
            raise ConfigurationError(
                "`trial_duration` must be a finite non-negative number of ms "
                "or None, not {!r}".format(value)
            )
        return value

    # --- Attribute access

    def __getattr__(self, name):
        fields = self.__dict__.get("_fields", {})
        if name in fields:
            return fields[name]
        render_params = self.__dict__.get("render_params", {})
        if name in render_params:
            return render_params[name]
        raise AttributeError(name)

    def __setattr__(self, name, value):
        raise AttributeError("TrialConfig is read-only")

    def __repr__(self):
        args = ", ".join("{}={!r}".format(k, v)
                         for k, v in sorted(self._fields.items()))
        return "TrialConfig({})".format(args)

    @property
    def response_enabled(self):
        return self.choices != NO_KEYS

    @property
    def echoed_params(self):
        """Side-specific rendering parameters reported with the data."""
        keys = STIMULUS_KINDS[self.stimulus_kind]
        return {k: self.render_params.get(k) for k in keys}
