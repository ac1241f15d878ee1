"""
Tests for the PsychoPy host with the window and keyboard replaced by fakes.
"""
import json

import numpy as np
import pandas as pd
import pytest

pytest.importorskip("psychopy.visual")

from barchoice import experiment  # noqa: E402
from barchoice.trial import TrialSession  # noqa: E402
from barchoice.utils import Params  # noqa: E402


class FakeWindow:

    def __init__(self):
        self.flips = 0

    def flip(self):
        self.flips += 1
        return self.flips / 60


class FakeDisplay:

    def __init__(self):
        self.shown = None

    def show(self, config, outcome):
        self.shown = outcome

    def draw(self):
        pass

    def clear(self):
        self.shown = None


class ScriptedKeyboard:
    """Stand-in for psychopy.event that returns keys on a given poll."""

    def __init__(self, script):
        self.script = dict(script)
        self.calls = 0
        self.cleared = 0

    def clearEvents(self):
        self.cleared += 1

    def getKeys(self, keyList=None, timeStamped=False):
        self.calls += 1
        return self.script.get(self.calls, [])


def make_runtime(monkeypatch, script):

    keyboard = ScriptedKeyboard(script)
    monkeypatch.setattr(experiment, "event", keyboard)
    p = Params("base")
    runtime = experiment.PsychoPyRuntime(FakeWindow(), p, FakeDisplay(),
                                         np.random.RandomState(0))
    return runtime, keyboard


def test_run_trial_until_response(monkeypatch):

    runtime, keyboard = make_runtime(monkeypatch, {3: [("j", .421)]})
    trial = TrialSession(dict(correct_side="right"), runtime, runtime.display)

    result = runtime.run_trial(trial)

    assert keyboard.calls == 3
    assert result["key"] == "j"
    assert result["rt"] == pytest.approx(421)
    assert result["accuracy"] == 1
    assert runtime.trial_data == [result]
    assert runtime.display.shown is None
    assert "trial" not in result


def test_presses_before_onset_are_ignored(monkeypatch):

    script = {1: [("f", -.05)], 3: [("j", .421)]}
    runtime, keyboard = make_runtime(monkeypatch, script)
    trial = TrialSession(dict(correct_side="right"), runtime, runtime.display)

    result = runtime.run_trial(trial)

    assert keyboard.cleared == 2
    assert result["key"] == "j"
    assert result["rt"] == pytest.approx(421)
    assert result["accuracy"] == 1


def test_quit_key_aborts_trial(monkeypatch):

    runtime, _ = make_runtime(monkeypatch, {2: [("escape", .1)]})

    def fake_quit():
        raise SystemExit

    monkeypatch.setattr(experiment.core, "quit", fake_quit)
    trial = TrialSession({}, runtime, runtime.display)

    with pytest.raises(SystemExit):
        runtime.run_trial(trial)

    assert trial.state == "aborted"
    assert runtime.pending == 0
    assert runtime.trial_data == []


def test_save_data(tmp_path):

    p = Params("base")
    p.set_by_cmdline(["--subject", "s01"])
    p.output_template = str(tmp_path / "{subject}_{session}")

    trial_data = [pd.Series(dict(key="f", rt=400.0), dtype=object),
                  pd.Series(dict(key=None, rt=None), dtype=object)]
    experiment.save_data(p, trial_data)

    data = pd.read_csv(str(tmp_path / "s01_1_trials.csv"))
    assert list(data.columns[:3]) == ["trial", "key", "rt"]
    assert list(data["trial"]) == [1, 2]
    assert data["key"].isnull().tolist() == [False, True]

    with open(str(tmp_path / "s01_1_params.json")) as fid:
        saved = json.load(fid)
    assert saved["subject"] == "s01"


def test_save_data_skipped_with_nosave(tmp_path):

    p = Params("base")
    p.set_by_cmdline(["--nosave"])
    p.output_template = str(tmp_path / "{subject}")
    experiment.save_data(p, [pd.Series(dict(key="f"))])
    assert list(tmp_path.iterdir()) == []
