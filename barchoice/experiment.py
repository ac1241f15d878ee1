import sys
import json

import numpy as np
import pandas as pd

from psychopy import core, event, logging, visual

from .config import TrialConfig
from .runtime import EventLoop
from .stimuli import TrialDisplay
from .trial import TrialSession
from .utils import Params, output_stem, archive_old_version


# =========================================================================== #
# Basic setup
# =========================================================================== #


def main(arglist=None):

    if arglist is None:
        arglist = sys.argv[1:]
    arglist = list(arglist)

    # Get the experiment parameters
    mode = "base"
    if arglist and not arglist[0].startswith("-"):
        mode = arglist.pop(0)
    p = Params(mode)
    p.set_by_cmdline(arglist)

    # Check the trial parameters before opening a window
    TrialConfig.from_params(p)

    # Open up the stimulus window
    win = launch_window(p)

    # Initialize the host runtime and the display
    runtime = PsychoPyRuntime(win, p, TrialDisplay(win, p),
                              np.random.RandomState(p.seed))
    logging.defaultClock = runtime.clock

    # Execute the experiment function
    try:
        experiment_loop(p, runtime)
    finally:
        save_data(p, runtime.trial_data)
        win.close()


def launch_window(p):
    """Open a PsychoPy window in pixel units."""
    win = visual.Window(size=p.display_size,
                        fullscr=p.display_fullscreen,
                        color=p.bg_color,
                        units="pix",
                        allowGUI=False)
    return win


# =========================================================================== #
# Experiment functions
# =========================================================================== #


def experiment_loop(p, runtime):
    """Outer loop for the experiment."""
    for t in range(1, p.n_trials + 1):

        # Inter-trial interval
        runtime.win.flip()
        wait_check_quit(p.wait_iti, p.quit_keys)

        # Execute this trial
        runtime.send_message("trial_{}".format(t))
        config = TrialConfig.from_params(p)
        result = runtime.run_trial(TrialSession(config, runtime,
                                                runtime.display))

        logging.data("Trial {}: key={} rt={} accuracy={}"
                     .format(t, result["key"], result["rt"],
                             result["accuracy"]))


def wait_check_quit(secs, quit_keys):
    """Wait for a period of time while listening for the quit keys."""
    keys = event.waitKeys(maxWait=secs, keyList=quit_keys)
    if keys:
        core.quit()


def save_data(p, trial_data):
    """Write out experiment data at the end of the run."""
    if not (trial_data and p.save_data):
        return

    stem = output_stem(p)

    data = pd.DataFrame(trial_data)
    data.insert(0, "trial", np.arange(1, len(data) + 1))
    out_data_fname = stem + "_trials.csv"
    archive_old_version(out_data_fname)
    data.to_csv(out_data_fname, index=False)

    out_json_fname = stem + "_params.json"
    archive_old_version(out_json_fname)
    with open(out_json_fname, "w") as fid:
        json.dump(p, fid, sort_keys=True, indent=4)


# =========================================================================== #
# Host runtime
# =========================================================================== #


class PsychoPyRuntime(EventLoop):
    """Event loop host that polls the PsychoPy keyboard once per frame.

    Reaction times are measured from the first flip that shows the
    stimulus. Key presses carry their PsychoPy timestamps, so a response
    made before the timeout wins even when both are read on the same frame.

    """
    def __init__(self, win, p, display, rng=None):

        super(PsychoPyRuntime, self).__init__(rng)

        self.win = win
        self.p = p
        self.display = display

        self.clock = core.Clock()
        self.resp_clock = core.Clock()

    def send_message(self, msg):

        super(PsychoPyRuntime, self).send_message(msg)
        logging.exp(msg)

    def current_time(self):

        return self.resp_clock.getTime() * 1000

    def read_keys(self):

        keys = event.getKeys(timeStamped=self.resp_clock)
        for key, _ in keys:
            if key in self.p.quit_keys:
                core.quit()
        # Drop presses made before stimulus onset
        return [(key, key_time * 1000) for key, key_time in keys
                if key_time >= 0]

    def run_trial(self, trial):
        """Show a trial and poll for events until it is finalized."""
        event.clearEvents()
        self.reset_clock()

        with trial:

            trial.start()

            frame = 0
            while not trial.finished:

                self.display.draw()
                self.win.flip()
                if not frame:
                    self.resp_clock.reset()
                    event.clearEvents()
                frame += 1

                self.poll()

        # Remove the stimulus from the screen
        self.display.draw()
        self.win.flip()

        return trial.result


if __name__ == "__main__":
    main(sys.argv[1:])
