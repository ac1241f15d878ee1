"""Local utilities for running bar choice experiments."""
import os
import time
import argparse
from copy import deepcopy

from . import params as param_sets


class Params(dict):
    """Parameter set with attribute access.

    Built from one of the named sets in `params.py` and then optionally
    updated from the command line.

    """
    def __init__(self, mode="base", **overrides):

        try:
            source = getattr(param_sets, mode)
        except AttributeError:
            raise ValueError("No parameter set named {!r}".format(mode))
        if not isinstance(source, dict):
            raise ValueError("No parameter set named {!r}".format(mode))

        super(Params, self).__init__(deepcopy(source))
        self.update(overrides)
        self["mode"] = mode

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value

    def set_by_cmdline(self, arglist):
        """Update parameters from a list of command line arguments."""
        args = define_parser().parse_args(arglist)

        self.subject = args.subject
        self.session = args.session
        self.time = time.strftime("%Y-%m-%d_%H-%M-%S")
        self.seed = args.seed

        if args.nosave:
            self.save_data = False
        if args.trials is not None:
            self.n_trials = args.trials
        for key in ["prompt", "correct_side", "left_image", "right_image"]:
            val = getattr(args, key)
            if val is not None:
                self[key] = val
        if args.duration is not None:
            self.trial_duration = args.duration

        return args


def define_parser():

    parser = argparse.ArgumentParser(prog="barchoice")
    parser.add_argument("--subject", default="test")
    parser.add_argument("--session", default="1")
    parser.add_argument("--trials", type=int)
    parser.add_argument("--seed", type=int)
    parser.add_argument("--nosave", action="store_true")
    parser.add_argument("--prompt")
    parser.add_argument("--correct-side", choices=["left", "right"])
    parser.add_argument("--duration", type=float,
                        help="trial duration in ms")
    parser.add_argument("--left-image")
    parser.add_argument("--right-image")
    return parser


def output_stem(p):
    """Return the file path stem for the data from this run."""
    stem = p.output_template.format(subject=p.subject,
                                    session=p.session,
                                    time=p.time)
    out_dir = os.path.dirname(stem)
    if out_dir and not os.path.exists(out_dir):
        os.makedirs(out_dir)
    return stem


def archive_old_version(fname):
    """Move an existing file out of the way so it is not overwritten."""
    if not os.path.exists(fname):
        return None
    base, ext = os.path.splitext(fname)
    for n in range(1, 1000):
        archive = "{}_old{:02d}{}".format(base, n, ext)
        if not os.path.exists(archive):
            os.rename(fname, archive)
            return archive
    raise IOError("Too many archived versions of {}".format(fname))
