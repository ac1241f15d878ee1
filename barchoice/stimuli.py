"""PsychoPy rendering for the two bar choice stimulus kinds.

All positions and sizes are in pixels. The engine hands each adapter a
TrialConfig and the sampled StimulusOutcome; nothing here changes them.

"""
from psychopy import visual


class PlotAxes(object):

    def __init__(self, win, p, plot_size):

        width, height = plot_size
        x, y = p.plot_pos
        left, bottom = x - width / 2, y - height / 2

        kws = dict(lineColor=p.axis_color,
                   lineWidth=p.axis_width,
                   autoLog=False)
        self.lines = [
            visual.Line(win, start=(left, bottom), end=(left, bottom + height),
                        **kws),
            visual.Line(win, start=(left, bottom), end=(left + width, bottom),
                        **kws),
        ]

    def draw(self):

        for line in self.lines:
            line.draw()


class BarPair(object):
    """Two colored bars rising from the x axis of a plot."""
    def __init__(self, win, p):

        self.win = win
        self.p = p

        width, height = p.plot_size
        self.plot_height = height
        self.baseline = p.plot_pos[1] - height / 2

        self.axes = PlotAxes(win, p, (width, height))
        self.positions = self.side_positions()

        self.bars = [visual.Rect(win,
                                 width=p.bar_width,
                                 height=1,
                                 pos=(x, self.baseline),
                                 lineColor=None,
                                 autoLog=False)
                     for x in self.positions]
        self.heights = [0, 0]

    def side_positions(self):

        offset = (self.p.bar_width + self.p.bar_gap) / 2
        x = self.p.plot_pos[0]
        return [x - offset, x + offset]

    def show(self, config, outcome):

        colors = config.left_color, config.right_color
        heights = outcome.final_left, outcome.final_right

        for bar, x, color, height in zip(self.bars, self.positions,
                                         colors, heights):
            height = max(height, 0)
            bar.fillColor = color
            if height:
                bar.height = height
                bar.pos = x, self.baseline + height / 2

        self.heights = list(heights)

    def draw(self):

        for bar, height in zip(self.bars, self.heights):
            if height > 0:
                bar.draw()
        self.axes.draw()


class ImageBarPair(BarPair):
    """Two images revealed from the bottom up to the bar heights.

    Each image sits on the x axis, scaled down if it is taller than the
    plot, and everything above the sampled height is covered by a mask in
    the background color.

    """
    def __init__(self, win, p):

        super(ImageBarPair, self).__init__(win, p)

        self.images = [None, None]
        self.masks = [visual.Rect(win,
                                  width=1,
                                  height=1,
                                  pos=(x, self.baseline),
                                  fillColor=p.bg_color,
                                  lineColor=None,
                                  autoLog=False)
                      for x in self.positions]

    def side_positions(self):

        x = self.p.plot_pos[0]
        offset = self.p.get("image_offset", 150)
        return [x - offset, x + offset]

    def load_image(self, fname, x):

        stim = visual.ImageStim(self.win, image=fname, units="pix",
                                autoLog=False)
        width, height = stim.size
        if height > self.plot_height:
            scale = self.plot_height / height
            width, height = width * scale, self.plot_height
            stim.size = width, height
        stim.pos = x, self.baseline + height / 2
        return stim

    def show(self, config, outcome):

        fnames = config.left_image, config.right_image
        heights = outcome.final_left, outcome.final_right

        for i, (fname, x, height) in enumerate(zip(fnames, self.positions,
                                                   heights)):

            image = self.load_image(fname, x)
            self.images[i] = image

            # Cover the image from the sampled height to the top of the plot
            height = min(max(height, 0), self.plot_height)
            mask_height = self.plot_height - height
            mask = self.masks[i]
            mask.fillColor = config.bg_color
            if mask_height:
                mask.width = image.size[0]
                mask.height = mask_height
                mask.pos = x, self.baseline + height + mask_height / 2

        self.heights = list(heights)

    def draw(self):

        for image, mask, height in zip(self.images, self.masks, self.heights):
            if image is None:
                continue
            image.draw()
            if height < self.plot_height:
                mask.draw()
        self.axes.draw()


class TrialDisplay(object):
    """Rendering adapter that draws the prompt and the active stimulus."""
    def __init__(self, win, p):

        self.win = win
        self.prompt = visual.TextStim(win,
                                      text="",
                                      pos=p.prompt_pos,
                                      height=p.prompt_height,
                                      color=p.prompt_color,
                                      units="pix",
                                      autoLog=False)

        if p.stimulus_kind == "image":
            self.pair = ImageBarPair(win, p)
        else:
            self.pair = BarPair(win, p)

        self.visible = False

    def show(self, config, outcome):

        self.prompt.text = config.prompt or ""
        self.pair.show(config, outcome)
        self.visible = True

    def draw(self):

        if not self.visible:
            return
        self.prompt.draw()
        self.pair.draw()

    def clear(self):

        self.visible = False
