from copy import deepcopy


# --------------------------------------------------------------------- #
# Base parameters
# --------------------------------------------------------------------- #


base = dict(

    experiment_name="barchoice",

    # Display setup
    # -------------

    # Size of the window in pixels; all stimulus units are pixels
    display_size=(1024, 768),

    # Whether to open a fullscreen window
    display_fullscreen=False,

    # Background color of the window and of the plot area
    bg_color="#ffffff",

    # Prompt
    # ------

    # Concept word shown above the plot (None shows nothing)
    prompt=None,

    # Position and letter height of the prompt
    prompt_pos=(0, 250),
    prompt_height=32,
    prompt_color="black",

    # Plot layout
    # -----------

    # Width and height of the plot area for bar stimuli
    plot_size=(400, 400),

    # Center of the plot area
    plot_pos=(0, -40),

    # Width of each bar and the gap between the two bars
    bar_width=100,
    bar_gap=100,

    # Color and width of the x and y axis lines
    axis_color="black",
    axis_width=2,

    # Stimulus parameters
    # -------------------

    # How the two magnitudes are shown: "bar" or "image"
    stimulus_kind="bar",

    # Range (inclusive) of the sampled bar height on each side, in pixels
    left_height_range=(50, 150),
    right_height_range=(50, 150),

    # Each height is perturbed by an integer drawn from [-jitter, jitter]
    jitter=5,

    # Bar colors
    left_color="#3498db",
    right_color="#e74c3c",

    # Response parameters
    # -------------------

    # Keys for the left and right choice; use "NO_KEYS" to disable responses
    choices=("f", "j"),

    # Side that is scored as correct ("left", "right", or None for no scoring)
    correct_side=None,

    # Maximum duration of the trial in ms (None waits for a response)
    trial_duration=None,

    # If True, the first response ends the trial
    response_ends_trial=True,

    # Pressing any of these keys quits the experiment
    quit_keys=["escape", "q"],

    # Run structure
    # -------------

    # Number of trials to run with these parameters
    n_trials=10,

    # Blank screen between trials, in seconds
    wait_iti=.5,

    # Data output
    # -----------

    # If False, nothing is written to disk
    save_data=True,

    # Template for naming the output files from a run
    output_template="data/{subject}/{session}/barchoice_{time}",

)


# Image backed bars: the bar height reveals the bottom of an image
image = deepcopy(base)
image.update(dict(

    stimulus_kind="image",

    # Wider plot to fit two images
    plot_size=(500, 400),

    # Horizontal offset of each image from the plot center
    image_offset=150,

    left_image=None,
    right_image=None,

))


# Timed trials that record the first response and end on the timer
timed = deepcopy(base)
timed.update(dict(

    trial_duration=2000,
    response_ends_trial=False,

))
