import numpy as np

PALETTES = [
    ["#003049", "#d62828", "#f77f00", "#fcbf49", "#eae2b7"],
    ["#264653", "#2a9d8f", "#e9c46a", "#f4a261", "#e76f51"],
    ["#000000"],
]


def create_random_config(
    width=1200,
    height=850,
    n_flowlines=-1,
    segments=-1,
    segment_len=-1,
    smoothness=-1,
    noise_seed=-1,
    palette=None,
    rng=None,
) -> dict:
    """
    function to create a random config that is later used to create a flowline plot. Negative parameter values will be replaced by random values.
    """
    if rng is None:
        rng = np.random.default_rng()

    params = {
        "width": width,
        "height": height,
        "n_flowlines": n_flowlines,
        "segments": segments,
        "segment_len": segment_len,
        "smoothness": smoothness,
        "noise_seed": noise_seed,
        "palette": palette,
    }

    if n_flowlines < 0:
        params["n_flowlines"] = int(rng.integers(500, 5000))

    if segments < 0:
        params["segments"] = int(rng.integers(20, 200))

    if segment_len < 0:
        params["segment_len"] = float(rng.uniform(2.0, 10.0))

    if smoothness < 0:
        params["smoothness"] = float(rng.uniform(0.0005, 0.003))

    if noise_seed < 0:
        params["noise_seed"] = int(rng.integers(0, 2**31))

    if palette is None:
        params["palette"] = PALETTES[int(rng.integers(len(PALETTES)))]

    return params
