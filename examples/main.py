import datetime
import logging

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from flowart import Canvas, FlowField, GridNoise, TraceConfig
from flowart.render import MatplotlibRenderer, SvgRenderer
from helper import create_random_config


def main(n_pictures=5):
    rng = np.random.default_rng()
    for pic in range(n_pictures):
        t1 = datetime.datetime.now()
        config = create_random_config(rng=rng)
        canvas = Canvas(config["width"], config["height"])
        field = FlowField(
            canvas,
            noise=GridNoise(seed=config["noise_seed"]),
            smoothness=config["smoothness"],
            palette=config["palette"],
            rng=rng,
            config=TraceConfig(
                segments=config["segments"],
                segment_len=config["segment_len"],
                n_jobs=4,
                line_width=0.5,
            ),
        )
        field.seed_flowlines(config["n_flowlines"])
        t2 = datetime.datetime.now()
        print(f"it took {t2-t1} to trace {config['n_flowlines']} flowlines for {pic}")

        svg = SvgRenderer(canvas.width, canvas.height)
        field.draw_flowlines(svg)
        svg.write(f"{pic}.svg")

        mpl = MatplotlibRenderer(width=canvas.width, height=canvas.height)
        field.draw_flowlines(mpl)
        plt.tight_layout()
        mpl.savefig(f"{pic}.png")
        plt.close(mpl.ax.figure)

        t3 = datetime.datetime.now()
        print(f"it took {t3-t2} to create plot {pic}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
