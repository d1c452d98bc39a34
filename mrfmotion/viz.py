"""Matplotlib rendering of detector outputs."""
from __future__ import annotations

from typing import Mapping

import numpy as np
from matplotlib.figure import Figure


def render_results(results: Mapping[str, np.ndarray], output: str | None = None, show: bool = False) -> Figure:
    """
    Draw each named result as a grayscale panel in one row.

    Saves to ``output`` when given; ``show`` opens a pyplot window and blocks
    until it is closed.
    """
    if not results:
        raise ValueError("No results to render")
    n = len(results)
    fig = Figure(figsize=(4 * n, 4))
    axes = fig.subplots(1, n, squeeze=False)[0]
    for ax, (title, img) in zip(axes, results.items()):
        ax.imshow(img, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
        ax.set_title(title)
        ax.axis("off")
    fig.tight_layout()
    if output is not None:
        fig.savefig(output, dpi=100)
    if show:
        import matplotlib.pyplot as plt

        # one window per result
        for title, img in results.items():
            plt.figure(title)
            plt.imshow(img, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
            plt.axis("off")
        plt.show()
    return fig
