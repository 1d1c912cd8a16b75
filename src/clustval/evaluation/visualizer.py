import logging

import matplotlib.pyplot as plt
import numpy as np

from clustval.evaluation.cdbw import CDbw
from clustval.partition.partition import UNCLASSIFIED

logger = logging.getLogger(__name__)


def plot_cdbw_2d(
    index: CDbw,
    alpha: float = None,
    point_size: int = None,
    show_rcrs: bool = True,
    savepath: str | None = None,
):
    """
    Plot the clusters of a computed CDbw index.

    Parameters
    ----------
    index : CDbw
        Index on which compute(r) has already been called.
    alpha : float, optional
        Point transparency; defaults scale by dataset size.
    point_size : int, optional
        Marker size; defaults scale by dataset size.
    show_rcrs : bool, default=True
        If True, draw the RCR segments between representatives.
    savepath : str, optional
        If provided, saves plot to file.
    """
    if index.r_ is None:
        raise ValueError("compute(r) must be called before plotting")

    coords = index.points
    labels = index.partition.cluster_ids
    n_points = len(coords)

    # auto alpha and point size scaling
    if alpha is None:
        alpha = 0.6 if n_points < 5000 else 0.3 if n_points < 50000 else 0.15
    if point_size is None:
        point_size = 30 if n_points < 5000 else 10 if n_points < 50000 else 5

    fig, ax = plt.subplots(figsize=(10, 7))
    colors = plt.cm.tab10(np.linspace(0, 1, max(len(index.clusters), 1)))

    noise = labels == UNCLASSIFIED
    if noise.any():
        ax.scatter(coords[noise, 0], coords[noise, 1], s=point_size, alpha=alpha, c="lightgray", label="Noise (-1)")

    for color, cluster in zip(colors, index.clusters):
        members = coords[cluster.members]
        ax.scatter(members[:, 0], members[:, 1], s=point_size, alpha=alpha, c=[color], label=f"Cluster {cluster.cluster_id}")

        reps = cluster.representative_coords()
        ax.scatter(reps[:, 0], reps[:, 1], s=point_size * 3, marker="x", c=[color])

    if show_rcrs and index.rcrs_ is not None:
        for i, j in index.rcrs_.ordered_pairs():
            if i > j:
                continue
            for u, w in index.rcrs_[i, j]:
                ax.plot(coords[[u, w], 0], coords[[u, w], 1], color="black", linewidth=0.8, alpha=0.6)

    title = f"CDbw (r={index.r_}, {len(index.clusters)} clusters)"
    if not np.isnan(index.cdbw()):
        title += f"  [CDbw={index.cdbw():.3f}]"
    ax.set_title(title)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.legend(markerscale=1.5, fontsize=8, framealpha=0.6)
    fig.tight_layout()

    if savepath:
        fig.savefig(savepath, dpi=200, bbox_inches="tight")
        logger.info(f"Saved CDbw plot to {savepath}")
    else:
        plt.show()

    plt.close(fig)
