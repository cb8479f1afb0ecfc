"""
Partition visualization utilities.

Renders clustered images and the k-means silhouette sweep for debugging.
"""

from typing import Optional, List, Dict
import matplotlib.pyplot as plt

from ..base.interfaces import ImageSource
from ..base.data_structures import Partition, Centroid
from ..image.summary import mean_colour_image


def plot_partition(image: ImageSource,
                   partition: Partition,
                   ax: Optional[plt.Axes] = None,
                   centroids: Optional[List[Centroid]] = None,
                   show_original: bool = False,
                   centroid_marker: str = 'X',
                   centroid_size: int = 120,
                   title: Optional[str] = None) -> plt.Axes:
    """Plot an image with every pixel painted in its cluster's mean colour.

    Args:
        image: Image the partition was built from
        partition: Partition to render
        ax: Matplotlib axes (created if None)
        centroids: Optional k-means centroids to mark
        show_original: Render the source pixels instead of cluster means
        centroid_marker: Marker for centroids
        centroid_size: Size of centroid markers
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 6))

    if show_original:
        painted = image.to_tensor().cpu().reshape(image.height, image.width, 4).byte()
    else:
        painted = mean_colour_image(image, partition)

    ax.imshow(painted.numpy(), interpolation='nearest')

    if centroids:
        xs = [c.coordinate[0] for c in centroids]
        ys = [c.coordinate[1] for c in centroids]
        colours = [tuple(v / 255.0 for v in c.rgb) for c in centroids]
        ax.scatter(xs, ys, c=colours, marker=centroid_marker, s=centroid_size,
                   edgecolors='black', linewidth=1.5)

    ax.set_xticks([])
    ax.set_yticks([])

    if title is None:
        title = f'{partition.n_clusters} clusters'
    ax.set_title(title)

    return ax


def plot_silhouette_scores(scores: Dict[int, float],
                           ax: Optional[plt.Axes] = None,
                           best_k: Optional[int] = None,
                           title: Optional[str] = None) -> plt.Axes:
    """Plot mean silhouette against k.

    Args:
        scores: Mapping k -> mean silhouette, e.g. ``KMeansClusterer.silhouette_scores_``
        ax: Matplotlib axes (created if None)
        best_k: Selected k to highlight
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    ks = sorted(scores)
    ax.plot(ks, [scores[k] for k in ks], 'o-', color='tab:blue')

    if best_k is not None and best_k in scores:
        ax.axvline(best_k, color='tab:red', linestyle='--', alpha=0.7)
        ax.scatter([best_k], [scores[best_k]], color='tab:red', s=100, zorder=3,
                   label=f'best k = {best_k}')
        ax.legend()

    ax.set_xlabel('k')
    ax.set_ylabel('Mean silhouette')
    ax.set_xticks(ks)
    ax.grid(True, alpha=0.3)
    ax.set_title(title or 'Silhouette by k')

    return ax
