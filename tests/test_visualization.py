# tests/test_visualization.py
"""
Smoke tests for the matplotlib helpers (Agg backend, nothing is shown).
"""

from __future__ import annotations

import pytest

try:
    import torch
except Exception:  # pragma: no cover
    torch = None  # type: ignore

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from pixclust import KMeansClusterer, PixelGrid  # noqa: E402
from pixclust.visualization import plot_partition, plot_silhouette_scores  # noqa: E402

from data_gen import RED, BLUE, YELLOW, make_noisy_stripes  # noqa: E402


pytestmark = pytest.mark.skipif(torch is None, reason="PyTorch is required for these tests")


@pytest.fixture(scope="module")
def fitted():
    image = PixelGrid(make_noisy_stripes(12, 6, [RED, BLUE, YELLOW], seed=0))
    model = KMeansClusterer(max_k=4, random_state=0, device="cpu").fit(image)
    return image, model


def test_plot_partition(fitted):
    image, model = fitted
    ax = plot_partition(image, model.partition_, centroids=model.centroids_)

    assert ax.get_title() == f"{model.partition_.n_clusters} clusters"
    assert len(ax.images) == 1
    assert ax.images[0].get_array().shape == (6, 12, 4)
    plt.close(ax.figure)


def test_plot_partition_on_given_axes(fitted):
    image, model = fitted
    fig, axes = plt.subplots(1, 2)

    plot_partition(image, model.partition_, ax=axes[0], show_original=True, title="original")
    plot_partition(image, model.partition_, ax=axes[1])

    assert axes[0].get_title() == "original"
    plt.close(fig)


def test_plot_silhouette_scores(fitted):
    _, model = fitted
    ax = plot_silhouette_scores(model.silhouette_scores_, best_k=model.best_k_)

    line = ax.lines[0]
    assert list(line.get_xdata()) == sorted(model.silhouette_scores_)
    assert ax.get_legend() is not None
    plt.close(ax.figure)
