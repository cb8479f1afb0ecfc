"""
Comparison of the two pixel clustering algorithms.

This example demonstrates:
1. Agglomerative clustering at a few tolerances
2. K-means with silhouette-selected k
3. Both distance algorithms (euclidean and redmean)

Shows how the number of colour regions depends on the algorithm and settings.
"""

import numpy as np
import matplotlib.pyplot as plt
from time import time

# Add parent directory to path
import sys
sys.path.append('..')

from pixclust import (
    PixelGrid, ClusteringEngine, ClusteringOptions, plot_partition, plot_silhouette_scores
)


def generate_synthetic_image(width=48, height=32, noise_level=12.0, random_state=42):
    """Generate an image of soft-edged colour blobs on a transparent background.

    Each blob has its own base colour with per-pixel Gaussian noise.
    """
    rng = np.random.default_rng(random_state)

    pixels = np.zeros((height, width, 4), dtype=np.float64)
    blobs = [
        ((12, 10), 8, (220, 40, 40)),
        ((34, 12), 9, (40, 90, 220)),
        ((22, 24), 7, (240, 210, 40)),
    ]

    ys, xs = np.mgrid[0:height, 0:width]
    for (cx, cy), radius, colour in blobs:
        mask = (xs - cx) ** 2 + (ys - cy) ** 2 <= radius ** 2
        pixels[mask, :3] = colour
        pixels[mask, 3] = 255

    opaque = pixels[..., 3] > 0
    pixels[opaque, :3] += rng.normal(scale=noise_level, size=(opaque.sum(), 3))

    return np.clip(np.rint(pixels), 0, 255).astype(np.uint8)


def evaluate(image, options, name):
    """Cluster with the given options and report timing and cluster count."""
    print(f"\n{'='*50}")
    print(f"Testing {name}")
    print('='*50)

    engine = ClusteringEngine(options)

    start = time()
    result = engine.cluster_with_details(image)
    fit_time = time() - start

    print(f"Fit time: {fit_time:.3f}s")
    print(f"Clusters: {result.n_clusters}")
    if 'threshold' in result.metadata:
        print(f"Threshold: {result.metadata['threshold']:.4f}")
        print(f"Merges: {result.metadata['n_merges']}")
    if 'best_k' in result.metadata:
        scores = result.metadata['silhouette_scores']
        print(f"Best k: {result.metadata['best_k']} "
              f"(silhouette {scores[result.metadata['best_k']]:.3f})")

    return {'name': name, 'result': result, 'time': fit_time}


def plot_comparison(image, results_list):
    """Plot every partition next to the original image."""
    n_plots = len(results_list) + 1
    fig, axes = plt.subplots(1, n_plots, figsize=(4 * n_plots, 4))

    plot_partition(image, results_list[0]['result'].partition, ax=axes[0],
                   show_original=True, title='Original')

    for ax, res in zip(axes[1:], results_list):
        result = res['result']
        plot_partition(image, result.partition, ax=ax,
                       centroids=result.metadata.get('centroids'),
                       title=f"{res['name']}\n{result.n_clusters} clusters")

    plt.tight_layout()

    kmeans_results = [r for r in results_list if 'silhouette_scores' in r['result'].metadata]
    if kmeans_results:
        metadata = kmeans_results[0]['result'].metadata
        plot_silhouette_scores(metadata['silhouette_scores'], best_k=metadata['best_k'])

    plt.show()


def main():
    print("Generating synthetic image...")
    image = PixelGrid(generate_synthetic_image(), name='blobs')
    print(f"Image size: {image.width}x{image.height}")

    configs = [
        ('Agglo t=0.6', ClusteringOptions(clustering_alg='agglomerative', agglo_tolerance=0.6)),
        ('Agglo t=0.95', ClusteringOptions(clustering_alg='agglomerative', agglo_tolerance=0.95)),
        ('K-means', ClusteringOptions(clustering_alg='kmeans', max_k=6, random_state=42)),
        ('K-means redmean', ClusteringOptions(clustering_alg='kmeans', pixeldist_alg='redmean',
                                              max_k=6, random_state=42)),
    ]

    results_list = [evaluate(image, options, name) for name, options in configs]

    print("\n" + "="*50)
    print("SUMMARY")
    print("="*50)
    for res in results_list:
        print(f"{res['name']:<18} clusters={res['result'].n_clusters:<4} time={res['time']:.3f}s")

    plot_comparison(image, results_list)

    print("\nComparison complete!")


if __name__ == "__main__":
    main()
