"""
Test point file ingestion and result output
"""

import tempfile
from pathlib import Path

import numpy as np

from kmeans.config import KMeansConfig, ConfigurationError
from kmeans.data import load_points, write_points, write_centroids
from kmeans.clustering import KMeansEngine


def test_load_text_points():
    """Whitespace and comma separated lines load into an n × d array."""
    print("Testing text point file...")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "points.txt"
        path.write_text(
            "# x y\n"
            "0 0\n"
            "0,1\n"
            "\n"
            "10.5   0\n"
            "10, 1\n"
        )
        points = load_points(path)

    assert points.shape == (4, 2)
    assert np.array_equal(points, [[0, 0], [0, 1], [10.5, 0], [10, 1]])
    print("  ✓ 4 points, comments and blank lines skipped")


def test_load_npy_points():
    """.npy files load directly."""
    print("\nTesting .npy point file...")

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "points.npy"
        data = np.arange(12, dtype=float).reshape(4, 3)
        np.save(path, data)
        points = load_points(path)

    assert np.array_equal(points, data)
    print("  ✓ 4 × 3 array loaded")


def test_load_errors():
    """Bad point files raise ConfigurationError."""
    print("\nTesting point file errors...")

    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        (tmp / "ragged.txt").write_text("1 2\n3 4 5\n")
        (tmp / "words.txt").write_text("1 2\nthree 4\n")
        (tmp / "empty.txt").write_text("# nothing here\n\n")

        for name in ("missing.txt", "ragged.txt", "words.txt", "empty.txt"):
            try:
                load_points(tmp / name)
                assert False, f"Should have rejected {name}"
            except ConfigurationError:
                pass
    print("  ✓ Missing, ragged, non-numeric and empty files rejected")


def test_load_undecodable_files():
    """Binary garbage in a point file is a ConfigurationError, not a decode crash."""
    print("\nTesting undecodable point files...")

    with tempfile.TemporaryDirectory() as tmpdir:
        tmp = Path(tmpdir)
        (tmp / "binary.txt").write_bytes(b"\xff\xfe 1 2\n")
        (tmp / "corrupt.npy").write_bytes(b"\xff\xfe not an array")

        for name in ("binary.txt", "corrupt.npy"):
            try:
                load_points(tmp / name)
                assert False, f"Should have rejected {name}"
            except ConfigurationError:
                pass
    print("  ✓ Invalid UTF-8 text and corrupt .npy rejected")


def test_write_points_and_centroids():
    """Output files hold coordinates + cluster id, and id + size + centroid."""
    print("\nTesting output writers...")

    data = [[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]]
    result = KMeansEngine(data, config=KMeansConfig(seed=1)).cluster(2)

    with tempfile.TemporaryDirectory() as tmpdir:
        points_path = Path(tmpdir) / "out" / "points.txt"
        centroids_path = Path(tmpdir) / "out" / "centroids.txt"
        write_points(result, points_path)
        write_centroids(result, centroids_path)

        point_rows = np.loadtxt(points_path)
        centroid_rows = np.loadtxt(centroids_path)

    assert point_rows.shape == (4, 3)
    assert np.allclose(point_rows[:, :2], data)
    assert np.array_equal(point_rows[:, 2].astype(int), result.labels)

    assert centroid_rows.shape == (2, 4)
    assert centroid_rows[:, 0].tolist() == [0.0, 1.0]
    assert centroid_rows[:, 1].tolist() == [2.0, 2.0]
    assert np.allclose(centroid_rows[:, 2:], result.original_centroids())
    print("  ✓ points.txt and centroids.txt match the result")


def run_all_tests():
    """Run all data I/O tests."""
    print("=" * 60)
    print("DATA I/O VALIDATION")
    print("=" * 60)
    print()

    test_load_text_points()
    test_load_npy_points()
    test_load_errors()
    test_load_undecodable_files()
    test_write_points_and_centroids()

    print()
    print("=" * 60)
    print("✅ ALL DATA I/O TESTS PASSED")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
