"""
Test point/cluster models and distance functions
"""

import numpy as np

from kmeans.clustering import (
    Point,
    Cluster,
    UNASSIGNED,
    squared_distance,
    distance,
)


def test_point_starts_unassigned():
    """A new point has no cluster."""
    print("Testing Point defaults...")

    point = Point(coordinates=np.array([1.0, 2.0, 3.0]))
    assert point.cluster_id == UNASSIGNED
    assert point.dimensions == 3
    assert point.to_dict() == {"coordinates": [1.0, 2.0, 3.0], "cluster_id": -1}
    print("  ✓ Point unassigned with 3 dimensions")


def test_cluster_members_are_indices():
    """Clusters track member indices, not point data."""
    print("\nTesting Cluster members...")

    cluster = Cluster(id=2, centroid=np.zeros(2))
    assert cluster.is_empty
    assert cluster.size == 0

    cluster.members.extend([0, 4, 7])
    assert not cluster.is_empty
    assert cluster.size == 3
    assert cluster.to_meta_dict() == {"id": 2, "size": 3}
    print("  ✓ Cluster size follows member list")


def test_distance_properties():
    """Distance is symmetric, satisfies the triangle inequality, and squares consistently."""
    print("\nTesting distance properties...")

    rng = np.random.default_rng(0)
    for _ in range(50):
        a, b, c = rng.normal(size=(3, 4))

        assert distance(a, b) == distance(b, a)
        assert distance(a, c) <= distance(a, b) + distance(b, c) + 1e-12
        assert np.isclose(distance(a, b) ** 2, squared_distance(a, b))

    assert squared_distance([0, 0], [3, 4]) == 25.0
    assert distance([0, 0], [3, 4]) == 5.0
    assert distance([1, 1], [1, 1]) == 0.0
    print("  ✓ Symmetric, triangle inequality, 3-4-5 triangle")


def run_all_tests():
    """Run all model tests."""
    print("=" * 60)
    print("MODEL VALIDATION")
    print("=" * 60)
    print()

    test_point_starts_unassigned()
    test_cluster_members_are_indices()
    test_distance_properties()

    print()
    print("=" * 60)
    print("✅ ALL MODEL TESTS PASSED")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
