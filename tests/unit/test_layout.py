"""
Unit tests for the layout engine
"""
import math
import random
import pytest

from models.cluster import ClusterSnapshot, NodeCerts
from models.topology import LayoutStrategy, ViewportBounds, CONTROL_PLANE_ID
from services.layout import (
    arrange_circle,
    arrange_grid,
    arrange_random,
    build_nodes,
    compute_layout,
    merge_layout,
)


def make_snapshot(worker_ips):
    return ClusterSnapshot(
        control_plane=NodeCerts(ip="10.0.0.1"),
        workers=[NodeCerts(ip=ip) for ip in worker_ips],
    )


class TestCircleLayout:
    """Tests for circle layout"""

    def test_three_workers_800x600(self, bounds):
        """Workers at 0/120/240 degrees, radius 180 around (400, 300)"""
        center, workers = arrange_circle(3, bounds)
        assert (center.x, center.y) == (400, 300)

        expected_angles = [0.0, 120.0, 240.0]
        for point, expected in zip(workers, expected_angles):
            assert math.hypot(point.x - 400, point.y - 300) == pytest.approx(180)
            angle = math.degrees(math.atan2(point.y - 300, point.x - 400)) % 360
            assert angle == pytest.approx(expected, abs=1e-9)

        assert workers[0].x == pytest.approx(580)
        assert workers[0].y == pytest.approx(300)

    @pytest.mark.parametrize("count", [1, 2, 5, 12])
    @pytest.mark.parametrize("width,height", [(800, 600), (300, 900), (1024, 1024)])
    def test_radius_and_even_spacing(self, count, width, height):
        """Every worker on the circle, angles evenly spaced by 2pi/n"""
        bounds = ViewportBounds(width=width, height=height)
        center, workers = arrange_circle(count, bounds)
        radius = 0.3 * min(width, height)

        angles = []
        for point in workers:
            assert math.hypot(point.x - center.x, point.y - center.y) == pytest.approx(radius)
            angles.append(math.atan2(point.y - center.y, point.x - center.x) % (2 * math.pi))

        step = 2 * math.pi / count
        for index, angle in enumerate(angles):
            assert angle == pytest.approx((step * index) % (2 * math.pi), abs=1e-9)
        assert len({round(a, 9) for a in angles}) == count

    def test_zero_workers(self, bounds):
        """No division by zero with no workers"""
        center, workers = arrange_circle(0, bounds)
        assert workers == []
        assert (center.x, center.y) == (400, 300)

    def test_zero_sized_viewport(self):
        """Degenerate viewport collapses every node to the origin"""
        center, workers = arrange_circle(4, ViewportBounds(width=0, height=0))
        assert (center.x, center.y) == (0, 0)
        assert all((p.x, p.y) == (0, 0) for p in workers)
        assert len(workers) == 4


class TestGridLayout:
    """Tests for grid layout"""

    def test_four_workers(self, bounds):
        """2x2 grid with 100 padding in 800x600"""
        control, workers = arrange_grid(4, bounds)
        assert (control.x, control.y) == (400, 50)
        assert [(p.x, p.y) for p in workers] == [
            (250, 200), (550, 200),
            (250, 400), (550, 400),
        ]

    def test_idempotent(self, bounds):
        """Same inputs give identical coordinates"""
        assert arrange_grid(7, bounds) == arrange_grid(7, bounds)

    @pytest.mark.parametrize("count", [1, 3, 9, 10, 25])
    def test_within_padding(self, count, bounds):
        """All workers strictly inside [padding, dimension - padding]"""
        _, workers = arrange_grid(count, bounds)
        for point in workers:
            assert 100 < point.x < bounds.width - 100
            assert 100 < point.y < bounds.height - 100

    def test_zero_workers(self, bounds):
        control, workers = arrange_grid(0, bounds)
        assert workers == []
        assert (control.x, control.y) == (400, 50)

    def test_zero_width(self):
        control, workers = arrange_grid(3, ViewportBounds(width=0, height=500))
        assert (control.x, control.y) == (0, 0)
        assert all((p.x, p.y) == (0, 0) for p in workers)


class TestRandomLayout:
    """Tests for random layout"""

    def test_within_padding(self, bounds):
        control, workers = arrange_random(50, bounds, rng=random.Random(7))
        assert (control.x, control.y) == (400, 300)
        for point in workers:
            assert 100 <= point.x <= 700
            assert 100 <= point.y <= 500

    def test_uses_given_rng(self, bounds):
        first = arrange_random(5, bounds, rng=random.Random(42))
        second = arrange_random(5, bounds, rng=random.Random(42))
        assert first == second

    def test_zero_sized_viewport(self):
        _, workers = arrange_random(2, ViewportBounds(width=100, height=0))
        assert all((p.x, p.y) == (0, 0) for p in workers)


class TestComputeLayout:
    """Tests for strategy dispatch"""

    def test_accepts_strategy_name(self, bounds):
        assert compute_layout("grid", 4, bounds) == arrange_grid(4, bounds)
        assert compute_layout(LayoutStrategy.CIRCLE, 4, bounds) == arrange_circle(4, bounds)

    def test_unknown_strategy(self, bounds):
        with pytest.raises(ValueError):
            compute_layout("spiral", 3, bounds)


class TestNodeIdentity:
    """Tests for NodeVisual construction and merge-preserving recompute"""

    def test_build_nodes_ids(self, bounds):
        snapshot = make_snapshot(["10.0.0.2", "10.0.0.3"])
        nodes = build_nodes(snapshot, arrange_circle(2, bounds))
        assert list(nodes) == [CONTROL_PLANE_ID, "worker1", "worker2"]
        assert nodes["worker2"].ip == "10.0.0.3"
        assert nodes[CONTROL_PLANE_ID].kind.value == "control_plane"

    def test_merge_preserves_moved_positions(self, bounds):
        """Positions survive a refresh; only new ids get layout coordinates"""
        before = merge_layout({}, make_snapshot(["10.0.0.2", "10.0.0.3"]), LayoutStrategy.CIRCLE, bounds)
        before["worker2"].x = 123.0
        before["worker2"].y = 456.0
        control_before = (before[CONTROL_PLANE_ID].x, before[CONTROL_PLANE_ID].y)
        worker1_before = (before["worker1"].x, before["worker1"].y)

        after = merge_layout(
            before,
            make_snapshot(["10.0.0.2", "10.0.0.3", "10.0.0.9"]),
            LayoutStrategy.CIRCLE,
            bounds,
        )

        assert (after["worker2"].x, after["worker2"].y) == (123.0, 456.0)
        assert (after["worker1"].x, after["worker1"].y) == worker1_before
        assert (after[CONTROL_PLANE_ID].x, after[CONTROL_PLANE_ID].y) == control_before

        _, fresh = arrange_circle(3, bounds)
        assert (after["worker3"].x, after["worker3"].y) == (fresh[2].x, fresh[2].y)

    def test_merge_keys_by_index_not_ip(self, bounds):
        """Upstream reordering keeps ids stable; ips follow the snapshot"""
        before = merge_layout({}, make_snapshot(["10.0.0.2", "10.0.0.3"]), LayoutStrategy.GRID, bounds)
        position = (before["worker1"].x, before["worker1"].y)

        after = merge_layout(before, make_snapshot(["10.0.0.3", "10.0.0.2"]), LayoutStrategy.GRID, bounds)
        assert (after["worker1"].x, after["worker1"].y) == position
        assert after["worker1"].ip == "10.0.0.3"

    def test_merge_drops_removed_ids(self, bounds):
        before = merge_layout({}, make_snapshot(["a", "b", "c"]), LayoutStrategy.CIRCLE, bounds)
        after = merge_layout(before, make_snapshot(["a"]), LayoutStrategy.CIRCLE, bounds)
        assert set(after) == {CONTROL_PLANE_ID, "worker1"}
