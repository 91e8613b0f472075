"""
Layout engine
레이아웃 전략별 노드 좌표 계산 (circle, grid, random)

모든 함수는 순수 함수이며 상태를 변경하지 않는다.
뷰포트가 0 크기면 모든 노드를 원점에 모은다.
"""
import math
import random
from typing import Callable, Dict, List, Optional, Tuple

from core.config import settings
from models.topology import (
    CONTROL_PLANE_ID,
    LayoutStrategy,
    NodeKind,
    NodeVisual,
    Point,
    ViewportBounds,
    worker_id,
)
from models.cluster import ClusterSnapshot

# (control plane 좌표, 워커 좌표 목록)
Layout = Tuple[Point, List[Point]]

ORIGIN = Point(x=0.0, y=0.0)


def _degenerate(node_count: int) -> Layout:
    return ORIGIN, [ORIGIN] * max(node_count, 0)


def arrange_circle(node_count: int, bounds: ViewportBounds) -> Layout:
    """컨트롤 플레인을 중심에, 워커를 원 위에 균등 배치"""
    if bounds.is_degenerate:
        return _degenerate(node_count)

    center = bounds.center
    radius = min(bounds.width, bounds.height) * settings.CIRCLE_RADIUS_FACTOR
    step = 2 * math.pi / node_count if node_count > 0 else 0.0

    workers = []
    for index in range(node_count):
        angle = step * index
        workers.append(Point(
            x=center.x + radius * math.cos(angle),
            y=center.y + radius * math.sin(angle),
        ))
    return center, workers


def arrange_grid(node_count: int, bounds: ViewportBounds,
                 padding: float = settings.LAYOUT_PADDING) -> Layout:
    """워커를 정사각 격자에, 컨트롤 플레인을 격자 위쪽에 배치"""
    if bounds.is_degenerate:
        return _degenerate(node_count)

    cols = max(math.ceil(math.sqrt(node_count)), 1)
    cell_width = (bounds.width - padding * 2) / cols
    cell_height = (bounds.height - padding * 2) / cols

    workers = []
    for index in range(node_count):
        row, col = divmod(index, cols)
        workers.append(Point(
            x=padding + col * cell_width + cell_width / 2,
            y=padding + row * cell_height + cell_height / 2,
        ))
    return Point(x=bounds.width / 2, y=padding / 2), workers


def arrange_random(node_count: int, bounds: ViewportBounds,
                   padding: float = settings.LAYOUT_PADDING,
                   rng: Optional[random.Random] = None) -> Layout:
    """워커를 패딩 안쪽 임의 위치에 배치 (재현 불가)"""
    if bounds.is_degenerate:
        return _degenerate(node_count)

    rng = rng or random
    workers = [
        Point(
            x=rng.uniform(padding, bounds.width - padding),
            y=rng.uniform(padding, bounds.height - padding),
        )
        for _ in range(node_count)
    ]
    return bounds.center, workers


STRATEGIES: Dict[LayoutStrategy, Callable[..., Layout]] = {
    LayoutStrategy.CIRCLE: arrange_circle,
    LayoutStrategy.GRID: arrange_grid,
    LayoutStrategy.RANDOM: arrange_random,
}


def compute_layout(strategy: LayoutStrategy, node_count: int,
                   bounds: ViewportBounds) -> Layout:
    """전략 이름으로 레이아웃 계산"""
    return STRATEGIES[LayoutStrategy(strategy)](node_count, bounds)


def build_nodes(snapshot: ClusterSnapshot, layout: Layout) -> Dict[str, NodeVisual]:
    """스냅샷과 좌표로 NodeVisual 집합 생성

    워커 ID는 IP가 아니라 인덱스 기반이다.
    """
    control_point, worker_points = layout
    nodes = {
        CONTROL_PLANE_ID: NodeVisual(
            id=CONTROL_PLANE_ID,
            kind=NodeKind.CONTROL_PLANE,
            x=control_point.x,
            y=control_point.y,
            ip=snapshot.control_plane.ip,
        )
    }
    for index, (worker, point) in enumerate(zip(snapshot.workers, worker_points)):
        node_id = worker_id(index)
        nodes[node_id] = NodeVisual(
            id=node_id,
            kind=NodeKind.WORKER,
            x=point.x,
            y=point.y,
            ip=worker.ip,
        )
    return nodes


def merge_layout(previous: Dict[str, NodeVisual], snapshot: ClusterSnapshot,
                 strategy: LayoutStrategy, bounds: ViewportBounds) -> Dict[str, NodeVisual]:
    """위치를 보존하는 재계산

    이전 집합과 새 집합 모두에 있는 ID는 (x, y)를 그대로 유지하고,
    새로 나타난 ID에만 레이아웃 좌표를 부여한다. IP는 스냅샷 값을 따른다.
    """
    fresh = build_nodes(snapshot, compute_layout(strategy, len(snapshot.workers), bounds))
    for node_id, node in fresh.items():
        kept = previous.get(node_id)
        if kept is not None:
            node.x = kept.x
            node.y = kept.y
    return fresh
