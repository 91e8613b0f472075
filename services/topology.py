"""
Topology view
노드 위치, 드래그, 뷰포트 상태의 단일 소유자

모든 가변 상태는 이벤트 루프 스레드에서만 갱신된다.
스냅샷 또는 뷰포트가 바뀌면 기존 위치를 보존하며 재배치한다.
"""
import asyncio
import logging
from typing import Dict, List, Optional

from core.config import settings
from core.exceptions import DataUnavailable
from models.cluster import ClusterSnapshot
from models.topology import (
    LayoutStrategy,
    NodeDetail,
    NodeVisual,
    Point,
    RenderModel,
    TopologyState,
    ViewportBounds,
)
from services import layout, renderer
from services.cluster import ClusterFetcher
from services.drag import DragController
from services.events import EventHub, RESIZE
from services.viewport import RemoteSurface, ViewportTracker

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_UNAVAILABLE = "unavailable"


def _default_strategy() -> LayoutStrategy:
    try:
        return LayoutStrategy(settings.DEFAULT_LAYOUT)
    except ValueError:
        choices = ", ".join(s.value for s in LayoutStrategy)
        raise ValueError(
            f"Invalid DEFAULT_LAYOUT {settings.DEFAULT_LAYOUT!r} (expected one of: {choices})"
        ) from None


class TopologyView:
    """클러스터 토폴로지 시각화 상태"""

    def __init__(
        self,
        fetcher: Optional[ClusterFetcher] = None,
        strategy: Optional[LayoutStrategy] = None,
        poll_interval: float = settings.CLUSTER_POLL_INTERVAL,
        settle_delay: float = settings.VIEWPORT_SETTLE_DELAY,
    ):
        self.fetcher = fetcher or ClusterFetcher()
        self.strategy = LayoutStrategy(strategy) if strategy is not None else _default_strategy()
        self.poll_interval = poll_interval
        self.hub = EventHub()
        self.surface = RemoteSurface()
        self.tracker = ViewportTracker(
            self.hub, self.surface.measure, self._on_bounds_change, settle_delay=settle_delay
        )
        self.drag = DragController(self.hub, lambda: self._nodes, lambda: self.tracker.bounds)

        self.snapshot: Optional[ClusterSnapshot] = None
        self.status = STATUS_LOADING
        self.error: Optional[str] = None
        self.hovered: Optional[str] = None
        self._nodes: Dict[str, NodeVisual] = {}

        self._alive = False
        self._fetch_task: Optional[asyncio.Task] = None
        self._poll_task: Optional[asyncio.Task] = None

    # ============================================
    # 수명 주기
    # ============================================

    async def start(self) -> None:
        """마운트: 뷰포트 관찰, 첫 조회, (설정 시) 주기 조회 시작"""
        self._alive = True
        self.tracker.mount()
        await self.refresh()
        if self.poll_interval > 0:
            self._poll_task = asyncio.create_task(self._poll())
            logger.info(f"Polling cluster API every {self.poll_interval}s")

    async def stop(self) -> None:
        """언마운트: 진행 중인 조회 취소, 모든 리스너 해제"""
        self._alive = False
        for task in (self._poll_task, self._fetch_task):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._poll_task = None
        self._fetch_task = None
        self.drag.teardown()
        self.tracker.teardown()

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def fetching(self) -> bool:
        return self._fetch_task is not None and not self._fetch_task.done()

    async def _poll(self) -> None:
        while self._alive:
            await asyncio.sleep(self.poll_interval)
            await self.refresh()

    # ============================================
    # 스냅샷
    # ============================================

    async def refresh(self) -> bool:
        """스냅샷 재조회

        이미 조회 중이면 무시하고 False를 반환한다.
        언마운트 이후 도착한 결과는 버린다.
        """
        if self.fetching:
            logger.debug("Snapshot fetch already in flight, ignoring refresh")
            return False

        self._fetch_task = asyncio.create_task(self.fetcher.fetch_snapshot())
        try:
            snapshot = await self._fetch_task
        except DataUnavailable as e:
            if self._alive:
                logger.warning(f"Cluster data unavailable: {e}")
                self.status = STATUS_UNAVAILABLE
                self.error = str(e)
            return False
        except asyncio.CancelledError:
            # stop()이 취소한 조회는 조용히 버린다
            if self._alive:
                raise
            return False
        finally:
            self._fetch_task = None

        if not self._alive:
            logger.debug("View stopped before fetch completed, discarding snapshot")
            return False

        self.apply_snapshot(snapshot)
        return True

    def apply_snapshot(self, snapshot: ClusterSnapshot) -> None:
        self.snapshot = snapshot
        self.status = STATUS_READY
        self.error = None
        self._relayout()

    # ============================================
    # 레이아웃
    # ============================================

    @property
    def bounds(self) -> Optional[ViewportBounds]:
        return self.tracker.bounds

    @property
    def nodes(self) -> List[NodeVisual]:
        return list(self._nodes.values())

    def get_node(self, node_id: str) -> NodeVisual:
        return self._nodes[node_id]

    def report_viewport(self, bounds: ViewportBounds) -> None:
        """클라이언트가 측정한 박스를 기록하고 resize 이벤트 발생"""
        self.surface.report(bounds)
        self.hub.dispatch(RESIZE, bounds)

    def _on_bounds_change(self, bounds: ViewportBounds) -> None:
        self._relayout()

    def _can_layout(self) -> bool:
        # 0 크기 박스(최소화, 숨은 탭)에서는 배치하지 않고 기존 좌표를 유지한다
        return self.snapshot is not None and self.bounds is not None and not self.bounds.is_degenerate

    def _relayout(self) -> None:
        """드래그로 옮긴 위치를 보존하며 재계산"""
        if not self._can_layout():
            return
        self._nodes = layout.merge_layout(self._nodes, self.snapshot, self.strategy, self.bounds)
        if self.hovered is not None and self.hovered not in self._nodes:
            self.hovered = None
        logger.debug(f"Relayout ({self.strategy.value}): {len(self._nodes)} nodes")

    def rearrange(self, strategy: LayoutStrategy) -> None:
        """전략 변경: 모든 노드에 새 좌표 부여"""
        self.strategy = LayoutStrategy(strategy)
        if not self._can_layout():
            return
        positions = layout.compute_layout(self.strategy, len(self.snapshot.workers), self.bounds)
        self._nodes = layout.build_nodes(self.snapshot, positions)
        logger.info(f"Rearranged {len(self._nodes)} nodes as {self.strategy.value}")

    # ============================================
    # 포인터
    # ============================================

    def pointer_down(self, node_id: str, pointer: Point) -> bool:
        return self.drag.pointer_down(node_id, pointer)

    def set_hovered(self, node_id: Optional[str]) -> None:
        if node_id is not None and node_id not in self._nodes:
            raise KeyError(node_id)
        self.hovered = node_id

    # ============================================
    # 읽기
    # ============================================

    def render(self) -> RenderModel:
        return renderer.render(self._nodes, self.snapshot, self.hovered)

    def render_svg(self) -> str:
        return renderer.to_svg(self.render(), self.bounds)

    def describe(self, node_id: str) -> NodeDetail:
        return renderer.describe_node(self._nodes[node_id], self.snapshot)

    def state(self) -> TopologyState:
        return TopologyState(
            status=self.status,
            error=self.error,
            strategy=self.strategy,
            bounds=self.bounds,
            nodes=self.nodes,
            drag=self.drag.state,
            hovered=self.hovered,
        )
