"""
Drag interaction controller
포인터 이벤트를 노드 위치 갱신으로 변환하는 상태 머신 (Idle / Dragging)
"""
import logging
from typing import Callable, Dict, List, Optional

from core.config import settings
from models.topology import DragState, NodeVisual, Point, ViewportBounds
from services.events import (
    EventHub,
    Subscription,
    POINTER_CANCEL,
    POINTER_LEAVE,
    POINTER_MOVE,
    POINTER_UP,
)
from utils.helpers import clamp

logger = logging.getLogger(__name__)


class DragController:
    """한 번에 하나의 노드만 드래그할 수 있다.

    드래그가 시작되면 전역 범위에 move/up/cancel/leave 리스너를 등록하고,
    드래그가 끝나거나 teardown되면 모두 해제한다.
    """

    def __init__(
        self,
        hub: EventHub,
        get_nodes: Callable[[], Dict[str, NodeVisual]],
        get_bounds: Callable[[], Optional[ViewportBounds]],
        padding: float = settings.DRAG_PADDING,
    ):
        self._hub = hub
        self._get_nodes = get_nodes
        self._get_bounds = get_bounds
        self.padding = padding
        self._state: Optional[DragState] = None
        self._subscriptions: List[Subscription] = []

    @property
    def state(self) -> Optional[DragState]:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return self._state is not None

    def pointer_down(self, node_id: str, pointer: Point) -> bool:
        """Idle -> Dragging

        다른 드래그가 진행 중이면 무시하고 False를 반환한다.
        존재하지 않는 노드면 KeyError.
        """
        if self._state is not None:
            logger.debug(
                f"Ignoring pointer down on {node_id}: "
                f"{self._state.active_node_id} is already being dragged"
            )
            return False

        node = self._get_nodes()[node_id]
        origin = self._origin()
        self._state = DragState(
            active_node_id=node_id,
            dx=pointer.x - (origin.x + node.x),
            dy=pointer.y - (origin.y + node.y),
        )
        self._subscriptions = [
            self._hub.subscribe(POINTER_MOVE, self._on_move),
            self._hub.subscribe(POINTER_UP, self._on_release),
            self._hub.subscribe(POINTER_CANCEL, self._on_release),
            self._hub.subscribe(POINTER_LEAVE, self._on_leave),
        ]
        logger.debug(f"Drag started on {node_id}")
        return True

    def pointer_move(self, pointer: Point) -> Optional[NodeVisual]:
        """Dragging -> Dragging: 드래그 중인 노드만 이동"""
        if self._state is None:
            return None

        bounds = self._get_bounds()
        if bounds is None:
            return None

        node = self._get_nodes().get(self._state.active_node_id)
        if node is None:
            # 새로고침으로 노드가 사라짐
            return None

        candidate_x = pointer.x - bounds.x - self._state.dx
        candidate_y = pointer.y - bounds.y - self._state.dy
        node.x = clamp(candidate_x, self.padding, bounds.width - self.padding)
        node.y = clamp(candidate_y, self.padding, bounds.height - self.padding)
        return node

    def pointer_up(self) -> None:
        """Dragging -> Idle (재배치 없음)"""
        if self._state is None:
            return
        logger.debug(f"Drag ended on {self._state.active_node_id}")
        self._state = None
        self._release_listeners()

    def teardown(self) -> None:
        self._state = None
        self._release_listeners()

    def _origin(self) -> Point:
        bounds = self._get_bounds()
        if bounds is None:
            return Point(x=0.0, y=0.0)
        return bounds.origin

    def _release_listeners(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions = []

    def _on_move(self, pointer: Point) -> None:
        self.pointer_move(pointer)

    def _on_release(self, _payload) -> None:
        self.pointer_up()

    def _on_leave(self, _payload) -> None:
        # 뷰포트를 벗어나도 드래그는 계속된다 (좌표는 계속 clamp)
        pass
