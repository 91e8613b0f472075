"""
Event hub
문서(전역) 범위 리스너 레지스트리

포인터 이동/해제, 리사이즈 같은 이벤트는 특정 노드가 아니라
전역 범위로 전달된다. 리스너는 Subscription으로 등록되고
dispose()로 해제된다.
"""
import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]

POINTER_MOVE = "pointermove"
POINTER_UP = "pointerup"
POINTER_CANCEL = "pointercancel"
POINTER_LEAVE = "pointerleave"
RESIZE = "resize"


class Subscription:
    """등록된 리스너 하나 (dispose는 여러 번 호출해도 안전)"""

    def __init__(self, hub: "EventHub", event: str, handler: Handler):
        self._hub = hub
        self.event = event
        self.handler = handler
        self.active = True

    def dispose(self) -> None:
        if not self.active:
            return
        self.active = False
        self._hub._remove(self)


class EventHub:
    """이벤트 이름별 핸들러 목록"""

    def __init__(self):
        self._handlers: Dict[str, List[Subscription]] = {}

    def subscribe(self, event: str, handler: Handler) -> Subscription:
        subscription = Subscription(self, event, handler)
        self._handlers.setdefault(event, []).append(subscription)
        return subscription

    def dispatch(self, event: str, payload: Any = None) -> int:
        """핸들러 호출 후 호출된 수 반환

        핸들러 안에서 구독이 해제될 수 있으므로 목록 복사본을 순회한다.
        """
        called = 0
        for subscription in list(self._handlers.get(event, [])):
            if subscription.active:
                subscription.handler(payload)
                called += 1
        return called

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._handlers.get(subscription.event, [])
        if subscription in handlers:
            handlers.remove(subscription)
        if not handlers:
            self._handlers.pop(subscription.event, None)
