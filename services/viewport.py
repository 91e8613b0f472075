"""
Viewport bounds tracker
렌더링 표면의 위치/크기를 관찰하고 변경 시 알림
"""
import asyncio
import logging
from typing import Callable, Optional

from core.config import settings
from models.topology import ViewportBounds
from services.events import EventHub, Subscription, RESIZE

logger = logging.getLogger(__name__)


class RemoteSurface:
    """클라이언트가 보고한 마지막 박스를 측정값으로 제공"""

    def __init__(self):
        self._box: Optional[ViewportBounds] = None

    def report(self, box: ViewportBounds) -> None:
        self._box = box

    def measure(self) -> Optional[ViewportBounds]:
        return self._box


class ViewportTracker:
    """마운트 시 (settle 지연 후) 그리고 resize 이벤트마다 측정

    첫 측정을 지연시키는 이유는 레이아웃이 잡히기 전 0 크기 측정을 피하기 위함.
    """

    def __init__(
        self,
        hub: EventHub,
        measure: Callable[[], Optional[ViewportBounds]],
        on_change: Callable[[ViewportBounds], None],
        settle_delay: float = settings.VIEWPORT_SETTLE_DELAY,
    ):
        self._hub = hub
        self._measure = measure
        self._on_change = on_change
        self.settle_delay = settle_delay
        self._bounds: Optional[ViewportBounds] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self._subscription: Optional[Subscription] = None

    @property
    def bounds(self) -> Optional[ViewportBounds]:
        return self._bounds

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    def mount(self) -> None:
        if self.mounted:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.settle_delay, self._settled)
        self._subscription = self._hub.subscribe(RESIZE, self._on_resize)

    def update(self) -> bool:
        """측정 후 바뀌었으면 발행하고 True 반환"""
        bounds = self._measure()
        if bounds is None or bounds == self._bounds:
            return False
        self._bounds = bounds
        logger.debug(f"Viewport bounds changed: {bounds.width}x{bounds.height} at ({bounds.x}, {bounds.y})")
        self._on_change(bounds)
        return True

    def teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    def _settled(self) -> None:
        self._timer = None
        self.update()

    def _on_resize(self, _payload) -> None:
        self.update()
