"""
Topology visualization Pydantic models
노드 위치, 드래그 상태, 뷰포트, 렌더링 결과 데이터 구조 정의
"""
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from models.cluster import CertStatus, WorkerDetail


CONTROL_PLANE_ID = "control"


def worker_id(index: int) -> str:
    """워커 인덱스(0부터)로 안정적인 노드 ID 생성"""
    return f"worker{index + 1}"


class NodeKind(str, Enum):
    CONTROL_PLANE = "control_plane"
    WORKER = "worker"


class LayoutStrategy(str, Enum):
    CIRCLE = "circle"
    GRID = "grid"
    RANDOM = "random"


class Point(BaseModel):
    """2D 좌표"""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class ViewportBounds(BaseModel):
    """렌더링 표면의 위치와 크기"""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    width: float
    height: float

    @property
    def origin(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def center(self) -> Point:
        return Point(x=self.width / 2, y=self.height / 2)

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0


class NodeVisual(BaseModel):
    """화면에 배치된 노드 (유일한 가변 엔티티)"""
    id: str
    kind: NodeKind
    x: float
    y: float
    ip: str

    @property
    def position(self) -> Point:
        return Point(x=self.x, y=self.y)


class DragState(BaseModel):
    """진행 중인 드래그 제스처"""
    model_config = ConfigDict(frozen=True)

    active_node_id: str
    dx: float
    dy: float


# ============================================
# 요청 모델
# ============================================

class PointerEvent(BaseModel):
    """클라이언트 기준 포인터 좌표"""
    x: float = 0.0
    y: float = 0.0


class PointerDownRequest(PointerEvent):
    node_id: str


class HoverRequest(BaseModel):
    node_id: Optional[str] = None


# ============================================
# 렌더링 모델
# ============================================

class NodeGlyph(BaseModel):
    """노드 하나의 표시 정보"""
    id: str
    kind: NodeKind
    label: str
    ip: str
    x: float
    y: float
    reachable: bool
    hovered: bool = False


class Edge(BaseModel):
    """컨트롤 플레인과 워커를 잇는 그라디언트 연결선"""
    id: str
    source: str
    target: str
    x1: float
    y1: float
    x2: float
    y2: float
    gradient_id: str
    stops: List[str]


class CertEntry(BaseModel):
    cert_type: str
    status: str
    glyph: str  # resolved, attention, failure
    last_updated: str


class CertificateOverlay(BaseModel):
    """호버된 노드의 인증서 목록"""
    node_id: str
    x: float
    y: float
    entries: List[CertEntry]


class CertificateSummary(BaseModel):
    total: int
    distributed: int
    pending: int
    badge: str  # Healthy, Pending


class ConnectivitySummary(BaseModel):
    total_nodes: int
    available_nodes: int
    unreachable_ips: List[str]
    last_checked: Optional[str] = None


class RenderModel(BaseModel):
    """렌더러 출력"""
    glyphs: List[NodeGlyph] = []
    edges: List[Edge] = []
    overlay: Optional[CertificateOverlay] = None
    certificates: Optional[CertificateSummary] = None
    connectivity: Optional[ConnectivitySummary] = None


class NodeDetail(BaseModel):
    """노드 상세 정보 (노드 모달)"""
    node: NodeVisual
    label: str
    reachable: bool
    certs: List[CertStatus] = []
    status: Optional[str] = None
    name: Optional[str] = None
    # /api/worker-nodes 레코드 (id, metrics 포함), 컨트롤 플레인은 None
    detail: Optional[WorkerDetail] = None


class TopologyState(BaseModel):
    """뷰 전체 상태"""
    status: str  # loading, ready, unavailable
    error: Optional[str] = None
    strategy: LayoutStrategy
    bounds: Optional[ViewportBounds] = None
    nodes: List[NodeVisual] = []
    drag: Optional[DragState] = None
    hovered: Optional[str] = None
