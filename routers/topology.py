"""
Topology visualization API
노드 배치, 드래그, 뷰포트 보고, 렌더링 결과 조회
"""
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from models.topology import (
    HoverRequest,
    LayoutStrategy,
    Point,
    PointerDownRequest,
    PointerEvent,
    ViewportBounds,
)
from services.events import POINTER_CANCEL, POINTER_LEAVE, POINTER_MOVE, POINTER_UP
from services.topology import TopologyView

router = APIRouter(prefix="/api/topology", tags=["topology"])


def get_view(request: Request) -> TopologyView:
    """앱 수명 주기 동안 유지되는 TopologyView"""
    return request.app.state.topology


def _drag_payload(view: TopologyView) -> dict:
    drag = view.drag.state
    node = None
    if drag is not None:
        try:
            node = view.get_node(drag.active_node_id).model_dump(mode="json")
        except KeyError:
            # 새로고침으로 사라진 노드
            node = None
    return {
        "dragging": drag is not None,
        "drag": drag.model_dump() if drag else None,
        "node": node,
    }


# ============================================
# 상태 / 렌더링
# ============================================

@router.get("")
async def get_topology(request: Request):
    """뷰 전체 상태 조회"""
    return get_view(request).state().model_dump(mode="json")


@router.get("/render")
async def get_render_model(request: Request):
    """노드 글리프, 연결선, 인증서 오버레이"""
    return get_view(request).render().model_dump(mode="json")


@router.get("/svg")
async def get_topology_svg(request: Request):
    """SVG 렌더링"""
    return Response(content=get_view(request).render_svg(), media_type="image/svg+xml")


@router.get("/nodes/{node_id}")
async def get_node_detail(node_id: str, request: Request):
    """노드 상세 정보 (인증서, 도달 가능 여부)"""
    try:
        return get_view(request).describe(node_id).model_dump(mode="json")
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Node {node_id} not found")


# ============================================
# 조회 / 레이아웃 / 뷰포트
# ============================================

@router.post("/refresh")
async def refresh_topology(request: Request):
    """클러스터 스냅샷 재조회 (조회 중이면 무시)"""
    view = get_view(request)
    refreshed = await view.refresh()
    return {"refreshed": refreshed, "status": view.status, "error": view.error}


@router.post("/layout/{strategy}")
async def rearrange_topology(strategy: LayoutStrategy, request: Request):
    """레이아웃 전략으로 재배치"""
    view = get_view(request)
    view.rearrange(strategy)
    return view.state().model_dump(mode="json")


@router.post("/viewport")
async def report_viewport(bounds: ViewportBounds, request: Request):
    """렌더링 표면 크기 보고 (resize 이벤트)"""
    view = get_view(request)
    view.report_viewport(bounds)
    return view.state().model_dump(mode="json")


@router.post("/hover")
async def set_hovered_node(body: HoverRequest, request: Request):
    """호버 노드 지정 (null이면 해제)"""
    view = get_view(request)
    try:
        view.set_hovered(body.node_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Node {body.node_id} not found")
    return view.render().model_dump(mode="json")


# ============================================
# 포인터 이벤트
# ============================================

@router.post("/pointer/down")
async def pointer_down(event: PointerDownRequest, request: Request):
    """노드에서 드래그 시작 (다른 드래그 중이면 무시)"""
    view = get_view(request)
    try:
        accepted = view.pointer_down(event.node_id, Point(x=event.x, y=event.y))
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Node {event.node_id} not found")
    return {"accepted": accepted, **_drag_payload(view)}


@router.post("/pointer/move")
async def pointer_move(event: PointerEvent, request: Request):
    view = get_view(request)
    view.hub.dispatch(POINTER_MOVE, Point(x=event.x, y=event.y))
    return _drag_payload(view)


@router.post("/pointer/up")
async def pointer_up(event: PointerEvent, request: Request):
    view = get_view(request)
    view.hub.dispatch(POINTER_UP, Point(x=event.x, y=event.y))
    return _drag_payload(view)


@router.post("/pointer/leave")
async def pointer_leave(event: PointerEvent, request: Request):
    view = get_view(request)
    view.hub.dispatch(POINTER_LEAVE, Point(x=event.x, y=event.y))
    return _drag_payload(view)


@router.post("/pointer/cancel")
async def pointer_cancel(request: Request):
    """포인터 캡처 상실"""
    view = get_view(request)
    view.hub.dispatch(POINTER_CANCEL)
    return _drag_payload(view)
