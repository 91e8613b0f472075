"""
Topology renderer
현재 노드 위치로 노드 글리프, 그라디언트 연결선, 인증서 오버레이를 구성

읽기 전용: 어떤 상태도 변경하지 않는다.
"""
from html import escape
from typing import Dict, Iterable, List, Optional

from models.cluster import CertStatus, ClusterSnapshot, DISTRIBUTED, GENERATED
from models.topology import (
    CONTROL_PLANE_ID,
    CertEntry,
    CertificateOverlay,
    CertificateSummary,
    ConnectivitySummary,
    Edge,
    NodeDetail,
    NodeGlyph,
    NodeKind,
    NodeVisual,
    RenderModel,
    ViewportBounds,
    worker_id,
)
from utils.helpers import format_timestamp

EDGE_GRADIENT = ["#4f46e5", "#06b6d4"]

GLYPH_RESOLVED = "resolved"
GLYPH_ATTENTION = "attention"
GLYPH_FAILURE = "failure"

# SVG 색상 (slate 다크 테마)
COLORS = {
    "background": "#1e293b",
    "control_plane": "#60a5fa",
    "worker": "#4ade80",
    "unreachable": "#f87171",
    "text": "#ffffff",
    "muted": "#94a3b8",
    "overlay": "#1e293b",
    "overlay_border": "#475569",
    GLYPH_RESOLVED: "#4ade80",
    GLYPH_ATTENTION: "#facc15",
    GLYPH_FAILURE: "#f87171",
}

GLYPH_SYMBOLS = {
    GLYPH_RESOLVED: "✓",
    GLYPH_ATTENTION: "!",
    GLYPH_FAILURE: "✗",
}


def cert_glyph(status: str) -> str:
    """인증서 상태 -> 상태 글리프"""
    if status == DISTRIBUTED:
        return GLYPH_RESOLVED
    if status == GENERATED:
        return GLYPH_ATTENTION
    return GLYPH_FAILURE


def node_label(node: NodeVisual) -> str:
    if node.kind == NodeKind.CONTROL_PLANE:
        return "Control Plane"
    return f"Worker {node.id[len('worker'):]}"


def certs_for(node_id: str, snapshot: Optional[ClusterSnapshot]) -> List[CertStatus]:
    """노드 ID(인덱스 기반)로 스냅샷의 인증서 목록 조회"""
    if snapshot is None:
        return []
    if node_id == CONTROL_PLANE_ID:
        return list(snapshot.control_plane.certs)
    for index, worker in enumerate(snapshot.workers):
        if worker_id(index) == node_id:
            return list(worker.certs)
    return []


def summarize_certificates(certs: Iterable[CertStatus]) -> CertificateSummary:
    certs = list(certs)
    distributed = sum(1 for c in certs if c.status == DISTRIBUTED)
    pending = sum(1 for c in certs if c.status == GENERATED)
    return CertificateSummary(
        total=len(certs),
        distributed=distributed,
        pending=pending,
        badge="Healthy" if distributed == len(certs) else "Pending",
    )


def summarize_connectivity(snapshot: ClusterSnapshot) -> ConnectivitySummary:
    """connectivity 필드가 없으면 스냅샷에서 계산"""
    connectivity = snapshot.connectivity
    total = 1 + len(snapshot.workers)
    unreachable = list(connectivity.unreachable_ips) if connectivity else []
    if connectivity and connectivity.total_nodes is not None:
        total = connectivity.total_nodes
    available = total - len(unreachable)
    if connectivity and connectivity.available_nodes is not None:
        available = connectivity.available_nodes
    return ConnectivitySummary(
        total_nodes=total,
        available_nodes=available,
        unreachable_ips=unreachable,
        last_checked=connectivity.last_checked if connectivity else None,
    )


def build_edges(nodes: Dict[str, NodeVisual]) -> List[Edge]:
    """워커마다 컨트롤 플레인과 잇는 연결선 (현재 좌표 기준)"""
    control = nodes.get(CONTROL_PLANE_ID)
    if control is None:
        return []

    edges = []
    for node in nodes.values():
        if node.kind != NodeKind.WORKER:
            continue
        edges.append(Edge(
            id=f"edge-{node.id}",
            source=control.id,
            target=node.id,
            x1=control.x,
            y1=control.y,
            x2=node.x,
            y2=node.y,
            gradient_id=f"line-gradient-{node.id}",
            stops=list(EDGE_GRADIENT),
        ))
    return edges


def _reachable(node: NodeVisual, snapshot: Optional[ClusterSnapshot]) -> bool:
    """워커는 조인된 상세 레코드의 도달 가능 여부를 우선 사용"""
    if snapshot is None:
        return True
    detail = snapshot.find_detail(node.ip) if node.kind == NodeKind.WORKER else None
    if detail is not None:
        return detail.is_reachable
    return snapshot.is_reachable(node.ip)


def render(nodes: Dict[str, NodeVisual], snapshot: Optional[ClusterSnapshot],
           hovered: Optional[str] = None) -> RenderModel:
    """현재 노드 집합으로 렌더 모델 생성"""
    glyphs = [
        NodeGlyph(
            id=node.id,
            kind=node.kind,
            label=node_label(node),
            ip=node.ip,
            x=node.x,
            y=node.y,
            reachable=_reachable(node, snapshot),
            hovered=node.id == hovered,
        )
        for node in nodes.values()
    ]

    overlay = None
    hovered_node = nodes.get(hovered) if hovered else None
    if hovered_node is not None:
        overlay = CertificateOverlay(
            node_id=hovered_node.id,
            x=hovered_node.x,
            y=hovered_node.y,
            entries=[
                CertEntry(
                    cert_type=cert.cert_type,
                    status=cert.status,
                    glyph=cert_glyph(cert.status),
                    last_updated=format_timestamp(cert.last_updated),
                )
                for cert in certs_for(hovered_node.id, snapshot)
            ],
        )

    return RenderModel(
        glyphs=glyphs,
        edges=build_edges(nodes),
        overlay=overlay,
        certificates=summarize_certificates(snapshot.control_plane.certs) if snapshot else None,
        connectivity=summarize_connectivity(snapshot) if snapshot else None,
    )


def describe_node(node: NodeVisual, snapshot: Optional[ClusterSnapshot]) -> NodeDetail:
    """노드 모달용 상세 정보"""
    detail = snapshot.find_detail(node.ip) if snapshot and node.kind == NodeKind.WORKER else None
    return NodeDetail(
        node=node,
        label=node_label(node),
        reachable=detail.is_reachable if detail else _reachable(node, snapshot),
        certs=certs_for(node.id, snapshot),
        status=detail.status if detail else None,
        name=detail.name if detail else None,
        detail=detail,
    )


# ============================================
# SVG 출력
# ============================================

def _svg_edge(edge: Edge) -> str:
    return (
        f'  <defs><linearGradient id="{edge.gradient_id}" gradientUnits="userSpaceOnUse" '
        f'x1="{edge.x1:.1f}" y1="{edge.y1:.1f}" x2="{edge.x2:.1f}" y2="{edge.y2:.1f}">'
        f'<stop offset="0%" stop-color="{edge.stops[0]}"/>'
        f'<stop offset="100%" stop-color="{edge.stops[-1]}"/>'
        f'</linearGradient></defs>\n'
        f'  <line x1="{edge.x1:.1f}" y1="{edge.y1:.1f}" x2="{edge.x2:.1f}" y2="{edge.y2:.1f}" '
        f'stroke="url(#{edge.gradient_id})" stroke-width="2"/>'
    )


def _svg_glyph(glyph: NodeGlyph) -> str:
    color = COLORS["control_plane"] if glyph.kind == NodeKind.CONTROL_PLANE else COLORS["worker"]
    if not glyph.reachable:
        color = COLORS["unreachable"]
    size = 28 if glyph.hovered else 24
    dash = ' stroke-dasharray="4 2"' if not glyph.reachable else ""
    if glyph.kind == NodeKind.CONTROL_PLANE:
        shape = (f'<circle cx="{glyph.x:.1f}" cy="{glyph.y:.1f}" r="{size}" '
                 f'fill="none" stroke="{color}" stroke-width="3"{dash}/>')
    else:
        shape = (f'<rect x="{glyph.x - size:.1f}" y="{glyph.y - size:.1f}" '
                 f'width="{size * 2}" height="{size * 2}" rx="6" '
                 f'fill="none" stroke="{color}" stroke-width="3"{dash}/>')
    return (
        f'  <g class="node {glyph.kind.value}" data-node-id="{escape(glyph.id)}">'
        f'{shape}'
        f'<text x="{glyph.x:.1f}" y="{glyph.y + size + 16:.1f}" text-anchor="middle" '
        f'fill="{COLORS["text"]}" font-size="13">{escape(glyph.label)}</text>'
        f'<text x="{glyph.x:.1f}" y="{glyph.y + size + 30:.1f}" text-anchor="middle" '
        f'fill="{COLORS["muted"]}" font-size="11">{escape(glyph.ip)}</text>'
        f'</g>'
    )


def _svg_overlay(overlay: CertificateOverlay) -> str:
    width = 256
    height = 36 + 34 * len(overlay.entries)
    left = overlay.x - width / 2
    top = overlay.y - height - 40
    parts = [
        f'  <g class="overlay" data-node-id="{escape(overlay.node_id)}">',
        f'<rect x="{left:.1f}" y="{top:.1f}" width="{width}" height="{height}" rx="12" '
        f'fill="{COLORS["overlay"]}" fill-opacity="0.95" stroke="{COLORS["overlay_border"]}"/>',
        f'<text x="{left + 16:.1f}" y="{top + 24:.1f}" fill="{COLORS["text"]}" '
        f'font-size="13">Certificates</text>',
    ]
    for index, entry in enumerate(overlay.entries):
        y = top + 48 + 34 * index
        parts.append(
            f'<text x="{left + 16:.1f}" y="{y:.1f}" fill="{COLORS[entry.glyph]}" '
            f'font-size="13" class="cert-{entry.glyph}">{GLYPH_SYMBOLS[entry.glyph]}</text>'
            f'<text x="{left + 36:.1f}" y="{y:.1f}" fill="{COLORS["text"]}" '
            f'font-size="12">{escape(entry.cert_type)}</text>'
            f'<text x="{left + 36:.1f}" y="{y + 14:.1f}" fill="{COLORS["muted"]}" '
            f'font-size="10">{escape(entry.last_updated)}</text>'
        )
    parts.append('</g>')
    return "".join(parts)


def to_svg(model: RenderModel, bounds: Optional[ViewportBounds]) -> str:
    """렌더 모델을 SVG 문자열로 변환"""
    width = max(bounds.width, 0) if bounds else 0
    height = max(bounds.height, 0) if bounds else 0
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}" '
        f'viewBox="0 0 {width:g} {height:g}" style="font-family: sans-serif;">',
        f'  <rect width="100%" height="100%" fill="{COLORS["background"]}"/>',
    ]
    parts.extend(_svg_edge(edge) for edge in model.edges)
    parts.extend(_svg_glyph(glyph) for glyph in model.glyphs)
    if model.overlay is not None:
        parts.append(_svg_overlay(model.overlay))
    parts.append('</svg>')
    return "\n".join(parts)
