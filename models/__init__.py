# Pydantic models
from .cluster import (
    CertStatus, NodeCerts, Connectivity, ClusterInfo, ClusterResponse,
    WorkerNodeRecord, WorkerNodesResponse, WorkerDetail, ClusterSnapshot,
)
from .topology import (
    CONTROL_PLANE_ID, worker_id, NodeKind, LayoutStrategy, Point,
    ViewportBounds, NodeVisual, DragState, PointerEvent, PointerDownRequest,
    HoverRequest, NodeGlyph, Edge, CertEntry, CertificateOverlay,
    CertificateSummary, ConnectivitySummary, RenderModel, NodeDetail,
    TopologyState,
)

__all__ = [
    # Cluster
    'CertStatus', 'NodeCerts', 'Connectivity', 'ClusterInfo', 'ClusterResponse',
    'WorkerNodeRecord', 'WorkerNodesResponse', 'WorkerDetail', 'ClusterSnapshot',
    # Topology
    'CONTROL_PLANE_ID', 'worker_id', 'NodeKind', 'LayoutStrategy', 'Point',
    'ViewportBounds', 'NodeVisual', 'DragState', 'PointerEvent', 'PointerDownRequest',
    'HoverRequest',
    # Render
    'NodeGlyph', 'Edge', 'CertEntry', 'CertificateOverlay',
    'CertificateSummary', 'ConnectivitySummary', 'RenderModel', 'NodeDetail',
    'TopologyState',
]
