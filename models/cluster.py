"""
Cluster related Pydantic models
업스트림 클러스터 API 응답 스키마와 정규화된 스냅샷
"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, AliasChoices


DISTRIBUTED = "Distributed"
GENERATED = "Generated"


class CertStatus(BaseModel):
    """노드에 배포된 인증서 상태"""
    model_config = ConfigDict(frozen=True)

    cert_type: str
    status: str  # Distributed, Generated, 그 외는 실패로 표시
    issuer: Optional[str] = None
    expires: Optional[str] = None
    last_updated: Optional[str] = None


class NodeCerts(BaseModel):
    """IP와 인증서 목록"""
    model_config = ConfigDict(frozen=True)

    ip: str
    certs: List[CertStatus] = []


class Connectivity(BaseModel):
    """노드 도달 가능성 정보"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_nodes: Optional[int] = None
    available_nodes: Optional[int] = None
    unreachable_ips: List[str] = Field(
        default=[],
        validation_alias=AliasChoices("unreachable_ips", "unreachable_nodes", "unreachableIps"),
    )
    last_checked: Optional[str] = None


class ClusterInfo(BaseModel):
    """GET /api/cluster 의 data 필드"""
    control_plane: NodeCerts
    workers: List[NodeCerts] = []
    connectivity: Optional[Connectivity] = None


class ClusterResponse(BaseModel):
    """GET /api/cluster 응답"""
    data: ClusterInfo


class WorkerNodeRecord(BaseModel):
    """GET /api/worker-nodes 의 워커 레코드"""
    id: str
    name: str
    ip: str
    status: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None


class WorkerNodesResponse(BaseModel):
    """GET /api/worker-nodes 응답"""
    data: List[WorkerNodeRecord]


class WorkerDetail(BaseModel):
    """인증서와 도달 가능성이 합쳐진 워커 상세 정보"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    ip: str
    status: Optional[str] = None
    metrics: Optional[Dict[str, Any]] = None
    certs: List[CertStatus] = []
    is_reachable: bool = True


class ClusterSnapshot(BaseModel):
    """한 번의 fetch 결과 (불변)

    새로고침할 때마다 통째로 교체된다.
    """
    model_config = ConfigDict(frozen=True)

    control_plane: NodeCerts
    workers: List[NodeCerts] = []
    connectivity: Optional[Connectivity] = None
    worker_details: List[WorkerDetail] = []

    def is_reachable(self, ip: str) -> bool:
        if self.connectivity is None:
            return True
        return ip not in self.connectivity.unreachable_ips

    def find_detail(self, ip: str) -> Optional[WorkerDetail]:
        for detail in self.worker_details:
            if detail.ip == ip:
                return detail
        return None
