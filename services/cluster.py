"""
Cluster snapshot fetcher
업스트림 클러스터 API에서 상태를 읽어 ClusterSnapshot으로 정규화

/api/cluster 와 /api/worker-nodes 를 동시에 읽고 IP 기준으로 합친다.
둘 중 하나라도 실패하면 스냅샷 전체가 실패한다 (DataUnavailable).
"""
import asyncio
import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from core.config import settings
from core.exceptions import DataUnavailable
from models.cluster import (
    ClusterResponse,
    ClusterSnapshot,
    WorkerDetail,
    WorkerNodesResponse,
)

logger = logging.getLogger(__name__)

CLUSTER_PATH = "/api/cluster"
WORKER_NODES_PATH = "/api/worker-nodes"

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


def join_snapshot(cluster: ClusterResponse, workers: WorkerNodesResponse) -> ClusterSnapshot:
    """두 응답을 IP 기준으로 합쳐 스냅샷 생성

    워커 상세 레코드마다 /api/cluster 의 인증서 목록과
    connectivity.unreachable_ips 기반 도달 가능 여부를 붙인다.
    """
    info = cluster.data
    certs_by_ip = {worker.ip: worker.certs for worker in info.workers}
    unreachable = set(info.connectivity.unreachable_ips) if info.connectivity else set()

    details = [
        WorkerDetail(
            id=record.id,
            name=record.name,
            ip=record.ip,
            status=record.status,
            metrics=record.metrics,
            certs=certs_by_ip.get(record.ip, []),
            is_reachable=record.ip not in unreachable,
        )
        for record in workers.data
    ]

    return ClusterSnapshot(
        control_plane=info.control_plane,
        workers=info.workers,
        connectivity=info.connectivity,
        worker_details=details,
    )


class ClusterFetcher:
    """클러스터 스냅샷 조회 (ClusterSnapshot의 유일한 생성자)"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.CLUSTER_API_URL).rstrip("/")
        self.timeout = settings.CLUSTER_FETCH_TIMEOUT if timeout is None else timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _read(self, client: httpx.AsyncClient, path: str,
                    model: Type[ResponseModel]) -> ResponseModel:
        try:
            response = await client.get(path)
            response.raise_for_status()
            return model.model_validate(response.json())
        except httpx.TimeoutException as e:
            raise DataUnavailable(f"request timed out ({e.__class__.__name__})", path) from e
        except httpx.HTTPStatusError as e:
            raise DataUnavailable(f"HTTP {e.response.status_code}", path) from e
        except httpx.HTTPError as e:
            raise DataUnavailable(f"request failed: {e}", path) from e
        except ValidationError as e:
            raise DataUnavailable(f"unexpected payload shape ({e.error_count()} errors)", path) from e
        except ValueError as e:
            raise DataUnavailable(f"malformed JSON: {e}", path) from e

    async def fetch_snapshot(self) -> ClusterSnapshot:
        """두 엔드포인트를 동시에 읽고 합친다

        Raises:
            DataUnavailable: 어느 한 쪽이라도 실패한 경우
        """
        async with self._client() as client:
            results = await asyncio.gather(
                self._read(client, CLUSTER_PATH, ClusterResponse),
                self._read(client, WORKER_NODES_PATH, WorkerNodesResponse),
                return_exceptions=True,
            )

        for result in results:
            if isinstance(result, BaseException):
                if isinstance(result, DataUnavailable):
                    raise result
                raise DataUnavailable(f"unexpected error: {result}") from result

        cluster, workers = results
        snapshot = join_snapshot(cluster, workers)
        logger.info(
            f"Fetched cluster snapshot: control plane {snapshot.control_plane.ip}, "
            f"{len(snapshot.workers)} workers"
        )
        return snapshot

    async def check_health(self) -> bool:
        """업스트림 /health 응답 여부"""
        try:
            async with self._client() as client:
                response = await client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Cluster API health check failed: {e}")
            return False
