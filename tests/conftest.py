"""
Pytest configuration and fixtures
"""
import os
import sys
import copy
import pytest
from typing import Generator, AsyncGenerator

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport

from models.cluster import ClusterResponse, WorkerNodesResponse
from models.topology import ViewportBounds
from services.cluster import ClusterFetcher, join_snapshot


# ============================================
# Data Fixtures
# ============================================

CLUSTER_PAYLOAD = {
    "data": {
        "control_plane": {
            "ip": "10.0.0.1",
            "certs": [
                {"cert_type": "kube-apiserver", "status": "Distributed",
                 "last_updated": "2024-05-01T10:00:00+00:00"},
                {"cert_type": "etcd", "status": "Generated",
                 "last_updated": "2024-05-01T09:30:00+00:00"},
            ],
        },
        "workers": [
            {"ip": "10.0.0.2", "certs": [
                {"cert_type": "kubelet", "status": "Distributed",
                 "last_updated": "2024-05-01T10:05:00+00:00"},
            ]},
            {"ip": "10.0.0.3", "certs": [
                {"cert_type": "kubelet", "status": "Generated"},
            ]},
            {"ip": "10.0.0.4", "certs": [
                {"cert_type": "kubelet", "status": "Revoked"},
            ]},
        ],
        "connectivity": {
            "unreachable_nodes": ["10.0.0.4"],
            "last_checked": "2024-05-01T10:10:00+00:00",
            "total_nodes": 4,
            "available_nodes": 3,
        },
    }
}

WORKER_NODES_PAYLOAD = {
    "data": [
        {"id": "worker1", "name": "Worker 1", "ip": "10.0.0.2", "status": "Ready",
         "metrics": {"cpu": "45%", "memory": "60%", "disk": "32%"}},
        {"id": "worker2", "name": "Worker 2", "ip": "10.0.0.3", "status": "Ready"},
        {"id": "worker3", "name": "Worker 3", "ip": "10.0.0.4", "status": "NotReady"},
    ]
}


@pytest.fixture
def cluster_payload():
    """Sample /api/cluster response"""
    return copy.deepcopy(CLUSTER_PAYLOAD)


@pytest.fixture
def worker_nodes_payload():
    """Sample /api/worker-nodes response"""
    return copy.deepcopy(WORKER_NODES_PAYLOAD)


@pytest.fixture
def snapshot(cluster_payload, worker_nodes_payload):
    """Joined snapshot: 1 control plane, 3 workers"""
    return join_snapshot(
        ClusterResponse.model_validate(cluster_payload),
        WorkerNodesResponse.model_validate(worker_nodes_payload),
    )


@pytest.fixture
def bounds():
    """800x600 viewport at the page origin"""
    return ViewportBounds(x=0, y=0, width=800, height=600)


# ============================================
# Upstream Mock Fixtures
# ============================================

def make_transport(routes: dict) -> httpx.MockTransport:
    """path -> JSON body (dict) 또는 handler(request) 매핑으로 MockTransport 생성"""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "not found"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    return httpx.MockTransport(handler)


@pytest.fixture
def transport_factory():
    """MockTransport factory for ad-hoc upstreams"""
    return make_transport


@pytest.fixture
def upstream_routes(cluster_payload, worker_nodes_payload):
    """Mutable upstream routes; tests may replace entries"""
    return {
        "/api/cluster": cluster_payload,
        "/api/worker-nodes": worker_nodes_payload,
        "/health": lambda request: httpx.Response(200, text="OK"),
    }


@pytest.fixture
def fetcher(upstream_routes):
    """ClusterFetcher backed by the mock upstream"""
    return ClusterFetcher(
        base_url="http://cluster.test",
        timeout=1.0,
        transport=make_transport(upstream_routes),
    )


# ============================================
# App Fixtures
# ============================================

@pytest.fixture
def app(fetcher):
    """Create FastAPI app for testing"""
    from main import create_app
    return create_app(fetcher=fetcher, poll_interval=0, settle_delay=0)


@pytest.fixture
def client(app) -> Generator:
    """Synchronous test client (runs lifespan)"""
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client(app) -> AsyncGenerator:
    """Asynchronous test client"""
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
