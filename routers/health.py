"""
Health check API
"""
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health_check():
    """API 헬스체크"""
    return {"status": "healthy", "service": "cluster-topology"}


@router.get("/api/upstream/health")
async def upstream_health_check(request: Request):
    """클러스터 API 연결 헬스체크"""
    fetcher = request.app.state.topology.fetcher
    if await fetcher.check_health():
        return {"status": "connected", "url": fetcher.base_url}
    return {"status": "disconnected", "url": fetcher.base_url}
