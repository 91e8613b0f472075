"""
API Routers - 기능별 모듈화

- topology : 클러스터 토폴로지 시각화 (레이아웃, 드래그, 렌더링)
- health   : API / 업스트림 헬스체크
"""
from .topology import router as topology_router
from .health import router as health_router

__all__ = [
    'topology_router',
    'health_router',
]
