"""
클러스터 토폴로지 시각화 백엔드 API

API 구조:
- /api/topology/*        - 노드 배치, 드래그, 뷰포트, 렌더링
- /api/health            - API 헬스체크
- /api/upstream/health   - 클러스터 API 연결 상태
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from routers import topology_router, health_router
from services.cluster import ClusterFetcher
from services.topology import TopologyView

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(fetcher: Optional[ClusterFetcher] = None,
               poll_interval: Optional[float] = None,
               settle_delay: Optional[float] = None) -> FastAPI:
    """FastAPI 앱 생성 (TopologyView는 앱 수명 주기에 묶임)"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        view = TopologyView(
            fetcher=fetcher,
            poll_interval=settings.CLUSTER_POLL_INTERVAL if poll_interval is None else poll_interval,
            settle_delay=settings.VIEWPORT_SETTLE_DELAY if settle_delay is None else settle_delay,
        )
        app.state.topology = view
        await view.start()
        logger.info(f"Topology view started (cluster API: {view.fetcher.base_url})")
        try:
            yield
        finally:
            await view.stop()
            logger.info("Topology view stopped")

    app = FastAPI(title=settings.APP_TITLE, version=settings.APP_VERSION, lifespan=lifespan)

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    # ============================================
    # 라우터 등록
    # ============================================
    app.include_router(topology_router)
    app.include_router(health_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
