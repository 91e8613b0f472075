"""
Application configuration settings
"""
import os
from typing import List


class Settings:
    """Application settings"""

    # App
    APP_TITLE: str = "Cluster Topology Visualizer API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    CORS_ORIGINS: List[str] = ["*"]
    CORS_CREDENTIALS: bool = True
    CORS_METHODS: List[str] = ["*"]
    CORS_HEADERS: List[str] = ["*"]

    # Upstream cluster API (certificate manager web server)
    CLUSTER_API_URL: str = os.getenv("CLUSTER_API_URL", "http://localhost:3000")
    CLUSTER_FETCH_TIMEOUT: float = float(os.getenv("CLUSTER_FETCH_TIMEOUT", "5.0"))
    # 0 disables periodic re-fetch
    CLUSTER_POLL_INTERVAL: float = float(os.getenv("CLUSTER_POLL_INTERVAL", "0"))

    # Viewport
    VIEWPORT_SETTLE_DELAY: float = float(os.getenv("VIEWPORT_SETTLE_DELAY", "0.1"))

    # Layout / drag geometry
    DEFAULT_LAYOUT: str = os.getenv("DEFAULT_LAYOUT", "circle")
    LAYOUT_PADDING: float = 100.0
    DRAG_PADDING: float = 50.0
    CIRCLE_RADIUS_FACTOR: float = 0.3


settings = Settings()
