"""
Utility helper functions
"""
from datetime import datetime
from typing import Optional


def clamp(value: float, low: float, high: float) -> float:
    """value를 [low, high] 범위로 제한 (범위가 뒤집히면 low 우선)"""
    return max(low, min(high, value))


def format_timestamp(value: Optional[str]) -> str:
    """인증서 갱신 시각을 표시용 문자열로 변환"""
    if not value:
        return "Not updated"

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        # 해석할 수 없으면 원문 그대로 표시
        return value
    return parsed.strftime("%Y-%m-%d %H:%M:%S")
