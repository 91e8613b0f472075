"""
Error taxonomy for the topology engine
"""
from typing import Optional


class DataUnavailable(Exception):
    """클러스터 스냅샷을 가져오거나 해석하지 못함

    전송 오류, 타임아웃, 비정상 상태 코드, JSON 파싱 실패,
    스키마 불일치 모두 이 예외로 분류된다.
    """

    def __init__(self, message: str, endpoint: Optional[str] = None):
        super().__init__(message)
        self.endpoint = endpoint

    def __str__(self) -> str:
        message = super().__str__()
        if self.endpoint:
            return f"{self.endpoint}: {message}"
        return message
