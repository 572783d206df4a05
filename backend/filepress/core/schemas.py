"""Pydantic 스키마"""
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel


class ResultArtifact(BaseModel):
    """처리 결과 (요청 범위, 저장하지 않음)"""
    content: bytes
    media_type: str
    filename: str
    original_size: int
    page_count: Optional[int] = None

    @property
    def result_size(self) -> int:
        return len(self.content)

    @property
    def compression_ratio(self) -> float:
        """결과 크기 / 원본 크기"""
        if self.original_size > 0:
            return self.result_size / self.original_size
        return 1.0


class HealthResponse(BaseModel):
    """헬스체크 응답"""
    status: str
    version: str
    timestamp: datetime
    ghostscript_available: bool
    image_formats: List[str]
    pdf_levels: List[str]


class ErrorResponse(BaseModel):
    """에러 응답"""
    error: str
    detail: Optional[str] = None
    code: Optional[str] = None
