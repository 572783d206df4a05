"""헬스체크 API"""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException

from filepress.core.config import settings
from filepress.core.schemas import HealthResponse
from filepress.models.formats import CompressionLevel, ImageFormat
from filepress.services.pdf_engine import GhostscriptEngine, get_engine

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/healthz", response_model=HealthResponse)
async def health_check(engine: GhostscriptEngine = Depends(get_engine)):
    """
    헬스체크 엔드포인트

    Ghostscript가 없으면 이미지 기능만 가능하므로 degraded로 보고한다.
    """
    ghostscript_available = engine.is_available()
    if not ghostscript_available:
        logger.warning(f"Ghostscript를 찾을 수 없습니다: {engine.command}")

    return HealthResponse(
        status="healthy" if ghostscript_available else "degraded",
        version=settings.APP_VERSION,
        timestamp=datetime.now(timezone.utc),
        ghostscript_available=ghostscript_available,
        image_formats=[fmt.value for fmt in ImageFormat],
        pdf_levels=[level.value for level in CompressionLevel]
    )


@router.get("/readyz")
async def readiness_check(engine: GhostscriptEngine = Depends(get_engine)):
    """
    준비 상태 확인
    """
    if not engine.is_available():
        raise HTTPException(status_code=503, detail="Service not ready: Ghostscript is not installed")
    return {"status": "ready"}
