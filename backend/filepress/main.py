"""FastAPI 메인 애플리케이션"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from starlette.exceptions import HTTPException as StarletteHTTPException

from filepress.core.config import settings
from filepress.core.logging import setup_logging
from filepress.core.schemas import ErrorResponse
from filepress.api import images, pdf, health

# 로깅 설정
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기"""
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} 시작")

    # 임시 디렉토리 생성
    settings.ensure_directories()
    logger.info(f"임시 디렉토리: {settings.TEMP_DIR}")

    yield

    logger.info("애플리케이션 종료")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="이미지 압축/변환 및 PDF 압축 API",
    lifespan=lifespan
)

# CORS 설정 (다운로드 파일명/크기 헤더 노출)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Original-Size", "X-Result-Size", "X-Page-Count"],
)


# 라우터 등록
app.include_router(images.router, prefix="/api", tags=["Images"])
app.include_router(pdf.router, prefix="/api", tags=["PDF"])
app.include_router(health.router, prefix="/api", tags=["Health"])


# Prometheus 메트릭 (옵션)
if settings.ENABLE_METRICS:
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs"
    }


# 에러 핸들러
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    """HTTP 예외를 {"error": ...} 형태로 변환"""
    body = ErrorResponse(error=str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    """요청 형식 오류는 400으로 처리"""
    logger.info(f"요청 검증 실패: {request.url.path} - {exc.errors()}")
    body = ErrorResponse(error="Invalid request", detail=str(exc.errors()), code="validation_error")
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """전역 예외 처리"""
    logger.error(f"처리되지 않은 예외: {exc}", exc_info=True)
    body = ErrorResponse(
        error="Internal Server Error",
        detail=str(exc) if settings.ENVIRONMENT == "development" else None
    )
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "filepress.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        workers=settings.WEB_CONCURRENCY
    )
