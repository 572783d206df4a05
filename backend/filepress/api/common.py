"""라우터 공통 유틸리티"""
import logging
from typing import Optional
from fastapi import HTTPException, UploadFile
from fastapi.responses import Response

from filepress.core.config import settings
from filepress.core.exceptions import UploadTooLargeError
from filepress.core.metrics import record_outcome, record_saved_bytes
from filepress.core.schemas import ResultArtifact
from filepress.models.formats import CompressionLevel
from filepress.services.file_service import FileService

logger = logging.getLogger(__name__)

MIN_QUALITY = 1
MAX_QUALITY = 100


def client_error(operation: str, message: str, status_code: int = 400) -> HTTPException:
    """클라이언트 입력 오류 (메트릭 기록 포함)"""
    record_outcome(operation, "client_error")
    logger.info(f"{operation} 요청 거부 ({status_code}): {message}")
    return HTTPException(status_code=status_code, detail=message)


def server_error(operation: str, message: str) -> HTTPException:
    record_outcome(operation, "error")
    return HTTPException(status_code=500, detail=message)


def too_large_error(operation: str, exc: UploadTooLargeError) -> HTTPException:
    max_mb = exc.max_size // (1024 * 1024)
    return client_error(
        operation,
        f"File exceeds the maximum upload size of {max_mb} MB.",
        status_code=413
    )


def require_file(file: Optional[UploadFile], operation: str) -> UploadFile:
    """file 필드 필수 확인"""
    if file is None or not file.filename:
        raise client_error(operation, "No file uploaded.")
    return file


def parse_quality(raw: Optional[str], operation: str) -> int:
    """quality 필드 파싱 (비어 있으면 기본값, 범위 밖이면 400)"""
    if raw is None or not raw.strip():
        return settings.DEFAULT_IMAGE_QUALITY

    try:
        quality = int(raw.strip())
    except ValueError:
        raise client_error(operation, f"Invalid quality: {raw}. Must be an integer between {MIN_QUALITY} and {MAX_QUALITY}.")

    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise client_error(operation, f"Invalid quality: {quality}. Must be between {MIN_QUALITY} and {MAX_QUALITY}.")

    return quality


def parse_level(raw: Optional[str], operation: str) -> CompressionLevel:
    """level 필드 파싱 (비어 있으면 기본 레벨)"""
    if raw is None or not raw.strip():
        return CompressionLevel(settings.DEFAULT_PDF_LEVEL)

    level = CompressionLevel.from_name(raw)
    if level is None:
        raise client_error(operation, f"Unsupported compression level: {raw}")
    return level


def file_response(artifact: ResultArtifact, operation: str) -> Response:
    """결과 바이트를 첨부 파일 응답으로 변환"""
    headers = {
        "Content-Disposition": FileService.content_disposition(artifact.filename),
        "X-Original-Size": str(artifact.original_size),
        "X-Result-Size": str(artifact.result_size),
    }
    if artifact.page_count is not None:
        headers["X-Page-Count"] = str(artifact.page_count)

    record_outcome(operation, "success")
    record_saved_bytes(operation, artifact.original_size, artifact.result_size)
    logger.info(
        f"{operation} 응답: {artifact.filename} {artifact.original_size} -> {artifact.result_size} bytes "
        f"(ratio: {artifact.compression_ratio:.2%})",
        extra={'operation': operation, 'compression_ratio': round(artifact.compression_ratio, 4)}
    )

    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers=headers
    )
