"""이미지 압축/변환 API"""
import logging
from pathlib import Path
from typing import Optional
from fastapi import APIRouter, UploadFile, File, Form, Depends
from starlette.concurrency import run_in_threadpool

from filepress.api.common import (
    client_error,
    file_response,
    parse_quality,
    require_file,
    server_error,
    too_large_error,
)
from filepress.core.exceptions import ImageProcessingError, UploadTooLargeError
from filepress.core.metrics import track_processing
from filepress.core.schemas import ResultArtifact
from filepress.models.formats import ImageFormat
from filepress.services.file_service import FileService
from filepress.services.image_engine import ImageEngine

router = APIRouter()
logger = logging.getLogger(__name__)


def get_image_engine() -> ImageEngine:
    """이미지 엔진 의존성"""
    return ImageEngine()


@router.post("/compress-image")
async def compress_image(
    file: Optional[UploadFile] = File(None),
    quality: Optional[str] = Form(None),
    engine: ImageEngine = Depends(get_image_engine)
):
    """
    이미지를 원본 포맷 그대로 지정 품질로 재인코딩

    - **file**: JPEG / PNG / WebP 이미지
    - **quality**: 1-100 (기본 80)
    """
    operation = "compress-image"
    upload = require_file(file, operation)

    image_format = ImageFormat.from_mime(upload.content_type)
    if image_format is None:
        raise client_error(operation, f"Unsupported file type: {upload.content_type}")

    quality_value = parse_quality(quality, operation)

    try:
        data = await FileService.read_upload(upload)
    except UploadTooLargeError as e:
        raise too_large_error(operation, e)

    try:
        with track_processing(operation):
            output = await run_in_threadpool(engine.compress, data, image_format, quality_value)
    except ImageProcessingError as e:
        logger.error(f"이미지 압축 실패: {upload.filename} - {e}", exc_info=True)
        raise server_error(operation, "Error compressing image")

    original_name = FileService.sanitize_filename(upload.filename, default=f"image.{image_format.extension}")
    artifact = ResultArtifact(
        content=output,
        media_type=image_format.mime_type,
        filename=f"compressed-{original_name}",
        original_size=len(data)
    )
    return file_response(artifact, operation)


@router.post("/convert-image")
async def convert_image(
    file: Optional[UploadFile] = File(None),
    output_format: Optional[str] = Form(None, alias="format"),
    engine: ImageEngine = Depends(get_image_engine)
):
    """
    이미지를 대상 포맷으로 변환

    - **file**: 디코딩 가능한 이미지
    - **format**: jpeg / png / webp
    """
    operation = "convert-image"
    upload = require_file(file, operation)

    if output_format is None or not output_format.strip():
        raise client_error(operation, "Output format not specified.")

    target = ImageFormat.from_name(output_format)
    if target is None:
        raise client_error(operation, f"Unsupported output format: {output_format}")

    try:
        data = await FileService.read_upload(upload)
    except UploadTooLargeError as e:
        raise too_large_error(operation, e)

    try:
        with track_processing(operation):
            output = await run_in_threadpool(engine.convert, data, target)
    except ImageProcessingError as e:
        logger.error(f"이미지 변환 실패: {upload.filename} -> {target.value} - {e}", exc_info=True)
        raise server_error(operation, "Error converting image")

    stem = Path(FileService.sanitize_filename(upload.filename, default="image")).stem or "image"
    artifact = ResultArtifact(
        content=output,
        media_type=target.mime_type,
        filename=f"{stem}.{target.extension}",
        original_size=len(data)
    )
    return file_response(artifact, operation)
