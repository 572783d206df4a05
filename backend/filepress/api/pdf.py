"""PDF 압축 API"""
import logging
from typing import Optional
import aiofiles
from fastapi import APIRouter, UploadFile, File, Form, Depends
from starlette.concurrency import run_in_threadpool

from filepress.api.common import (
    client_error,
    file_response,
    parse_level,
    require_file,
    server_error,
    too_large_error,
)
from filepress.core.exceptions import PdfProcessingError, ToolNotInstalledError, UploadTooLargeError
from filepress.core.metrics import track_processing
from filepress.core.schemas import ResultArtifact
from filepress.services.file_service import FileService, TempWorkspace, get_workspace
from filepress.services.pdf_engine import GhostscriptEngine, get_engine, get_page_count

router = APIRouter()
logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


@router.post("/compress-pdf")
async def compress_pdf(
    file: Optional[UploadFile] = File(None),
    level: Optional[str] = Form(None),
    engine: GhostscriptEngine = Depends(get_engine),
    workspace: TempWorkspace = Depends(get_workspace)
):
    """
    Ghostscript로 PDF 압축

    - **file**: PDF 파일 (application/pdf)
    - **level**: low(/screen) / medium(/ebook, 기본) / high(/printer)

    입력/출력 임시 파일은 성공, 실패와 무관하게 삭제된다.
    """
    operation = "compress-pdf"
    upload = require_file(file, operation)

    if upload.content_type != PDF_MIME_TYPE:
        raise client_error(operation, "File is not a PDF.")

    compression_level = parse_level(level, operation)
    original_name = FileService.sanitize_filename(upload.filename, default="document.pdf")

    with workspace.acquire("input", ".pdf") as input_path, \
            workspace.acquire("output", ".pdf") as output_path:

        try:
            original_size = await FileService.save_upload_file(upload, str(input_path))
        except UploadTooLargeError as e:
            raise too_large_error(operation, e)

        logger.info(f"PDF 압축 시작: {original_name} level={compression_level.value}")

        try:
            with track_processing(operation):
                result = await run_in_threadpool(
                    engine.compress,
                    str(input_path),
                    str(output_path),
                    compression_level
                )
        except ToolNotInstalledError as e:
            raise server_error(operation, str(e))
        except PdfProcessingError as e:
            logger.error(f"PDF 압축 실패: {original_name} - {e}", exc_info=True)
            raise server_error(operation, "Error compressing PDF")

        async with aiofiles.open(output_path, 'rb') as f:
            content = await f.read()

        page_count = get_page_count(str(output_path))

    logger.info(
        f"PDF 압축 결과: {original_name} engine={result['engine']} level={result['level']} "
        f"{result['input_size']} -> {result['output_size']} bytes (ratio: {result['compression_ratio']:.2%})"
    )

    artifact = ResultArtifact(
        content=content,
        media_type=PDF_MIME_TYPE,
        filename=f"compressed-{original_name}",
        original_size=original_size,
        page_count=page_count
    )
    return file_response(artifact, operation)
