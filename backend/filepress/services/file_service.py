"""파일 처리 서비스"""
import os
import uuid
import logging
import aiofiles
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import quote
from fastapi import UploadFile
from filepress.core.config import settings
from filepress.core.exceptions import UploadTooLargeError

logger = logging.getLogger(__name__)


class TempWorkspace:
    """
    요청 범위 임시 파일 관리

    acquire()로 받은 경로는 블록을 벗어날 때 성공/실패와 무관하게 삭제된다.
    이미 없는 파일은 무시한다.
    """

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def new_path(self, prefix: str, suffix: str = "") -> Path:
        """충돌하지 않는 고유 경로 생성 (파일은 만들지 않음)"""
        return self.directory / f"{prefix}-{uuid.uuid4().hex}{suffix}"

    @contextmanager
    def acquire(self, prefix: str, suffix: str = "") -> Iterator[Path]:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.new_path(prefix, suffix)
        try:
            yield path
        finally:
            self.release(path)

    @staticmethod
    def release(path: Path):
        """임시 파일 삭제 (멱등)"""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"임시 파일 삭제 실패: {path} - {e}")


def get_workspace() -> TempWorkspace:
    """임시 작업공간 의존성"""
    return TempWorkspace(settings.TEMP_DIR)


class FileService:
    """파일 처리 서비스"""

    CHUNK_SIZE = 1024 * 1024  # 1MB

    @staticmethod
    async def save_upload_file(
        upload_file: UploadFile,
        destination: str,
        max_size: Optional[int] = None
    ) -> int:
        """업로드 파일을 스트리밍으로 저장"""
        if max_size is None:
            max_size = settings.max_upload_size_bytes
        total_size = 0

        try:
            Path(destination).parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(destination, 'wb') as f:
                while True:
                    chunk = await upload_file.read(FileService.CHUNK_SIZE)
                    if not chunk:
                        break

                    total_size += len(chunk)
                    if total_size > max_size:
                        raise UploadTooLargeError(max_size)

                    await f.write(chunk)

            logger.info(f"파일 저장 완료: {destination} ({total_size} bytes)")
            return total_size

        except Exception as e:
            logger.warning(f"파일 저장 실패: {e}")
            # 실패 시 부분 파일 삭제
            if os.path.exists(destination):
                os.remove(destination)
            raise

    @staticmethod
    async def read_upload(upload_file: UploadFile, max_size: Optional[int] = None) -> bytes:
        """업로드 파일을 메모리로 읽기 (크기 제한)"""
        if max_size is None:
            max_size = settings.max_upload_size_bytes
        buffer = bytearray()

        while True:
            chunk = await upload_file.read(FileService.CHUNK_SIZE)
            if not chunk:
                break
            buffer.extend(chunk)
            if len(buffer) > max_size:
                raise UploadTooLargeError(max_size)

        return bytes(buffer)

    @staticmethod
    def sanitize_filename(filename: Optional[str], default: str = "file") -> str:
        """파일명 정리 (경로 조작 방지)"""
        # 윈도우 경로도 처리
        filename = os.path.basename((filename or "").replace("\\", "/"))

        # 위험한 문자 제거
        for char in ['\x00', '"', '\r', '\n']:
            filename = filename.replace(char, '_')

        filename = filename.strip()
        if filename in ('', '.', '..'):
            return default
        return filename

    @staticmethod
    def content_disposition(filename: str) -> str:
        """
        Content-Disposition 헤더 생성

        RFC 5987에 따라 filename에는 ASCII 대체 이름,
        filename*에는 UTF-8로 인코딩된 원본 파일명을 넣는다.
        """
        ascii_name = filename.encode('ascii', 'ignore').decode('ascii') or 'download'
        encoded = quote(filename.encode('utf-8'))
        return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{encoded}"
