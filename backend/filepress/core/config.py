"""애플리케이션 설정"""
import os
import tempfile
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    """애플리케이션 설정 클래스"""

    # 기본 설정
    APP_NAME: str = "FilePress"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WEB_CONCURRENCY: int = 2
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # 업로드 설정
    MAX_UPLOAD_SIZE_MB: int = 50
    TEMP_DIR: str = os.path.join(tempfile.gettempdir(), "filepress")

    # 이미지 설정
    DEFAULT_IMAGE_QUALITY: int = 80

    # PDF 압축 설정
    DEFAULT_PDF_LEVEL: str = "medium"
    GHOSTSCRIPT_COMMAND: str = "gs" if os.name != "nt" else "gswin64c"
    PDF_COMPATIBILITY_LEVEL: str = "1.4"
    TOOL_TIMEOUT_SECONDS: Optional[int] = None  # None: 제한 없음

    # 로깅
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # 메트릭
    ENABLE_METRICS: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def cors_origins_list(self) -> List[str]:
        """CORS origins를 리스트로 반환"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_upload_size_bytes(self) -> int:
        """최대 업로드 크기 (바이트)"""
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def ensure_directories(self):
        """필요한 디렉토리 생성"""
        Path(self.TEMP_DIR).mkdir(parents=True, exist_ok=True)


settings = Settings()
