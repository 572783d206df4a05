"""PDF 압축 엔진 - Ghostscript"""
import os
import logging
import subprocess
import shutil
from typing import Any, Callable, Dict, List, Optional
import pikepdf
from filepress.core.config import settings
from filepress.core.exceptions import PdfProcessingError, ToolNotInstalledError
from filepress.models.formats import CompressionLevel, PdfPreset

logger = logging.getLogger(__name__)

TOOL_MISSING_MESSAGE = "Processing failed: Ghostscript might not be installed on the server."

# (명령, 타임아웃) -> 완료된 프로세스
CommandRunner = Callable[[List[str], Optional[int]], subprocess.CompletedProcess]


def run_command(cmd: List[str], timeout: Optional[int] = None) -> subprocess.CompletedProcess:
    """외부 명령 실행 (셸 없이, 실패 시 CalledProcessError)"""
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=True
    )


def get_page_count(pdf_path: str) -> Optional[int]:
    """PDF 페이지 수 (읽을 수 없으면 None)"""
    try:
        with pikepdf.open(pdf_path) as pdf:
            return len(pdf.pages)
    except pikepdf.PasswordError:
        logger.warning(f"암호화된 PDF (비밀번호 필요): {pdf_path}")
        return None
    except pikepdf.PdfError as e:
        logger.warning(f"PDF 페이지 수 확인 실패: {e}")
        return None


class GhostscriptEngine:
    """Ghostscript 압축 엔진"""

    # 프리셋별 설정 (dpi는 로그용 참고값)
    PRESET_SETTINGS = {
        PdfPreset.SCREEN: {
            'pdfsettings': '/screen',
            'dpi': 72,
        },
        PdfPreset.EBOOK: {
            'pdfsettings': '/ebook',
            'dpi': 150,
        },
        PdfPreset.PRINTER: {
            'pdfsettings': '/printer',
            'dpi': 300,
        },
    }

    def __init__(
        self,
        command: Optional[str] = None,
        runner: Optional[CommandRunner] = None,
        timeout: Optional[int] = None
    ):
        self.command = command or settings.GHOSTSCRIPT_COMMAND
        self.runner = runner or run_command
        self.timeout = timeout if timeout is not None else settings.TOOL_TIMEOUT_SECONDS

    def is_available(self) -> bool:
        """Ghostscript 사용 가능 여부"""
        return shutil.which(self.command) is not None

    def build_command(self, input_path: str, output_path: str, level: CompressionLevel) -> List[str]:
        """레벨에 맞는 Ghostscript 인자 구성"""
        preset_config = self.PRESET_SETTINGS[level.preset]
        return [
            self.command,
            '-sDEVICE=pdfwrite',
            f'-dCompatibilityLevel={settings.PDF_COMPATIBILITY_LEVEL}',
            f"-dPDFSETTINGS={preset_config['pdfsettings']}",
            '-dNOPAUSE',
            '-dQUIET',
            '-dBATCH',
            f'-sOutputFile={output_path}',
            input_path,
        ]

    def compress(self, input_path: str, output_path: str, level: CompressionLevel) -> Dict[str, Any]:
        """
        Ghostscript로 PDF 압축

        Args:
            input_path: 입력 파일 경로
            output_path: 출력 파일 경로
            level: 압축 레벨

        Returns:
            압축 결과 정보

        Raises:
            ToolNotInstalledError: 실행 파일이 없음
            PdfProcessingError: 비정상 종료, 타임아웃, 출력 파일 없음
        """
        cmd = self.build_command(input_path, output_path, level)
        logger.info(f"Ghostscript 명령 실행: {' '.join(cmd)}")

        try:
            self.runner(cmd, self.timeout)
        except FileNotFoundError as e:
            logger.error(f"Ghostscript 실행 파일 없음: {self.command}")
            raise ToolNotInstalledError(TOOL_MISSING_MESSAGE) from e
        except subprocess.TimeoutExpired as e:
            logger.error(f"Ghostscript 타임아웃 ({self.timeout}s)")
            raise PdfProcessingError("압축 작업 시간 초과") from e
        except subprocess.CalledProcessError as e:
            logger.error(f"Ghostscript 실패 (exit={e.returncode}): {e.stderr}")
            raise PdfProcessingError(f"Ghostscript 압축 실패: {e.stderr}") from e

        if not os.path.exists(output_path):
            raise PdfProcessingError("출력 파일이 생성되지 않았습니다")

        output_size = os.path.getsize(output_path)
        input_size = os.path.getsize(input_path)

        logger.info(
            f"압축 완료: level={level.value} dpi={self.PRESET_SETTINGS[level.preset]['dpi']} "
            f"{input_size} -> {output_size} bytes"
        )

        return {
            'engine': 'ghostscript',
            'level': level.value,
            'input_size': input_size,
            'output_size': output_size,
            'compression_ratio': output_size / input_size if input_size > 0 else 1.0
        }


def get_engine() -> GhostscriptEngine:
    """PDF 엔진 의존성"""
    return GhostscriptEngine()
