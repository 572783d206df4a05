"""도메인 예외"""


class UploadTooLargeError(ValueError):
    """업로드 크기 제한 초과"""

    def __init__(self, max_size: int):
        self.max_size = max_size
        super().__init__(f"파일 크기가 제한을 초과했습니다: {max_size} bytes")


class ImageProcessingError(RuntimeError):
    """이미지 디코딩/인코딩 실패"""


class PdfProcessingError(RuntimeError):
    """PDF 압축 실패"""


class ToolNotInstalledError(PdfProcessingError):
    """외부 도구(Ghostscript) 미설치"""
