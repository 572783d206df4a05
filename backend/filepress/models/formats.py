"""지원 포맷 및 압축 레벨"""
from enum import Enum
from typing import Optional


class ImageFormat(str, Enum):
    """지원 이미지 포맷"""
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def pil_format(self) -> str:
        """Pillow 인코더 이름"""
        return self.value.upper()

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_mime(cls, mime_type: Optional[str]) -> Optional["ImageFormat"]:
        """MIME 타입으로 조회 (미지원이면 None)"""
        for member in cls:
            if member.mime_type == mime_type:
                return member
        return None

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["ImageFormat"]:
        """포맷 이름으로 조회 (대소문자 무시, 미지원이면 None)"""
        if not name:
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


class PdfPreset(str, Enum):
    """Ghostscript PDFSETTINGS 프리셋"""
    SCREEN = "screen"          # 72 DPI
    EBOOK = "ebook"            # 150 DPI
    PRINTER = "printer"        # 300 DPI


class CompressionLevel(str, Enum):
    """PDF 압축 레벨"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def preset(self) -> PdfPreset:
        return _LEVEL_PRESETS[self]

    @classmethod
    def from_name(cls, name: Optional[str]) -> Optional["CompressionLevel"]:
        if not name:
            return None
        try:
            return cls(name.strip().lower())
        except ValueError:
            return None


_LEVEL_PRESETS = {
    CompressionLevel.LOW: PdfPreset.SCREEN,
    CompressionLevel.MEDIUM: PdfPreset.EBOOK,
    CompressionLevel.HIGH: PdfPreset.PRINTER,
}
