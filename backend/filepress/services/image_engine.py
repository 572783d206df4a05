"""이미지 압축/변환 엔진 (Pillow)"""
import io
import logging
from typing import Callable, Dict, Optional
from PIL import Image
from filepress.core.config import settings
from filepress.core.exceptions import ImageProcessingError
from filepress.models.formats import ImageFormat

logger = logging.getLogger(__name__)

# 흰색 배경 (JPEG 알파 합성용)
BACKGROUND_COLOR = (255, 255, 255)

# PNG로 그대로 저장 가능한 모드
PNG_MODES = ('1', 'L', 'LA', 'I', 'I;16', 'P', 'RGB', 'RGBA')


def has_alpha(img: Image.Image) -> bool:
    """투명도 채널 보유 여부"""
    if img.mode in ('RGBA', 'LA', 'PA', 'RGBa', 'La'):
        return True
    return img.mode == 'P' and 'transparency' in img.info


def flatten_to_rgb(img: Image.Image) -> Image.Image:
    """알파 채널을 흰 배경에 합성하여 RGB로 변환"""
    rgba = img.convert('RGBA')
    background = Image.new('RGB', rgba.size, BACKGROUND_COLOR)
    background.paste(rgba, mask=rgba.split()[-1])
    return background


class ImageEngine:
    """이미지 재인코딩 엔진"""

    def __init__(self, default_quality: Optional[int] = None):
        self.default_quality = default_quality or settings.DEFAULT_IMAGE_QUALITY
        self._encoders: Dict[ImageFormat, Callable[[Image.Image, int], bytes]] = {
            ImageFormat.JPEG: self._encode_jpeg,
            ImageFormat.PNG: self._encode_png,
            ImageFormat.WEBP: self._encode_webp,
        }

    def compress(self, data: bytes, image_format: ImageFormat, quality: int) -> bytes:
        """원본 포맷 그대로 지정 품질로 재인코딩"""
        img = self.decode(data)
        output = self.encode(img, image_format, quality)
        logger.info(f"이미지 압축 완료: {image_format.value} q={quality} {len(data)} -> {len(output)} bytes")
        return output

    def convert(self, data: bytes, target: ImageFormat) -> bytes:
        """대상 포맷으로 재인코딩 (PNG는 무손실)"""
        img = self.decode(data)
        quality = 100 if target is ImageFormat.PNG else self.default_quality
        output = self.encode(img, target, quality)
        logger.info(f"이미지 변환 완료: {img.format} -> {target.value} ({len(output)} bytes)")
        return output

    @staticmethod
    def decode(data: bytes) -> Image.Image:
        """바이트에서 이미지 디코딩"""
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
            return img
        except (Image.DecompressionBombError, OSError, ValueError) as e:
            raise ImageProcessingError(f"이미지 디코딩 실패: {e}") from e

    def encode(self, img: Image.Image, image_format: ImageFormat, quality: int) -> bytes:
        encoder = self._encoders[image_format]
        try:
            return encoder(img, quality)
        except (OSError, ValueError, KeyError) as e:
            raise ImageProcessingError(
                f"{image_format.value} 인코딩 실패 (mode={img.mode}): {e}"
            ) from e

    @staticmethod
    def _save(img: Image.Image, pil_format: str, **options) -> bytes:
        buffer = io.BytesIO()
        img.save(buffer, format=pil_format, **options)
        return buffer.getvalue()

    def _encode_jpeg(self, img: Image.Image, quality: int) -> bytes:
        if has_alpha(img):
            img = flatten_to_rgb(img)
        elif img.mode not in ('RGB', 'L'):
            img = img.convert('RGB')
        return self._save(img, ImageFormat.JPEG.pil_format, quality=quality, optimize=True)

    def _encode_webp(self, img: Image.Image, quality: int) -> bytes:
        if img.mode not in ('RGB', 'RGBA'):
            img = img.convert('RGBA' if has_alpha(img) else 'RGB')
        return self._save(img, ImageFormat.WEBP.pil_format, quality=quality)

    def _encode_png(self, img: Image.Image, quality: int) -> bytes:
        if img.mode not in PNG_MODES:
            img = img.convert('RGBA' if has_alpha(img) else 'RGB')

        lossless = self._save(img, ImageFormat.PNG.pil_format, optimize=True)
        if quality >= 100:
            return lossless

        # 품질 < 100: 팔레트 양자화 (품질에 비례한 색상 수), 무손실보다 크면 무손실 유지
        colors = max(2, quality * 256 // 100)
        base = img.convert('RGBA' if has_alpha(img) else 'RGB')
        paletted = base.quantize(colors=colors, method=Image.Quantize.FASTOCTREE)
        quantized = self._save(paletted, ImageFormat.PNG.pil_format, optimize=True)
        return quantized if len(quantized) < len(lossless) else lossless
