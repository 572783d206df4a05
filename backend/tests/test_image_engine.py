"""이미지 엔진 테스트"""
import io
import pytest
from PIL import Image

from filepress.core.exceptions import ImageProcessingError
from filepress.models.formats import ImageFormat
from filepress.services.image_engine import ImageEngine, flatten_to_rgb, has_alpha


def reopen(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


def test_image_format_lookup():
    """MIME/이름 조회"""
    assert ImageFormat.from_mime("image/jpeg") is ImageFormat.JPEG
    assert ImageFormat.from_mime("image/webp") is ImageFormat.WEBP
    assert ImageFormat.from_mime("image/gif") is None
    assert ImageFormat.from_mime(None) is None
    assert ImageFormat.from_name("PNG") is ImageFormat.PNG
    assert ImageFormat.from_name("jpg") is None
    assert ImageFormat.JPEG.mime_type == "image/jpeg"
    assert ImageFormat.WEBP.pil_format == "WEBP"


def test_rgba_to_jpeg_is_flattened_on_white():
    transparent = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
    buffer = io.BytesIO()
    transparent.save(buffer, format="PNG")

    output = ImageEngine().convert(buffer.getvalue(), ImageFormat.JPEG)

    img = reopen(output)
    assert img.mode == "RGB"
    r, g, b = img.getpixel((5, 5))
    assert min(r, g, b) > 245


def test_palette_image_to_webp():
    img = Image.new("P", (32, 32))
    img.putpalette([i % 256 for i in range(768)])
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")

    output = ImageEngine().convert(buffer.getvalue(), ImageFormat.WEBP)

    assert reopen(output).format == "WEBP"


def test_grayscale_jpeg_keeps_mode(image_factory):
    source = image_factory(ImageFormat.JPEG, mode="L", quality=90)
    output = ImageEngine().compress(source, ImageFormat.JPEG, 50)

    assert reopen(output).mode == "L"


def test_png_quality_below_100_is_paletted(image_factory):
    source = image_factory(ImageFormat.PNG, size=(64, 64))
    engine = ImageEngine()

    lossless = reopen(engine.compress(source, ImageFormat.PNG, 100))
    lossy = reopen(engine.compress(source, ImageFormat.PNG, 50))

    assert lossless.mode == "RGB"
    assert lossy.mode == "P"
    assert len(lossy.getcolors(256)) <= 128


def test_convert_to_png_is_lossless(image_factory):
    source = image_factory(ImageFormat.PNG, size=(40, 40))
    output = ImageEngine().convert(source, ImageFormat.PNG)

    assert list(reopen(output).getdata()) == list(reopen(source).getdata())


def test_convert_uses_default_quality(sample_jpeg):
    engine = ImageEngine(default_quality=30)

    assert engine.convert(sample_jpeg, ImageFormat.JPEG) == engine.compress(sample_jpeg, ImageFormat.JPEG, 30)


def test_decode_error():
    with pytest.raises(ImageProcessingError, match="디코딩 실패"):
        ImageEngine().compress(b"not an image at all", ImageFormat.PNG, 80)


def test_alpha_helpers():
    assert has_alpha(Image.new("RGBA", (1, 1)))
    assert has_alpha(Image.new("LA", (1, 1)))
    assert not has_alpha(Image.new("RGB", (1, 1)))
    assert flatten_to_rgb(Image.new("LA", (2, 2), (0, 0))).getpixel((0, 0)) == (255, 255, 255)


def test_cmyk_jpeg_to_png():
    buffer = io.BytesIO()
    Image.new("CMYK", (16, 16), (0, 255, 255, 0)).save(buffer, format="JPEG", quality=95)

    img = reopen(ImageEngine().convert(buffer.getvalue(), ImageFormat.PNG))

    assert img.format == "PNG"
    assert img.mode == "RGB"
    r, g, b = img.getpixel((8, 8))
    assert r > 200 and g < 60 and b < 60


@pytest.mark.parametrize("quality", [1, 25, 50, 80, 99])
def test_flat_png_never_grows(quality):
    """단색 PNG는 어떤 품질에서도 무손실 결과보다 커지지 않음"""
    source = Image.new("RGB", (200, 200), (30, 120, 200))
    buffer = io.BytesIO()
    source.save(buffer, format="PNG", optimize=True)
    engine = ImageEngine()

    lossless = engine.compress(buffer.getvalue(), ImageFormat.PNG, 100)
    output = engine.compress(buffer.getvalue(), ImageFormat.PNG, quality)

    assert len(output) <= len(lossless)
    pixel = reopen(output).convert("RGB").getpixel((100, 100))
    assert all(abs(a - b) <= 8 for a, b in zip(pixel, (30, 120, 200)))
