"""Pytest 설정"""
import io
import shutil
import subprocess
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from filepress.main import app
from filepress.models.formats import ImageFormat
from filepress.services.file_service import TempWorkspace, get_workspace
from filepress.services.pdf_engine import GhostscriptEngine, get_engine


class FakeGhostscript:
    """
    Ghostscript 대역

    mode:
        copy       - 입력을 출력으로 복사 (성공)
        missing    - 실행 파일 없음
        fail       - 비정상 종료
        no_output  - 종료 코드 0이지만 출력 없음
    """

    def __init__(self, mode: str = "copy"):
        self.mode = mode
        self.calls = []

    def __call__(self, cmd, timeout=None):
        self.calls.append(list(cmd))

        if self.mode == "missing":
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if self.mode == "fail":
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="Error: /syntaxerror in --token--")
        if self.mode == "copy":
            output_arg = next(arg for arg in cmd if arg.startswith("-sOutputFile="))
            shutil.copyfile(cmd[-1], output_arg[len("-sOutputFile="):])

        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    @property
    def last_command(self):
        return self.calls[-1]


@pytest.fixture
def fake_gs():
    """성공하는 Ghostscript 대역"""
    return FakeGhostscript()


@pytest.fixture
def workspace(tmp_path):
    """테스트 전용 임시 작업공간"""
    return TempWorkspace(str(tmp_path / "work"))


@pytest.fixture(scope="function")
def client(fake_gs, workspace):
    """테스트 클라이언트"""
    app.dependency_overrides[get_engine] = lambda: GhostscriptEngine(command="gs", runner=fake_gs)
    app.dependency_overrides[get_workspace] = lambda: workspace
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_image(size=(500, 500), mode="RGB") -> Image.Image:
    """그라디언트 + 노이즈 테스트 이미지"""
    red = Image.linear_gradient("L").resize(size)
    green = Image.effect_noise(size, 40)
    blue = Image.radial_gradient("L").resize(size)
    img = Image.merge("RGB", (red, green, blue))

    if mode == "RGBA":
        alpha = Image.linear_gradient("L").rotate(90).resize(size)
        img.putalpha(alpha)
    elif mode != "RGB":
        img = img.convert(mode)
    return img


def encode_image(img: Image.Image, image_format: ImageFormat, **options) -> bytes:
    if image_format is ImageFormat.JPEG and img.mode not in ("RGB", "L"):
        img = img.convert("RGB")
    buffer = io.BytesIO()
    img.save(buffer, format=image_format.pil_format, **options)
    return buffer.getvalue()


@pytest.fixture
def image_factory():
    """포맷별 샘플 이미지 바이트 생성"""
    def factory(image_format=ImageFormat.JPEG, size=(500, 500), mode="RGB", **options):
        return encode_image(make_image(size, mode), image_format, **options)
    return factory


@pytest.fixture
def sample_jpeg(image_factory):
    return image_factory(ImageFormat.JPEG, quality=95)


@pytest.fixture
def sample_pdf():
    """샘플 PDF 파일 생성"""
    from reportlab.pdfgen import canvas
    from reportlab.lib.pagesizes import letter

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)

    for i in range(3):
        c.drawString(100, 750, f"Test PDF - Page {i+1}")
        c.drawString(100, 700, "This is a test PDF file for compression testing.")
        c.showPage()

    c.save()
    buffer.seek(0)

    return buffer


@pytest.fixture
def image_pdf():
    """이미지가 포함된 PDF"""
    from reportlab.pdfgen import canvas
    from reportlab.lib.pagesizes import letter
    from reportlab.lib.utils import ImageReader

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=letter)

    for i in range(4):
        c.drawString(100, 750, f"Image PDF - Page {i+1}")
        c.drawImage(ImageReader(make_image((800, 600))), 100, 200, width=400, height=300)
        c.showPage()

    c.save()
    buffer.seek(0)

    return buffer
