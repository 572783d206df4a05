"""서비스 모듈"""
from filepress.services.file_service import FileService, TempWorkspace, get_workspace
from filepress.services.image_engine import ImageEngine
from filepress.services.pdf_engine import GhostscriptEngine, get_engine, get_page_count

__all__ = [
    'FileService',
    'TempWorkspace',
    'get_workspace',
    'ImageEngine',
    'GhostscriptEngine',
    'get_engine',
    'get_page_count',
]
