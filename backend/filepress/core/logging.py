"""구조화된 로깅 설정"""
import logging
import sys
from typing import Any, Dict, Optional, TextIO
from pythonjsonlogger import jsonlogger
from filepress.core.config import settings

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(operation_tag)s%(message)s'
JSON_FORMAT = '%(levelname)s %(name)s %(message)s'

# 업로드 파서, 이미지/PDF 라이브러리의 디버그 로그 억제
QUIET_LOGGERS = ('multipart', 'python_multipart', 'PIL', 'pikepdf')


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """
    서비스 메타데이터를 붙이는 JSON 포맷터

    요청 처리 로그의 extra(operation, compression_ratio 등)는
    python-json-logger가 그대로 필드로 옮긴다.
    """

    def __init__(self, *args, **kwargs):
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = log_record.pop('levelname', record.levelname)
        log_record['logger'] = log_record.pop('name', record.name)
        log_record['service'] = settings.APP_NAME
        log_record['version'] = settings.APP_VERSION
        log_record['environment'] = settings.ENVIRONMENT

        if 'exc_info' in log_record:
            log_record['exception'] = log_record.pop('exc_info')


class OperationTextFormatter(logging.Formatter):
    """operation extra가 있으면 메시지 앞에 [operation] 표시"""

    def format(self, record: logging.LogRecord) -> str:
        operation = getattr(record, 'operation', None)
        record.operation_tag = f"[{operation}] " if operation else ""
        return super().format(record)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return ServiceJsonFormatter(JSON_FORMAT)
    return OperationTextFormatter(TEXT_FORMAT)


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """루트 로거 설정 (인자가 없으면 settings 값 사용)"""
    level = level or settings.LOG_LEVEL
    log_format = log_format or settings.LOG_FORMAT

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(build_formatter(log_format))
    logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
