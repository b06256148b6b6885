# -*- coding: utf-8 -*-
"""
로깅 설정 모듈

콘솔 + 로테이팅 파일 핸들러 구성
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.settings.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# setup_logging()이 설치한 핸들러 표식
_HANDLER_MARK = "_cache_service_handler"


def setup_logging(settings: Settings) -> logging.Logger:
    """
    루트 로거 설정

    여러 번 호출해도 이전에 설치한 핸들러를 교체하므로 중복 출력되지 않음

    Args:
        settings: 애플리케이션 설정 (log_level, log_file, log_max_bytes, log_backup_count)

    Returns:
        logging.Logger: 설정된 루트 로거
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=settings.log_max_bytes,
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_MARK, True)
        root.addHandler(handler)

    return root
