from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Optional
from datetime import datetime

LOGGER_NAME = "ro_parser"


class ColoredFormatter(logging.Formatter):
    """컬러 로그 포맷터"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m',
    }

    def format(self, record: logging.LogRecord) -> str:
        # 다른 핸들러가 같은 record를 쓰므로 원래 levelname을 복원
        original = record.levelname
        if original in self.COLORS:
            record.levelname = f"{self.COLORS[original]}{original}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logger(
    name: str = LOGGER_NAME,
    log_dir: Optional[Path] = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    enable_color: bool = True
) -> logging.Logger:

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # 1) 콘솔 핸들러
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)

    if enable_color:
        console_formatter = ColoredFormatter("%(levelname)s | %(message)s")
    else:
        console_formatter = logging.Formatter("%(levelname)-8s | %(message)s")

    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # 2) 파일 핸들러 (배치 워커 스레드 구분을 위해 threadName 포함)
    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)

        # 파일명: ro_parser_YYYYMMDD_HHMMSS.log
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{LOGGER_NAME}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)

        file_format = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
        file_handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

        logger.info(f"로그 파일: {log_file}")

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    패키지 로거 반환
    - name이 모듈명(ro_parser.xxx)이면 그대로, 아니면 ro_parser 하위로 붙인다
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


# 단계 실행 시간 로깅
class LogContext:

    def __init__(self, logger: logging.Logger, message: str, level: int = logging.INFO):
        self.logger = logger
        self.message = message
        self.level = level
        self.elapsed: Optional[float] = None
        self._start: Optional[float] = None

    def __enter__(self) -> "LogContext":
        self._start = time.perf_counter()
        self.logger.log(self.level, f"▶ {self.message} 시작...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.elapsed = time.perf_counter() - self._start

        if exc_type is None:
            self.logger.log(self.level, f"✓ {self.message} 완료 ({self.elapsed:.2f}초)")
        else:
            self.logger.error(f"✗ {self.message} 실패 ({self.elapsed:.2f}초): {exc_type.__name__} - {exc_val}")

        # 예외는 삼키지 않는다
        return False


def log_step(logger: logging.Logger, message: str, level: int = logging.INFO) -> LogContext:
    """with log_step(logger, "파일 파싱"): ..."""
    return LogContext(logger, message, level)
