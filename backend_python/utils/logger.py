"""
日志配置模块 - 后端统一日志：控制台 + 按天滚动的文件日志

环境变量:
    LOG_LEVEL         logger 级别，默认 INFO
    POLYGON_LOG_DIR   文件日志目录，默认 backend_python/logs
"""
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Mapping, Optional

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'

DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"


def _log_dir() -> Path:
    return Path(os.getenv("POLYGON_LOG_DIR", str(DEFAULT_LOG_DIR)))


def setup_logger(name: str = "polygon_manager", log_level: Optional[str] = None) -> logging.Logger:
    """
    设置并返回配置好的logger

    Args:
        name: logger名称，同时作为日志文件名前缀
        log_level: 日志级别，缺省读取 LOG_LEVEL

    Returns:
        配置好的logger实例
    """
    logger = logging.getLogger(name)

    # 避免重复添加handler
    if logger.handlers:
        return logger

    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console_handler)

    # 文件日志 <name>_YYYYMMDD.log，目录不可写时只保留控制台
    try:
        log_dir = _log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"{name}_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)
    except OSError as e:
        logger.warning(f"无法创建文件日志: {e}")

    return logger


logger = setup_logger()


def log_error(message: str, exc_info: bool = False):
    logger.error(message, exc_info=exc_info)


def log_api_request(method: str, path: str, status_code: int = None, duration_ms: float = None):
    """一次请求一行：GET /api/polygons -> 200 (3ms)"""
    parts = [f"{method} {path}"]
    if status_code:
        parts.append(f"-> {status_code}")
    if duration_ms:
        parts.append(f"({duration_ms:.0f}ms)")
    logger.info(" ".join(parts))


def log_polygon_operation(operation: str, details: Mapping = None):
    """记录多边形的创建/删除/清空"""
    msg = f"[多边形] {operation}"
    if details:
        msg += " | " + ", ".join(f"{k}={v}" for k, v in details.items())
    logger.info(msg)


def log_validation_failure(method: str, path: str, errors: Iterable[Mapping]):
    """参数校验失败：只记录字段位置和原因，不记录原始输入"""
    fields = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}" for e in errors
    )
    logger.warning(f"[校验失败] {method} {path} | {fields}")
