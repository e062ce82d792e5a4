# ev_crm/common/logger.py
"""
Логирование консоли.

Консоль или JSON (по LOG_FORMAT), опционально файл с архивированием по
размеру. Номера CNIC и bearer-токены маскируются до попадания в хендлеры.
Асинхронные помощники log_* добавляют в запись место вызова.
"""

from __future__ import annotations

import inspect
import json
import logging
import re
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, NamedTuple

from ev_crm.common.constants import TypeMsg


DEFAULT_LOGGER = "ev_crm"

_CNIC_RE = re.compile(r"\b(\d{5})-?(\d{7})-?(\d)\b")
_BEARER_RE = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)

_LEVELS: dict[TypeMsg, int] = {
    TypeMsg.DEBUG: logging.DEBUG,
    TypeMsg.INFO: logging.INFO,
    TypeMsg.WARNING: logging.WARNING,
    TypeMsg.ERROR: logging.ERROR,
    TypeMsg.CRITICAL: logging.CRITICAL,
}

_NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "nicegui": logging.INFO,
    "uvicorn": logging.INFO,
}

_loggers: dict[str, logging.Logger] = {}
_file_handler: logging.Handler | None = None
_initialized = False


class _Options(NamedTuple):
    level: str = "DEBUG"
    fmt: str = "colored"
    to_file: bool = False
    file_path: str = "logs/ev_crm.log"
    max_bytes: int = 10 * 1024 * 1024


def mask_sensitive(text: str) -> str:
    """Оставляет от CNIC только последнюю цифру, токен заменяет на ***."""
    text = _CNIC_RE.sub(lambda m: f"XXXXX-XXXXXXX-{m.group(3)}", text)
    return _BEARER_RE.sub(r"\1***", text)


class SensitiveDataFilter(logging.Filter):
    """Маскирует персональные данные в тексте записи."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = mask_sensitive(record.getMessage())
        record.args = ()
        return True


def _record_time(record: logging.LogRecord, *, utc: bool) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc if utc else None)


# =============================================================================
# ФОРМАТТЕРЫ
# =============================================================================

class JsonFormatter(logging.Formatter):
    """Одна запись = одна JSON строка."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _record_time(record, utc=True).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        extra_data = getattr(record, "extra_data", None)
        if extra_data:
            payload["extra"] = extra_data
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ColoredFormatter(logging.Formatter):
    """Читаемый вывод для терминала разработчика."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"
    GRAY = "\033[90m"

    def _caller(self, record: logging.LogRecord) -> str:
        extra_data = getattr(record, "extra_data", None) or {}
        if not extra_data.get("caller_function"):
            return ""
        where = f"{extra_data.get('caller_module')}.{extra_data['caller_function']}()"
        return f" {self.GRAY}[{where} {extra_data.get('caller_file')}:{extra_data.get('caller_line')}]{self.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.GRAY)
        stamp = _record_time(record, utc=False).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{stamp} {color}[{record.levelname}]{self.RESET}{self._caller(record)} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class TimestampRotatingFileHandler(RotatingFileHandler):
    """
    Пишет в <log_dir>/<logger_name>.log; переполненный файл уходит в архив
    <logger_name>_<дата-время>.log, запись продолжается в новый.
    """

    def __init__(self, log_dir: str, max_bytes: int, logger_name: str = "ev_crm", encoding: str = "utf-8"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.logger_name = logger_name
        super().__init__(
            filename=str(self.log_dir / f"{logger_name}.log"),
            maxBytes=max_bytes,
            backupCount=0,
            encoding=encoding,
        )

    def archive_path(self) -> Path:
        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        return self.log_dir / f"{self.logger_name}_{stamp}.log"

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        current = Path(self.baseFilename)
        if current.exists():
            try:
                current.replace(self.archive_path())
            except OSError as e:
                # Windows: файл держит другой процесс, пишем дальше в него
                sys.stderr.write(f"log rollover skipped: {e}\n")

        self.stream = self._open()


# =============================================================================
# ЛОГГЕРЫ
# =============================================================================

def _options() -> _Options:
    """Параметры из settings.logging; до загрузки настроек — значения по умолчанию."""
    try:
        from ev_crm.config import settings
    except (ImportError, ValueError):
        return _Options()
    opts = settings.logging
    return _Options(
        level=str(opts.LOG_LEVEL),
        fmt=str(opts.LOG_FORMAT),
        to_file=bool(opts.LOG_TO_FILE),
        file_path=str(opts.LOG_FILE_PATH),
        max_bytes=int(opts.LOG_MAX_BYTES),
    )


def _shared_file_handler(options: _Options, formatter: logging.Formatter) -> logging.Handler:
    global _file_handler
    if _file_handler is None:
        path = Path(options.file_path)
        _file_handler = TimestampRotatingFileHandler(
            log_dir=str(path.parent),
            max_bytes=options.max_bytes,
            logger_name=path.stem,
        )
        _file_handler.setFormatter(formatter)
        _file_handler.addFilter(SensitiveDataFilter())
    return _file_handler


def get_logger(name: str = DEFAULT_LOGGER) -> logging.Logger:
    """Логгер с хендлерами консоли (и файла); повторный вызов отдаёт тот же."""
    cached = _loggers.get(name)
    if cached is not None:
        return cached

    options = _options()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, options.level.upper(), logging.DEBUG))
    logger.propagate = False

    if not logger.handlers:
        formatter: logging.Formatter = JsonFormatter() if options.fmt == "json" else ColoredFormatter()
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        console.addFilter(SensitiveDataFilter())
        logger.addHandler(console)
        if options.to_file:
            logger.addHandler(_shared_file_handler(options, formatter))

    _loggers[name] = logger
    return logger


def setup_logging() -> None:
    """Готовит корневой логгер консоли и приглушает сторонние библиотеки."""
    global _initialized
    if _initialized:
        return
    _initialized = True

    get_logger(DEFAULT_LOGGER)
    for name, level in _NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


# =============================================================================
# АСИНХРОННЫЕ ПОМОЩНИКИ
# =============================================================================

def _get_caller_info() -> dict[str, Any]:
    """Место вызова первой функции вне этого модуля."""
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        while caller is not None and caller.f_code.co_filename == __file__:
            caller = caller.f_back
        if caller is None:
            return {}
        module = inspect.getmodule(caller)
        return {
            "caller_function": caller.f_code.co_name,
            "caller_module": module.__name__ if module else "unknown",
            "caller_file": Path(caller.f_code.co_filename).name,
            "caller_line": caller.f_lineno,
        }
    finally:
        del frame
        del caller


def _emit(
    level: int,
    message: str,
    logger_name: str,
    extra: dict[str, Any] | None,
    exc_info: bool = False,
) -> None:
    logger = get_logger(logger_name)
    extra_data = {**_get_caller_info(), **(extra or {})}
    method = {
        logging.DEBUG: logger.debug,
        logging.WARNING: logger.warning,
        logging.ERROR: logger.error,
        logging.CRITICAL: logger.critical,
    }.get(level, logger.info)
    if exc_info:
        method(message, extra={"extra_data": extra_data}, exc_info=True)
    else:
        method(message, extra={"extra_data": extra_data})


async def log_info(
    message: str,
    *,
    type_msg: TypeMsg = TypeMsg.INFO,
    logger_name: str = DEFAULT_LOGGER,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Пишет сообщение с уровнем из type_msg.

    Args:
        message: Текст
        type_msg: Уровень
        logger_name: Имя логгера
        extra: Поля для JSON вывода
    """
    _emit(_LEVELS.get(type_msg, logging.INFO), message, logger_name, extra)


async def log_debug(message: str, logger_name: str = DEFAULT_LOGGER, extra: dict[str, Any] | None = None) -> None:
    _emit(logging.DEBUG, message, logger_name, extra)


async def log_warning(message: str, logger_name: str = DEFAULT_LOGGER, extra: dict[str, Any] | None = None) -> None:
    _emit(logging.WARNING, message, logger_name, extra)


async def log_error(
    message: str,
    logger_name: str = DEFAULT_LOGGER,
    extra: dict[str, Any] | None = None,
    exc_info: bool = False,
) -> None:
    """ERROR; exc_info=True добавляет трейсбек текущего исключения."""
    _emit(logging.ERROR, message, logger_name, extra, exc_info=exc_info)
