"""
구조화 로깅

서비스 계층은 StructuredLogger로 operation, entity_id, duration_ms 같은 필드를 함께 남긴다.
필드는 LogRecord의 "structured" 속성으로 전달되고 JsonFormatter가 한 줄 JSON으로 출력한다.
"""
import json
import logging
import traceback
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

REDACTED = "***REDACTED***"


class StructuredLogger:
    """필드 단위 컨텍스트를 붙여 기록하는 로거 래퍼"""

    SENSITIVE_KEYS = ("password", "secret", "token", "api_key", "idempotency_key", "authorization")

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

    def _log(
        self,
        level: int,
        msg: str,
        exception: Optional[BaseException] = None,
        duration_ms: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None,
        **fields: Any,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        structured: Dict[str, Any] = {"logger": self.name}
        merged = {**fields, **(context or {})}
        if merged:
            structured["context"] = self.sanitize(merged)
        # 0ms도 기록
        if duration_ms is not None:
            structured["performance"] = {"duration_ms": duration_ms}
        if exception is not None:
            structured["exception"] = {
                "type": type(exception).__name__,
                "message": str(exception),
                "traceback": traceback.format_exc() if level >= logging.ERROR else None,
            }

        self.logger.log(level, msg, extra={"structured": structured})

    def sanitize(self, data: Any) -> Any:
        """민감 키 값 가림, JSON으로 표현할 수 없는 값은 문자열로 변환"""
        if isinstance(data, dict):
            return {
                key: REDACTED if any(s in str(key).lower() for s in self.SENSITIVE_KEYS) else self.sanitize(value)
                for key, value in data.items()
            }
        if isinstance(data, (list, tuple, set)):
            return [self.sanitize(item) for item in data]
        if isinstance(data, (datetime, date)):
            return data.isoformat()
        if data is None or isinstance(data, (str, int, float, bool)):
            return data
        return str(data)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, exception: Optional[BaseException] = None, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, exception=exception, **kwargs)


class JsonFormatter(logging.Formatter):
    """한 레코드를 한 줄 JSON으로 출력"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "location": f"{record.pathname}:{record.lineno}",
        }
        structured = getattr(record, "structured", None)
        if isinstance(structured, dict):
            payload.update(structured)
        elif record.exc_info:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(log_level: str = "INFO", json_logs: bool = True, log_file: Optional[str] = None) -> None:
    """루트 로거 설정 (기존 핸들러는 교체)"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = JsonFormatter() if json_logs else logging.Formatter(
        "%(asctime)s [%(levelname)-8s] %(name)s:%(lineno)d - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.info(f"Logging configured: level={log_level}, json_logs={json_logs}, file={log_file or 'None'}")
