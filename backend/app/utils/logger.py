import atexit
import logging
import queue
import sys
from pathlib import Path
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import traceback

from app.core.config import settings

LOG_DIR = Path(settings.LOG_DIR)
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOG_FORMAT = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

logger = logging.getLogger("paper_assistant")
logger.setLevel(logging.INFO)

# Loggers whose records are written verbatim as JSON lines
llm_jsonl_logger = logging.getLogger("paper_assistant_jsonl.llm")
api_jsonl_logger = logging.getLogger("paper_assistant_jsonl.api")
perf_jsonl_logger = logging.getLogger("paper_assistant_jsonl.performance")

# Handlers run only on the listener thread, never on the event loop.
_log_queue: "queue.Queue[logging.LogRecord]" = queue.Queue(-1)
_listener: Optional[QueueListener] = None


def _rotating(filename: str, backup_count: int, level: int, formatter: logging.Formatter,
              only: Optional[str] = None) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        LOG_DIR / filename,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    if only:
        handler.addFilter(logging.Filter(only))
    return handler


if not logger.handlers:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(LOG_FORMAT)
    console_handler.setLevel(logging.INFO)
    logger.addHandler(console_handler)

    plain = logging.Formatter("%(message)s")
    _listener = QueueListener(
        _log_queue,
        _rotating("app.log", 5, logging.INFO, LOG_FORMAT, only="paper_assistant"),
        _rotating("error.log", 3, logging.ERROR, LOG_FORMAT, only="paper_assistant"),
        _rotating("llm_calls.jsonl", 5, logging.INFO, plain, only=llm_jsonl_logger.name),
        _rotating("api_requests.jsonl", 5, logging.INFO, plain, only=api_jsonl_logger.name),
        _rotating("performance.jsonl", 5, logging.INFO, plain, only=perf_jsonl_logger.name),
        respect_handler_level=True,
    )
    queue_handler = QueueHandler(_log_queue)
    logger.addHandler(queue_handler)
    for jsonl_logger in (llm_jsonl_logger, api_jsonl_logger, perf_jsonl_logger):
        jsonl_logger.setLevel(logging.INFO)
        jsonl_logger.propagate = False
        jsonl_logger.addHandler(queue_handler)
    _listener.start()
    atexit.register(_listener.stop)

# Specialized loggers
llm_logger = logging.getLogger("paper_assistant.llm")
api_logger = logging.getLogger("paper_assistant.api")
perf_logger = logging.getLogger("paper_assistant.performance")


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _append_jsonl(target: logging.Logger, entry: Dict[str, Any]):
    target.info(json.dumps(entry, default=str))


def log_llm_call(
    provider: str,
    model: str,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool,
    error: str = None,
    latency_ms: float = 0.0
):
    """Log LLM API calls in structured JSON format."""
    log_entry = {
        "timestamp": _utcnow(),
        "provider": provider,
        "model": model,
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
        "success": success,
        "error": error,
        "latency_ms": latency_ms,
    }
    _append_jsonl(llm_jsonl_logger, log_entry)

    llm_logger.info(
        f"{provider}/{model}: {prompt_tokens + completion_tokens} tokens, "
        f"latency={latency_ms:.0f}ms, success={success}"
    )


def log_api_request(
    request_id: str,
    method: str,
    path: str,
    status_code: int,
    latency_ms: float,
    request_body: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
):
    """Log API requests in structured JSON format with detailed context."""
    log_entry = {
        "timestamp": _utcnow(),
        "request_id": request_id,
        "method": method,
        "path": path,
        "status_code": status_code,
        "latency_ms": round(latency_ms, 2),
        "request_body": request_body,
        "error": error,
        "metadata": metadata or {},
    }
    _append_jsonl(api_jsonl_logger, log_entry)

    level = "ERROR" if status_code >= 500 else "WARNING" if status_code >= 400 else "INFO"
    getattr(api_logger, level.lower())(
        f"{method} {path} - {status_code} ({latency_ms:.0f}ms) [req_id={request_id}]"
    )


def log_performance(
    operation: str,
    duration_ms: float,
    success: bool,
    metadata: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None
):
    """Log performance metrics for critical operations."""
    log_entry = {
        "timestamp": _utcnow(),
        "operation": operation,
        "duration_ms": round(duration_ms, 2),
        "success": success,
        "metadata": metadata or {},
        "error": error,
    }
    _append_jsonl(perf_jsonl_logger, log_entry)

    perf_logger.info(
        f"{operation}: {duration_ms:.0f}ms, success={success}"
        + (f", error={error}" if error else "")
    )


def log_operation_start(operation: str, metadata: Optional[Dict[str, Any]] = None):
    """Log the start of a request-level operation."""
    meta_str = f" {metadata}" if metadata else ""
    logger.info(f"START: {operation}{meta_str}")


def log_operation_end(operation: str, duration_ms: float, metadata: Optional[Dict[str, Any]] = None):
    """Log the end of a request-level operation."""
    meta_str = f" {metadata}" if metadata else ""
    logger.info(f"END: {operation} ({duration_ms:.0f}ms){meta_str}")


def log_error_with_trace(operation: str, error: Exception, metadata: Optional[Dict[str, Any]] = None):
    """Log error with full traceback."""
    trace = traceback.format_exc()
    meta_str = f" | Metadata: {metadata}" if metadata else ""
    logger.error(
        f"ERROR in {operation}: {str(error)}{meta_str}\n{trace}"
    )
