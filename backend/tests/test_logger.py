import json
import time
from logging.handlers import QueueHandler

from app.utils import logger as log_module


def _wait_for_line(path, needle, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if path.exists() and needle in path.read_text(encoding="utf-8"):
            return True
        time.sleep(0.02)
    return False


def test_structured_loggers_only_enqueue():
    for jsonl_logger in (
        log_module.llm_jsonl_logger,
        log_module.api_jsonl_logger,
        log_module.perf_jsonl_logger,
    ):
        assert jsonl_logger.handlers
        assert all(isinstance(h, QueueHandler) for h in jsonl_logger.handlers)
        assert jsonl_logger.propagate is False


def test_performance_entry_lands_in_jsonl_file():
    log_module.log_performance(
        "jsonl_roundtrip_check", 12.5, success=True, metadata={"k": "v"}
    )

    path = log_module.LOG_DIR / "performance.jsonl"
    assert _wait_for_line(path, "jsonl_roundtrip_check")

    entries = [
        json.loads(line)
        for line in path.read_text(encoding="utf-8").splitlines()
        if "jsonl_roundtrip_check" in line
    ]
    assert entries[-1]["duration_ms"] == 12.5
    assert entries[-1]["metadata"] == {"k": "v"}


def test_structured_lines_stay_out_of_app_log():
    log_module.log_llm_call("Gemini", "gemini-test", 1, 2, success=True)
    log_module.logger.info("app_log_marker")

    assert _wait_for_line(log_module.LOG_DIR / "app.log", "app_log_marker")
    assert _wait_for_line(log_module.LOG_DIR / "llm_calls.jsonl", "gemini-test")
    assert '"total_tokens"' not in (log_module.LOG_DIR / "app.log").read_text(
        encoding="utf-8"
    )
