"""JSON-lines logging for sitegen.

Every record under the ``sitegen`` logger tree is rendered as one JSON
object. Structured fields travel in ``extra={"data": {...}}``; failures
carry the exception text and, for tracked errors, their trace id. The
helpers at the bottom are the fixed event names the agent loop and the
orchestrator report: ``tool_exec``, ``llm_call`` and ``generation_end``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import TrackedError

LOG_FILENAME = "generation.jsonl"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data is not None:
            entry["data"] = data
        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            entry["error"] = str(exc) or type(exc).__name__
            if isinstance(exc, TrackedError):
                entry["trace_id"] = exc.trace_id
        return json.dumps(entry, ensure_ascii=False, default=str)


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    log_dir: Path | None = None,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """Attach JSON handlers to the ``sitegen`` logger.

    Session records go to ``<log_dir>/generation.jsonl`` at ``level`` when a
    directory is given. Warnings and errors always reach stderr so a CLI run
    shows agent failures. Calling this again only updates the level.
    """
    level = _coerce_level(level)
    logger = logging.getLogger("sitegen")
    logger.setLevel(level)
    if logger.handlers:
        return logger

    formatter = JSONFormatter()
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        session_log = logging.FileHandler(path / LOG_FILENAME, encoding="utf-8")
        session_log.setLevel(level)
        session_log.setFormatter(formatter)
        logger.addHandler(session_log)

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(formatter)
    logger.addHandler(console)
    return logger


def _report(channel: str, event: str, **data: Any) -> None:
    logging.getLogger(f"sitegen.{channel}").info(event, extra={"data": data})


def log_tool_execution(tool_name: str, elapsed_s: float, output_len: int, is_error: bool = False):
    _report(
        "tool",
        "tool_exec",
        tool=tool_name,
        elapsed_s=round(elapsed_s, 3),
        output_len=output_len,
        is_error=is_error,
    )


def log_model_call(model: str, step: int, elapsed_s: float, usage: dict, tool_calls: int):
    _report(
        "llm",
        "llm_call",
        model=model,
        step=step,
        elapsed_s=round(elapsed_s, 3),
        prompt_tokens=usage.get("prompt_tokens", 0),
        completion_tokens=usage.get("completion_tokens", 0),
        tool_calls=tool_calls,
    )


def log_generation(
    outcome: str,
    pages: list[str],
    spec_name: str | None,
    elapsed_s: float,
    metrics: dict[str, Any],
    usage: dict[str, Any],
):
    """Summary record for one finished session: outcome, pages, spec, metrics and usage."""
    _report(
        "generation",
        "generation_end",
        outcome=outcome,
        pages=pages,
        spec_name=spec_name,
        elapsed_s=round(elapsed_s, 3),
        metrics=metrics,
        usage=usage,
    )
