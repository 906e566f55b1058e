import json
import logging

import pytest

from sitegen.config import Settings, refresh_settings, resolve_model, update_runtime_overrides
from sitegen.exceptions import AgentRunError
from sitegen.log import JSONFormatter, log_tool_execution, setup_logging

_MODEL_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_MODEL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_BASE_URL",
    "ANTHROPIC_MODEL",
    "MAX_TOKENS",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in _MODEL_ENV:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    settings = Settings()
    assert settings.openai_model == "gpt-4o"
    assert settings.anthropic_model == "claude-sonnet-4-20250514"
    assert settings.max_tokens == 16000
    assert settings.bridge_wait_timeout == 0.1


def test_anthropic_key_selects_anthropic(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-ant")
    clean_env.setenv("OPENAI_API_KEY", "sk-openai")
    model = resolve_model(Settings())
    assert model.name == "anthropic"
    assert model.model == "claude-sonnet-4-20250514"
    assert model.api_key == "sk-ant"
    assert model.base_url == "https://api.anthropic.com/v1"


def test_openai_is_the_default_provider(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("OPENAI_API_KEY", "sk-openai")
    clean_env.setenv("OPENAI_MODEL", "gpt-4.1")
    model = resolve_model(Settings())
    assert model.name == "openai"
    assert model.model == "gpt-4.1"
    assert model.api_key == "sk-openai"


def test_bad_numbers_fall_back_to_defaults(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("MAX_TOKENS", "lots")
    assert Settings().max_tokens == 16000


def test_runtime_overrides_apply_to_refreshed_settings(clean_env: pytest.MonkeyPatch) -> None:
    update_runtime_overrides({"max_turns": 3})
    try:
        assert refresh_settings().max_turns == 3
    finally:
        from sitegen import config

        config._runtime_overrides.clear()
        refresh_settings()


def test_json_formatter_includes_data() -> None:
    record = logging.LogRecord("sitegen.tool", logging.INFO, __file__, 1, "tool_exec", None, None)
    record.data = {"tool": "write_page"}
    entry = json.loads(JSONFormatter().format(record))
    assert entry["logger"] == "sitegen.tool"
    assert entry["msg"] == "tool_exec"
    assert entry["data"] == {"tool": "write_page"}


def test_json_formatter_reports_tracked_error_trace_id() -> None:
    error = AgentRunError("model unavailable")
    record = logging.LogRecord(
        "sitegen.generation.event_bridge", logging.WARNING, __file__, 1, "agent_run_failed", None,
        (AgentRunError, error, None),
    )
    entry = json.loads(JSONFormatter().format(record))
    assert entry["error"] == "model unavailable"
    assert entry["trace_id"] == error.trace_id


def test_tool_execution_helper_logs_structured_data(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="sitegen"):
        log_tool_execution("write_page", 0.12345, 42, is_error=True)
    record = [r for r in caplog.records if r.getMessage() == "tool_exec"][-1]
    assert record.name == "sitegen.tool"
    assert record.data == {"tool": "write_page", "elapsed_s": 0.123, "output_len": 42, "is_error": True}


def test_setup_logging_writes_jsonl(tmp_path) -> None:
    logger = logging.getLogger("sitegen")
    saved = list(logger.handlers)
    for handler in saved:
        logger.removeHandler(handler)
    try:
        setup_logging(tmp_path, "INFO")
        logging.getLogger("sitegen.generation").info("generation_end", extra={"data": {"pages": 1}})
        for handler in logger.handlers:
            handler.flush()
        line = (tmp_path / "generation.jsonl").read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["data"] == {"pages": 1}
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        for handler in saved:
            logger.addHandler(handler)
