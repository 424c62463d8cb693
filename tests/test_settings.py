import logging

import pytest

from chatsession.logging_config import DailyFileHandler, LocalTimezoneFormatter, is_app_record
from chatsession.settings import Settings


def test_settings_defaults(monkeypatch):
    for key in ("PORT", "OPENAI_MODEL", "DEFAULT_TEMPERATURE", "SESSION_INACTIVITY_MINUTES"):
        monkeypatch.delenv(key, raising=False)

    cfg = Settings(_env_file=None)

    assert cfg.port == 3333
    assert cfg.openai_model == "gpt-4.1-nano"
    assert cfg.default_temperature == 0.5
    assert cfg.session_inactivity_minutes == 30
    assert cfg.session_sweep_interval_seconds == 300


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("SESSION_INACTIVITY_MINUTES", "5")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.local, ,http://b.local")

    cfg = Settings(_env_file=None)

    assert cfg.port == 8080
    assert cfg.session_inactivity_minutes == 5
    assert cfg.get_cors_origins() == ["http://a.local", "http://b.local"]


def test_default_temperature_out_of_range_is_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_TEMPERATURE", "2.5")

    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_cors_wildcard(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "*")

    assert Settings(_env_file=None).get_cors_origins() == ["*"]


def test_formatter_uses_configured_timezone():
    formatter = LocalTimezoneFormatter("%(asctime)s %(message)s", timezone_name="UTC")
    record = logging.LogRecord("chatsession", logging.INFO, __file__, 1, "hello", None, None)
    record.created = 0.0

    assert formatter.formatTime(record).startswith("1970-01-01T00:00:00.000+00:00")


def test_daily_file_handler_writes_and_prunes(tmp_path):
    for day in ("2020-01-01", "2020-01-02", "2020-01-03"):
        (tmp_path / f"app-{day}.log").write_text("old\n", encoding="utf-8")

    handler = DailyFileHandler(log_dir=tmp_path, backup_count=2)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.emit(logging.LogRecord("chatsession", logging.INFO, __file__, 1, "written", None, None))
    handler.close()

    files = sorted(p.name for p in tmp_path.iterdir())
    assert len(files) == 2
    today_file = max(tmp_path.iterdir())
    assert today_file.read_text(encoding="utf-8").strip() == "written"


def test_file_filter_keeps_only_app_records():
    def record(name: str) -> logging.LogRecord:
        return logging.LogRecord(name, logging.INFO, __file__, 1, "msg", None, None)

    assert is_app_record(record("chatsession"))
    assert is_app_record(record("chatsession.logging_config"))
    assert not is_app_record(record("chatsessionx"))
    assert not is_app_record(record("uvicorn.access"))
