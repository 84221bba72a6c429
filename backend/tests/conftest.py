import logging
import os
from pathlib import Path

os.environ["APP_ENV"] = "dev"
os.environ["OPENAI_OFFLINE"] = "1"

import pytest

from guideline_qa.core.log_leak_scan import format_report, scan_file


@pytest.fixture(autouse=True)
def _set_default_test_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("OPENAI_OFFLINE", "1")
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "0")
    monkeypatch.delenv("RATE_LIMIT_TRUST_FORWARDED", raising=False)
    monkeypatch.setenv("MAX_REQUEST_BYTES", "65536")


@pytest.fixture
def corpus():
    return ["휴가는 연차 사용 후 승인", "출장비는 사전 결재 필요"]


@pytest.fixture(scope="session", autouse=True)
def _capture_logs_for_leak_scan():
    base_dir = Path(__file__).resolve().parents[1]
    log_dir = base_dir / ".pytest_logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "pytest.log"

    handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)

    try:
        yield log_path
    finally:
        root_logger.removeHandler(handler)
        handler.close()
        violations = scan_file(log_path)
        if violations:
            pytest.fail(format_report(violations))
