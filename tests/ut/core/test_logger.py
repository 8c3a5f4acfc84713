"""日志配置测试"""

from __future__ import annotations

import json
import logging

from libsim.utils.logger import JSONFormatter, reset_logging, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="libsim.core.pool", level=logging.INFO, pathname=__file__, lineno=1,
        msg="%s 借到一本书", args=("Student #1",), exc_info=None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


class TestJSONFormatter:
    def test_basic_fields(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert data["level"] == "INFO"
        assert data["logger"] == "libsim.core.pool"
        assert data["message"] == "Student #1 借到一本书"
        assert "thread" in data
        assert "actor" not in data

    def test_actor_field(self) -> None:
        data = json.loads(JSONFormatter().format(_record(actor="Student #1")))
        assert data["actor"] == "Student #1"


class TestSetupLogging:
    def test_single_handler(self) -> None:
        root = logging.getLogger()
        saved, saved_level = root.handlers[:], root.level
        try:
            setup_logging("DEBUG")
            setup_logging("WARNING", json_output=True)
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.WARNING
        finally:
            reset_logging()
            for h in saved:
                root.addHandler(h)
            root.setLevel(saved_level)
