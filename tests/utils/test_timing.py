import logging

import pytest

from clustval.utils.timing import catch_time


def test_catch_time_logs_completion(caplog):
    caplog.set_level(logging.DEBUG)
    with catch_time("mock task"):
        sum(range(100))

    messages = [r.message for r in caplog.records]
    assert any("mock task completed" in msg for msg in messages)


def test_catch_time_custom_level(caplog):
    caplog.set_level(logging.INFO)
    with catch_time("info task", level=logging.INFO):
        pass
    assert caplog.records[-1].levelname == "INFO"


def test_catch_time_handles_exceptions(caplog):
    """Ensure catch_time logs errors if the wrapped block raises."""
    caplog.set_level(logging.ERROR)
    with pytest.raises(ValueError):
        with catch_time("failing task"):
            raise ValueError("intentional failure")

    messages = [r.message for r in caplog.records]
    assert any("failing task failed" in msg for msg in messages)
