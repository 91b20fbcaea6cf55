import logging

from docuparse.logger import DETAIL, logger, trace_logger


def test_trace_logger_is_a_child_of_the_package_logger():
    assert trace_logger.parent is logger


def test_detail_level_is_registered_between_debug_and_info():
    assert logging.DEBUG < DETAIL < logging.INFO
    assert logging.getLevelName(DETAIL) == "DETAIL"


def test_detail_logs_at_detail_level(caplog):
    with caplog.at_level(DETAIL, logger="docuparse.trace"):
        trace_logger.detail("skipping %s", "this")  # type: ignore

    assert caplog.record_tuples == [("docuparse.trace", DETAIL, "skipping this")]


def test_detail_is_dropped_when_level_is_higher(caplog):
    with caplog.at_level(logging.INFO, logger="docuparse.trace"):
        trace_logger.detail("not shown")  # type: ignore

    assert caplog.records == []
