import logging

from battlefleet.engine.errors import log_recoverable


def test_log_recoverable_attaches_exception(caplog) -> None:
    logger = logging.getLogger("test.recoverable")
    caplog.set_level(logging.DEBUG, logger="test.recoverable")
    try:
        raise OSError("disk gone")
    except OSError:
        log_recoverable(logger, "payload_unreadable")
    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.exc_info is not None
    assert record.exc_info[0] is OSError
