"""通知モジュールのテストケース."""

import logging
from pathlib import Path

import pytest

from tempstage.core.notify import (
    CollectingSink,
    LoggingSink,
    Notification,
    NotificationKind,
    NotificationLevel,
    emit,
)


@pytest.mark.parametrize("kind,message,level", [
    (NotificationKind.CREATING_ROOT, "creating temp root", NotificationLevel.DEBUG),
    (NotificationKind.CREATING_DIRECTORY, "creating temp directory", NotificationLevel.DEBUG),
    (NotificationKind.CREATING_FILE, "creating temp file", NotificationLevel.DEBUG),
    (NotificationKind.DELETED_DIRECTORY, "deleted temp directory", NotificationLevel.DEBUG),
    (NotificationKind.DIRECTORY_DELETION_FAILED, "could not delete temp directory", NotificationLevel.WARN),
    (NotificationKind.DELETED_FILE, "deleted temp file", NotificationLevel.DEBUG),
    (NotificationKind.FILE_DELETION_FAILED, "could not delete temp file", NotificationLevel.WARN),
])
def test_notification_text_and_level(kind, message, level):
    notification = Notification(kind=kind, path=Path("/tmp/x/entry"))
    assert str(notification) == f"{message}: /tmp/x/entry"
    assert notification.level is level


def test_emit_routes_by_level():
    sink = CollectingSink()
    emit(sink, Notification(kind=NotificationKind.DELETED_FILE, path=Path("/a")))
    emit(sink, Notification(kind=NotificationKind.FILE_DELETION_FAILED, path=Path("/b")))
    
    assert sink.events == [
        (NotificationLevel.DEBUG, "deleted temp file: /a"),
        (NotificationLevel.WARN, "could not delete temp file: /b"),
    ]
    assert sink.messages(NotificationLevel.WARN) == ["could not delete temp file: /b"]


def test_logging_sink(caplog):
    """LoggingSinkはdebug/warningとしてログ出力する."""
    logger = logging.getLogger("tempstage.tests.notify")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    sink = LoggingSink(logger)
    
    sink.debug("debug message")
    sink.warn("warn message")
    
    levels = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert levels == [
        (logging.DEBUG, "debug message"),
        (logging.WARNING, "warn message"),
    ]


def test_logging_sink_default_logger():
    sink = LoggingSink()
    assert sink.logger.name == "tempstage.core.notify"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
