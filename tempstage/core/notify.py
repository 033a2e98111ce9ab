"""一時ファイル操作のイベント通知."""

import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from pydantic import BaseModel


class NotificationLevel(str, Enum):
    """通知の重要度."""
    DEBUG = "debug"
    WARN = "warn"


class NotificationKind(str, Enum):
    """通知の種類."""
    CREATING_ROOT = "creating_root"
    CREATING_DIRECTORY = "creating_directory"
    CREATING_FILE = "creating_file"
    DELETED_DIRECTORY = "deleted_directory"
    DIRECTORY_DELETION_FAILED = "directory_deletion_failed"
    DELETED_FILE = "deleted_file"
    FILE_DELETION_FAILED = "file_deletion_failed"


_MESSAGES = {
    NotificationKind.CREATING_ROOT: "creating temp root",
    NotificationKind.CREATING_DIRECTORY: "creating temp directory",
    NotificationKind.CREATING_FILE: "creating temp file",
    NotificationKind.DELETED_DIRECTORY: "deleted temp directory",
    NotificationKind.DIRECTORY_DELETION_FAILED: "could not delete temp directory",
    NotificationKind.DELETED_FILE: "deleted temp file",
    NotificationKind.FILE_DELETION_FAILED: "could not delete temp file",
}

_WARN_KINDS = {
    NotificationKind.DIRECTORY_DELETION_FAILED,
    NotificationKind.FILE_DELETION_FAILED,
}


class Notification(BaseModel):
    """作成・削除処理に関する通知."""
    
    kind: NotificationKind
    path: Path
    
    @property
    def level(self) -> NotificationLevel:
        if self.kind in _WARN_KINDS:
            return NotificationLevel.WARN
        return NotificationLevel.DEBUG
    
    def __str__(self) -> str:
        return f"{_MESSAGES[self.kind]}: {self.path}"


class EventSink(Protocol):
    """通知の受け取り先が満たすインターフェース."""
    
    def debug(self, message: str) -> None:
        ...
    
    def warn(self, message: str) -> None:
        ...


class LoggingSink:
    """標準loggingへ通知を転送するシンク."""
    
    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Args:
            logger: 出力先のロガー（未指定時はこのモジュールのロガー）
        """
        self.logger = logger or logging.getLogger(__name__)
    
    def debug(self, message: str) -> None:
        self.logger.debug(message)
    
    def warn(self, message: str) -> None:
        self.logger.warning(message)


class CollectingSink:
    """通知をメモリ上に記録するシンク（テスト・診断用）."""
    
    def __init__(self):
        self.events: List[Tuple[NotificationLevel, str]] = []
    
    def debug(self, message: str) -> None:
        self.events.append((NotificationLevel.DEBUG, message))
    
    def warn(self, message: str) -> None:
        self.events.append((NotificationLevel.WARN, message))
    
    def messages(self, level: Optional[NotificationLevel] = None) -> List[str]:
        """記録されたメッセージを返す（levelを指定した場合はその重要度のみ）."""
        return [msg for lvl, msg in self.events if level is None or lvl == level]


def emit(sink: EventSink, notification: Notification) -> None:
    """
    通知を重要度に応じてシンクへ送る.
    
    WARNはwarn、DEBUGはdebugとして送る。
    """
    if notification.level is NotificationLevel.WARN:
        sink.warn(str(notification))
    else:
        sink.debug(str(notification))
