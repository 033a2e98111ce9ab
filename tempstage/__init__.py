"""tempstage - scoped temporary files and directories under a staging root."""

from tempstage.config import load_settings
from tempstage.core.notify import (
    CollectingSink,
    EventSink,
    LoggingSink,
    Notification,
    NotificationKind,
    NotificationLevel,
)
from tempstage.core.temp import (
    CreatingDirectoryError,
    CreatingFileError,
    CreatingRootError,
    HandleState,
    TempConfig,
    TempDir,
    TempError,
    TempFile,
    Verbosity,
)
from tempstage.models.schemas import TempSettings

__all__ = [
    "load_settings",
    "CollectingSink",
    "EventSink",
    "LoggingSink",
    "Notification",
    "NotificationKind",
    "NotificationLevel",
    "CreatingDirectoryError",
    "CreatingFileError",
    "CreatingRootError",
    "HandleState",
    "TempConfig",
    "TempDir",
    "TempError",
    "TempFile",
    "Verbosity",
    "TempSettings",
]
