"""
ステージングルート配下の一時ファイル・ディレクトリ管理.

TempConfigが一意な名前のエントリを作成し、TempDir / TempFileハンドルを返す。
ハンドルのスコープ終了時（with文の終了、close()、ガベージコレクション）に
対応するエントリは必ず削除される。
"""

import logging
import os
import shutil
import weakref
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Generator, Optional

from tempstage.core import raw
from tempstage.core.notify import (
    EventSink,
    LoggingSink,
    Notification,
    NotificationKind,
    emit,
)
from tempstage.models.schemas import TempSettings

logger = logging.getLogger(__name__)

# ランダム部分の長さ
RANDOM_NAME_LENGTH = 16


class Verbosity(Enum):
    """作成イベントを通知するかどうかの設定."""
    VERBOSE = "verbose"
    NOT_VERBOSE = "not_verbose"
    
    @classmethod
    def from_flag(cls, verbose: bool) -> "Verbosity":
        return cls.VERBOSE if verbose else cls.NOT_VERBOSE


class TempError(Exception):
    """一時エントリ作成エラーの基底クラス."""
    
    kind = "entry"
    
    def __init__(self, path: Path, error: OSError):
        super().__init__(f"could not create temp {self.kind}: {path}")
        self.path = Path(path)
        self.error = error
    
    @property
    def description(self) -> str:
        return f"could not create temp {self.kind}"


class CreatingRootError(TempError):
    """ステージングルートの作成失敗."""
    kind = "root"


class CreatingFileError(TempError):
    """一時ファイルの作成失敗."""
    kind = "file"


class CreatingDirectoryError(TempError):
    """一時ディレクトリの作成失敗."""
    kind = "directory"


class HandleState(Enum):
    """ハンドルの状態."""
    LIVE = "live"
    CLEANING = "cleaning"
    GONE = "gone"


def _remove_directory(path: Path, notifier: EventSink) -> None:
    if not raw.is_directory(path):
        return
    try:
        shutil.rmtree(path)
    except OSError:
        emit(notifier, Notification(kind=NotificationKind.DIRECTORY_DELETION_FAILED, path=path))
        return
    emit(notifier, Notification(kind=NotificationKind.DELETED_DIRECTORY, path=path))


def _remove_file(path: Path, notifier: EventSink) -> None:
    if not raw.is_file(path):
        return
    try:
        path.unlink()
    except OSError:
        emit(notifier, Notification(kind=NotificationKind.FILE_DELETION_FAILED, path=path))
        return
    emit(notifier, Notification(kind=NotificationKind.DELETED_FILE, path=path))


# ハンドル経由で使えるPathの属性（エントリ自体を変更しないもの）
_DELEGATED_ATTRIBUTES = frozenset({
    "name", "suffix", "suffixes", "stem", "parent", "parents", "parts",
    "anchor", "drive", "root",
    "exists", "is_dir", "is_file", "is_symlink", "stat", "lstat", "samefile",
    "iterdir", "glob", "rglob", "joinpath", "match",
    "with_name", "with_stem", "with_suffix", "relative_to", "is_relative_to",
    "as_posix", "as_uri", "absolute", "resolve",
    "open", "read_text", "read_bytes", "write_text", "write_bytes",
})


class _TempHandle(os.PathLike):
    """
    一つの一時エントリを所有するパス風ハンドル.
    
    Pathの読み取り系操作（name, exists(), stat(), read_text()など）と内容の読み書きは
    そのままpathへ委譲する。エントリ自体を移動・削除する操作（unlink, rename,
    rmdir, chmodなど）は委譲しないので、必要な場合は明示的に``handle.path``を使う。
    """
    
    _remove = None
    
    def __init__(self, config: "TempConfig", path: Path):
        """
        Args:
            config: このハンドルを作成したTempConfig
            path: 所有するエントリの絶対パス
        """
        self.config = config
        self.path = path
        self._state = HandleState.LIVE
        # selfを参照しないコールバックのみ登録できる
        self._finalizer = weakref.finalize(self, type(self)._remove, path, config.notifier)
    
    @property
    def state(self) -> HandleState:
        return self._state
    
    def close(self) -> None:
        """エントリを削除する. 二回目以降の呼び出しは何もしない."""
        if self._state is not HandleState.LIVE:
            return
        self._state = HandleState.CLEANING
        try:
            self._finalizer()
        finally:
            self._state = HandleState.GONE
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()
    
    def __fspath__(self) -> str:
        return os.fspath(self.path)
    
    def __truediv__(self, other) -> Path:
        return self.path / other
    
    def __getattr__(self, name: str) -> Any:
        # __init__完了前の参照で無限再帰しないようにする
        if name == "path" or name not in _DELEGATED_ATTRIBUTES:
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            )
        return getattr(self.path, name)
    
    def __eq__(self, other) -> bool:
        if isinstance(other, _TempHandle):
            return self.path == other.path
        if isinstance(other, Path):
            return self.path == other
        return NotImplemented
    
    def __hash__(self) -> int:
        return hash(self.path)
    
    def __str__(self) -> str:
        return str(self.path)
    
    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class TempDir(_TempHandle):
    """一時ディレクトリのハンドル. 終了時に中身ごと削除する."""
    _remove = staticmethod(_remove_directory)


class TempFile(_TempHandle):
    """一時ファイルのハンドル. 終了時にファイルを削除する."""
    _remove = staticmethod(_remove_file)


def _validate_fragment(label: str, value: str) -> None:
    """ファイル名の一部として使う文字列にパス区切り文字が含まれていないか検証する."""
    forbidden = ["\0", os.sep]
    if os.altsep:
        forbidden.append(os.altsep)
    for char in forbidden:
        if char in value:
            raise ValueError(f"Temp file {label} must not contain {char!r}: {value!r}")


class TempConfig:
    """
    ステージングルートと一時エントリの生成を管理するクラス.
    
    生成後は変更されない。ルートディレクトリは最初の作成要求時に作られる。
    """
    
    def __init__(
        self,
        root_directory: Path,
        remote_identifier: str = "",
        verbosity: Verbosity = Verbosity.NOT_VERBOSE,
        notifier: Optional[EventSink] = None,
    ):
        """
        Args:
            root_directory: ステージングルートのパス（相対パスは絶対パスに変換）
            remote_identifier: 呼び出し側の文脈情報（このクラスでは解釈しない）
            verbosity: 作成イベントを通知するかどうか
            notifier: イベントの通知先（未指定時はloggingへ出力）
        """
        self._root_directory = Path(root_directory).absolute()
        self._remote_identifier = remote_identifier
        self._verbosity = verbosity
        self._notifier = notifier if notifier is not None else LoggingSink(logger)
    
    @classmethod
    def from_settings(
        cls,
        settings: TempSettings,
        notifier: Optional[EventSink] = None,
    ) -> "TempConfig":
        """設定モデルからTempConfigを生成する."""
        return cls(
            root_directory=settings.root_directory,
            remote_identifier=settings.remote_identifier,
            verbosity=Verbosity.from_flag(settings.verbose),
            notifier=notifier,
        )
    
    @property
    def root_directory(self) -> Path:
        return self._root_directory
    
    @property
    def remote_identifier(self) -> str:
        return self._remote_identifier
    
    @property
    def verbosity(self) -> Verbosity:
        return self._verbosity
    
    @property
    def notifier(self) -> EventSink:
        return self._notifier
    
    def _notify_verbose(self, kind: NotificationKind, path: Path) -> None:
        if self._verbosity is Verbosity.VERBOSE:
            emit(self._notifier, Notification(kind=kind, path=path))
    
    def create_root(self) -> bool:
        """
        ステージングルートが存在することを保証する.
        
        Returns:
            ルートを新たに作成した場合はTrue
            
        Raises:
            CreatingRootError: ルートディレクトリの作成に失敗した場合
        """
        try:
            return raw.ensure_dir_exists(
                self._root_directory,
                lambda path: self._notify_verbose(NotificationKind.CREATING_ROOT, path),
            )
        except OSError as e:
            raise CreatingRootError(self._root_directory, e) from e
    
    def new_directory(self) -> TempDir:
        """
        一意な名前の一時ディレクトリを作成する.
        
        Returns:
            TempDir: 作成したディレクトリのハンドル
            
        Raises:
            CreatingRootError: ルートディレクトリの作成に失敗した場合
            CreatingDirectoryError: ディレクトリの作成に失敗した場合
        """
        self.create_root()
        
        while True:
            temp_dir = self._root_directory / (raw.random_string(RANDOM_NAME_LENGTH) + "_dir")
            
            # 存在確認と作成の間に他者が作成する可能性があるため、
            # 作成時のFileExistsErrorも名前の衝突として扱う
            if raw.path_exists(temp_dir):
                continue
            
            try:
                temp_dir.mkdir()
            except FileExistsError:
                continue
            except OSError as e:
                raise CreatingDirectoryError(temp_dir, e) from e
            # 衝突して再試行した名前は通知しない
            self._notify_verbose(NotificationKind.CREATING_DIRECTORY, temp_dir)
            return TempDir(self, temp_dir)
    
    def new_file(self) -> TempFile:
        """一意な名前の空の一時ファイルを作成する."""
        return self.new_file_with_ext("", "")
    
    def new_file_with_ext(self, prefix: str, ext: str) -> TempFile:
        """
        接頭辞と拡張子を指定して一意な名前の空の一時ファイルを作成する.
        
        ファイル名は ``prefix + ランダム16文字 + "_file" + ext`` となる。
        
        Args:
            prefix: ファイル名の接頭辞
            ext: ファイル名の末尾（例: ".txt"）
            
        Returns:
            TempFile: 作成したファイルのハンドル
            
        Raises:
            ValueError: prefixまたはextにパス区切り文字が含まれる場合
            CreatingRootError: ルートディレクトリの作成に失敗した場合
            CreatingFileError: ファイルの作成に失敗した場合
        """
        _validate_fragment("prefix", prefix)
        _validate_fragment("extension", ext)
        
        self.create_root()
        
        while True:
            temp_name = prefix + raw.random_string(RANDOM_NAME_LENGTH) + "_file" + ext
            temp_file = self._root_directory / temp_name
            
            if raw.path_exists(temp_file):
                continue
            
            try:
                # 排他作成（既に存在する場合はFileExistsError）
                with open(temp_file, "x"):
                    pass
            except FileExistsError:
                continue
            except OSError as e:
                raise CreatingFileError(temp_file, e) from e
            self._notify_verbose(NotificationKind.CREATING_FILE, temp_file)
            return TempFile(self, temp_file)
    
    @contextmanager
    def workspace(self) -> Generator[TempDir, None, None]:
        """
        一時作業ディレクトリを作成するコンテキストマネージャー.
        
        Yields:
            TempDir: 一時ディレクトリのハンドル
            
        Note:
            コンテキスト終了時に自動的にディレクトリを削除する
        """
        temp_dir = self.new_directory()
        try:
            yield temp_dir
        finally:
            # クリーンアップ（エラーが発生しても必ず実行）
            temp_dir.close()
    
    @contextmanager
    def scratch_file(self, prefix: str = "", ext: str = "") -> Generator[TempFile, None, None]:
        """一時ファイルを作成し、コンテキスト終了時に削除する."""
        temp_file = self.new_file_with_ext(prefix, ext)
        try:
            yield temp_file
        finally:
            temp_file.close()
    
    def __repr__(self) -> str:
        return (
            f"TempConfig(root_directory={str(self._root_directory)!r}, "
            f"remote_identifier={self._remote_identifier!r}, "
            f"verbosity={self._verbosity.name}, notifier=...)"
        )
