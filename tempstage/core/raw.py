"""ファイルシステム操作の低レベルヘルパー."""

import os
import secrets
import string
from pathlib import Path
from typing import Callable, Optional, Union

PathLike = Union[str, os.PathLike]

# random_stringで使用する文字集合（英数字のみ）
_ALPHANUMERIC = string.ascii_letters + string.digits


def ensure_dir_exists(
    path: PathLike,
    on_create: Optional[Callable[[Path], None]] = None,
) -> bool:
    """
    ディレクトリが存在することを保証する.
    
    存在しない場合は中間ディレクトリも含めて作成する。
    
    Args:
        path: 対象ディレクトリのパス
        on_create: 作成を試みる直前に呼ばれるコールバック
        
    Returns:
        実際にディレクトリを作成した場合はTrue、既に存在した場合はFalse
        
    Raises:
        OSError: ディレクトリの作成に失敗した場合
    """
    target = Path(path)
    if is_directory(target):
        return False
    
    if on_create is not None:
        on_create(target)
    
    try:
        target.mkdir(parents=True)
    except FileExistsError:
        # 並行して作成された場合は成功扱い
        if is_directory(target):
            return False
        raise
    return True


def path_exists(path: PathLike) -> bool:
    """パスに何らかのエントリが存在するか判定する（壊れたシンボリックリンクも含む）."""
    return os.path.lexists(path)


def is_directory(path: PathLike) -> bool:
    """パスがディレクトリかどうか判定する. メタデータを取得できない場合はFalse."""
    return os.path.isdir(path)


def is_file(path: PathLike) -> bool:
    """パスが通常ファイルかどうか判定する. メタデータを取得できない場合はFalse."""
    return os.path.isfile(path)


def random_string(length: int) -> str:
    """
    英数字からなるランダム文字列を生成する.
    
    Args:
        length: 文字列の長さ
        
    Returns:
        ランダムな英数字文字列
    """
    return "".join(secrets.choice(_ALPHANUMERIC) for _ in range(length))
