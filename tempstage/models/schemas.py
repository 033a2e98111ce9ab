"""
設定ファイルのスキーマ定義
"""
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field


def _default_root() -> Path:
    return Path(tempfile.gettempdir()) / "tempstage"


class TempSettings(BaseModel):
    """一時ファイル管理の設定"""
    root_directory: Path = Field(default_factory=_default_root, description="ステージングルートのパス")
    remote_identifier: str = Field("", description="呼び出し側の文脈情報（リモートサーバー識別子等）")
    verbose: bool = Field(False, description="作成イベントを通知するかどうか")
