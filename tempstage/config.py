"""YAML設定ファイルと環境変数からの設定読み込み."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from tempstage.models.schemas import TempSettings

logger = logging.getLogger(__name__)

ENV_ROOT = "TEMPSTAGE_ROOT"
ENV_REMOTE = "TEMPSTAGE_REMOTE"
ENV_VERBOSE = "TEMPSTAGE_VERBOSE"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    """設定ファイルの ``temp`` セクションを読み込む. 読めない場合は空の辞書を返す."""
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read temp settings from {config_path}: {e}")
        return {}
    
    if not isinstance(config, dict):
        return {}
    section = config.get("temp")
    if not isinstance(section, dict):
        return {}
    return section


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    
    env_root = os.environ.get(ENV_ROOT)
    if env_root:
        overrides["root_directory"] = Path(env_root)
    
    env_remote = os.environ.get(ENV_REMOTE)
    if env_remote is not None:
        overrides["remote_identifier"] = env_remote
    
    env_verbose = os.environ.get(ENV_VERBOSE)
    if env_verbose is not None:
        value = env_verbose.strip().lower()
        if value in _TRUE_VALUES:
            overrides["verbose"] = True
        elif value in _FALSE_VALUES:
            overrides["verbose"] = False
        # 不正な値は無視する
    
    return overrides


def load_settings(config_path: Optional[Path] = None) -> TempSettings:
    """
    一時ファイル管理の設定を読み込む.
    
    優先順位は 環境変数 > 設定ファイル > デフォルト値。
    
    Args:
        config_path: YAML設定ファイルのパス（存在しない場合はデフォルト値を使用）
        
    Returns:
        TempSettings: 読み込んだ設定
    """
    data: Dict[str, Any] = {}
    if config_path and Path(config_path).exists():
        data = _read_config_file(Path(config_path))
    
    try:
        settings = TempSettings(**data)
    except ValidationError as e:
        logger.warning(f"Invalid temp settings in {config_path}, using defaults: {e}")
        settings = TempSettings()
    
    overrides = _env_overrides()
    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings
