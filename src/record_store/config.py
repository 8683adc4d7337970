"""
設定管理モジュール

関連クラス:
  - storage.create_storage: backend/db_pathを使用
  - store.RecordStore: raise_on_write_errorを使用
  - logger.setup_logger: ログ設定を使用
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError

BACKENDS = ("sqlite", "memory")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class StoreConfig:
    """レコードストア設定クラス"""

    # ストレージ設定
    backend: str = "sqlite"
    db_path: Optional[str] = None

    # 書き込み失敗を呼び出し元に例外として通知するか
    raise_on_write_error: bool = False

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/record_store.log"

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend: {self.backend} (expected one of {', '.join(BACKENDS)})"
            )

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "StoreConfig":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時はconfig/record_store.yamlを使用）

        Returns:
            StoreConfig: 設定インスタンス
        """
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "record_store.yaml"

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        storage_data = yaml_data.get("storage", {})
        log_data = yaml_data.get("log", {})

        return cls(
            backend=storage_data.get("backend", "sqlite"),
            db_path=storage_data.get("db_path"),
            raise_on_write_error=_as_bool(storage_data.get("raise_on_write_error", False)),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/record_store.log"),
        )

    @classmethod
    def from_env(cls) -> "StoreConfig":
        """環境変数から設定を読み込む"""
        return cls(
            backend=os.getenv("RECORD_STORE_BACKEND", "sqlite"),
            db_path=os.getenv("RECORD_STORE_DB_PATH"),
            raise_on_write_error=_as_bool(os.getenv("RECORD_STORE_RAISE_ON_WRITE_ERROR", "false")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/record_store.log"),
        )
