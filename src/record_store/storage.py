"""Key-Value Storage

レコードストアの永続化先。1エンティティ種別につき1キーで、
値はエンコード済みのレコード配列（バイト列）。

Related Classes: RecordStore (store.py), StoreConfig (config.py)
"""

from __future__ import annotations

import os
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from .config import StoreConfig
from .exceptions import ConfigurationError, StorageError


@runtime_checkable
class KeyValueStorage(Protocol):
    """キー単位でバイト列を読み書きするストレージ"""

    def read(self, key: str) -> Optional[bytes]:
        ...

    def write(self, key: str, data: bytes) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class InMemoryStorage:
    """dictベースのストレージ。テストやアプリ再起動のシミュレーションに使う。"""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def read(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SqliteStorage:
    """SQLiteベースのキーバリューストレージ"""

    def __init__(self, db_path: Optional[Path] = None):
        root = Path(__file__).resolve().parents[2]
        default_path = root / "data" / "record_store.db"
        env_path = os.getenv("RECORD_STORE_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = default_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        """key_valueテーブルの初期化"""
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS key_value (
                    key TEXT PRIMARY KEY,
                    value BLOB NOT NULL
                )
                """
            )
            conn.commit()

    def read(self, key: str) -> Optional[bytes]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM key_value WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read key '{key}': {exc}") from exc
        return bytes(row["value"]) if row else None

    def write(self, key: str, data: bytes) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO key_value (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, sqlite3.Binary(data)),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write key '{key}': {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM key_value WHERE key = ?", (key,))
                conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to remove key '{key}': {exc}") from exc


def create_storage(config: StoreConfig) -> KeyValueStorage:
    """設定に応じたストレージを生成する

    Raises:
        ConfigurationError: 未知のバックエンドが指定された場合
    """
    if config.backend == "sqlite":
        return SqliteStorage(db_path=Path(config.db_path) if config.db_path else None)
    if config.backend == "memory":
        return InMemoryStorage()
    raise ConfigurationError(f"Unknown storage backend: {config.backend}")
