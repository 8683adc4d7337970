"""
ロギング設定モジュール

StoreConfigのlog設定（level/file）から、src配下の全モジュールが使う
パッケージロガー "src" を組み立てる。ルートロガーには触れない。
"""

import logging
from pathlib import Path

from .config import StoreConfig
from .exceptions import ConfigurationError

PACKAGE_LOGGER = "src"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(config: StoreConfig) -> logging.Logger:
    """
    パッケージロガーのセットアップ

    何度呼んでも前回追加したハンドラを置き換えるだけで、出力は重複しない。

    Args:
        config: log_level (DEBUG, INFO, WARNING, ERROR, CRITICAL) と log_file を持つ設定

    Returns:
        設定済みの "src" ロガー

    Raises:
        ConfigurationError: 未知のログレベル
    """
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {config.log_level}")

    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (logging.FileHandler(log_path, encoding="utf-8"), logging.StreamHandler()):
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger
