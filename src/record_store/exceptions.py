"""Record Storeのカスタム例外定義

このモジュールは、ローカルレコードストアで使用される
カスタム例外クラスを定義します。
"""


class RecordStoreError(Exception):
    """Record Store基底例外"""

    pass


class CodecError(RecordStoreError):
    """レコード配列のエンコード/デコードエラー"""

    pass


class StorageError(RecordStoreError):
    """キーバリューストレージの読み書きエラー"""

    pass


class StoreWriteError(StorageError):
    """ミューテーション後の永続化に失敗した"""

    pass


class ConfigurationError(RecordStoreError):
    """設定エラー"""

    pass
