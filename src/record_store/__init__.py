"""Local record store shared by the entity-specific stores."""

from .codec import CodecResult, decode_records, encode_records
from .config import StoreConfig
from .exceptions import (
    CodecError,
    ConfigurationError,
    RecordStoreError,
    StorageError,
    StoreWriteError,
)
from .models import ArchivableRecord, Record
from .query import Period
from .storage import InMemoryStorage, KeyValueStorage, SqliteStorage, create_storage
from .store import ArchivableRecordStore, RecordStore

__all__ = [
    "ArchivableRecord",
    "ArchivableRecordStore",
    "CodecError",
    "CodecResult",
    "ConfigurationError",
    "InMemoryStorage",
    "KeyValueStorage",
    "Period",
    "Record",
    "RecordStore",
    "RecordStoreError",
    "SqliteStorage",
    "StorageError",
    "StoreConfig",
    "StoreWriteError",
    "create_storage",
    "decode_records",
    "encode_records",
]
