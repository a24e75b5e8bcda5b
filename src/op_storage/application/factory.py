"""Storage driver factory keyed by StorageDriverKind.

The concrete backend is picked once at startup from Settings.STORAGE_DRIVER.
"""

from config.settings import Settings
from src.op_common.database import create_engine, create_session_factory
from src.op_common.enums import StorageDriverKind
from src.op_common.errors import StorageConfigError
from src.op_common.redis_client import create_redis
from src.op_storage.application.manager import StorageManager
from src.op_storage.domain.driver import StorageDriver
from src.op_storage.infrastructure.database_driver import DatabaseStorageDriver
from src.op_storage.infrastructure.file_driver import FileStorageDriver
from src.op_storage.infrastructure.redis_driver import RedisStorageDriver


def create_driver(kind: StorageDriverKind, settings: Settings) -> StorageDriver:
    if kind is StorageDriverKind.FILE:
        return FileStorageDriver(settings.STORAGE_PATH)
    if kind is StorageDriverKind.REDIS:
        return RedisStorageDriver(
            create_redis(settings.REDIS_URL),
            expire_grace=settings.REDIS_EXPIRE_GRACE,
        )
    if kind is StorageDriverKind.DATABASE:
        engine = create_engine(settings)
        return DatabaseStorageDriver(create_session_factory(engine), engine=engine)
    raise StorageConfigError(f"unsupported driver {kind!r}")


def create_storage_manager(settings: Settings) -> StorageManager:
    try:
        kind = StorageDriverKind(settings.STORAGE_DRIVER)
    except ValueError as exc:
        raise StorageConfigError(f"unknown driver {settings.STORAGE_DRIVER!r}") from exc
    return StorageManager(create_driver(kind, settings), prefix=settings.STORAGE_PREFIX)
