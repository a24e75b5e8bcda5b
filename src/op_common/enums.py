"""Global enums: values must match the STORAGE_DRIVER setting exactly."""

from enum import Enum


class StorageDriverKind(str, Enum):
    FILE = "file"
    REDIS = "redis"
    DATABASE = "database"
