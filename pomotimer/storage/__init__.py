"""Storage package."""

from .local_storage import KeyValueStore, SqlKeyValueStore
from .config_storage import ConfigStorage, USER_CONFIGS_KEY

__all__ = ["KeyValueStore", "SqlKeyValueStore", "ConfigStorage", "USER_CONFIGS_KEY"]
