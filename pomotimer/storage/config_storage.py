"""User-defined Pomodoro configurations, kept in the key-value store.

All configs live in one JSON list under :data:`USER_CONFIGS_KEY`.  Names
are the identity: saving a config replaces any config with the same name.
"""

from __future__ import annotations

import logging

from ..timer.config import InvalidConfiguration, PomodoroConfig
from .local_storage import KeyValueStore

logger = logging.getLogger(__name__)

USER_CONFIGS_KEY = "pomodoro_user_configs"


class ConfigStorage:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def get_user_configs(self) -> list[PomodoroConfig]:
        """Stored configs in save order; unreadable entries are skipped."""
        records = self._store.get(USER_CONFIGS_KEY)
        if not isinstance(records, list):
            return []

        configs: list[PomodoroConfig] = []
        for record in records:
            try:
                configs.append(PomodoroConfig.from_dict(record))
            except InvalidConfiguration as error:
                logger.warning("Skipping stored config %r: %s", record, error)
        return configs

    def save_user_config(self, config: PomodoroConfig) -> None:
        """Store *config*, replacing any config with the same name.

        Raises :class:`InvalidConfiguration` for a config that could not be
        read back, so nothing is written that would later be skipped.
        """
        PomodoroConfig.from_dict(config.to_dict())
        configs = [c for c in self.get_user_configs() if c.name != config.name]
        configs.append(config)
        self._write(configs)

    def delete_user_config(self, name: str) -> None:
        configs = [c for c in self.get_user_configs() if c.name != name]
        self._write(configs)

    def config_name_exists(self, name: str) -> bool:
        wanted = name.casefold()
        return any(
            c.name and c.name.casefold() == wanted
            for c in self.get_user_configs()
        )

    def _write(self, configs: list[PomodoroConfig]) -> None:
        self._store.set(USER_CONFIGS_KEY, [c.to_dict() for c in configs])
