# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from chronicle import configuration


class ConfigurationRepository:
    def __init__(self, config_path: Path) -> None:
        self._config_path = config_path
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        self._config = load(self._config_path.read_text(), Loader=Loader)

        if self._config is None:
            raise ValueError(f"empty configuration file: {self._config_path}")

        # Fill in keys added after the config file was first written
        defaults = configuration.get_default_configuration()
        for key, value in defaults.items():
            if key not in self._config:
                self._config[key] = value  # type: ignore[literal-required]

    def __save_data(self, config: configuration.Configuration) -> None:
        self._config_path.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> None:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        remote_url: Optional[str] = None,
        remote_anon_key: Optional[str] = None,
        remove_remote: bool = False,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        show_header: Optional[bool] = None,
        log_level: Optional[str] = None,
        voice_language: Optional[str] = None,
        voice_max_restarts: Optional[int] = None,
        voice_restart_delay: Optional[float] = None,
        magic_link_redirect: Optional[str] = None,
    ) -> None:
        self.is_dirty = True

        if remote_url is not None:
            self.config["remote_url"] = remote_url
        if remote_anon_key is not None:
            self.config["remote_anon_key"] = remote_anon_key
        if remove_remote:
            self.config["remote_url"] = None
            self.config["remote_anon_key"] = None
        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if show_header is not None:
            self.config["show_header"] = show_header
        if log_level is not None:
            self.config["log_level"] = log_level.upper()
        if voice_language is not None:
            self.config["voice_language"] = voice_language
        if voice_max_restarts is not None:
            self.config["voice_max_restarts"] = voice_max_restarts
        if voice_restart_delay is not None:
            self.config["voice_restart_delay"] = voice_restart_delay
        if magic_link_redirect is not None:
            self.config["magic_link_redirect"] = magic_link_redirect
