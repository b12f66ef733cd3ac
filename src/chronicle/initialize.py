# SPDX-License-Identifier: MIT

from typing import Any

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from chronicle import configuration
from chronicle.model.id_map import IdMap
from chronicle.repository.configuration import ConfigurationRepository
from chronicle.template.id_map import get_id_map_template
from chronicle.view import state as view_state


def initialize() -> ConfigurationRepository:
    """
    Create the config and data files a first run needs and point the data
    paths at the configured data directory.
    """
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    __ensure_config_files()
    configuration.load_data_path_configuration()
    configuration.DATA_PATH.mkdir(parents=True, exist_ok=True)
    __ensure_data_files()

    config_repo = ConfigurationRepository(configuration.APP_CONFIG_PATH)
    view_state.configure_views(show_header=config_repo.get_config()["show_header"])
    return config_repo


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        configuration.APP_CONFIG_PATH.touch()
        config = configuration.get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))


def __ensure_data_files() -> None:
    if not configuration.DATA_MIGRATE_PATH.is_file():
        configuration.DATA_MIGRATE_PATH.touch()
        migrate: dict[str, Any] = {"version": 0}
        configuration.DATA_MIGRATE_PATH.write_text(dump(migrate, Dumper=Dumper))
    if not configuration.DATA_ID_MAP_PATH.is_file():
        configuration.DATA_ID_MAP_PATH.touch()
        id_map: IdMap = get_id_map_template()
        configuration.DATA_ID_MAP_PATH.write_text(dump(dict(id_map), Dumper=Dumper))
    if not configuration.DATA_KEY_VALUE_PATH.is_file():
        configuration.DATA_KEY_VALUE_PATH.write_text("{}")
